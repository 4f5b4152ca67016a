import os
import stat

import pytest

from html_to_pdf.config import Config, reset_config


FAKE_PDF = b"%PDF-1.4\nfake body\n%%EOF\n"

# Arguments arrive as: [options...] --quiet INPUT OUTPUT
_ARGS = 'eval "input=\\${$(($# - 1))}"\neval "output=\\${$#}"\n'

ECHO_ENGINE = "#!/bin/sh\n" + _ARGS + """\
if [ "$input" = "-" ]; then cat > /dev/null; fi
if [ "$output" = "-" ]; then
  printf '%%PDF-1.4\\nfake body\\n%%%%EOF\\n'
else
  printf '%%PDF-1.4\\nfake body\\n%%%%EOF\\n' > "$output"
fi
"""

# Copies the HTML it was given (stdin or file) into the PDF body
PASSTHROUGH_ENGINE = "#!/bin/sh\n" + _ARGS + """\
printf '%%PDF-1.4\\n'
if [ "$input" = "-" ]; then cat; else cat "$input"; fi
printf '%%%%EOF\\n'
"""

# Writes the PDF after a short delay, then never exits
HANGING_ENGINE = "#!/bin/sh\n" + _ARGS + """\
sleep 1
if [ "$input" != "-" ] && [ -f "$input" ]; then
  { printf '%%PDF-1.4\\n'; cat "$input"; printf '\\n%%%%EOF\\n'; } > "$output"
else
  printf '%%PDF-1.4\\nfake body\\n%%%%EOF\\n' > "$output"
fi
exec sleep 60
"""

# Writes the PDF straight away, then never exits
EAGER_HANGING_ENGINE = "#!/bin/sh\n" + _ARGS + """\
printf '%%PDF-1.4\\nfake body\\n%%%%EOF\\n' > "$output"
exec sleep 60
"""

# Starts writing but never finishes, and never exits
STALLED_ENGINE = "#!/bin/sh\n" + _ARGS + """\
echo $$ > "$output.pid"
printf '%%PDF-1.4\\npartial\\n' > "$output"
exec sleep 60
"""

# Writes a complete PDF, then exits with an error on its own
FAILING_WRITER_ENGINE = "#!/bin/sh\n" + _ARGS + """\
if [ "$input" = "-" ]; then cat > /dev/null; fi
sleep 0.5
if [ "$output" = "-" ]; then
  printf '%%PDF-1.4\\nbody\\n%%%%EOF\\n'
else
  printf '%%PDF-1.4\\nbody\\n%%%%EOF\\n' >> "$output"
fi
exit 1
"""

# Mentions EOF inside the body well before the trailer, then hangs
BODY_MARKER_ENGINE = "#!/bin/sh\n" + _ARGS + """\
sleep 0.5
printf '%%PDF-1.4\\nstream xEOFx\\n' >> "$output"
sleep 0.6
printf '%%%%EOF\\n' >> "$output"
exec sleep 60
"""

# Writes the trailer without its final newline first, then hangs
SPLIT_TRAILER_ENGINE = "#!/bin/sh\n" + _ARGS + """\
sleep 0.5
printf '%%PDF-1.4\\nbody\\n%%%%EOF' >> "$output"
sleep 0.6
printf '\\n' >> "$output"
exec sleep 60
"""

# Writes a PDF without a trailer to its output file and exits
INCOMPLETE_FILE_ENGINE = "#!/bin/sh\n" + _ARGS + """\
printf '%%PDF-1.4\\npartial\\n' > "$output"
"""

FAILING_ENGINE = """#!/bin/sh
cat > /dev/null
echo "boom" >&2
exit 3
"""

INCOMPLETE_ENGINE = """#!/bin/sh
cat > /dev/null
printf '%%PDF-1.4\\npartial\\n'
"""

VERSION_ENGINE = """#!/bin/sh
echo "wkhtmltopdf 0.12.6 (fake)"
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep the user's config file and HTML2PDF_* variables out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path_factory.mktemp("home")))
    for name in list(os.environ):
        if name.startswith("HTML2PDF_"):
            monkeypatch.delenv(name)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def make_engine(tmp_path):
    """Write an executable fake wkhtmltopdf script and return its path."""
    def _make(script, name="wkhtmltopdf"):
        path = tmp_path / "bin" / name
        path.parent.mkdir(exist_ok=True)
        path.write_text(script)
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path
    return _make


@pytest.fixture
def make_config():
    def _make(engine, **overrides):
        values = {"wkhtmltopdf": str(engine), "poll_interval": 0.05}
        values.update(overrides)
        return Config(values)
    return _make
