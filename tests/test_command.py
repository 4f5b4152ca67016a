import shlex

import pytest

from html_to_pdf.command import Invocation, build_command
from html_to_pdf.source import Source


def test_inline_html_reads_from_stdin_and_writes_to_stdout():
    invocation = build_command("wkhtmltopdf", [], Source("<html><body>hi</body></html>"))
    assert invocation.tokens == ("wkhtmltopdf", "--quiet", "-", "-")
    assert invocation.input_token == "-"
    assert invocation.output_token == "-"


def test_token_order():
    invocation = build_command(
        "/usr/bin/wkhtmltopdf",
        ["--page-size", "A4", "--grayscale"],
        Source("https://example.com/report"),
        path="/tmp/out.pdf",
    )
    assert invocation.tokens == (
        "/usr/bin/wkhtmltopdf", "--page-size", "A4", "--grayscale", "--quiet",
        "https://example.com/report", "/tmp/out.pdf",
    )


def test_file_source_uses_its_path(tmp_path):
    page = tmp_path / "page.html"
    page.write_text("<p>x</p>")
    invocation = build_command("wkhtmltopdf", [], Source(str(page)))
    assert invocation.input_token == str(page)


def test_temp_file_takes_precedence_over_stdin():
    invocation = build_command("wkhtmltopdf", [], Source("<p>x</p>"), path="out.pdf", temp_file="/tmp/source1.html")
    assert invocation.input_token == "/tmp/source1.html"
    assert invocation.output_token == "out.pdf"


def test_every_token_is_shell_escaped():
    tokens = ["--title", "Bob's report; rm -rf /", "--header-left", "$(whoami)"]
    invocation = build_command("wkhtmltopdf", tokens, Source("<p>x</p>"), path="my output.pdf")
    command = str(invocation)
    assert shlex.split(command) == list(invocation.tokens)
    assert "'my output.pdf'" in command


def test_invocation_is_immutable():
    invocation = Invocation(("wkhtmltopdf", "--quiet", "-", "-"))
    with pytest.raises(AttributeError):
        invocation.tokens = ()
