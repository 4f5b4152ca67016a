#!/usr/bin/env python3
"""
HTML to PDF converter driving wkhtmltopdf as a subprocess.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

import os
import tempfile
from contextlib import ExitStack
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Union

from .command import Invocation, build_command
from .config import Config, get_config
from .console import ConsoleLogger
from .dependencies import ensure_executable, resolve_executable
from .engine import ExecutionEngine, GenerationRequest
from .errors import CommandFailedError, NoExecutableError, PDFGenerationError
from .options import find_options_in_meta, normalize_options, options_to_args
from .source import Source, append_stylesheets
from .verification import is_complete


class HTMLToPDFConverter:
    """Converts a URL, an HTML file or an HTML string to PDF."""

    def __init__(self, url_file_or_html: Any, options: Optional[Dict[str, Any]] = None,
                 config: Optional[Config] = None, logger: Optional[ConsoleLogger] = None):
        """Initialize the converter.

        Args:
            url_file_or_html: URL, path to an HTML file, HTML string or open file
            options: wkhtmltopdf options such as ``{"page_size": "A4"}``
            config: Configuration, the process-wide one by default
            logger: Console logger
        """
        self.config = config or get_config()
        self.logger = logger or ConsoleLogger()
        self.source = Source(url_file_or_html)
        self.stylesheets: List[Union[str, Path]] = []
        self._executable: Optional[Path] = None

        merged = self.config.get_default_options()
        merged.update(options or {})
        if not self.source.is_url():
            merged.update(find_options_in_meta(self.source.read(), self.config.get_meta_tag_prefix()))
        self.options = normalize_options(merged)

        self.engine = ExecutionEngine(self.logger)

    def initialize(self) -> Path:
        """Check that the wkhtmltopdf executable exists.

        Must be called before generating anything.

        Raises:
            NoExecutableError: If the executable is missing
        """
        self._executable = ensure_executable(self.config.get_executable())
        self.logger.debug(f"Using wkhtmltopdf at {self._executable}")
        return self._executable

    @property
    def executable(self) -> str:
        return resolve_executable(self.config.get_executable())

    def command(self, path: Optional[str] = None, temp_file: Optional[str] = None) -> Invocation:
        """Build the invocation for writing to ``path`` (stdout when None)."""
        return build_command(self.executable, options_to_args(self.options), self.source, path, temp_file)

    def to_pdf(self, path: Optional[Union[str, Path]] = None, ensure_termination: Optional[bool] = None,
               timeout: Optional[float] = None, settle_delay: Optional[float] = None) -> bytes:
        """Generate the PDF and return its bytes.

        We give the possibility to ensure the termination of the process
        because wkhtmltopdf 0.10 RC2 never terminates. In that mode the
        output is written to a file, watched for its EOF trailer and the
        process is interrupted once it shows up.

        Args:
            path: Also keep the PDF at this path
            ensure_termination: Use the detached strategy (configured default otherwise)
            timeout: Seconds to wait for the EOF trailer
            settle_delay: Seconds to wait before watching the output file

        Returns:
            The PDF bytes

        Raises:
            NoExecutableError: If initialize() has not succeeded
            PDFGenerationError: If the output lacks the EOF trailer
            CommandFailedError: If wkhtmltopdf failed or wrote nothing
        """
        if self._executable is None:
            raise NoExecutableError(self.config.get_executable(), "call initialize() before generating")

        if ensure_termination is None:
            ensure_termination = self.config.get_ensure_termination()
        path = str(path) if path is not None else None

        self.source = append_stylesheets(self.source, self.stylesheets)
        self.stylesheets = []

        with ExitStack() as stack:
            tmp = None
            if ensure_termination and self.source.is_html():
                tmp = stack.enter_context(self._source_temp_file())
            output_path = path
            if ensure_termination and output_path is None:
                output_path = stack.enter_context(_TempOutput()).name

            invoke = self.command(output_path, tmp.name if tmp else None)
            request = GenerationRequest(
                source=self.source,
                options=tuple(options_to_args(self.options)),
                path=output_path,
                ensure_termination=ensure_termination,
                timeout=timeout if timeout is not None else self.config.get_timeout(),
                settle_delay=settle_delay if settle_delay is not None else self.config.get_settle_delay(),
                poll_interval=self.config.get_poll_interval(),
            )

            result = self.engine.execute(request, invoke, tmp)

        # Nothing written at all is a failed command, not an incomplete PDF
        if not result.output.strip():
            raise CommandFailedError(str(invoke), result.returncode, result.stderr)
        if not is_complete(result.output):
            target = path or ('temporary output' if ensure_termination else 'stdout')
            raise PDFGenerationError(f"{target}, generation was not completed properly", path=path)
        if not result.succeeded:
            raise CommandFailedError(str(invoke), result.returncode, result.stderr)

        self.logger.debug(f"Generated {len(result.output)} bytes")
        return result.output

    def to_file(self, path: Union[str, Path], ensure_termination: Optional[bool] = None,
                timeout: Optional[float] = None, settle_delay: Optional[float] = None) -> BinaryIO:
        """Generate the PDF at ``path`` and return it opened for reading."""
        self.to_pdf(path, ensure_termination=ensure_termination, timeout=timeout, settle_delay=settle_delay)
        return open(path, 'rb')

    def _source_temp_file(self):
        """Write the HTML source to a temporary ``.html`` file."""
        tmp = tempfile.NamedTemporaryFile(prefix='source', suffix='.html', delete=False)
        # Encode to UTF-8, dropping anything that cannot be encoded
        tmp.write(str(self.source).encode('utf-8', errors='ignore'))
        tmp.flush()
        return _TempFile(tmp)


class _TempFile:
    """Closes and removes a NamedTemporaryFile on exit."""

    def __init__(self, handle):
        self.handle = handle
        self.name = handle.name

    def close(self) -> None:
        self.handle.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.handle.close()
        try:
            os.unlink(self.name)
        except FileNotFoundError:
            pass


class _TempOutput(_TempFile):
    """Temporary output target for generations that return bytes."""

    def __init__(self):
        super().__init__(tempfile.NamedTemporaryFile(prefix='output', suffix='.pdf', delete=False))
        self.handle.close()


def from_url(url: str, path: Optional[str] = None, options: Optional[Dict[str, Any]] = None, **kwargs) -> bytes:
    """Convert the page at ``url``."""
    return _convert(url, path, options, **kwargs)


def from_file(filename: Union[str, Path], path: Optional[str] = None,
              options: Optional[Dict[str, Any]] = None, **kwargs) -> bytes:
    """Convert an HTML file on disk."""
    return _convert(Path(filename), path, options, **kwargs)


def from_string(html: str, path: Optional[str] = None, options: Optional[Dict[str, Any]] = None,
                **kwargs) -> bytes:
    """Convert an HTML string."""
    return _convert(html, path, options, **kwargs)


def _convert(source: Any, path: Optional[str], options: Optional[Dict[str, Any]],
             stylesheets: Optional[List[Union[str, Path]]] = None, config: Optional[Config] = None,
             **kwargs) -> bytes:
    converter = HTMLToPDFConverter(source, options, config=config)
    converter.stylesheets.extend(stylesheets or [])
    converter.initialize()
    return converter.to_pdf(path, **kwargs)
