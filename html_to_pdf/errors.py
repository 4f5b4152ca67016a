#!/usr/bin/env python3
"""
Error types raised by the HTML to PDF converter.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

from typing import Optional


class HTMLToPDFError(Exception):
    """Base class for every error raised by the converter."""


class ConfigurationError(HTMLToPDFError):
    """Raised when the converter is not configured correctly."""


class NoExecutableError(ConfigurationError):
    """Raised when the rendering executable cannot be found."""

    def __init__(self, executable: str, instructions: str = ""):
        self.executable = executable
        msg = f"No wkhtmltopdf executable found at {executable}\n"
        msg += f">> Please install wkhtmltopdf - {instructions or 'https://wkhtmltopdf.org/downloads.html'}"
        super().__init__(msg)


class ImproperSourceError(HTMLToPDFError):
    def __init__(self, msg: str):
        super().__init__(f"Improper Source: {msg}")


class PDFGenerationError(HTMLToPDFError):
    """Raised when the output was produced but is not complete."""

    def __init__(self, msg: str, path: Optional[str] = None):
        self.path = path
        super().__init__(f"Generation failed: {msg}")


class GenerationTimeoutError(PDFGenerationError):
    """Raised when the completion marker was not seen before the deadline."""

    def __init__(self, path: str, timeout: float, elapsed: float):
        self.timeout = timeout
        self.elapsed = elapsed
        super().__init__(
            f"generation timed out after {elapsed:.2f}s (timeout {timeout}s) watching {path}",
            path=path,
        )


class WatchIOError(PDFGenerationError):
    """Raised when the watched output file disappears or shrinks."""


class CommandFailedError(HTMLToPDFError):
    """Raised when the engine exits unsuccessfully or writes nothing."""

    def __init__(self, invocation: str, returncode: Optional[int] = None, stderr: str = ""):
        self.invocation = invocation
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed: {invocation}"
        if returncode is not None:
            msg += f" (exit status {returncode})"
        if stderr:
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)
