"""
HTML to PDF converter package.
Converts URLs, HTML files and HTML strings to PDF with wkhtmltopdf, guarding
against engine versions that never exit.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

__version__ = "1.0.0"

from .converter import HTMLToPDFConverter, from_file, from_string, from_url
from .command import Invocation, build_command
from .config import Config, configure, get_config, get_user_config_dir
from .console import ConsoleLogger
from .dependencies import DependencyChecker, check_dependencies, ensure_executable
from .engine import ExecutionEngine, ExecutionResult, GenerationRequest
from .errors import (
    CommandFailedError,
    ConfigurationError,
    GenerationTimeoutError,
    HTMLToPDFError,
    ImproperSourceError,
    NoExecutableError,
    PDFGenerationError,
    WatchIOError,
)
from .source import Source
from .verification import calculate_file_hash, is_complete
from .watcher import Watcher, WatchState

__all__ = [
    "HTMLToPDFConverter",
    "from_file",
    "from_string",
    "from_url",
    "Invocation",
    "build_command",
    "Config",
    "configure",
    "get_config",
    "get_user_config_dir",
    "ConsoleLogger",
    "DependencyChecker",
    "check_dependencies",
    "ensure_executable",
    "ExecutionEngine",
    "ExecutionResult",
    "GenerationRequest",
    "CommandFailedError",
    "ConfigurationError",
    "GenerationTimeoutError",
    "HTMLToPDFError",
    "ImproperSourceError",
    "NoExecutableError",
    "PDFGenerationError",
    "WatchIOError",
    "Source",
    "calculate_file_hash",
    "is_complete",
    "Watcher",
    "WatchState",
]
