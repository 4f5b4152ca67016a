#!/usr/bin/env python3
"""
Coloured console logging shared by the converter components.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

import sys
import threading
from typing import Optional, TextIO
from colorama import Fore, Style, init

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class ConsoleLogger:
    """Thread-safe coloured log lines ([DEBUG], [INFO], [WARNING], [ERROR], [OK])."""

    def __init__(self, debug: bool = False, stream: Optional[TextIO] = None):
        self.debug_enabled = debug
        self.stream = stream
        self._lock = threading.Lock()

    def _emit(self, color: str, label: str, message: str) -> None:
        with self._lock:
            print(f"{color}[{label}]{Style.RESET_ALL} {message}", file=self.stream or sys.stdout)

    def debug(self, message: str) -> None:
        """Log debug message (only if debug mode is enabled)."""
        if self.debug_enabled:
            self._emit(Fore.CYAN, "DEBUG", message)

    def info(self, message: str) -> None:
        self._emit(Fore.GREEN, "INFO", message)

    def warning(self, message: str) -> None:
        self._emit(Fore.YELLOW, "WARNING", message)

    def error(self, message: str) -> None:
        self._emit(Fore.RED, "ERROR", message)

    def success(self, message: str) -> None:
        self._emit(Fore.GREEN, "OK", message)
