#!/usr/bin/env python3
"""
Startup checks for the rendering executable.
Provides platform-specific installation guidance.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

import os
import shutil
import subprocess
import platform
from pathlib import Path
from typing import Tuple, List, Optional
from colorama import Fore, Style, init

from .errors import NoExecutableError

init(autoreset=True)


def get_install_instructions(system: Optional[str] = None) -> str:
    """Get platform-specific wkhtmltopdf installation instructions."""
    system = system or platform.system()
    if system == "Windows":
        return "Download from https://wkhtmltopdf.org/downloads.html and add to PATH"
    elif system == "Darwin":  # macOS
        return "brew install --cask wkhtmltopdf"
    else:  # Linux
        return "sudo apt-get install wkhtmltopdf  # or: sudo yum install wkhtmltopdf"


def resolve_executable(configured: str) -> str:
    """Pick the executable to put at the head of an invocation.

    A bare command name is left for the shell to resolve. An absolute path is
    used when it exists, otherwise its basename is tried instead.
    """
    if not os.path.isabs(configured):
        return configured
    if os.path.exists(configured):
        return configured
    return os.path.basename(configured)


def ensure_executable(configured: str) -> Path:
    """Check once, before any invocation, that the executable exists.

    Args:
        configured: Absolute path or command name from the configuration

    Returns:
        Absolute path of the executable

    Raises:
        NoExecutableError: If the executable is not on disk
    """
    if os.path.isabs(configured):
        if os.path.isfile(configured):
            return Path(configured)
    else:
        found = shutil.which(configured)
        if found:
            return Path(found)
    raise NoExecutableError(configured, get_install_instructions())


class DependencyChecker:
    """Check and report on the external tools the converter needs."""

    def __init__(self, executable: str):
        self.executable = executable
        self.system = platform.system()
        self.missing_external_tools: List[Tuple[str, str]] = []  # (name, install_instructions)

    def check_executable(self) -> Optional[Path]:
        """Return the resolved executable path, or None if it is missing."""
        try:
            return ensure_executable(self.executable)
        except NoExecutableError:
            self.missing_external_tools.append(("wkhtmltopdf", get_install_instructions(self.system)))
            return None

    def get_version(self, path: Path) -> Optional[str]:
        """Ask the executable for its version string."""
        try:
            result = subprocess.run(
                [str(path), "--version"],
                capture_output=True,
                text=True,
                timeout=5
            )
        except (OSError, subprocess.TimeoutExpired):
            return None
        output = (result.stdout or result.stderr).strip()
        return output.splitlines()[0] if output else None

    def check_all(self) -> Tuple[bool, List[str]]:
        """Check all dependencies and return status and messages."""
        messages: List[str] = []

        print(f"{Fore.CYAN}Checking external tools...{Style.RESET_ALL}")

        path = self.check_executable()
        if path is None:
            messages.append(f"{Fore.RED}[MISSING]{Style.RESET_ALL} wkhtmltopdf at {self.executable} (required)")
            messages.append(f"  {get_install_instructions(self.system)}")
            return False, messages

        version = self.get_version(path)
        print(f"{Fore.GREEN}[OK]{Style.RESET_ALL} wkhtmltopdf is available at {path}")
        if version:
            print(f"  {version}")
        else:
            messages.append(f"{Fore.YELLOW}[WARNING]{Style.RESET_ALL} Could not read the wkhtmltopdf version")

        return True, messages

    def print_summary(self) -> bool:
        """Check dependencies and print summary. Returns True if all required deps are available."""
        all_ok, messages = self.check_all()

        if messages:
            print(f"\n{Fore.YELLOW}Dependency Summary:{Style.RESET_ALL}")
            for msg in messages:
                print(f"  {msg}")
        else:
            print(f"\n{Fore.GREEN}All dependencies are available!{Style.RESET_ALL}")

        return all_ok


def check_dependencies(executable: str) -> bool:
    """Convenience function to check dependencies."""
    checker = DependencyChecker(executable)
    return checker.print_summary()
