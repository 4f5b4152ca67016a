#!/usr/bin/env python3
"""
Builds the shell-escaped wkhtmltopdf invocation.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

import shlex
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .source import Source


STDIN_MARKER = "-"
STDOUT_MARKER = "-"
QUIET_FLAG = "--quiet"


@dataclass(frozen=True)
class Invocation:
    """Ordered command tokens; ``str()`` gives the shell-escaped command."""

    tokens: Tuple[str, ...]

    @property
    def input_token(self) -> str:
        return self.tokens[-2]

    @property
    def output_token(self) -> str:
        return self.tokens[-1]

    def __str__(self) -> str:
        return shlex.join(self.tokens)


def build_command(executable: str, option_args: Sequence[str], source: Source,
                  path: Optional[str] = None, temp_file: Optional[str] = None) -> Invocation:
    """Assemble executable, options, quiet flag, input and output tokens.

    Args:
        executable: Executable to run
        option_args: Normalized option tokens
        source: What to render
        path: Output file, or None to write to stdout
        temp_file: File holding the HTML, used instead of stdin

    Returns:
        The invocation, every token escaped when rendered as a string
    """
    args = [executable]
    args += [str(token) for token in option_args if token is not None]
    args.append(QUIET_FLAG)

    if temp_file:
        args.append(str(temp_file))
    elif source.is_html():
        args.append(STDIN_MARKER)  # Get HTML from stdin
    else:
        args.append(str(source))

    args.append(str(path) if path else STDOUT_MARKER)  # Write to file or stdout

    return Invocation(tuple(args))
