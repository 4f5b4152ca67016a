#!/usr/bin/env python3
"""
Input sources for the converter: a URL, a file on disk, or inline HTML.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

import re
from pathlib import Path
from typing import Any, Iterable, Union

from .errors import ImproperSourceError


URL_RE = re.compile(r'^https?://', re.IGNORECASE)
HEAD_CLOSE_RE = re.compile(r'</head>', re.IGNORECASE)


class Source:
    """Wraps whatever the caller passed to render."""

    def __init__(self, url_file_or_html: Any):
        name = getattr(url_file_or_html, 'name', None)
        if hasattr(url_file_or_html, 'read') and isinstance(name, str) and Path(name).is_file():
            # Files on disk go to wkhtmltopdf by path so relative assets resolve
            url_file_or_html = name
        elif hasattr(url_file_or_html, 'read'):
            # Anything else readable is rendered from its content
            data = url_file_or_html.read()
            if isinstance(data, bytes):
                data = data.decode('utf-8', errors='replace')
            url_file_or_html = data
        if isinstance(url_file_or_html, Path):
            url_file_or_html = str(url_file_or_html)
        if not isinstance(url_file_or_html, str):
            raise ImproperSourceError(f"unsupported source type {type(url_file_or_html).__name__}")
        self.source = url_file_or_html

    def is_url(self) -> bool:
        return bool(URL_RE.match(self.source))

    def is_file(self) -> bool:
        if self.is_url() or '\n' in self.source or '<' in self.source:
            return False
        try:
            return Path(self.source).is_file()
        except (OSError, ValueError):
            return False

    def is_html(self) -> bool:
        return not (self.is_url() or self.is_file())

    def read(self) -> str:
        """Return the HTML text for file and inline sources."""
        if self.is_url():
            raise ImproperSourceError('cannot read the content of a URL source')
        if self.is_file():
            try:
                return Path(self.source).read_text(encoding='utf-8', errors='replace')
            except OSError as e:
                raise ImproperSourceError(f"cannot read {self.source}: {e}")
        return self.source

    def __str__(self) -> str:
        return self.source

    def __repr__(self) -> str:
        kind = 'url' if self.is_url() else 'file' if self.is_file() else 'html'
        return f"Source({kind})"


def style_tag_for(stylesheet: Union[str, Path]) -> str:
    """Read a stylesheet and wrap it in a ``<style>`` tag."""
    try:
        css = Path(stylesheet).read_text(encoding='utf-8')
    except OSError as e:
        raise ImproperSourceError(f"cannot read stylesheet {stylesheet}: {e}")
    return f"<style>{css}</style>"


def append_stylesheets(source: Source, stylesheets: Iterable[Union[str, Path]]) -> Source:
    """Inject stylesheets before ``</head>``, or at the top of the document.

    Returns:
        A new Source when stylesheets were added, otherwise the same source

    Raises:
        ImproperSourceError: If stylesheets are given for a non-HTML source
    """
    stylesheets = list(stylesheets)
    if not stylesheets:
        return source
    if not source.is_html():
        raise ImproperSourceError('Stylesheets may only be added to an HTML source')

    html = str(source)
    for stylesheet in stylesheets:
        tag = style_tag_for(stylesheet)
        if HEAD_CLOSE_RE.search(html):
            html = HEAD_CLOSE_RE.sub(lambda m: tag + m.group(0), html)
        else:
            html = tag + html
    return Source(html)
