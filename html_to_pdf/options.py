#!/usr/bin/env python3
"""
Rendering option handling: turns option mappings into wkhtmltopdf flags and
reads option overrides from HTML meta tags.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional


META_TAG_RE = re.compile(r'<meta [^>]*>', re.IGNORECASE)
META_CONTENT_RE = re.compile(r'content=["\']([^"\']*)')


def normalize_arg(arg: Any) -> str:
    """Lower-case an option name and replace punctuation with dashes."""
    return re.sub(r'[^a-z0-9]', '-', str(arg).lower())


def _flatten(values: Iterable[Any]) -> List[str]:
    flat: List[str] = []
    for value in values:
        if isinstance(value, Mapping):
            flat.extend(_flatten(_pairs(value)))
        elif isinstance(value, (list, tuple)):
            flat.extend(_flatten(value))
        elif value is not None:
            flat.append(str(value))
    return flat


def _pairs(mapping: Mapping) -> List[Any]:
    pairs: List[Any] = []
    for key, value in mapping.items():
        pairs.extend([key, value])
    return pairs


def normalize_value(value: Any) -> Optional[List[str]]:
    """Convert an option value to its CLI tokens.

    ``True`` becomes ``None`` (a bare flag), mappings become repeated
    ``key value`` pairs and sequences are flattened.
    """
    if value is True:
        return None
    if isinstance(value, Mapping):
        return _flatten(_pairs(value))
    if isinstance(value, (list, tuple)):
        return _flatten(value)
    return [str(value)]


def normalize_options(options: Mapping[str, Any]) -> Dict[str, Optional[List[str]]]:
    """Map option names to ``--dash-separated`` flags, dropping false values."""
    normalized: Dict[str, Optional[List[str]]] = {}
    for key, value in options.items():
        if value is None or value is False:
            continue
        normalized[f"--{normalize_arg(key)}"] = normalize_value(value)
    return normalized


def options_to_args(normalized: Mapping[str, Optional[List[str]]]) -> List[str]:
    """Flatten normalized options into an ordered list of CLI tokens."""
    args: List[str] = []
    for flag, values in normalized.items():
        args.append(flag)
        if values:
            args.extend(values)
    return args


def find_options_in_meta(content: str, prefix: str = "pdfkit-") -> Dict[str, str]:
    """Collect options from ``<meta name="<prefix>option" content="...">`` tags.

    Args:
        content: HTML document
        prefix: Meta name prefix marking converter options

    Returns:
        Dictionary of option name to value, in document order
    """
    found: Dict[str, str] = {}
    name_re = re.compile(r'name=["\']' + re.escape(prefix) + r'([^"\']*)')

    for meta in META_TAG_RE.findall(content):
        name_match = name_re.search(meta)
        if not name_match:
            continue
        content_match = META_CONTENT_RE.search(meta)
        if content_match:
            found[name_match.group(1)] = content_match.group(1)

    return found
