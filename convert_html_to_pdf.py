#!/usr/bin/env python3
"""
Convert a URL, an HTML file or HTML from stdin to PDF with wkhtmltopdf.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from html_to_pdf import (
    Config,
    ConsoleLogger,
    DependencyChecker,
    HTMLToPDFConverter,
    HTMLToPDFError,
    calculate_file_hash,
)


def parse_option_pairs(pairs: List[str], flags: List[str]) -> Dict[str, Any]:
    """Turn KEY=VALUE pairs and bare flag names into an options dict."""
    options: Dict[str, Any] = {}
    for pair in pairs:
        if '=' not in pair:
            raise ValueError(f"Invalid option '{pair}'. Use KEY=VALUE, or --flag for options without a value.")
        key, value = pair.split('=', 1)
        options[key.strip()] = value
    for flag in flags:
        options[flag.strip()] = True
    return options


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Convert HTML (URL, file or stdin) to PDF with wkhtmltopdf")
    parser.add_argument("source", nargs="?", help="URL, HTML file, or '-' to read HTML from stdin")
    parser.add_argument("-o", "--output", help="Output PDF path (default: write PDF bytes to stdout)")
    parser.add_argument("--ensure-termination", action="store_true", default=None,
                        help="Watch the output for its EOF trailer and stop wkhtmltopdf once it appears")
    parser.add_argument("--timeout", type=float, help="Seconds to wait for the EOF trailer (default: 10)")
    parser.add_argument("--settle-delay", type=float,
                        help="Seconds to wait before watching the output file (default: 5)")
    parser.add_argument("--option", action="append", default=[], metavar="KEY=VALUE",
                        help="wkhtmltopdf option, e.g. --option page_size=A4 (repeatable)")
    parser.add_argument("--flag", action="append", default=[], metavar="KEY",
                        help="wkhtmltopdf option without a value, e.g. --flag grayscale (repeatable)")
    parser.add_argument("--stylesheet", action="append", default=[], help="CSS file to inject (HTML sources only)")
    parser.add_argument("--wkhtmltopdf", help="Path to the wkhtmltopdf executable")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging for detailed output")
    parser.add_argument("--check-deps", action="store_true", help="Check that wkhtmltopdf is installed and exit")

    args = parser.parse_args(argv)

    config = Config({
        "wkhtmltopdf": args.wkhtmltopdf,
        "ensure_termination": args.ensure_termination,
        "timeout": args.timeout,
        "settle_delay": args.settle_delay,
    })
    logger = ConsoleLogger(debug=args.debug, stream=sys.stderr)

    if args.check_deps:
        return 0 if DependencyChecker(config.get_executable()).print_summary() else 1

    if not args.source:
        parser.error("a source is required unless --check-deps is given")

    if not args.output and sys.stdout.isatty():
        parser.error("refusing to write PDF bytes to a terminal; use --output")

    try:
        options = parse_option_pairs(args.option, args.flag)
        source = sys.stdin.read() if args.source == "-" else args.source
        converter = HTMLToPDFConverter(source, options, config=config, logger=logger)
        converter.stylesheets.extend(args.stylesheet)
        converter.initialize()
        pdf = converter.to_pdf(args.output)
    except ValueError as e:
        logger.error(str(e))
        return 2
    except HTMLToPDFError as e:
        logger.error(str(e))
        return 1

    if args.output:
        output = Path(args.output)
        logger.success(f"Wrote {output} ({len(pdf)} bytes, sha256 {calculate_file_hash(output)[:12]})")
    else:
        sys.stdout.buffer.write(pdf)
        sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
