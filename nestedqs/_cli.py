"""nestedqs command-line interface.

Usage:
    python3 -m nestedqs parse 'a[b]=c&a[d][]=e'
    echo 'a.b=c' | python3 -m nestedqs parse --allow-dots
    echo '{"a":{"b":"c"}}' | python3 -m nestedqs stringify [--array-format brackets]
    python3 -m nestedqs stringify --input file.json --format RFC1738
    python3 -m nestedqs version
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from . import QsError, __version__, formats, parse, stringify
from ._constants import ARRAY_FORMATS, CHARSETS


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nestedqs",
        description="nestedqs — nested query strings to JSON and back",
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log lenient-input decisions to stderr")
    sub = parser.add_subparsers(dest="command")

    # ── parse ──
    parse_p = sub.add_parser("parse", help="Parse a query string into JSON")
    parse_p.add_argument("query", nargs="?",
                         help="Query string (read from --input or stdin if omitted)")
    parse_p.add_argument("--input", "-i", metavar="FILE",
                         help="Read the query string from FILE")
    parse_p.add_argument("--allow-dots", action="store_true",
                         help="Treat a.b as a[b]")
    parse_p.add_argument("--depth", type=int, default=None,
                         help="Maximum bracket nesting before the tail is kept literally")
    parse_p.add_argument("--array-limit", type=int, default=None,
                         help="Highest index that still produces a list")
    parse_p.add_argument("--strict-null-handling", action="store_true",
                         help="Bare keys (no '=') become null instead of \"\"")
    parse_p.add_argument("--ignore-query-prefix", action="store_true",
                         help="Skip a leading '?'")
    parse_p.add_argument("--charset", choices=sorted(CHARSETS), default=None)
    parse_p.add_argument("--charset-sentinel", action="store_true",
                         help="Honour a utf8=... sentinel pair")
    parse_p.add_argument("--delimiter", default=None)

    # ── stringify ──
    str_p = sub.add_parser("stringify", help="Serialize JSON into a query string")
    str_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read JSON from FILE instead of stdin")
    str_p.add_argument("--allow-dots", action="store_true",
                       help="Write a.b instead of a[b]")
    str_p.add_argument("--array-format", choices=sorted(ARRAY_FORMATS), default=None)
    str_p.add_argument("--format", choices=sorted(formats.FORMATTERS), default=None)
    str_p.add_argument("--no-encode", action="store_true",
                       help="Do not percent-encode keys or values")
    str_p.add_argument("--encode-values-only", action="store_true")
    str_p.add_argument("--skip-nulls", action="store_true")
    str_p.add_argument("--strict-null-handling", action="store_true",
                       help="Write null values as a bare key")
    str_p.add_argument("--add-query-prefix", action="store_true")
    str_p.add_argument("--charset", choices=sorted(CHARSETS), default=None)
    str_p.add_argument("--charset-sentinel", action="store_true")
    str_p.add_argument("--delimiter", default=None)

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str]) -> str:
    """Read text from a file or stdin."""
    if filepath:
        with open(filepath, "r", encoding="utf-8") as f:
            return f.read()
    if sys.stdin.isatty():
        print("nestedqs: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.read()


def _given(**kwargs: Any) -> Dict[str, Any]:
    """Keep only options that were set on the command line."""
    return {k: v for k, v in kwargs.items() if v is not None and v is not False}


def _cmd_parse(args: argparse.Namespace) -> None:
    query = args.query
    if query is None:
        query = _read_input(args.input).strip()

    result = parse(query, **_given(
        allow_dots=args.allow_dots,
        depth=args.depth,
        array_limit=args.array_limit,
        strict_null_handling=args.strict_null_handling,
        ignore_query_prefix=args.ignore_query_prefix,
        charset=args.charset,
        charset_sentinel=args.charset_sentinel,
        delimiter=args.delimiter,
    ))
    print(json.dumps(result, ensure_ascii=False))


def _cmd_stringify(args: argparse.Namespace) -> None:
    data = json.loads(_read_input(args.input))

    options = _given(
        allow_dots=args.allow_dots,
        array_format=args.array_format,
        format=args.format,
        encode_values_only=args.encode_values_only,
        skip_nulls=args.skip_nulls,
        strict_null_handling=args.strict_null_handling,
        add_query_prefix=args.add_query_prefix,
        charset=args.charset,
        charset_sentinel=args.charset_sentinel,
        delimiter=args.delimiter,
    )
    if args.no_encode:
        options["encode"] = False
    print(stringify(data, **options))


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr,
                            format="%(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"nestedqs {__version__}")
        return

    try:
        if args.command == "parse":
            _cmd_parse(args)
        elif args.command == "stringify":
            _cmd_stringify(args)
    except QsError as e:
        print(f"nestedqs: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except json.JSONDecodeError as e:
        print(f"nestedqs: JSON parse error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
