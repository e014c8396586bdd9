"""Main CLI entry point for bitschema."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .. import __version__
from ..codec import decode, encode
from .analyze import analyze_file, load_schema
from .jsonio import from_json_value, to_json_value

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bitschema",
        description="bitschema: Declarative Binary Layouts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bitschema analyze schemas.py                          Show field sizes
  bitschema decode schemas.py:INSTRUMENTS dump.bin      Decode to JSON
  bitschema encode schemas.py:INSTRUMENTS dump.json -o dump.bin
  bitschema --version                                   Show version
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"bitschema {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    analyze = commands.add_parser("analyze", help="Show the size of every schema in a file")
    analyze.add_argument("file", metavar="FILE", help="Python file defining schemas")

    decode_cmd = commands.add_parser("decode", help="Decode a binary file to JSON")
    decode_cmd.add_argument("schema", metavar="FILE:NAME", help="Schema to decode with")
    decode_cmd.add_argument("input", metavar="INPUT", help="Binary file to decode")
    decode_cmd.add_argument("-o", "--output", metavar="OUT", help="Write JSON here (default: stdout)")
    decode_cmd.add_argument(
        "--strict", action="store_true", help="Fail if whole bytes are left over"
    )

    encode_cmd = commands.add_parser("encode", help="Encode a JSON file to binary")
    encode_cmd.add_argument("schema", metavar="FILE:NAME", help="Schema to encode with")
    encode_cmd.add_argument("input", metavar="INPUT", help="JSON file to encode")
    encode_cmd.add_argument(
        "-o", "--output", metavar="OUT", help="Write bytes here (default: stdout)"
    )

    return parser


def _run_decode(args: argparse.Namespace) -> None:
    _, schema = load_schema(args.schema)
    data = Path(args.input).read_bytes()
    value = decode(schema, data, strict=args.strict)
    document = json.dumps(to_json_value(value), indent=2)

    if args.output:
        Path(args.output).write_text(document + "\n", encoding="utf-8")
    else:
        print(document)


def _run_encode(args: argparse.Namespace) -> None:
    _, schema = load_schema(args.schema)
    value = from_json_value(json.loads(Path(args.input).read_text(encoding="utf-8")))
    data = encode(schema, value)

    if args.output:
        Path(args.output).write_bytes(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the bitschema CLI.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    # If no command specified, show help
    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "analyze":
        file_path = Path(args.file)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

    try:
        if args.command == "analyze":
            analyze_file(Path(args.file))
        elif args.command == "decode":
            _run_decode(args)
        else:
            _run_encode(args)
    except Exception as e:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
