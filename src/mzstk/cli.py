"""
CLI entry point for mzstk.

Usage:
    mzstk <file.mzstk>                 Parse a program and print its AST
    mzstk <file.mzstk> --json          Print the AST as JSON
    mzstk <file.mzstk> --max-depth N   Limit block nesting
"""

import argparse
import logging
import sys

from mzstk import __version__

logger = logging.getLogger(__name__)

SOURCE_EXTENSION = ".mzstk"


def cmd_parse(args):
    """Parse a file and print its AST."""
    from .parser import TranslationError, parse_file, print_ast
    from .parser.ast_serde import serialize_ast

    if not args.file.endswith(SOURCE_EXTENSION):
        print(f"Error: Input file must have {SOURCE_EXTENSION} extension", file=sys.stderr)
        return 1

    try:
        ast = parse_file(args.file, max_depth=args.max_depth)
    except OSError as e:
        print(f"Failed to open file: {e}", file=sys.stderr)
        return 1
    except TranslationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug(f"Parsed {args.file}")
    if args.json:
        try:
            output = serialize_ast(ast, indent=2)
        except TranslationError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(output.decode('utf-8'))
    else:
        print_ast(ast)
    return 0


def positive_int(text):
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return value


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="mzstk",
        description="Translate an mzstk program into its abstract syntax tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    mzstk countdown.mzstk
    mzstk countdown.mzstk --json
"""
    )
    parser.add_argument('--version', action='version', version=f'mzstk {__version__}')
    parser.add_argument('file', help=f'Program to parse ({SOURCE_EXTENSION})')
    parser.add_argument('--json', action='store_true', help='Print the AST as JSON')
    parser.add_argument('--max-depth', type=positive_int, default=None,
                        help='Maximum open-block stack depth, program root included')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug output to stderr')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    return cmd_parse(args)


if __name__ == "__main__":
    sys.exit(main())
