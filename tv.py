"""
tv - Tutorial Video CLI

Turns a Markdown tutorial into an animated slide-deck video.

Usage:
    tv video export [--config tutorial.config.json] [--mode animated|slides-only|hybrid]
    tv video plan [--config tutorial.config.json]
    tv slides parse --input tutorial.md
    tv status

Every command prints a JSON result; the exit status is 1 when it failed.
"""

import argparse
import json
import logging
import os
import sys

from tv_commands import utils, video


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='tv', description='Tutorial video generator')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command')

    video.register(subparsers)
    utils.register(subparsers)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else os.environ.get('TV_LOG_LEVEL', 'WARNING').upper()
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    result = args.func(args)
    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
    return 0 if result.get('success') else 1


if __name__ == '__main__':
    sys.exit(main())
