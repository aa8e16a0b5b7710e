"""Main CLI entry point for injtrace."""

import argparse
import json
import logging
import sys
from typing import List, Optional

import requests

from . import __version__
from .commands.stats import show_stats
from .formatters import OutputFormatter
from .injector_tree import split_injector_paths, transform_paths_into_tree
from .models import PathRecord
from .parsers import ForestParser

logger = logging.getLogger(__name__)

LOAD_ERRORS = (OSError, ValueError, requests.RequestException)


def setup_logging(verbose: bool = False, log_level: Optional[str] = None):
    """Configure logging based on verbosity flags."""
    if log_level:
        level = getattr(logging, log_level.upper(), logging.WARNING)
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def _load_paths(input_file: str) -> Optional[List[PathRecord]]:
    """Load path records, reporting failures on stderr."""
    try:
        _, paths = ForestParser.load(input_file)
    except LOAD_ERRORS as e:
        logger.error(f"Error parsing input file: {e}")
        print(f"Error parsing input file: {e}", file=sys.stderr)
        return None

    logger.info(f"Loaded {len(paths)} injector paths from the input file")
    return paths


def _write_output(output: str, output_file: str) -> int:
    try:
        if output_file == '-':
            print(output, end='')
        else:
            with open(output_file, 'w', encoding='utf-8') as f:
                f.write(output)
            logger.info(f"Output written to: {output_file}")
            print(f"Output written to: {output_file}")
    except OSError as e:
        logger.error(f"Error writing output: {e}")
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1
    return 0


def handle_tree(args):
    """Handle the 'tree' subcommand."""
    setup_logging(args.verbose, args.loglevel)

    paths = _load_paths(args.input)
    if paths is None:
        return 1

    if args.scope == 'all':
        selected = paths
        title = "Injector Tree:"
    else:
        split = split_injector_paths(paths)
        if args.scope == 'element':
            selected = split.element_paths
            title = "Element Injector Tree:"
        else:
            selected = split.environment_paths
            title = "Environment Injector Tree:"

    root = transform_paths_into_tree(selected)
    logger.info(f"Merged {len(selected)} paths into {len(root.children)} top-level injectors")

    if args.output_format == 'json':
        output = OutputFormatter.format_as_json(root)
    elif args.output_format == 'edges':
        output = OutputFormatter.format_edges(root)
    else:
        output = OutputFormatter.format_as_tree(root, title)

    return _write_output(output, args.output)


def handle_paths(args):
    """Handle the 'paths' subcommand."""
    setup_logging(args.verbose, args.loglevel)

    paths = _load_paths(args.input)
    if paths is None:
        return 1
    return _write_output(OutputFormatter.format_as_paths(paths), args.output)


def handle_split(args):
    """Handle the 'split' subcommand."""
    setup_logging(args.verbose, args.loglevel)

    paths = _load_paths(args.input)
    if paths is None:
        return 1

    split = split_injector_paths(paths)
    if args.index_only:
        output = json.dumps({
            element_id: [injector.id for injector in environment_path]
            for element_id, environment_path in split.starting_element_to_environment_path.items()
        }, indent=2) + '\n'
    else:
        output = OutputFormatter.format_split(split)
    return _write_output(output, args.output)


def handle_stats(args):
    """Handle the 'stats' subcommand."""
    setup_logging(args.verbose, args.loglevel)

    try:
        show_stats(args.input)
    except LOAD_ERRORS as e:
        logger.error(f"Error parsing input file: {e}")
        print(f"Error parsing input file: {e}", file=sys.stderr)
        return 1
    return 0


def _add_common_arguments(subparser):
    subparser.add_argument('-v', '--verbose', action='store_true', help='Verbose logging')
    subparser.add_argument('--loglevel',
                           choices=['TRACE', 'DEBUG', 'INFO', 'WARN', 'ERROR'],
                           help='Set log level')


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog='injtrace',
        description='Rebuild dependency injection trees from injector resolution paths'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Subcommands')

    # Tree command
    tree_parser = subparsers.add_parser('tree', help='Merge resolution paths into a single tree')
    tree_parser.add_argument('input', help='Forest or paths snapshot (JSON file or URL)')
    tree_parser.add_argument('output', nargs='?', default='-',
                             help='Output file (default: stdout, use - for stdout)')
    tree_parser.add_argument('--scope', default='all',
                             choices=['all', 'element', 'environment'],
                             help='Injectors to include (all, element, environment). Default: all')
    tree_parser.add_argument('--format', dest='output_format', default='tree',
                             choices=['tree', 'json', 'edges'],
                             help='Output format (tree, json, edges). Default: tree')
    _add_common_arguments(tree_parser)
    tree_parser.set_defaults(func=handle_tree)

    # Paths command
    paths_parser = subparsers.add_parser('paths', help='List root-first injector paths per node')
    paths_parser.add_argument('input', help='Forest or paths snapshot (JSON file or URL)')
    paths_parser.add_argument('output', nargs='?', default='-',
                              help='Output file (default: stdout, use - for stdout)')
    _add_common_arguments(paths_parser)
    paths_parser.set_defaults(func=handle_paths)

    # Split command
    split_parser = subparsers.add_parser('split', help='Split paths into element and environment paths')
    split_parser.add_argument('input', help='Forest or paths snapshot (JSON file or URL)')
    split_parser.add_argument('output', nargs='?', default='-',
                              help='Output file (default: stdout, use - for stdout)')
    split_parser.add_argument('--index-only', action='store_true',
                              help='Only print the starting element to environment path index')
    _add_common_arguments(split_parser)
    split_parser.set_defaults(func=handle_split)

    # Stats command
    stats_parser = subparsers.add_parser('stats', help='Show snapshot statistics')
    stats_parser.add_argument('input', help='Forest or paths snapshot (JSON file or URL)')
    _add_common_arguments(stats_parser)
    stats_parser.set_defaults(func=handle_stats)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
