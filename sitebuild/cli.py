"""Command-line interface for the site assembler.

Usage:
    sitebuild [build] [--root DIR] [--config FILE] [--profile NAME]
              [--strict] [--verbose] [--quiet]
    sitebuild serve [--port 8080]
"""

import argparse
import dataclasses
import sys
from pathlib import Path

from sitebuild.assemble import run_build, StrictBuildError
from sitebuild.config import BuildConfig, DEFAULT_CONFIG_FILE, load_config
from sitebuild.serve import serve

COMMANDS = ('build', 'serve')


def _add_site_options(parser):
    parser.add_argument('--root', default=None,
                        help='Project root (default: the config file\'s '
                             'directory, else the current directory)')
    parser.add_argument('--config', '-c', default=None,
                        help=f'YAML config file (default: <root>/{DEFAULT_CONFIG_FILE} '
                             f'if present)')
    parser.add_argument('--profile', '-p', default=None,
                        help='Config profile to use')


def main(args=None):
    parser = argparse.ArgumentParser(
        prog='sitebuild',
        description='Assemble component folders into one static page',
    )
    subparsers = parser.add_subparsers(dest='command')

    # --- build command ---
    build_parser = subparsers.add_parser('build', help='Build the site (default)')
    _add_site_options(build_parser)
    build_parser.add_argument('--strict', action='store_true',
                              help='Fail on orphaned placeholders/components '
                                   'and stale assets')
    build_parser.add_argument('--verbose', '-v', action='store_true',
                              help='Print build warnings')
    build_parser.add_argument('--quiet', '-q', action='store_true',
                              help='Suppress progress output')
    build_parser.add_argument('--prune', action='store_true',
                              help='Delete copied assets missing from the source')

    # --- serve command ---
    serve_parser = subparsers.add_parser('serve', help='Serve the built site')
    _add_site_options(serve_parser)
    serve_parser.add_argument('--port', type=int, default=8080,
                              help='Port to serve on (default: 8080)')

    argv = list(sys.argv[1:] if args is None else args)
    # Bare `sitebuild` (or options only) means `sitebuild build`
    if not argv or argv[0] not in COMMANDS + ('-h', '--help'):
        argv.insert(0, 'build')
    parsed = parser.parse_args(argv)

    if parsed.command == 'build':
        return cmd_build(parsed)
    elif parsed.command == 'serve':
        return cmd_serve(parsed)
    else:
        parser.print_help()
        return 1


def _load_site_config(args):
    """Resolve the BuildConfig for args, or None if --config is missing."""
    root = Path(args.root) if args.root is not None else None
    if args.config is not None:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: config file not found: {config_path}")
            return None
    else:
        search_root = root if root is not None else Path('.')
        config_path = search_root / DEFAULT_CONFIG_FILE
        if not config_path.exists():
            if args.profile is not None:
                print(f"Error: --profile given but no {DEFAULT_CONFIG_FILE} "
                      f"in {search_root}")
                return None
            return BuildConfig(root=search_root)
    return load_config(config_path, profile=args.profile, root=root)


def cmd_build(args):
    """Build the site from the components tree."""
    config = _load_site_config(args)
    if config is None:
        return 1

    overrides = {}
    for flag in ('strict', 'verbose', 'quiet'):
        if getattr(args, flag):
            overrides[flag] = True
    if args.prune:
        overrides['prune_stale_assets'] = True
    config = dataclasses.replace(config, **overrides)

    try:
        report = run_build(config)
    except StrictBuildError as e:
        print(f"Error: {e}")
        return 1

    if not config.quiet:
        for path in report.written:
            print(f"  Wrote {path}")
        print(f"  Copied {len(report.copied)} asset file(s)")
    return 0


def cmd_serve(args):
    """Serve the project root, building first if needed."""
    config = _load_site_config(args)
    if config is None:
        return 1
    try:
        serve(config, port=args.port)
    except StrictBuildError as e:
        print(f"Error: {e}")
        return 1
    return 0
