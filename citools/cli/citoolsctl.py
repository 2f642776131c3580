#!/usr/bin/env python3
"""
citoolsctl - CI chores operator CLI

Set up the git test fixture, publish documentation pages from CI,
and inspect generated implementor listings.
"""
import argparse
import os
import sys
from pathlib import Path

from citools.ci_env import CIEnvironment
from citools.fixture import FixtureBuilder, FixtureError
from citools.implementors import load_implementors, summarize, ImplementorParseError
from citools.publish import DocsPublisher, PublishError
from citools.tooling_config import ToolingConfig, CONFIG_ENV_VAR


def cmd_fixture_init(config: ToolingConfig, directory: str) -> int:
    """Create the git test fixture."""
    result = FixtureBuilder(config.fixture).init(Path(directory))

    print()
    print("Fixture Ready")
    print("=" * 50)
    print(f"Directory: {result.directory}")
    print(f"Commit: {result.commit_sha}")
    print(f"Remote: {result.remote_name} -> {result.remote_url}")
    print(f"Fetched: {'yes' if result.fetched else 'no'}")
    return 0


def cmd_publish_docs(config: ToolingConfig, workdir: str) -> int:
    """Publish docs when the CI guards allow it."""
    publisher = DocsPublisher(config.publish, CIEnvironment.from_env())
    result = publisher.publish(Path(workdir))
    return result.exit_code


def cmd_implementors(path: str) -> int:
    """List libraries and implementation counts in a listing file."""
    counts = summarize(load_implementors(Path(path)))

    if not counts:
        print("No implementors found.")
        return 0

    print(f"Implementors: {path}")
    print("=" * 50)
    for library, count in counts.items():
        print(f"  {library}: {count}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='CI chores operator CLI',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--config',
        default=os.environ.get(CONFIG_ENV_VAR),
        help=f'Path to YAML config (default: ${CONFIG_ENV_VAR}, else built-in defaults)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # fixture init
    fixture_parser = subparsers.add_parser('fixture-init', help='Create the git test fixture repository')
    fixture_parser.add_argument('directory', nargs='?', default='.', help='Target directory (default: current directory)')

    # publish docs
    publish_parser = subparsers.add_parser('publish-docs', help='Build and publish docs on master push builds')
    publish_parser.add_argument('--workdir', default='.', help='Project root to build docs in (default: current directory)')

    # implementors
    implementors_parser = subparsers.add_parser('implementors', help='Summarize an implementor listing file')
    implementors_parser.add_argument('path', help='Path to the listing script (e.g. implementors/std/io/trait.Write.js)')

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        config = ToolingConfig.load(Path(args.config) if args.config else None)

        if args.command == 'fixture-init':
            exit_code = cmd_fixture_init(config, args.directory)
        elif args.command == 'publish-docs':
            exit_code = cmd_publish_docs(config, args.workdir)
        elif args.command == 'implementors':
            exit_code = cmd_implementors(args.path)
        else:
            parser.print_help()
            sys.exit(1)
    except PublishError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(e.exit_code or 1)
    except (FixtureError, ImplementorParseError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == '__main__':
    main()
