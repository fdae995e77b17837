#!/usr/bin/env python3
"""
tfconfig - Terraform Module Inspector

Loads a Terraform module directory without executing it and prints a summary
of its variables, outputs, providers, resources and module calls.

Usage:
    # Markdown summary
    tfconfig ./modules/network

    # JSON for other tools
    tfconfig --json ./modules/network > network.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .encoding import module_to_json
from .loader import LoaderConfig, load_module
from .markdown import render_markdown


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Inspect a Terraform module without executing it.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    tfconfig ./modules/network
    tfconfig --json ./modules/network
        """,
    )

    parser.add_argument("directory", help="Path to the Terraform module directory")

    parser.add_argument("--json", action="store_true", help="Print the module as JSON")

    parser.add_argument(
        "--no-overrides",
        action="store_true",
        help="Ignore override files (override.tf, *_override.tf)",
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    module_path = Path(args.directory)
    if not module_path.exists():
        print(f"Error: Module path not found: {module_path}", file=sys.stderr)
        return 1

    config = LoaderConfig(include_overrides=not args.no_overrides)
    module = load_module(module_path, config)

    if args.json:
        print(module_to_json(module))
    else:
        print(render_markdown(module), end="")

    if module.diagnostics.has_errors():
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
