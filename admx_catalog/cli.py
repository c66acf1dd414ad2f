#
# admx-catalog - ADMX/ADML policy catalog generator
#
# Copyright (C) 2025-2026 BaseALT Ltd.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
"""
admx-catalog - convert PolicyDefinitions into per-language data_<lang>.json files
"""

import argparse
import logging
import logging.handlers
import sys

from . import config
from .errors import CatalogError, ISSUE_KINDS
from .pipeline import CatalogPipeline

logger = logging.getLogger('admx_catalog')


def setup_logging(verbose=False, use_syslog=False):
    """Attach a syslog or stderr handler to the package logger"""
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = None
    if use_syslog:
        try:
            handler = logging.handlers.SysLogHandler(address='/dev/log')
            handler.setFormatter(logging.Formatter('admx-catalog[%(process)d]: %(levelname)s: %(message)s'))
        except OSError as e:
            print(f"Syslog is not available ({e}), logging to stderr", file=sys.stderr)
            handler = None

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

    logger.addHandler(handler)
    return handler


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="admx-catalog",
        description="Convert ADMX/ADML policy definitions into flat per-language JSON data sets.",
    )
    parser.add_argument(
        "-s",
        "--source",
        dest="source_root",
        help=f"PolicyDefinitions directory. Defaults to ${config.ENV_SOURCE_ROOT} "
             f"or {config.DEFAULT_SOURCE_ROOT}.",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="output_dir",
        help=f"Directory for data_<lang>.json files. Defaults to ${config.ENV_OUTPUT_DIR} or '.'.",
    )
    parser.add_argument(
        "-l",
        "--language",
        dest="languages",
        action="append",
        help="Language folder to project (can be added multiple times). Defaults to en-US.",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=config.DEFAULT_MAX_DEPTH,
        help="Deepest nesting written as JSON structure; deeper values are stored as text.",
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        help="Emit minified JSON.",
    )
    parser.add_argument(
        "--syslog",
        action="store_true",
        help="Log to syslog instead of stderr.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def log_summary(result, list_issues=False) -> None:
    """Log run totals; with list_issues every accumulated warning is repeated."""
    graph = result.graph
    logger.info("Conversion completed:")
    logger.info(f"  - Source files: {len(graph.source_files)}")
    logger.info(f"  - Total categories: {len(graph.categories)}")
    logger.info(f"  - Total policies: {len(graph.policies)}")
    for language, path in result.outputs.items():
        logger.info(f"  - {language}: {path}")
    for language in result.skipped_languages:
        logger.info(f"  - {language}: skipped")

    counts = result.report.counts()
    if counts:
        logger.info(f"  - Warnings: {len(result.report)}")
        for kind in ISSUE_KINDS:
            if counts.get(kind):
                logger.info(f"      {kind}: {counts[kind]}")
        if list_issues:
            for issue in result.report.issues:
                logger.info(f"  ! {issue}")


def main(argv=None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.syslog)

    if args.max_depth < 1:
        parser.error("--max-depth must be a positive number")

    source_root = config.get_source_root(args.source_root)
    output_dir = config.get_output_dir(args.output_dir)
    languages = config.get_languages(args.languages)

    pipeline = CatalogPipeline(source_root)
    try:
        result = pipeline.run(languages, output_dir,
                              max_depth=args.max_depth,
                              indent=None if args.compact else 2)
    except CatalogError as e:
        logger.error(f"Error: {e}")
        return 1

    log_summary(result, list_issues=args.verbose)
    return 0


if __name__ == "__main__":
    sys.exit(main())
