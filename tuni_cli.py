#!/usr/bin/env python3

"""
Command-line interface for tuni.

Reads a text file listing GTF/GFF paths, checks the inputs and the output
directory, then writes one "<stem>.tuni.<ext>" file per input.
"""

import argparse
import sys
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from tuni.core.config import load_config
from tuni.core.exceptions import FileAccessError, InputValidationError, TuniError
from tuni.core.generators import DIALECTS

SAME_EXTENSION_MESSAGE = "GTF/GFFs must be readable and all have the same extension ('.gtf' or '.gff')"


def setup_logging(log_level: str = "WARNING") -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="tuni",
        description="tuni: Unify transcripts across different samples",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # gtf_paths.txt lists one GTF per line
  tuni --gtf-gff-path gtf_paths.txt --output-dir results/

  # With log messages and a processing report
  tuni -g gff_paths.txt -o results/ --verbose --report
        """
    )

    # Required arguments
    parser.add_argument(
        '-g', '--gtf-gff-path',
        required=True,
        metavar='*.txt',
        help='A text file containing GTF/GFF paths, one per line'
    )
    parser.add_argument(
        '-o', '--output-dir',
        required=True,
        metavar='/output/dir/',
        help='Directory where outputted GTF/GFFs will be stored (must exist)'
    )

    # Optional parameters
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Print log messages'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: WARNING, or INFO with --verbose)'
    )
    parser.add_argument(
        '--config',
        help='Configuration file (JSON or YAML)'
    )
    parser.add_argument(
        '--report',
        action='store_true',
        help='Write a processing report to the output directory'
    )

    return parser


def parse_gtf_gff_paths(gtf_gff_path: str) -> Tuple[str, List[Path]]:
    """
    Parse the file containing GTF/GFF paths.

    Returns:
        The shared extension ("gtf" or "gff") and the GTF/GFF paths

    Raises:
        FileAccessError: the file, or any of the GTF/GFFs, cannot be read
        InputValidationError: the file is empty, or a GTF/GFF does not exist
            or has an extension other than ".gtf"/".gff" or different from
            the first GTF/GFF
    """
    try:
        with open(gtf_gff_path, 'r') as f:
            paths = [Path(line.strip()) for line in f if line.strip()]
    except (OSError, UnicodeDecodeError) as e:
        raise FileAccessError("Unable to read file", gtf_gff_path) from e

    if not paths:
        raise InputValidationError(f"Provided file {gtf_gff_path!r} is empty")

    extension = paths[0].suffix[1:]
    if extension not in DIALECTS:
        raise InputValidationError(SAME_EXTENSION_MESSAGE, str(paths[0]))

    for path in paths:
        if not path.is_file() or path.suffix[1:] != extension:
            raise InputValidationError(SAME_EXTENSION_MESSAGE, str(path))
        # open() fails if the file is unreadable, e.g. due to permissions
        try:
            with open(path, 'r'):
                pass
        except OSError as e:
            raise FileAccessError("Unable to read file", str(path)) from e

    return extension, paths


def parse_output_dir(output_dir: str) -> Path:
    """Check the output directory exists."""
    path = Path(output_dir)
    if not path.is_dir():
        raise InputValidationError("output_dir must be an existing directory", output_dir)
    return path


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level or ('INFO' if args.verbose else 'WARNING'))
    logger = logging.getLogger(__name__)

    try:
        config = load_config(config_path=args.config, use_env=True)
        if args.report:
            config.generate_reports = True
        if config.debug_mode:
            logging.getLogger().setLevel(logging.DEBUG)

        extension, gtf_gff_paths = parse_gtf_gff_paths(args.gtf_gff_path)
        output_dir = parse_output_dir(args.output_dir)

        logger.info(f"GTF/GFFs: {len(gtf_gff_paths)} from {args.gtf_gff_path}")
        logger.info(f"Output directory: {output_dir}")

        from tuni import TranscriptUnificationPipeline

        pipeline = TranscriptUnificationPipeline(config)
        success = pipeline.run(gtf_gff_paths, output_dir, extension)

        if success:
            logger.info("tuni completed successfully!")
            return 0
        else:
            logger.error("tuni failed!")
            return 1

    except InputValidationError as e:
        logger.error(f"Input error: {e}")
        return 1
    except TuniError as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
