#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
alnrefine Pipeline

Command line entry point supporting two workflows:
1. Conversion Mode (--maf): MAF alignment blocks to blocked FASTA files
2. Refinement Mode (default): realign and trim FASTA alignments

Features:
- Full or quick (indel-window) realignment with ClustalW, MUSCLE or MAFFT
- Pure-gap and outgroup-relative column trimming
- Species subset extraction from MAF blocks
- One input file per worker process
"""

import sys
import argparse
import logging
import traceback

from .config import (Config, setup_logging, display_config, generate_config_template,
                     AlnRefineError, ConfigError, FileError)
from .modes import run_convert_mode, run_refine_mode

logger = logging.getLogger(__name__)

CONFIG_DISPLAY_OPTIONS = ['DISPLAY', 'template']


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='alnrefine: MAF conversion and refinement of multiple sequence alignments',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        usage='alnrefine [--maf] [-i <dir>] [-o <dir>] [--subset NAMES] [--gzip]\n'
              '        [--msa PROGRAM] [--quick] [--expand N] [--join N] [--outgroup [NAME]]\n'
              '        [--block] [--parallel N] [--force] [--debug [MODULE...]] [--config [.json]]'
    )

    # Modes
    parser.add_argument('--maf', action='store_true',
                        help='Conversion mode: convert MAF files to blocked FASTA')

    # Input/output
    parser.add_argument('-i', '--in_dir', metavar='<dir>', default='.',
                        help='Input directory, searched recursively (default: current directory)')
    parser.add_argument('-o', '--out_dir', metavar='<dir>', help='Output directory')

    # Conversion options
    parser.add_argument('--subset', metavar='NAMES',
                        help='Comma-separated species to extract, in output order')
    parser.add_argument('--gzip', action='store_true', help='Read *.maf.gz files')

    # Refinement options
    parser.add_argument('--msa', metavar='PROGRAM',
                        help='Aligner: clustalw, muscle, mafft or none (default: clustalw)')
    parser.add_argument('--quick', action='store_true', help='Realign indel regions only')
    parser.add_argument('--expand', type=int, metavar='N', help='Quick mode: expand indel regions by N columns')
    parser.add_argument('--join', type=int, metavar='N', help='Quick mode: join regions at most N columns apart')
    parser.add_argument('--all-indels', action='store_true',
                        help='Quick mode: also realign indels carried by a single sequence')
    parser.add_argument('--outgroup', metavar='NAME', nargs='?', const=True,
                        help='Trim relative to the outgroup (last sequence, or NAME)')
    parser.add_argument('--block', action='store_true',
                        help='Input FASTA files hold blank-line separated alignment blocks')
    parser.add_argument('--force', action='store_true', help='Replace an existing output directory')

    # Options
    parser.add_argument('--parallel', type=int, metavar='N', help='Number of worker processes')
    parser.add_argument('--no-progress', action='store_true', help='Hide the progress bar')
    parser.add_argument('--debug', nargs='*', metavar='MODULE',
                        help='Enable debug mode (universal or specific modules)')
    parser.add_argument('--config', metavar='[.json]', nargs='?', const='DISPLAY',
                        help='Configuration file, or display mode; "template" writes a template')

    args = parser.parse_args(argv)

    # Process debug argument
    if args.debug is not None:
        args.debug = True if len(args.debug) == 0 else args.debug
    else:
        args.debug = False

    if args.expand is not None and args.expand < 0:
        parser.error("--expand must be >= 0")
    if args.join is not None and args.join < 0:
        parser.error("--join must be >= 0")
    if args.parallel is not None and args.parallel < 1:
        parser.error("--parallel must be >= 1")

    return args


def apply_arguments(args):
    """Copy command line options onto Config."""
    if args.subset:
        Config.SUBSET_NAMES = [name.strip() for name in args.subset.split(',') if name.strip()]
    if args.gzip:
        Config.MAF_GZIP = True
    if args.msa:
        Config.ALIGN_PROGRAM = args.msa
    if args.quick:
        Config.QUICK_MODE = True
    if args.expand is not None:
        Config.INDEL_EXPAND = args.expand
    if args.join is not None:
        Config.INDEL_JOIN = args.join
    if args.all_indels:
        Config.QUICK_SHARED_INDELS_ONLY = False
    if args.outgroup is not None:
        Config.OUTGROUP = True
        if args.outgroup is not True:
            Config.OUTGROUP_NAME = args.outgroup
    if args.block:
        Config.BLOCK_INPUT = True
    if args.force:
        Config.CLEAR_OUTPUT = True
    if args.parallel is not None:
        Config.NUM_PROCESSES = args.parallel
    if args.no_progress:
        Config.SHOW_PROGRESS = False


def setup_pipeline(args):
    """
    Set up logging and configuration.

    Returns:
        bool: False when the run should stop after displaying settings
    """
    setup_logging(debug=args.debug)

    logger.debug("Initializing alnrefine pipeline")
    Config.get_instance()

    if args.config in CONFIG_DISPLAY_OPTIONS:
        if args.config == 'template':
            generate_config_template(Config, output_dir=args.out_dir)
        else:
            display_config(Config)
        return False

    if args.config:
        try:
            Config.load_from_file(args.config)
            logger.debug(f"Loaded configuration from {args.config}")
        except ConfigError:
            raise
        except Exception as e:
            raise FileError(f"Error loading configuration: {e}") from e

    apply_arguments(args)
    return True


def run_workflow(args):
    """Snapshot the settings and dispatch to the selected mode."""
    settings = Config.snapshot()

    if args.maf:
        return run_convert_mode(args.in_dir, args.out_dir, settings)
    return run_refine_mode(args.in_dir, args.out_dir, settings)


def run_pipeline(argv=None):
    """Main pipeline entry point."""
    logger_instance = None

    try:
        args = parse_arguments(argv)

        if not setup_pipeline(args):
            return True

        logger_instance = logging.getLogger(__name__)
        logger_instance.info("=== alnrefine Pipeline ===")

        success = run_workflow(args)

        if success:
            logger_instance.info("=== Pipeline completed successfully! ===")
            return True
        else:
            logger_instance.error("Pipeline finished with failed files")
            return False

    except AlnRefineError as e:
        if logger_instance:
            logger_instance.error(f"Pipeline error: {e}")
        else:
            print(f"Pipeline error: {e}")
        return False
    except Exception as e:
        if logger_instance:
            logger_instance.error(f"Unexpected error: {e}")
            logger_instance.debug(f"Error details: {str(e)}", exc_info=True)
        else:
            print(f"Unexpected error: {e}")
            print(traceback.format_exc())
        return False


def main():
    """Entry point for direct execution."""
    success = run_pipeline()
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
