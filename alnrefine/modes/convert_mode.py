#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MAF conversion mode for alnrefine.

This module contains the implementation of the conversion workflow:
1. Collect MAF files (plain or gzip-compressed) below the input directory
2. Parse every alignment block, optionally restricted to a species subset
3. Write one blocked FASTA file per MAF file with locus-encoded headers
"""

import os
import logging
from typing import List, Optional, Sequence

from ..config import Config, FileError
from ..core.block_parser import MAFBlockParser
from ..utils.file_io import FileIO
from . import common

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".fas"


def default_output_dir(in_dir: str, subset_names: Optional[Sequence[str]] = None) -> str:
    """Return ``<in_dir>_fasta`` or ``<in_dir>_fasta_<subset>`` for an input directory."""
    out_dir = os.path.abspath(in_dir).rstrip(os.sep) + "_fasta"
    if subset_names:
        out_dir += "_" + ",".join(subset_names)
    return out_dir


def find_maf_files(in_dir: str, prefer_gzip: bool = False) -> List[str]:
    """
    Collect MAF input files.

    Plain ``*.maf`` files are used unless ``prefer_gzip`` is set or none
    exist, in which case ``*.maf.gz`` files are used.
    """
    files = [] if prefer_gzip else FileIO.find_files(in_dir, ["*.maf"])
    if not files:
        files = FileIO.find_files(in_dir, ["*.maf.gz"])
    return files


def output_name(maf_file: str) -> str:
    return os.path.basename(maf_file) + OUTPUT_SUFFIX


def convert_file(maf_file: str, out_dir: str, settings) -> common.FileResult:
    """
    Convert one MAF file into a blocked FASTA file.

    Args:
        maf_file: Path to the MAF file
        out_dir: Output directory
        settings: RefineSettings snapshot (only subset_names is used)

    Returns:
        FileResult: Output path, blocks written and blocks skipped

    Raises:
        ParseError: If a block is malformed
        FileError: If reading or writing fails
    """
    output_file = os.path.join(out_dir, output_name(maf_file))
    parser = MAFBlockParser(settings.subset_names)

    written = 0
    with common.partial_output(output_file) as handle:
        for alignment in parser.parse_file(maf_file):
            FileIO.write_alignment(handle, alignment, blocked=True)
            written += 1

    logger.debug(f"{maf_file}: {written} of {parser.blocks_seen} blocks written to {output_file}")
    return common.FileResult(
        input_file=maf_file,
        output_file=output_file,
        alignments=written,
        skipped=parser.blocks_skipped,
    )


def run(in_dir: str, out_dir: Optional[str] = None, settings=None) -> bool:
    """
    Run the MAF conversion workflow.

    Args:
        in_dir: Directory searched recursively for MAF files
        out_dir: Output directory, derived from in_dir when None
        settings: RefineSettings snapshot, taken from Config when None

    Returns:
        bool: True if every file was converted

    Raises:
        FileError: If the input directory is missing, holds no MAF files
            or holds two MAF files with the same name, or if the output
            directory exists and may not be replaced
    """
    logger.info("=== MAF Conversion ===")

    if settings is None:
        settings = Config.snapshot()

    files = find_maf_files(in_dir, Config.MAF_GZIP)
    if not files:
        error_msg = f"No MAF files found in {in_dir}"
        logger.error(error_msg)
        raise FileError(error_msg)
    logger.info(f"Found {len(files)} MAF files")
    common.check_output_names(files, output_name)

    if out_dir is None:
        out_dir = default_output_dir(in_dir, settings.subset_names)
    out_dir = common.prepare_output_directory(out_dir, clear=Config.CLEAR_OUTPUT)

    results = common.run_files(
        files, convert_file, out_dir, settings,
        processes=Config.NUM_PROCESSES,
        show_progress=Config.SHOW_PROGRESS,
        description="Converting MAF files",
    )
    logger.info(f"Output written to {out_dir}")
    return common.summarize(results)
