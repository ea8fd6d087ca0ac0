#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Refinement mode for alnrefine.

This module contains the implementation of the refinement workflow:
1. Collect FASTA alignments (*.fa, *.fas, *.fasta) below the input directory
2. Realign each alignment, in full or around indels only
3. Trim pure-gap columns and, with an outgroup, outgroup-relative columns
4. Write one refined file per input file
"""

import os
import logging
from typing import Optional

from ..config import Config, FileError
from ..core.alignment import Alignment
from ..core.realigner import Realigner
from ..core.trimmer import ColumnTrimmer
from ..utils.file_io import FileIO
from . import common

logger = logging.getLogger(__name__)

FASTA_PATTERNS = ["*.fa", "*.fas", "*.fasta", "*.fa.gz", "*.fas.gz", "*.fasta.gz"]


def default_output_dir(in_dir: str, settings) -> str:
    """Return ``<in_dir>_<program>`` with a ``_quick`` suffix in quick mode."""
    out_dir = os.path.abspath(in_dir).rstrip(os.sep) + "_" + settings.align_program.value
    if settings.quick_mode:
        out_dir += "_quick"
    return out_dir


def output_name(fasta_file: str) -> str:
    name = os.path.basename(fasta_file)
    if name.endswith(".gz"):
        name = name[:-3]
    return name


def refine_alignment(alignment: Alignment, settings, realigner: Optional[Realigner] = None) -> Alignment:
    """
    Realign and trim one alignment.

    Args:
        alignment: Alignment to refine
        settings: RefineSettings snapshot
        realigner: Realigner to use, built from settings when None

    Returns:
        Alignment: Refined alignment with the same records in the same order

    Raises:
        ConsistencyError: If the outgroup name is missing or a pass breaks
            the equal-length invariant
        AdapterError: If the external aligner fails
    """
    if settings.outgroup_name:
        alignment.set_outgroup(settings.outgroup_name)

    if settings.align_program.realigns:
        if realigner is None:
            realigner = Realigner.from_settings(settings)
        alignment = realigner.realign(alignment, quick=settings.quick_mode)

    return ColumnTrimmer.trim(alignment, outgroup=settings.outgroup)


def refine_file(fasta_file: str, out_dir: str, settings, runner=None) -> common.FileResult:
    """
    Refine every alignment of one FASTA file.

    Plain files hold one alignment; with block input each blank-line
    separated block is refined independently and written as its own
    block, in input order.

    Args:
        fasta_file: Path to the FASTA file
        out_dir: Output directory
        settings: RefineSettings snapshot
        runner: AlignerRunner override

    Returns:
        FileResult: Output path and number of alignments written
    """
    output_file = os.path.join(out_dir, output_name(fasta_file))
    realigner = Realigner.from_settings(settings, runner) if settings.align_program.realigns else None

    if settings.block_input:
        alignments = FileIO.iter_blocked_fasta(fasta_file)
    else:
        alignments = [FileIO.read_fasta(fasta_file)]

    written = 0
    with common.partial_output(output_file) as handle:
        for alignment in alignments:
            refined = refine_alignment(alignment, settings, realigner)
            FileIO.write_alignment(handle, refined, blocked=settings.block_input)
            written += 1

    logger.debug(f"{fasta_file}: {written} alignments refined into {output_file}")
    return common.FileResult(input_file=fasta_file, output_file=output_file, alignments=written)


def run(in_dir: str, out_dir: Optional[str] = None, settings=None) -> bool:
    """
    Run the refinement workflow.

    Args:
        in_dir: Directory searched recursively for FASTA alignments
        out_dir: Output directory, derived from in_dir and settings when None
        settings: RefineSettings snapshot, taken from Config when None

    Returns:
        bool: True if every file was refined

    Raises:
        FileError: If no input files exist, two inputs share an output
            name, or the output directory exists and may not be replaced
    """
    logger.info("=== Alignment Refinement ===")

    if settings is None:
        settings = Config.snapshot()

    files = FileIO.find_files(in_dir, FASTA_PATTERNS)
    if out_dir is None:
        out_dir = default_output_dir(in_dir, settings)
    out_abs = os.path.abspath(out_dir)
    files = [f for f in files if not os.path.abspath(f).startswith(out_abs + os.sep)]

    if not files:
        error_msg = f"No FASTA alignments found in {in_dir}"
        logger.error(error_msg)
        raise FileError(error_msg)
    logger.info(f"Found {len(files)} alignment files")
    common.check_output_names(files, output_name)

    mode = "quick" if settings.quick_mode else "full"
    logger.info(f"Aligner: {settings.align_program.value} ({mode}), "
                f"outgroup trimming: {'on' if settings.outgroup else 'off'}")

    out_dir = common.prepare_output_directory(out_dir, clear=Config.CLEAR_OUTPUT)

    results = common.run_files(
        files, refine_file, out_dir, settings,
        processes=Config.NUM_PROCESSES,
        show_progress=Config.SHOW_PROGRESS,
        description="Refining alignments",
    )
    logger.info(f"Output written to {out_dir}")
    return common.summarize(results)
