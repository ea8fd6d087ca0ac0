#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Realignment module for alnrefine.

Contains functionality for:
1. Full realignment - the whole alignment, ungapped, through the aligner
2. Quick realignment - only the columns around indels are realigned
3. Indel region detection, expansion, ambiguity filtering and joining

Quick realignment leaves every column outside the selected indel
windows byte-for-byte unchanged (case included); only realigned windows
are upper-cased by the aligner.
"""

import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..helpers.aligner_runner import AlignerProgram, AlignerRunner
from .alignment import Alignment

logger = logging.getLogger(__name__)

GAP_RUN = re.compile(r'-+')


@dataclass(frozen=True)
class IndelRegion:
    """Inclusive, 0-based column range containing indels."""

    start_col: int
    end_col: int

    @property
    def width(self) -> int:
        return self.end_col - self.start_col + 1


def gap_runs(seq: str) -> List[IndelRegion]:
    """Return the runs of gap characters in one sequence."""
    return [IndelRegion(m.start(), m.end() - 1) for m in GAP_RUN.finditer(seq)]


def find_indel_regions(sequences: Sequence[str]) -> List[IndelRegion]:
    """
    Find column runs in which at least one sequence holds a gap.

    Args:
        sequences: Aligned sequences of equal length

    Returns:
        list: Maximal contiguous gap-containing column ranges, ascending
    """
    if not sequences:
        return []

    width = len(sequences[0])
    gapped = [False] * width
    for seq in sequences:
        for run in gap_runs(seq):
            for col in range(run.start_col, run.end_col + 1):
                gapped[col] = True

    regions = []
    start = None
    for col, has_gap in enumerate(gapped):
        if has_gap and start is None:
            start = col
        elif not has_gap and start is not None:
            regions.append(IndelRegion(start, col - 1))
            start = None
    if start is not None:
        regions.append(IndelRegion(start, width - 1))
    return regions


def expand_regions(regions: Sequence[IndelRegion], expand: int, width: int) -> List[IndelRegion]:
    """
    Grow each region by ``expand`` columns per side, clipped to the alignment.

    Regions that overlap or touch after growing are merged.
    """
    merged = []
    for region in sorted(regions, key=lambda r: r.start_col):
        start = max(0, region.start_col - expand)
        end = min(width - 1, region.end_col + expand)
        if merged and start <= merged[-1].end_col + 1:
            last = merged.pop()
            start, end = last.start_col, max(last.end_col, end)
        merged.append(IndelRegion(start, end))
    return merged


def join_regions(regions: Sequence[IndelRegion], join: int) -> List[IndelRegion]:
    """
    Merge regions separated by at most ``join`` columns.

    The separation of two regions is the number of columns strictly
    between them. Regions are visited by ascending start, so merging is
    transitive.
    """
    joined = []
    for region in sorted(regions, key=lambda r: r.start_col):
        if joined and region.start_col - joined[-1].end_col - 1 <= join:
            last = joined.pop()
            region = IndelRegion(last.start_col, max(last.end_col, region.end_col))
        joined.append(region)
    return joined


def filter_shared_regions(regions: Sequence[IndelRegion], sequences: Sequence[str],
                          expand: int) -> List[IndelRegion]:
    """
    Keep regions where the indels of two or more sequences meet.

    Each sequence's gap runs are expanded by ``expand`` columns; a region
    is kept when one of its columns is covered by the expanded gaps of at
    least two different sequences. An indel carried by a single sequence
    has only one possible placement and is left alone.
    """
    if not sequences:
        return []

    width = len(sequences[0])
    coverage = [0] * width
    for seq in sequences:
        for run in expand_regions(gap_runs(seq), expand, width):
            for col in range(run.start_col, run.end_col + 1):
                coverage[col] += 1

    return [region for region in regions
            if max(coverage[region.start_col:region.end_col + 1]) >= 2]


class Realigner:
    """
    Realigns an Alignment with an external aligner.

    Attributes:
        program: AlignerProgram used for realignment
        runner: AlignerRunner that executes the program
        indel_expand: Quick mode, columns added around each indel region
        indel_join: Quick mode, maximum separation of regions to join
        shared_indels_only: Quick mode, realign only regions where indels
            of two or more sequences meet

    Example:
        >>> realigner = Realigner(AlignerProgram.MAFFT, indel_expand=10, indel_join=10)
        >>> refined = realigner.realign(alignment, quick=True)
    """

    def __init__(self, program, runner: Optional[AlignerRunner] = None,
                 indel_expand: int = 50, indel_join: int = 50,
                 shared_indels_only: bool = True):
        self.program = AlignerProgram.from_name(program)
        self.runner = runner if runner is not None else AlignerRunner()
        self.indel_expand = indel_expand
        self.indel_join = indel_join
        self.shared_indels_only = shared_indels_only

    @classmethod
    def from_settings(cls, settings, runner: Optional[AlignerRunner] = None) -> "Realigner":
        """Build a Realigner from a RefineSettings snapshot."""
        if runner is None:
            runner = AlignerRunner(settings.aligner_commands)
        return cls(
            settings.align_program,
            runner=runner,
            indel_expand=settings.indel_expand,
            indel_join=settings.indel_join,
            shared_indels_only=settings.shared_indels_only,
        )

    def realign(self, alignment: Alignment, quick: bool = False) -> Alignment:
        """
        Realign an alignment in full or quick mode.

        With program NONE the alignment is returned unchanged.
        """
        if not self.program.realigns:
            return alignment
        if quick:
            return self.realign_quick(alignment)
        return self.realign_all(alignment)

    def realign_all(self, alignment: Alignment) -> Alignment:
        """
        Realign every sequence from scratch.

        Args:
            alignment: Alignment to realign

        Returns:
            Alignment: Upper-cased, realigned copy

        Raises:
            AdapterError: If the aligner fails
            ConsistencyError: If the result is not rectangular
        """
        if len(alignment) < 2:
            return alignment

        logger.debug(f"Realigning {len(alignment)} sequences of width {alignment.width} with {self.program.value}")
        aligned = self.runner.align([record.ungapped for record in alignment], self.program)

        result = alignment.with_sequences([seq.upper() for seq in aligned])
        result.check_consistency("full realignment")
        return result

    def plan_regions(self, alignment: Alignment) -> List[IndelRegion]:
        """
        Select the column windows quick mode will realign.

        Steps: find gap-containing column runs, expand them, optionally
        keep only regions where indels of different sequences meet, then
        join regions separated by at most ``indel_join`` columns.
        """
        sequences = alignment.sequences
        regions = find_indel_regions(sequences)
        regions = expand_regions(regions, self.indel_expand, alignment.width)
        if self.shared_indels_only:
            regions = filter_shared_regions(regions, sequences, self.indel_expand)
        regions = join_regions(regions, self.indel_join)
        logger.debug(f"Quick realignment regions: {[(r.start_col, r.end_col) for r in regions]}")
        return regions

    def realign_quick(self, alignment: Alignment) -> Alignment:
        """
        Realign only the indel windows and splice them back.

        Columns outside the windows are copied unchanged. A single window
        covering the whole alignment is a full realignment.

        Args:
            alignment: Alignment to refine

        Returns:
            Alignment: Refined copy, or the input itself when there is
            nothing to realign

        Raises:
            AdapterError: If the aligner fails on any window
            ConsistencyError: If the spliced result is not rectangular
        """
        if len(alignment) < 2:
            return alignment

        regions = self.plan_regions(alignment)
        if not regions:
            return alignment

        if len(regions) == 1 and regions[0].width == alignment.width:
            return self.realign_all(alignment)

        sequences = alignment.sequences
        pieces = [[] for _ in sequences]
        cursor = 0
        for region in regions:
            window = [seq[region.start_col:region.end_col + 1] for seq in sequences]
            aligned = self.runner.align(window, self.program)
            for index, seq in enumerate(sequences):
                pieces[index].append(seq[cursor:region.start_col])
                pieces[index].append(aligned[index])
            cursor = region.end_col + 1

        for index, seq in enumerate(sequences):
            pieces[index].append(seq[cursor:])

        result = alignment.with_sequences(["".join(parts) for parts in pieces])
        result.check_consistency("quick realignment")
        logger.debug(f"Realigned {len(regions)} windows, width {alignment.width} -> {result.width}")
        return result
