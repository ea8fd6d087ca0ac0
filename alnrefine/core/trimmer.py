#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Column trimming module for alnrefine.

Contains three passes, applied in this order:
1. Pure-gap trim - drop columns where every sequence holds a gap
2. Outgroup terminal trim - cut the alignment back to the outgroup's span
3. Complex-indel trim - drop gap runs that cannot be called as a single
   insertion or deletion against the outgroup

Passes never change the number of sequences and keep all sequences at
equal length.
"""

import logging
from typing import List

from .alignment import Alignment, GAP

logger = logging.getLogger(__name__)


class ColumnTrimmer:
    """
    Removes uninformative alignment columns.

    Example:
        >>> trimmed = ColumnTrimmer.trim(alignment, outgroup=True)
    """

    @staticmethod
    def trim(alignment: Alignment, outgroup: bool = False) -> Alignment:
        """
        Apply all configured passes.

        Args:
            alignment: Alignment to trim
            outgroup: Run the outgroup-relative passes

        Returns:
            Alignment: Trimmed copy
        """
        result = ColumnTrimmer.trim_pure_gaps(alignment)
        result.check_consistency("pure-gap trim")

        if outgroup and len(result) > 1:
            result = ColumnTrimmer.trim_outgroup_ends(result)
            result.check_consistency("outgroup terminal trim")
            result = ColumnTrimmer.trim_complex_indels(result)
            result.check_consistency("complex-indel trim")

        if result.width != alignment.width:
            logger.debug(f"Trimmed alignment from {alignment.width} to {result.width} columns")
        return result

    @staticmethod
    def trim_pure_gaps(alignment: Alignment) -> Alignment:
        """Drop every column in which all sequences hold the gap character."""
        if not len(alignment):
            return alignment

        keep = [col for col, column in enumerate(zip(*alignment.sequences))
                if any(residue != GAP for residue in column)]
        if len(keep) == alignment.width:
            return alignment
        return alignment.keep_columns(keep)

    @staticmethod
    def trim_outgroup_ends(alignment: Alignment) -> Alignment:
        """
        Trim leading and trailing columns where the outgroup holds a gap.

        Walks inward from each end and stops at the first column where the
        outgroup has a residue. An outgroup made only of gaps leaves no
        columns.
        """
        outgroup_seq = alignment.outgroup_record.residues
        stripped = outgroup_seq.strip(GAP)
        if not stripped:
            logger.debug("Outgroup holds no residues, removing all columns")
            return alignment.keep_columns([])

        start = len(outgroup_seq) - len(outgroup_seq.lstrip(GAP))
        end = len(outgroup_seq.rstrip(GAP))
        if start == 0 and end == len(outgroup_seq):
            return alignment
        return alignment.with_sequences([seq[start:end] for seq in alignment.sequences])

    @staticmethod
    def complex_columns(alignment: Alignment) -> List[int]:
        """
        Find the columns removed by the complex-indel pass.

        The alignment is split into gap runs, maximal column runs where at
        least one sequence holds a gap. A run is simple when every sequence
        is either gapped across the whole run or not gapped at all in it,
        i.e. one insertion/deletion event explains it. A run is complex when
        the outgroup holds a gap somewhere in it and some sequence is only
        partially gapped across it. All columns of complex runs are
        returned, except columns that are gaps in every sequence.
        """
        sequences = alignment.sequences
        outgroup_seq = alignment.outgroup_record.residues
        columns = list(zip(*sequences))

        runs = []
        start = None
        for col, column in enumerate(columns):
            if GAP in column and start is None:
                start = col
            elif GAP not in column and start is not None:
                runs.append((start, col - 1))
                start = None
        if start is not None:
            runs.append((start, len(columns) - 1))

        removed = []
        for run_start, run_end in runs:
            if GAP not in outgroup_seq[run_start:run_end + 1]:
                continue
            partial = False
            for seq in sequences:
                segment = seq[run_start:run_end + 1]
                gaps = segment.count(GAP)
                if 0 < gaps < len(segment):
                    partial = True
                    break
            if not partial:
                continue
            removed.extend(col for col in range(run_start, run_end + 1)
                           if any(residue != GAP for residue in columns[col]))
        return removed

    @staticmethod
    def trim_complex_indels(alignment: Alignment) -> Alignment:
        """Drop columns of gap runs that are complex relative to the outgroup."""
        removed = set(ColumnTrimmer.complex_columns(alignment))
        if not removed:
            return alignment
        logger.debug(f"Removing {len(removed)} complex indel columns")
        keep = [col for col in range(alignment.width) if col not in removed]
        return alignment.keep_columns(keep)
