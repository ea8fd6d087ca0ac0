#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MAF block parser for alnrefine.

This module turns Multiple Alignment Format (MAF) blocks into Alignment
objects: one SequenceRecord per "s" line, with coordinates converted from
MAF's 0-based half-open convention to 1-based inclusive loci. Blocks can
be restricted to an ordered subset of species.
"""

import re
import zlib
import logging
from typing import Iterator, List, Optional, Sequence

from ..config.exceptions import ParseError, FileError, ConsistencyError
from ..utils.file_io import FileIO
from .alignment import Alignment, Locus, SequenceRecord

logger = logging.getLogger(__name__)

S_LINE_FIELDS = 7


class MAFBlockParser:
    """
    Parser for MAF alignment blocks.

    Attributes:
        subset_names: Ordered species names to extract, or None for all
        blocks_seen: Number of blocks read by parse_file
        blocks_skipped: Number of blocks rejected by subset filtering

    Example:
        >>> parser = MAFBlockParser(subset_names=["human", "mouse"])
        >>> for alignment in parser.parse_file("chr1.maf"):
        ...     print(alignment.names)
    """

    def __init__(self, subset_names: Optional[Sequence[str]] = None):
        self.subset_names = list(subset_names) if subset_names else None
        self.blocks_seen = 0
        self.blocks_skipped = 0

    @staticmethod
    def parse_s_line(line: str) -> SequenceRecord:
        """
        Parse one "s" line into a SequenceRecord.

        Args:
            line: Line of the form ``s src start size strand srcSize text``

        Returns:
            SequenceRecord: Record named after the species part of ``src``

        Raises:
            ParseError: If the field count or a coordinate is invalid
        """
        fields = re.split(r'\s+', line.strip())
        if len(fields) != S_LINE_FIELDS or fields[0] != 's':
            raise ParseError(
                f"Expected {S_LINE_FIELDS} fields in sequence line, got {len(fields)}: {line.strip()[:60]}"
            )

        _, src, raw_start, raw_size, strand, _src_size, text = fields

        name, _, contig = src.partition('.')
        if not contig:
            contig = name

        try:
            start = int(raw_start) + 1
            size = int(raw_size)
        except ValueError as e:
            raise ParseError(f"Invalid coordinates in sequence line for {src}: {raw_start} {raw_size}") from e

        try:
            locus = Locus(contig=contig, start=start, end=start + size - 1, strand=strand)
        except ValueError as e:
            raise ParseError(str(e)) from e

        return SequenceRecord(name=name, residues=text, locus=locus)

    def parse_block(self, lines: Sequence[str]) -> Optional[Alignment]:
        """
        Build an Alignment from the lines of one block.

        Lines other than "s" lines are ignored. When subset names are set
        the block is kept only if it holds at least as many sequences as
        requested and every requested name occurs, as a substring, in the
        space-joined species names of the block. Kept blocks are emitted in
        the requested order.

        Args:
            lines: Raw lines of one MAF block

        Returns:
            Alignment, or None when the block is rejected by subset filtering

        Raises:
            ParseError: If a sequence line is malformed, a name repeats or
                the sequences differ in length
        """
        records = []
        seen = set()
        for line in lines:
            if not line.startswith('s'):
                continue
            record = self.parse_s_line(line)
            if record.name in seen:
                raise ParseError(f"Duplicate species '{record.name}' in alignment block")
            seen.add(record.name)
            records.append(record)

        if self.subset_names:
            records = self._select_subset(records)
            if records is None:
                self.blocks_skipped += 1
                return None

        alignment = Alignment(records)
        try:
            alignment.check_consistency("reading")
        except ConsistencyError as e:
            raise ParseError(str(e)) from e
        return alignment

    def _select_subset(self, records: List[SequenceRecord]) -> Optional[List[SequenceRecord]]:
        """Apply subset filtering; returns None when the block is rejected."""
        if len(records) < len(self.subset_names):
            logger.debug(f"Block has {len(records)} sequences, {len(self.subset_names)} requested")
            return None

        name_str = " ".join(record.name for record in records)
        if any(wanted not in name_str for wanted in self.subset_names):
            logger.debug(f"Block species '{name_str}' miss a requested name")
            return None

        by_name = {record.name: record for record in records}
        selected = []
        for wanted in self.subset_names:
            record = by_name.get(wanted)
            if record is None:
                record = next((r for r in records if wanted in r.name), None)
            if record is None or record in selected:
                # substring hit spans two names, e.g. "an mo" in "human mouse"
                return None
            selected.append(record)
        return selected

    @staticmethod
    def iter_blocks(maf_file: str) -> Iterator[List[str]]:
        """
        Split a MAF file into blocks of "s" lines.

        A block ends at a blank line, at the next "a" line or at end of
        file. Comment lines and i/e/q lines are dropped.

        Args:
            maf_file: Path to a .maf or .maf.gz file

        Yields:
            list: The "s" lines of one block
        """
        block = []
        with FileIO.open_text(maf_file) as f:
            for line in f:
                if not line.strip() or line.startswith('a'):
                    if block:
                        yield block
                        block = []
                elif line.startswith('s') and line[1:2].isspace():
                    block.append(line.rstrip('\n'))
        if block:
            yield block

    def parse_file(self, maf_file: str) -> Iterator[Alignment]:
        """
        Parse every block of a MAF file.

        Args:
            maf_file: Path to a .maf or .maf.gz file

        Yields:
            Alignment: One per accepted block, in file order

        Raises:
            ParseError: If a block is malformed
            FileError: If the file cannot be read
        """
        logger.debug(f"Parsing MAF file: {maf_file}")

        try:
            for lines in self.iter_blocks(maf_file):
                self.blocks_seen += 1
                try:
                    alignment = self.parse_block(lines)
                except ParseError as e:
                    raise ParseError(f"{maf_file}, block {self.blocks_seen}: {e}") from e
                if alignment is not None:
                    yield alignment
        except (OSError, EOFError) as e:
            error_msg = f"Error reading MAF file {maf_file}: {str(e)}"
            logger.error(error_msg)
            logger.debug(f"Error details: {str(e)}", exc_info=True)
            raise FileError(error_msg) from e
        except (UnicodeDecodeError, zlib.error) as e:
            error_msg = f"Undecodable MAF file {maf_file}: {str(e)}"
            logger.error(error_msg)
            logger.debug(f"Error details: {str(e)}", exc_info=True)
            raise ParseError(error_msg) from e

        logger.debug(f"Parsed {self.blocks_seen} blocks from {maf_file}, {self.blocks_skipped} skipped")
