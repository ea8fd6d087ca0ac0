#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Alignment data model for alnrefine.

Contains:
1. Locus - genomic coordinates of one aligned sequence (1-based, inclusive)
2. SequenceRecord - one named, gapped sequence
3. Alignment - ordered records of identical length with an explicit outgroup

Every refinement pass takes an Alignment and returns a new one; records
keep their encounter order from parsing to writing.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional, Sequence

from ..config.exceptions import ConsistencyError

logger = logging.getLogger(__name__)

GAP = "-"


@dataclass(frozen=True)
class Locus:
    """Genomic location of an aligned sequence, 1-based inclusive."""

    contig: str
    start: int
    end: int
    strand: str = "+"

    def __post_init__(self) -> None:
        if self.end < self.start - 1:
            raise ValueError(
                f"Locus end ({self.end}) precedes start ({self.start}) on {self.contig}"
            )

    @property
    def size(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class SequenceRecord:
    """One aligned sequence: identifier, gapped residues and optional locus."""

    name: str
    residues: str
    locus: Optional[Locus] = None

    def __len__(self) -> int:
        return len(self.residues)

    @property
    def ungapped(self) -> str:
        return self.residues.replace(GAP, "")

    def with_residues(self, residues: str) -> "SequenceRecord":
        return replace(self, residues=residues)


@dataclass
class Alignment:
    """
    Ordered collection of SequenceRecords sharing one column count.

    The outgroup is an explicit index into ``records``. When it is not
    given the last record is used, which matches the convention of input
    files that list the outgroup at the end.

    Attributes:
        records: Sequence records in encounter order
        outgroup: Index of the outgroup record
        display_names: Optional mapping from record name to the header
            written on output (used when names were simplified on reading)
    """

    records: List[SequenceRecord]
    outgroup: Optional[int] = None
    display_names: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        names = [record.name for record in self.records]
        if len(set(names)) != len(names):
            duplicates = sorted({name for name in names if names.count(name) > 1})
            raise ConsistencyError(f"Duplicate sequence names in alignment: {', '.join(duplicates)}")

        if self.outgroup is None:
            self.outgroup = len(self.records) - 1 if self.records else None
        elif not self.records:
            raise ConsistencyError("Outgroup given for an empty alignment")
        else:
            if self.outgroup < 0:
                self.outgroup += len(self.records)
            if not 0 <= self.outgroup < len(self.records):
                raise ConsistencyError(
                    f"Outgroup index {self.outgroup} out of range for {len(self.records)} sequences"
                )

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[SequenceRecord]:
        return iter(self.records)

    def __getitem__(self, name: str) -> SequenceRecord:
        for record in self.records:
            if record.name == name:
                return record
        raise KeyError(name)

    @property
    def names(self) -> List[str]:
        return [record.name for record in self.records]

    @property
    def sequences(self) -> List[str]:
        return [record.residues for record in self.records]

    @property
    def width(self) -> int:
        """Number of alignment columns (0 for an empty alignment)."""
        return len(self.records[0]) if self.records else 0

    @property
    def outgroup_record(self) -> Optional[SequenceRecord]:
        if self.outgroup is None:
            return None
        return self.records[self.outgroup]

    def output_name(self, record: SequenceRecord) -> str:
        return self.display_names.get(record.name, record.name)

    def set_outgroup(self, name: str) -> None:
        """
        Point the outgroup at the record called ``name``.

        Args:
            name: Record name, or original header for simplified names

        Raises:
            ConsistencyError: If no record carries that name
        """
        for index, record in enumerate(self.records):
            if record.name == name or self.display_names.get(record.name) == name:
                self.outgroup = index
                return
        raise ConsistencyError(f"Outgroup '{name}' not found among {', '.join(self.names)}")

    def with_sequences(self, sequences: Sequence[str]) -> "Alignment":
        """
        Copy this alignment with every record's residues replaced.

        Args:
            sequences: New residue strings, one per record, in record order

        Returns:
            Alignment: New alignment sharing names, loci and outgroup

        Raises:
            ConsistencyError: If the number of sequences differs
        """
        if len(sequences) != len(self.records):
            raise ConsistencyError(
                f"Expected {len(self.records)} sequences, got {len(sequences)}"
            )
        records = [record.with_residues(seq) for record, seq in zip(self.records, sequences)]
        return Alignment(records, outgroup=self.outgroup, display_names=dict(self.display_names))

    def keep_columns(self, columns: Sequence[int]) -> "Alignment":
        """Return a copy holding only the given column indices, in order."""
        sequences = ["".join(seq[c] for c in columns) for seq in self.sequences]
        return self.with_sequences(sequences)

    def check_consistency(self, stage: str = "") -> None:
        """
        Verify that all records have the same length.

        Args:
            stage: Name of the pass just applied, used in the error message

        Raises:
            ConsistencyError: If record lengths differ
        """
        lengths = {len(record) for record in self.records}
        if len(lengths) > 1:
            detail = ", ".join(f"{record.name}={len(record)}" for record in self.records)
            where = f" after {stage}" if stage else ""
            error_msg = f"Sequence lengths differ{where}: {detail}"
            logger.error(error_msg)
            raise ConsistencyError(error_msg)
