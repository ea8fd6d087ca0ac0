"""
Core processing modules for alnrefine.

This subpackage contains the alignment refinement engine:
- alignment: Locus, SequenceRecord and Alignment data model
- block_parser: MAF block parsing and subset filtering
- realigner: Full and quick (indel window) realignment
- trimmer: Pure-gap, outgroup terminal and complex-indel trimming
"""

__all__ = [
    'Alignment',
    'Locus',
    'SequenceRecord',
    'MAFBlockParser',
    'Realigner',
    'IndelRegion',
    'ColumnTrimmer'
]

from .alignment import Alignment, Locus, SequenceRecord
from .block_parser import MAFBlockParser
from .realigner import Realigner, IndelRegion
from .trimmer import ColumnTrimmer
