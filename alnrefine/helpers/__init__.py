"""
Helpers module for alnrefine.

Wrappers around external programs:
1. AlignerRunner - runs ClustalW, MUSCLE or MAFFT on a set of sequences
"""

from .aligner_runner import AlignerRunner, AlignerProgram

__all__ = ['AlignerRunner', 'AlignerProgram']
