"""
Utility modules for alnrefine.

This subpackage contains utility functions:
- file_io: File discovery, FASTA reading and writing
"""

from .file_io import FileIO

__all__ = [
    'FileIO'
]
