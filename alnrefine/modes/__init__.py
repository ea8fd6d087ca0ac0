#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pipeline mode modules for alnrefine.

This package contains the implementation of the two operation modes:
- Conversion mode: MAF alignment blocks to blocked FASTA files
- Refinement mode: realignment and trimming of FASTA alignments
"""

from . import common
from .convert_mode import run as run_convert_mode
from .refine_mode import run as run_refine_mode

__all__ = [
    'common',
    'convert_mode',
    'refine_mode',
    'run_convert_mode',
    'run_refine_mode'
]
