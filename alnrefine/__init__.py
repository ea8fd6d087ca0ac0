#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
alnrefine: conversion and refinement of multiple sequence alignments.

Converts MAF alignment blocks to FASTA, realigns alignments with an
external aligner (in full or around indels only) and trims uninformative
columns, optionally relative to an outgroup.
"""

__version__ = "0.1.0"
