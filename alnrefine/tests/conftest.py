#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shared pytest fixtures for alnrefine tests.

This file contains fixtures that can be reused across multiple test modules.
"""

import copy
import logging
import warnings

import pytest

from alnrefine.config import Config, RefineSettings
from alnrefine.core.alignment import Alignment, Locus, SequenceRecord
from alnrefine.helpers.aligner_runner import AlignerProgram


# ============== Suppress logging ===============
class NullHandler(logging.Handler):
    def emit(self, record):
        pass


def silence_logger(logger_name):
    """Completely silence a logger by name."""
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.CRITICAL)
    logger.propagate = False
    logger.handlers = []
    logger.addHandler(NullHandler())


silence_logger("tqdm")

root_logger = logging.getLogger()
root_logger.setLevel(logging.ERROR)

warnings.filterwarnings("ignore")


# ============== Fixtures ===============
@pytest.fixture(autouse=True)
def reset_config():
    """Restore Config class attributes after every test."""
    saved = {key: copy.deepcopy(value) for key, value in Config.get_all_settings().items()}
    yield
    for key, value in saved.items():
        setattr(Config, key, value)


@pytest.fixture
def settings():
    """Default refinement settings with realignment disabled."""
    return RefineSettings(align_program=AlignerProgram.NONE,
                          aligner_commands=copy.deepcopy(Config.ALIGNER_COMMANDS))


@pytest.fixture
def simple_alignment():
    """Three-sequence alignment; the last record is the outgroup."""
    return Alignment([
        SequenceRecord("human", "AC-GT"),
        SequenceRecord("mouse", "ACAGT"),
        SequenceRecord("dog", "AC-GT"),
    ])


@pytest.fixture
def maf_text():
    """Two-block MAF file with human/mouse in the first block only."""
    return (
        "##maf version=1\n"
        "# comment\n"
        "\n"
        "a score=10.0\n"
        "s human.chr1 10 4 + 100 AC-GT\n"
        "s mouse.chr7 20 5 + 200 ACAGT\n"
        "\n"
        "a score=5.0\n"
        "s human.chr1 50 3 + 100 AAA\n"
        "s dog.chr2 5 3 - 90 AAA\n"
        "\n"
    )


def make_alignment(*sequences, names=None):
    """Build an Alignment from bare sequences named s0, s1, ..."""
    names = names or [f"s{index}" for index in range(len(sequences))]
    return Alignment([SequenceRecord(name, seq) for name, seq in zip(names, sequences)])


@pytest.fixture
def alignment_factory():
    return make_alignment


@pytest.fixture
def locus():
    return Locus(contig="chr1", start=11, end=14, strand="+")
