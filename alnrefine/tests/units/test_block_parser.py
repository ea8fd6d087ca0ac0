#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Unit tests for the MAF block parser.

These tests verify coordinate conversion, subset filtering and
block splitting of plain and compressed MAF files.
"""

import gzip

import pytest

from alnrefine.config import ParseError, FileError
from alnrefine.core.block_parser import MAFBlockParser


@pytest.fixture
def parser():
    return MAFBlockParser()


@pytest.fixture
def maf_file(tmp_path, maf_text):
    path = tmp_path / "sample.maf"
    path.write_text(maf_text)
    return str(path)


class TestParseSLine:
    """Tests for single sequence line parsing."""

    def test_coordinates_converted_to_one_based(self, parser):
        record = parser.parse_s_line("s human.chr1 10 4 + 100 AC-GT")
        assert record.name == "human"
        assert record.residues == "AC-GT"
        assert record.locus.contig == "chr1"
        assert record.locus.start == 11
        assert record.locus.end == 14
        assert record.locus.strand == "+"

    @pytest.mark.parametrize("raw_start,size", [(0, 1), (99, 25), (1000, 0)])
    def test_coordinate_law(self, parser, raw_start, size):
        record = parser.parse_s_line(f"s sp.c {raw_start} {size} - 5000 ACGT")
        assert record.locus.start == raw_start + 1
        assert record.locus.end == raw_start + size

    def test_contig_keeps_later_dots(self, parser):
        record = parser.parse_s_line("s hg19.chr1.random 0 2 + 10 AC")
        assert record.name == "hg19"
        assert record.locus.contig == "chr1.random"

    def test_source_without_dot(self, parser):
        record = parser.parse_s_line("s scaffold 0 2 + 10 AC")
        assert record.name == "scaffold"
        assert record.locus.contig == "scaffold"

    def test_wrong_field_count(self, parser):
        with pytest.raises(ParseError, match="Expected 7 fields"):
            parser.parse_s_line("s human.chr1 10 4 + AC-GT")

    def test_non_numeric_coordinates(self, parser):
        with pytest.raises(ParseError, match="Invalid coordinates"):
            parser.parse_s_line("s human.chr1 ten 4 + 100 ACGT")


class TestParseBlock:
    """Tests for block assembly and subset filtering."""

    lines = [
        "s human.chr1 10 4 + 100 AC-GT",
        "s mouse.chr7 20 5 + 200 ACAGT",
        "s dog.chr2 5 5 - 90 ACAGT",
    ]

    def test_all_sequences_in_order(self, parser):
        alignment = parser.parse_block(self.lines)
        assert alignment.names == ["human", "mouse", "dog"]
        assert alignment.width == 5

    def test_non_sequence_lines_ignored(self, parser):
        alignment = parser.parse_block(["i human.chr1 C 0 C 0"] + self.lines[:2])
        assert alignment.names == ["human", "mouse"]

    def test_subset_in_requested_order(self):
        parser = MAFBlockParser(["mouse", "human"])
        alignment = parser.parse_block(self.lines)
        assert alignment.names == ["mouse", "human"]
        assert parser.blocks_skipped == 0

    def test_subset_missing_name_rejected(self):
        parser = MAFBlockParser(["human", "cat"])
        assert parser.parse_block(self.lines) is None
        assert parser.blocks_skipped == 1

    def test_subset_larger_than_block_rejected(self):
        parser = MAFBlockParser(["human", "mouse", "dog", "cow"])
        assert parser.parse_block(self.lines) is None

    def test_subset_substring_match(self):
        parser = MAFBlockParser(["hum", "dog"])
        alignment = parser.parse_block(self.lines)
        assert alignment.names == ["human", "dog"]

    def test_subset_spanning_two_names_rejected(self):
        parser = MAFBlockParser(["an mo"])
        assert parser.parse_block(self.lines) is None

    def test_duplicate_species(self, parser):
        with pytest.raises(ParseError, match="Duplicate species"):
            parser.parse_block(self.lines + ["s human.chr9 0 5 + 10 ACGTA"])

    def test_unequal_lengths(self, parser):
        with pytest.raises(ParseError, match="lengths differ"):
            parser.parse_block(self.lines + ["s cow.chr3 0 3 + 10 ACG"])


class TestParseFile:
    """Tests for whole-file parsing."""

    def test_blocks_split(self, parser, maf_file):
        blocks = list(parser.iter_blocks(maf_file))
        assert len(blocks) == 2
        assert all(line.startswith("s ") for block in blocks for line in block)

    def test_block_without_trailing_blank_line(self, parser, tmp_path):
        path = tmp_path / "tail.maf"
        path.write_text("a score=1\ns a.c 0 2 + 5 AC\ns b.c 0 2 + 5 AC\n"
                        "a score=2\ns a.c 2 2 + 5 GT\ns b.c 2 2 + 5 GT")
        blocks = list(parser.iter_blocks(str(path)))
        assert len(blocks) == 2

    def test_subset_end_to_end(self, maf_file):
        parser = MAFBlockParser(["human", "mouse"])
        alignments = list(parser.parse_file(maf_file))
        assert len(alignments) == 1
        assert alignments[0].sequences == ["AC-GT", "ACAGT"]
        assert parser.blocks_seen == 2
        assert parser.blocks_skipped == 1

    def test_gzip_input(self, parser, tmp_path, maf_text):
        path = tmp_path / "sample.maf.gz"
        with gzip.open(str(path), "wt") as handle:
            handle.write(maf_text)
        alignments = list(parser.parse_file(str(path)))
        assert [a.names for a in alignments] == [["human", "mouse"], ["human", "dog"]]

    def test_malformed_block_reports_position(self, parser, tmp_path):
        path = tmp_path / "bad.maf"
        path.write_text("a\ns a.c 0 2 + 5 AC\n\na\ns a.c 0 2 + AC\n")
        with pytest.raises(ParseError, match="block 2"):
            list(parser.parse_file(str(path)))

    def test_ragged_block_reports_position(self, parser, tmp_path):
        path = tmp_path / "ragged.maf"
        path.write_text("a\ns a.c 0 2 + 5 AC\ns b.c 0 2 + 5 AC\n\na\ns a.c 2 3 + 5 GTA\ns b.c 2 2 + 5 GT\n")
        with pytest.raises(ParseError, match="block 2"):
            list(parser.parse_file(str(path)))

    def test_invalid_text(self, parser, tmp_path):
        path = tmp_path / "binary.maf"
        path.write_bytes(b"a\ns a.c 0 2 + 5 \xff\xfe\n")
        with pytest.raises(ParseError, match="Undecodable"):
            list(parser.parse_file(str(path)))

    def test_missing_file(self, parser, tmp_path):
        with pytest.raises(FileError):
            list(parser.parse_file(str(tmp_path / "missing.maf")))
