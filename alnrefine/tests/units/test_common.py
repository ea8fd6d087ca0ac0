#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Unit tests for the shared mode helpers.
"""

import logging
import os

import pytest

from alnrefine.config import FileError, ParseError
from alnrefine.modes import common


def ok_worker(input_file, out_dir, settings):
    return common.FileResult(input_file=input_file, output_file=os.path.join(out_dir, "x"), alignments=2)


def failing_worker(input_file, out_dir, settings):
    raise ParseError(f"bad input {input_file}")


def buggy_worker(input_file, out_dir, settings):
    raise ValueError(f"unexpected value in {input_file}")


class TestOutputDirectory:
    """Tests for prepare_output_directory."""

    def test_creates_directory(self, tmp_path):
        out_dir = common.prepare_output_directory(str(tmp_path / "out"))
        assert os.path.isdir(out_dir)
        assert os.path.isabs(out_dir)

    def test_existing_directory_rejected(self, tmp_path):
        (tmp_path / "out").mkdir()
        (tmp_path / "out" / "keep.txt").write_text("x")
        with pytest.raises(FileError, match="already exists"):
            common.prepare_output_directory(str(tmp_path / "out"))
        assert os.path.exists(str(tmp_path / "out" / "keep.txt"))

    def test_existing_directory_cleared(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING, logger="alnrefine.modes.common")
        (tmp_path / "out").mkdir()
        (tmp_path / "out" / "old.fa").write_text(">a\nA\n")
        out_dir = common.prepare_output_directory(str(tmp_path / "out"), clear=True)
        assert os.listdir(out_dir) == []
        assert "removing it" in caplog.text


class TestOutputNames:
    """Tests for check_output_names."""

    def test_distinct_names(self):
        common.check_output_names(["x/a.fa", "y/b.fa"], os.path.basename)

    def test_shared_name_rejected(self):
        with pytest.raises(FileError, match="share output names") as excinfo:
            common.check_output_names(["x/locus.fa", "y/locus.fa", "z/other.fa"], os.path.basename)
        assert "x/locus.fa" in str(excinfo.value)
        assert "y/locus.fa" in str(excinfo.value)


class TestPartialOutput:
    """Tests for partial_output."""

    def test_renamed_on_success(self, tmp_path):
        target = str(tmp_path / "out.fa")
        with common.partial_output(target) as handle:
            handle.write(">a\nA\n")
            assert os.path.exists(target + common.PARTIAL_SUFFIX)
        assert os.path.exists(target)
        assert not os.path.exists(target + common.PARTIAL_SUFFIX)

    def test_partial_kept_on_failure(self, tmp_path):
        target = str(tmp_path / "out.fa")
        with pytest.raises(ParseError):
            with common.partial_output(target) as handle:
                handle.write(">a\n")
                raise ParseError("broken")
        assert not os.path.exists(target)
        assert os.path.exists(target + common.PARTIAL_SUFFIX)

    def test_unwritable_location(self, tmp_path):
        with pytest.raises(FileError):
            with common.partial_output(str(tmp_path / "missing" / "out.fa")):
                pass


class TestRunFiles:
    """Tests for run_files and summarize."""

    def test_in_process(self, tmp_path):
        results = common.run_files(["a", "b"], ok_worker, str(tmp_path), None, show_progress=False)
        assert [r.input_file for r in results] == ["a", "b"]
        assert all(r.ok for r in results)
        assert common.summarize(results) is True

    def test_failure_recorded(self, tmp_path):
        results = common.run_files(["a"], failing_worker, str(tmp_path), None, show_progress=False)
        assert not results[0].ok
        assert "bad input a" in results[0].error
        assert common.summarize(results) is False

    def test_unexpected_error_recorded(self, tmp_path):
        results = common.run_files(["a", "b"], buggy_worker, str(tmp_path), None, show_progress=False)
        assert len(results) == 2
        assert not any(r.ok for r in results)
        assert results[0].error == "ValueError: unexpected value in a"

    def test_process_pool(self, tmp_path):
        files = ["a", "b", "c"]
        results = common.run_files(files, ok_worker, str(tmp_path), None, processes=2, show_progress=False)
        assert sorted(r.input_file for r in results) == files
        assert sum(r.alignments for r in results) == 6

    def test_process_pool_failure(self, tmp_path):
        results = common.run_files(["a", "b"], failing_worker, str(tmp_path), None,
                                   processes=2, show_progress=False)
        assert len(results) == 2
        assert not any(r.ok for r in results)
