#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Tests for the alnrefine command line entry point.
"""

import os
from unittest.mock import patch

import pytest

from alnrefine import pipeline
from alnrefine.config import Config


@pytest.fixture(autouse=True)
def no_log_files():
    with patch('alnrefine.pipeline.setup_logging') as mock_setup:
        yield mock_setup


class TestParseArguments:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = pipeline.parse_arguments([])
        assert args.maf is False
        assert args.in_dir == "."
        assert args.debug is False
        assert args.outgroup is None

    def test_debug_modules(self):
        assert pipeline.parse_arguments(["--debug"]).debug is True
        assert pipeline.parse_arguments(["--debug", "realigner"]).debug == ["realigner"]

    def test_outgroup_forms(self):
        assert pipeline.parse_arguments(["--outgroup"]).outgroup is True
        assert pipeline.parse_arguments(["--outgroup", "dog"]).outgroup == "dog"

    def test_negative_expand_rejected(self):
        with pytest.raises(SystemExit):
            pipeline.parse_arguments(["--expand", "-1"])


class TestApplyArguments:
    """Tests for copying options onto Config."""

    def test_options_applied(self):
        args = pipeline.parse_arguments([
            "--subset", "human, mouse", "--msa", "mafft", "--quick", "--expand", "5",
            "--join", "3", "--outgroup", "dog", "--block", "--force", "--parallel", "4",
            "--all-indels", "--no-progress",
        ])
        pipeline.apply_arguments(args)

        assert Config.SUBSET_NAMES == ["human", "mouse"]
        assert Config.ALIGN_PROGRAM == "mafft"
        assert Config.QUICK_MODE is True
        assert Config.INDEL_EXPAND == 5
        assert Config.INDEL_JOIN == 3
        assert Config.OUTGROUP is True
        assert Config.OUTGROUP_NAME == "dog"
        assert Config.BLOCK_INPUT is True
        assert Config.CLEAR_OUTPUT is True
        assert Config.NUM_PROCESSES == 4
        assert Config.QUICK_SHARED_INDELS_ONLY is False
        assert Config.SHOW_PROGRESS is False

    def test_bare_outgroup_keeps_last_sequence(self):
        pipeline.apply_arguments(pipeline.parse_arguments(["--outgroup"]))
        assert Config.OUTGROUP is True
        assert Config.OUTGROUP_NAME is None


class TestRunPipeline:
    """End-to-end runs through run_pipeline."""

    def test_maf_conversion(self, tmp_path, maf_text):
        in_dir = tmp_path / "maf"
        in_dir.mkdir()
        (in_dir / "chr1.maf").write_text(maf_text)

        assert pipeline.run_pipeline(["--maf", "-i", str(in_dir), "--subset", "human,mouse",
                                      "--no-progress"]) is True
        assert os.path.exists(str(tmp_path / "maf_fasta_human,mouse" / "chr1.maf.fas"))

    def test_refine_without_aligner(self, tmp_path):
        in_dir = tmp_path / "aln"
        in_dir.mkdir()
        (in_dir / "a.fa").write_text(">x\n--ACGT\n>y\n-AAC-T\n")
        out_dir = tmp_path / "out"

        assert pipeline.run_pipeline(["-i", str(in_dir), "-o", str(out_dir), "--msa", "none",
                                      "--outgroup", "--no-progress"]) is True
        with open(str(out_dir / "a.fa")) as handle:
            assert handle.read() == ">x\n-ACGT\n>y\nAAC-T\n"

    def test_unknown_program(self, tmp_path):
        assert pipeline.run_pipeline(["-i", str(tmp_path), "--msa", "tcoffee"]) is False

    def test_missing_input_directory(self, tmp_path):
        assert pipeline.run_pipeline(["-i", str(tmp_path / "missing"), "--msa", "none"]) is False

    @patch('alnrefine.pipeline.display_config')
    def test_config_display_stops(self, mock_display, tmp_path):
        with patch('alnrefine.pipeline.run_workflow') as mock_workflow:
            assert pipeline.run_pipeline(["--config"]) is True
        mock_display.assert_called_once_with(Config)
        mock_workflow.assert_not_called()

    def test_config_file(self, tmp_path):
        config_file = tmp_path / "settings.json"
        config_file.write_text('{"INDEL_EXPAND": 9}')

        with patch('alnrefine.pipeline.run_workflow', return_value=True) as mock_workflow:
            assert pipeline.run_pipeline(["--config", str(config_file)]) is True

        mock_workflow.assert_called_once()
        assert Config.INDEL_EXPAND == 9

    def test_main_exit_code(self):
        with patch('alnrefine.pipeline.run_pipeline', return_value=False):
            with pytest.raises(SystemExit) as excinfo:
                pipeline.main()
        assert excinfo.value.code == 1
