#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Unit tests for the configuration package.
"""

import json

import pytest

from alnrefine.config import (Config, ConfigError, RefineSettings, display_config,
                              generate_config_template)
from alnrefine.helpers.aligner_runner import AlignerProgram


class TestRefineSettings:
    """Tests for the immutable settings snapshot."""

    def test_negative_values_rejected(self):
        with pytest.raises(ConfigError, match="indel_expand"):
            RefineSettings(align_program=AlignerProgram.NONE, indel_expand=-1)
        with pytest.raises(ConfigError, match="indel_join"):
            RefineSettings(align_program=AlignerProgram.NONE, indel_join=-1)

    def test_frozen(self, settings):
        with pytest.raises(AttributeError):
            settings.quick_mode = True


class TestSnapshot:
    """Tests for Config.snapshot."""

    def test_defaults(self):
        settings = Config.snapshot()
        assert settings.align_program is AlignerProgram.CLUSTALW
        assert settings.indel_expand == 50
        assert settings.indel_join == 50
        assert settings.outgroup is False
        assert settings.subset_names is None

    def test_overrides(self):
        Config.ALIGN_PROGRAM = "MAFFT"
        Config.QUICK_MODE = True
        Config.SUBSET_NAMES = ["human", "mouse"]
        Config.OUTGROUP_NAME = "dog"

        settings = Config.snapshot()

        assert settings.align_program is AlignerProgram.MAFFT
        assert settings.quick_mode is True
        assert settings.subset_names == ("human", "mouse")
        assert settings.outgroup is True
        assert settings.outgroup_name == "dog"

    def test_snapshot_is_independent(self):
        settings = Config.snapshot()
        Config.ALIGNER_COMMANDS["mafft"]["executable"] = "/opt/mafft"
        assert settings.aligner_commands["mafft"]["executable"] == "mafft"

    def test_unknown_program(self):
        Config.ALIGN_PROGRAM = "tcoffee"
        with pytest.raises(ConfigError):
            Config.snapshot()

    def test_negative_expand(self):
        Config.INDEL_EXPAND = -5
        with pytest.raises(ConfigError):
            Config.snapshot()


class TestLoadFromFile:
    """Tests for JSON configuration loading."""

    def test_load_settings(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "# comment": "ignored",
            "ALIGN_PROGRAM": "muscle",
            "INDEL_JOIN": 7,
            "ALIGNER_COMMANDS": {"muscle": {"executable": "/usr/local/bin/muscle"}},
            "NOT_A_SETTING": 1,
        }))

        assert Config.load_from_file(str(path)) is True

        assert Config.ALIGN_PROGRAM == "muscle"
        assert Config.INDEL_JOIN == 7
        assert Config.ALIGNER_COMMANDS["muscle"]["executable"] == "/usr/local/bin/muscle"
        assert Config.ALIGNER_COMMANDS["muscle"]["format"] == "fasta"
        assert "mafft" in Config.ALIGNER_COMMANDS
        assert not hasattr(Config, "NOT_A_SETTING")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            Config.load_from_file(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            Config.load_from_file(str(path))


class TestDisplayAndTemplate:
    """Tests for settings display and template generation."""

    def test_get_all_settings(self):
        settings = Config.get_all_settings()
        assert settings["ALIGN_PROGRAM"] == "clustalw"
        assert "get_instance" not in settings

    def test_display_config(self, capsys):
        display_config(Config)
        output = capsys.readouterr().out
        assert "ALIGN_PROGRAM" in output

    def test_generate_template(self, tmp_path, capsys):
        path = generate_config_template(Config, filename="template", output_dir=str(tmp_path))

        assert path.endswith("template.json")
        with open(path) as handle:
            template = json.load(handle)
        assert template["INDEL_EXPAND"] == 50
        assert template["ALIGN_PROGRAM"] == "clustalw"
