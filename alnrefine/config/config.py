#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration module for alnrefine.

Contains functionality for:
1. Central configuration settings management with singleton pattern
2. JSON configuration file loading
3. External aligner invocation table
4. Immutable settings snapshots handed to worker processes

This module provides centralized configuration management for the
alignment refinement pipeline. Components never read the mutable Config
class from deep inside their algorithms; the driver takes a RefineSettings
snapshot once and passes it explicitly.
"""

import os
import json
import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple

from .exceptions import ConfigError, FileFormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefineSettings:
    """Read-only configuration shared by every worker of one run."""

    align_program: Any
    quick_mode: bool = False
    indel_expand: int = 50
    indel_join: int = 50
    outgroup: bool = False
    outgroup_name: Optional[str] = None
    block_input: bool = False
    subset_names: Optional[Tuple[str, ...]] = None
    shared_indels_only: bool = True
    aligner_commands: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.indel_expand < 0:
            raise ConfigError(f"indel_expand must be >= 0, got {self.indel_expand}")
        if self.indel_join < 0:
            raise ConfigError(f"indel_join must be >= 0, got {self.indel_join}")


class Config:
    """
    Central configuration settings for alnrefine with singleton pattern.

    This class manages all configuration settings for the pipeline,
    providing a singleton pattern for consistent settings access across
    the command line layer and JSON configuration file support.

    Attributes:
        DEBUG_MODE: Enable debug logging mode
        NUM_PROCESSES: Number of worker processes, one input file each
        ALIGN_PROGRAM: External aligner name, or "none" to skip realignment
        INDEL_EXPAND: Columns added on each side of an indel region
        INDEL_JOIN: Maximum separation at which indel regions are joined

    Example:
        >>> config = Config.get_instance()
        >>> Config.load_from_file("my_config.json")
        >>> settings = Config.snapshot()
    """

    # Singleton instance
    _instance = None

    #############################################################################
    #                           Pipeline Mode Options
    #############################################################################
    DEBUG_MODE = False                   # Debug logging mode (enable with --debug flag)
    BLOCK_INPUT = False                  # Input FASTA files hold several blank-line separated alignments
    CLEAR_OUTPUT = False                 # Remove a pre-existing refinement output directory

    #############################################################################
    #                           Performance Settings
    #############################################################################
    NUM_PROCESSES = 1
    SHOW_PROGRESS = True

    #############################################################################
    #                           MAF Conversion Parameters
    #############################################################################
    SUBSET_NAMES = None                  # Ordered list of species names to extract, e.g. ["human", "mouse"]
    MAF_GZIP = False                     # Prefer *.maf.gz files over *.maf

    #############################################################################
    #                           Realignment Parameters
    #############################################################################
    ALIGN_PROGRAM = "clustalw"           # clustalw, muscle, mafft or none
    QUICK_MODE = False                   # Realign indel windows only
    INDEL_EXPAND = 50                    # Quick mode: expand indel regions by this many columns
    INDEL_JOIN = 50                      # Quick mode: join regions separated by at most this many columns
    QUICK_SHARED_INDELS_ONLY = True      # Quick mode: skip indels carried by a single sequence

    # {input} and {output} are replaced by temporary file paths
    ALIGNER_COMMANDS = {
        "clustalw": {
            "executable": "clustalw",
            "args": ["-INFILE={input}", "-OUTFILE={output}", "-OUTORDER=INPUT", "-QUIET"],
            "format": "clustal",
            "stdout": False,
        },
        "muscle": {
            "executable": "muscle",
            "args": ["-align", "{input}", "-output", "{output}"],
            "format": "fasta",
            "stdout": False,
        },
        "mafft": {
            "executable": "mafft",
            "args": ["--quiet", "--auto", "{input}"],
            "format": "fasta",
            "stdout": True,
        },
    }

    #############################################################################
    #                           Trimming Parameters
    #############################################################################
    OUTGROUP = False                     # Trim relative to an outgroup
    OUTGROUP_NAME = None                 # Outgroup sequence name; None means the last sequence

    def __init__(self):
        """Initialize Config instance with default values."""
        # Implementation left empty as we're using class variables
        pass

    @classmethod
    def get_instance(cls) -> 'Config':
        """
        Get the singleton instance of Config.

        Returns:
            Config: Singleton instance
        """
        if cls._instance is None:
            logger.debug("Creating new Config singleton instance")
            cls._instance = cls()
        return cls._instance

    @classmethod
    def get_user_config_dir(cls) -> str:
        """
        Get the user configuration directory, creating it if necessary.

        Returns:
            Path to user configuration directory

        Raises:
            ConfigError: If directory cannot be created
        """
        config_dir = os.path.join(os.path.expanduser("~"), ".alnrefine")

        try:
            os.makedirs(config_dir, exist_ok=True)
            logger.debug(f"User config directory: {config_dir}")
            return config_dir
        except OSError as e:
            error_msg = f"Failed to create user config directory {config_dir}: {str(e)}"
            logger.error(error_msg)
            logger.debug(f"Error details: {str(e)}", exc_info=True)
            raise ConfigError(error_msg) from e

    @classmethod
    def load_from_file(cls, filepath: str) -> bool:
        """
        Load settings from a JSON configuration file.

        Keys must match Config attribute names. ALIGNER_COMMANDS entries are
        merged per program so a file may override a single aligner.

        Args:
            filepath: Path to the settings file

        Returns:
            bool: True if settings were loaded successfully

        Raises:
            ConfigError: If file loading fails
        """
        logger.debug(f"Loading configuration from {filepath}")

        try:
            cls.get_instance()

            if not os.path.exists(filepath):
                error_msg = f"Configuration file not found: {filepath}"
                logger.error(error_msg)
                raise FileFormatError(error_msg)

            with open(filepath, 'r') as f:
                settings = json.load(f)

            if not isinstance(settings, dict):
                raise FileFormatError(f"Configuration file must hold a JSON object: {filepath}")

            logger.debug(f"Loaded {len(settings)} settings from JSON")

            for key, value in settings.items():
                if key.startswith('#'):
                    continue
                if key == "ALIGNER_COMMANDS" and isinstance(value, dict):
                    merged = copy.deepcopy(cls.ALIGNER_COMMANDS)
                    for program, entry in value.items():
                        merged.setdefault(program, {}).update(entry)
                    cls.ALIGNER_COMMANDS = merged
                    logger.debug(f"Updated aligner commands: {sorted(value)}")
                elif hasattr(cls, key) and not key.startswith('_'):
                    setattr(cls, key, value)
                    logger.debug(f"Updated {key} = {value}")
                else:
                    logger.warning(f"Ignoring unknown configuration key: {key}")

            return True

        except Exception as e:
            error_msg = f"Failed to load settings from {filepath}"
            logger.error(error_msg)
            logger.debug(f"Error details: {str(e)}", exc_info=True)
            raise ConfigError(error_msg) from e

    @classmethod
    def snapshot(cls) -> RefineSettings:
        """
        Freeze the current settings into a RefineSettings value.

        Returns:
            RefineSettings: Immutable settings for the workers

        Raises:
            ConfigError: If a setting holds an invalid value
        """
        from ..helpers.aligner_runner import AlignerProgram

        program = AlignerProgram.from_name(cls.ALIGN_PROGRAM)
        if program.realigns and program.value not in cls.ALIGNER_COMMANDS:
            raise ConfigError(f"No invocation parameters configured for aligner '{program.value}'")

        subset = tuple(cls.SUBSET_NAMES) if cls.SUBSET_NAMES else None

        settings = RefineSettings(
            align_program=program,
            quick_mode=bool(cls.QUICK_MODE),
            indel_expand=int(cls.INDEL_EXPAND),
            indel_join=int(cls.INDEL_JOIN),
            outgroup=bool(cls.OUTGROUP or cls.OUTGROUP_NAME),
            outgroup_name=cls.OUTGROUP_NAME,
            block_input=bool(cls.BLOCK_INPUT),
            subset_names=subset,
            shared_indels_only=bool(cls.QUICK_SHARED_INDELS_ONLY),
            aligner_commands=copy.deepcopy(cls.ALIGNER_COMMANDS),
        )
        logger.debug(f"Settings snapshot: {settings}")
        return settings

    @classmethod
    def get_all_settings(cls) -> Dict[str, Any]:
        """
        Get all settings as a dictionary.

        Returns:
            dict: Dictionary of all configuration settings
        """
        settings = {}

        for key in dir(cls):
            if not key.startswith('_') and key.isupper():
                settings[key] = getattr(cls, key)

        logger.debug(f"Retrieved {len(settings)} configuration settings")
        return settings
