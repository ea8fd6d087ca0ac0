#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration package for alnrefine.
"""

from .config import Config, RefineSettings
from .logging_config import setup_logging
from .exceptions import (AlnRefineError, FileError, FileFormatError, ParseError,
                         ConfigError, ConsistencyError,
                         ExternalToolError, AdapterError)
from .config_display import display_config
from .template_generator import generate_config_template

__all__ = [
    'Config',
    'RefineSettings',
    'setup_logging',
    'AlnRefineError',
    'FileError',
    'FileFormatError',
    'ParseError',
    'ConfigError',
    'ConsistencyError',
    'ExternalToolError',
    'AdapterError',
    'display_config',
    'generate_config_template'
]
