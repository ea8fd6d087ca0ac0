#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging configuration module for alnrefine.

Contains functionality for:
1. Per-module debug output, selected by short module name (--debug trimmer)
2. Colored console output for debug runs
3. A timestamped log file in the user configuration directory

Every module logs through ``logging.getLogger(__name__)``; this module only
installs the handlers on the root logger.
"""

import os
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

from colorama import Fore, Style

logger = logging.getLogger(__name__)


class ModuleDebugConfig:
    """
    Modules that can be switched to debug output individually.

    Attributes:
        MODULE_DEBUG_LEVELS: Default console level per module
        FILENAME_TO_MODULE: Short name (last dotted component) to module path

    Example:
        >>> ModuleDebugConfig.FILENAME_TO_MODULE['trimmer']
        'alnrefine.core.trimmer'
    """

    MODULE_DEBUG_LEVELS = {
        name: logging.INFO for name in (
            'alnrefine.pipeline',
            'alnrefine.modes.common',
            'alnrefine.modes.convert_mode',
            'alnrefine.modes.refine_mode',
            'alnrefine.core.alignment',
            'alnrefine.core.block_parser',
            'alnrefine.core.realigner',
            'alnrefine.core.trimmer',
            'alnrefine.helpers.aligner_runner',
            'alnrefine.utils.file_io',
            'alnrefine.config.config',
            'alnrefine.config.config_display',
            'alnrefine.config.template_generator',
        )
    }

    FILENAME_TO_MODULE = {name.rsplit('.', 1)[-1]: name for name in MODULE_DEBUG_LEVELS}


class SimpleDebugFormatter(logging.Formatter):
    """Formatter that colors whole lines by level when ``use_colors`` is set."""

    LEVEL_COLORS = {
        'DEBUG': Fore.WHITE,
        'INFO': Style.BRIGHT + Fore.WHITE,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.MAGENTA,
    }

    def __init__(self, fmt=None, datefmt=None, use_colors=False):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record):
        message = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelname) if self.use_colors else None
        if color:
            message = f"{color}{message}{Style.RESET_ALL}"
        return message


class EnhancedDebugFilter(logging.Filter):
    """
    Drop debug records from modules that are not selected for debug output.

    Records of modules missing from ``module_levels`` (and of their
    submodules) are passed from INFO upwards.
    """

    def __init__(self, module_levels: Dict[str, int]):
        super().__init__()
        self.module_levels = module_levels

    def filter(self, record):
        name = record.name
        while name:
            if name in self.module_levels:
                return record.levelno >= self.module_levels[name]
            name = name.rpartition('.')[0]
        return record.levelno >= logging.INFO


def setup_logging(debug: Union[bool, List[str]] = False, log_dir: Optional[str] = None) -> str:
    """
    Install file and console handlers on the root logger.

    Args:
        debug: False for normal output, True for debug output from every
            module, or a list of short module names to debug
        log_dir: Directory for the log file, defaults to
            ``<user config dir>/logs``

    Returns:
        str: Path to the created log file

    Raises:
        LoggingConfigError: If the handlers cannot be set up

    Example:
        >>> log_file = setup_logging(debug=['realigner', 'trimmer'])
    """
    from .config import Config

    try:
        debug_enabled, debug_modules = _normalize_debug_input(debug)

        module_levels = dict(ModuleDebugConfig.MODULE_DEBUG_LEVELS)
        for module in module_levels:
            if debug_enabled and (not debug_modules or module in
                                  {_resolve_module_name(m) for m in debug_modules}):
                module_levels[module] = logging.DEBUG

        if log_dir is None:
            log_dir = os.path.join(Config.get_user_config_dir(), "logs")
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f"alnrefine_{datetime.now():%Y%m%d_%H%M%S}.log")

        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        level = logging.DEBUG if debug_enabled else logging.INFO

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
        ))

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        if debug_enabled:
            console_handler.setFormatter(SimpleDebugFormatter('%(levelname)-8s [%(name)s] %(message)s',
                                                              use_colors=True))
            console_handler.addFilter(EnhancedDebugFilter(module_levels))
        else:
            console_handler.setFormatter(SimpleDebugFormatter('%(message)s'))

        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)

        if debug_enabled:
            logger.debug(f"Debug logging enabled, log file: {log_file}")
            unknown = [m for m in debug_modules or [] if not _resolve_module_name(m)]
            if unknown:
                logger.warning(f"Unknown module names: {', '.join(unknown)}")

        Config.DEBUG_MODE = debug_enabled
        return log_file

    except Exception as e:
        error_msg = "Failed to setup logging configuration"
        print(f"ERROR: {error_msg}: {str(e)}")
        raise LoggingConfigError(error_msg) from e


def _normalize_debug_input(debug: Union[bool, List[str]]) -> Tuple[bool, Optional[List[str]]]:
    """Return (debug_enabled, module names or None) for a --debug value."""
    from .config import Config

    if isinstance(debug, list):
        return bool(debug), list(debug) or None
    return bool(debug) or Config.DEBUG_MODE, None


def _resolve_module_name(name: str) -> Optional[str]:
    """Map a short module name or a full module path to a full module path."""
    if name in ModuleDebugConfig.MODULE_DEBUG_LEVELS:
        return name
    return ModuleDebugConfig.FILENAME_TO_MODULE.get(name)


class LoggingConfigError(Exception):
    """Error during logging configuration setup."""
    pass
