#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration template generator for alnrefine.

Writes a JSON file holding the commonly modified refinement settings,
ready to be edited and passed back with --config.
"""

import os
import json
from datetime import datetime
import colorama
from colorama import Fore, Style
import logging

logger = logging.getLogger(__name__)

TEMPLATE_KEYS = [
    "NUM_PROCESSES",
    "SHOW_PROGRESS",
    "SUBSET_NAMES",
    "ALIGN_PROGRAM",
    "QUICK_MODE",
    "INDEL_EXPAND",
    "INDEL_JOIN",
    "QUICK_SHARED_INDELS_ONLY",
    "OUTGROUP",
    "OUTGROUP_NAME",
    "BLOCK_INPUT",
    "ALIGNER_COMMANDS",
]


def generate_config_template(config_cls, filename=None, output_dir=None):
    """
    Generate a template configuration file based on current settings.

    Args:
        config_cls: The Config class containing default settings
        filename (str, optional): Filename to save template. Uses default if None.
        output_dir (str, optional): Directory to save template. Uses current if None.

    Returns:
        str: Path to the generated template file

    Raises:
        TemplateGenerationError: If template generation fails

    Example:
        >>> from alnrefine.config import Config
        >>> template_path = generate_config_template(Config, "my_config.json")
    """
    logger.debug(f"Generating config template: filename={filename}, output_dir={output_dir}")

    colorama.init()

    if output_dir is None:
        output_dir = os.getcwd()

    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d")
        filename = f"alnrefine_config_template_{timestamp}.json"

    if not filename.lower().endswith('.json'):
        filename += '.json'

    filepath = os.path.join(output_dir, filename)

    template = {
        "# alnrefine Configuration Template": "Generated on " + datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "# Instructions": "Modify the values below and save this file. Use it with: alnrefine --config your_config.json",
    }
    template.update(_build_template_dict(config_cls))

    try:
        os.makedirs(output_dir, exist_ok=True)
        with open(filepath, 'w') as f:
            json.dump(template, f, indent=4)
    except (OSError, TypeError) as e:
        error_msg = f"Failed to write template file to {filepath}"
        logger.error(error_msg)
        logger.debug(f"Error details: {str(e)}", exc_info=True)
        print(f"\n{Fore.RED}Error generating template: {str(e)}{Style.RESET_ALL}")
        raise TemplateGenerationError(error_msg) from e

    print(f"\n{Fore.WHITE}{'='*80}{Style.RESET_ALL}")
    print(f"{Fore.WHITE}Configuration Template File Generator")
    print(f"{Fore.WHITE}{'='*80}{Style.RESET_ALL}")
    print(f"\nTemplate saved to: {Fore.CYAN}{filepath}{Style.RESET_ALL}")
    print(f"\nTo use this template:")
    print(f"1. Edit the file with your preferred settings")
    print(f"2. Run: {Fore.CYAN}alnrefine --config {filepath}{Style.RESET_ALL}")
    print(f"\n{Fore.WHITE}{'='*80}{Style.RESET_ALL}\n")

    logger.debug("Template generation completed successfully")
    return filepath


def _build_template_dict(config_cls):
    """
    Build the template dictionary with commonly modified settings.

    Args:
        config_cls: The Config class containing default settings

    Returns:
        dict: Template dictionary in TEMPLATE_KEYS order
    """
    template = {}
    for key in TEMPLATE_KEYS:
        if hasattr(config_cls, key):
            template[key] = getattr(config_cls, key)
    logger.debug(f"Template dictionary built with {len(template)} settings")
    return template


class TemplateGenerationError(Exception):
    """Error during configuration template generation."""
    pass
