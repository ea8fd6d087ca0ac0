#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration display module for alnrefine.
"""

import textwrap
import colorama
from colorama import Fore, Style


def display_config(config_cls):
    """
    Display all configuration settings in a structured, easy-to-read format.

    Args:
        config_cls: The Config class
    """
    colorama.init()

    settings = config_cls.get_all_settings()

    print(f"\n{Fore.CYAN}{'='*80}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}{'alnrefine Configuration Settings':^80}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}{'='*80}{Style.RESET_ALL}\n")

    categories = {
        "Pipeline Mode Options": [
            "DEBUG_MODE", "BLOCK_INPUT", "CLEAR_OUTPUT"
        ],
        "Performance Settings": [
            "NUM_PROCESSES", "SHOW_PROGRESS"
        ],
        "MAF Conversion Parameters": [
            "SUBSET_NAMES", "MAF_GZIP"
        ],
        "Realignment Parameters": [
            "ALIGN_PROGRAM", "QUICK_MODE", "INDEL_EXPAND", "INDEL_JOIN",
            "QUICK_SHARED_INDELS_ONLY", "ALIGNER_COMMANDS"
        ],
        "Trimming Parameters": [
            "OUTGROUP", "OUTGROUP_NAME"
        ],
    }

    categorized_keys = []
    for keys in categories.values():
        categorized_keys.extend(keys)

    other_keys = [key for key in settings.keys() if key not in categorized_keys]
    if other_keys:
        categories["Other"] = other_keys

    for category, keys in categories.items():
        print(f"{Fore.GREEN}{category}{Style.RESET_ALL}")
        print(f"{Fore.GREEN}{'-' * len(category)}{Style.RESET_ALL}")

        for key in keys:
            if key not in settings:
                continue
            value = settings[key]
            if isinstance(value, dict):
                formatted_value = "\n" + textwrap.indent(
                    "\n".join(f"{k}: {v}" for k, v in value.items()), " " * 4
                )
            elif isinstance(value, list) and len(str(value)) > 60:
                formatted_value = "\n" + textwrap.indent(str(value), " " * 4)
            else:
                formatted_value = str(value)

            print(f"{Fore.YELLOW}{key}{Style.RESET_ALL}: {formatted_value}")
        print()

    print(f"{Fore.CYAN}{'='*80}{Style.RESET_ALL}")
    print(f"\n{Fore.WHITE}Configuration Options:{Style.RESET_ALL}")
    print(f"- View settings: {Fore.YELLOW}alnrefine --config{Style.RESET_ALL}")
    print(f"- Generate a template config file: {Fore.YELLOW}alnrefine --config template{Style.RESET_ALL}")
    print(f"- Use custom config: {Fore.YELLOW}alnrefine --config your_config.json{Style.RESET_ALL}")
    print(f"\nExample config file format:")
    print(f"{Fore.BLUE}{{")
    print(f'    "ALIGN_PROGRAM": "mafft",')
    print(f'    "QUICK_MODE": true,')
    print(f'    "INDEL_EXPAND": 50,')
    print(f'    "INDEL_JOIN": 50')
    print(f"}}{Style.RESET_ALL}\n")
