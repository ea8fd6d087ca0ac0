#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Custom exceptions for alnrefine.

This module defines exception classes used throughout the alignment
refinement pipeline to provide more specific error information and
improve error handling.
"""


class AlnRefineError(Exception):
    """Base exception class for all alnrefine-specific errors."""
    pass


class FileError(AlnRefineError):
    """Base class for file-related errors."""
    pass


class FileFormatError(FileError):
    """Error with file formatting or parsing."""
    pass


class ParseError(FileFormatError):
    """Malformed alignment block or unbalanced FASTA header/sequence pairs."""
    pass


class ConfigError(AlnRefineError):
    """Error with configuration parameters."""
    pass


class ConsistencyError(AlnRefineError):
    """Sequences of one alignment disagree in length or count after a pass."""
    pass


class ExternalToolError(AlnRefineError):
    """Error related to external tools like ClustalW, MUSCLE or MAFFT."""

    def __init__(self, message, tool_name=None, command=None, return_code=None, stdout=None, stderr=None):
        """
        Initialize with extended information about the external tool error.

        Args:
            message (str): Error message
            tool_name (str, optional): Name of the external tool
            command (str, optional): Command that was executed
            return_code (int, optional): Return code from the command
            stdout (str, optional): Standard output from the command
            stderr (str, optional): Standard error from the command
        """
        self.tool_name = tool_name
        self.command = command
        self.return_code = return_code
        self.stdout = stdout
        self.stderr = stderr

        detailed_message = message
        if tool_name:
            detailed_message = f"{tool_name} error: {message}"
        if return_code is not None:
            detailed_message += f" (return code: {return_code})"

        super().__init__(detailed_message)


class AdapterError(ExternalToolError):
    """The external aligner failed or produced output that cannot be used."""
    pass
