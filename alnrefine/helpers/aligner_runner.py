#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
External aligner runner for alnrefine.

This module wraps the multiple sequence alignment programs (ClustalW,
MUSCLE, MAFFT) behind a single call: an ordered list of sequences goes
in, the same number of equal-length, upper-cased aligned sequences comes
out in the same order. Any failure of the external program is raised as
AdapterError; realignment is never skipped silently.
"""

import io
import os
import subprocess
import tempfile
import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence

from Bio import AlignIO, SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from ..config import Config
from ..config.exceptions import AdapterError, ConfigError

logger = logging.getLogger(__name__)


class AlignerProgram(Enum):
    """External alignment programs known to the pipeline."""

    NONE = "none"
    CLUSTALW = "clustalw"
    MUSCLE = "muscle"
    MAFFT = "mafft"

    @property
    def realigns(self) -> bool:
        return self is not AlignerProgram.NONE

    @classmethod
    def from_name(cls, name) -> "AlignerProgram":
        """
        Look up a program by (case-insensitive) name.

        Raises:
            ConfigError: If the name is unknown
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError as e:
            known = ", ".join(member.value for member in cls)
            raise ConfigError(f"Unknown alignment program '{name}' (expected one of: {known})") from e


class AlignerRunner:
    """
    Runs an external multiple sequence aligner on a list of sequences.

    Attributes:
        commands: Mapping of program name to invocation parameters
            (executable, argument template, output format, stdout flag)

    Example:
        >>> runner = AlignerRunner()
        >>> runner.align(["ACGT", "AGT"], AlignerProgram.MAFFT)
        ['ACGT', 'A-GT']
    """

    def __init__(self, commands: Optional[Dict[str, Dict]] = None):
        self.commands = commands if commands is not None else Config.ALIGNER_COMMANDS

    def build_command(self, program: AlignerProgram, input_path: str, output_path: str) -> List[str]:
        """
        Build the argument vector for one aligner call.

        Args:
            program: Aligner to run
            input_path: FASTA file holding the unaligned sequences
            output_path: File the aligner should write to

        Returns:
            list: Command line, executable first

        Raises:
            ConfigError: If the program has no invocation parameters
        """
        entry = self.commands.get(program.value)
        if not entry or not entry.get("executable"):
            raise ConfigError(f"No invocation parameters configured for aligner '{program.value}'")

        args = [arg.format(input=input_path, output=output_path) for arg in entry.get("args", [])]
        return [entry["executable"]] + args

    def align(self, sequences: Sequence[str], program) -> List[str]:
        """
        Align sequences with an external program.

        Gap characters in the input are removed first. Sequences that are
        empty after that are not sent to the aligner and come back as
        all-gap rows. With fewer than two non-empty sequences no external
        process is started.

        Args:
            sequences: Ordered sequences, gapped or not
            program: AlignerProgram (or its name); must not be NONE

        Returns:
            list: Aligned sequences, same count and order, equal length, upper case

        Raises:
            ValueError: If program is NONE
            AdapterError: If the aligner fails or its output is unusable
        """
        program = AlignerProgram.from_name(program)
        if not program.realigns:
            raise ValueError("Aligner 'none' cannot be run; check program.realigns first")

        stripped = [seq.replace('-', '').upper() for seq in sequences]
        active = [seq for seq in stripped if seq]

        if len(active) < 2:
            width = len(active[0]) if active else 0
            return [seq if seq else '-' * width for seq in stripped]

        aligned = iter(self._run(program, active))
        width = None
        result = []
        for seq in stripped:
            if seq:
                row = next(aligned)
                width = len(row)
                result.append(row)
            else:
                result.append(None)
        return [row if row is not None else '-' * width for row in result]

    def _run(self, program: AlignerProgram, sequences: List[str]) -> List[str]:
        """Write sequences to a temporary FASTA, run the aligner, read the result."""
        entry = self.commands.get(program.value, {})
        output_format = entry.get("format", "fasta")

        with tempfile.TemporaryDirectory(prefix="alnrefine_") as tmp_dir:
            input_path = os.path.join(tmp_dir, "input.fa")
            output_path = os.path.join(tmp_dir, "output.aln")

            records = [SeqRecord(Seq(seq), id=str(index), description="")
                       for index, seq in enumerate(sequences)]
            SeqIO.write(records, input_path, "fasta")

            cmd = self.build_command(program, input_path, output_path)
            command_str = " ".join(cmd)
            logger.debug(f"Running {program.value} on {len(sequences)} sequences: {command_str}")

            try:
                result = subprocess.run(cmd, capture_output=True, text=True, cwd=tmp_dir)
            except OSError as e:
                error_msg = f"Cannot execute {cmd[0]}: {str(e)}"
                logger.error(error_msg)
                raise AdapterError(error_msg, tool_name=program.value, command=command_str) from e

            if result.returncode != 0:
                logger.debug(f"{program.value} stderr: {result.stderr}")
                raise AdapterError(
                    "alignment failed",
                    tool_name=program.value,
                    command=command_str,
                    return_code=result.returncode,
                    stdout=result.stdout,
                    stderr=result.stderr,
                )

            try:
                if entry.get("stdout"):
                    alignment = AlignIO.read(io.StringIO(result.stdout), output_format)
                else:
                    with open(output_path, 'r') as handle:
                        alignment = AlignIO.read(handle, output_format)
            except (ValueError, OSError) as e:
                logger.debug(f"Error details: {str(e)}", exc_info=True)
                raise AdapterError(
                    f"unparsable output: {str(e)}",
                    tool_name=program.value,
                    command=command_str,
                    stdout=result.stdout,
                    stderr=result.stderr,
                ) from e

        return self._order_output(alignment, len(sequences), program)

    @staticmethod
    def _order_output(alignment, expected: int, program: AlignerProgram) -> List[str]:
        """Return aligned rows in input order, validating count and width."""
        by_id = {record.id: str(record.seq).upper() for record in alignment}
        missing = [str(index) for index in range(expected) if str(index) not in by_id]
        if missing or len(by_id) != expected:
            raise AdapterError(
                f"expected {expected} aligned sequences, got {len(by_id)}",
                tool_name=program.value,
            )

        rows = [by_id[str(index)] for index in range(expected)]
        if len({len(row) for row in rows}) != 1:
            raise AdapterError("aligned sequences differ in length", tool_name=program.value)
        return rows
