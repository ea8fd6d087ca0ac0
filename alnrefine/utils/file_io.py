#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
File I/O module for alnrefine.

Contains functionality for:
1. Transparent reading of plain and gzip-compressed text files
2. Recursive input file discovery
3. FASTA alignment reading and writing, plain and blocked variants
4. Encoding genomic loci into FASTA headers and back

A "blocked" FASTA file holds several alignments, each a run of
header/sequence line pairs, separated by blank lines.
"""

import os
import re
import gzip
import zlib
import fnmatch
import logging
from typing import IO, Iterator, List, Optional, Sequence, Tuple

from ..config.exceptions import FileError, ParseError, ConsistencyError

logger = logging.getLogger(__name__)

HEADER_PATTERN = re.compile(r'^(?P<name>[^.\s]+)\.(?P<contig>\S+?)\((?P<strand>[+-])\):(?P<start>\d+)-(?P<end>\d+)$')


class FileIO:
    """
    File operations for alignment files.

    All methods are static; the class only groups them.

    Example:
        >>> alignment = FileIO.read_fasta("locus1.fas")
        >>> FileIO.save_fasta(alignment, "out/locus1.fas")
    """

    @staticmethod
    def open_text(filepath: str, mode: str = 'r') -> IO[str]:
        """
        Open a text file, decompressing .gz files on the fly.

        Args:
            filepath: Path to the file
            mode: 'r', 'w' or 'a'

        Returns:
            Open text file handle

        Raises:
            FileError: If the file cannot be opened
        """
        try:
            if filepath.endswith('.gz'):
                return gzip.open(filepath, mode + 't')
            return open(filepath, mode)
        except OSError as e:
            error_msg = f"Cannot open {filepath}: {str(e)}"
            logger.error(error_msg)
            logger.debug(f"Error details: {str(e)}", exc_info=True)
            raise FileError(error_msg) from e

    @staticmethod
    def find_files(in_dir: str, patterns: Sequence[str]) -> List[str]:
        """
        Recursively collect files matching any of the glob patterns.

        Args:
            in_dir: Directory to search
            patterns: Filename patterns such as '*.maf' or '*.fas'

        Returns:
            Sorted list of matching file paths

        Raises:
            FileError: If the directory does not exist
        """
        if not os.path.isdir(in_dir):
            error_msg = f"Input directory not found: {in_dir}"
            logger.error(error_msg)
            raise FileError(error_msg)

        matches = []
        for root, _dirs, files in os.walk(in_dir):
            for filename in files:
                if any(fnmatch.fnmatch(filename, pattern) for pattern in patterns):
                    matches.append(os.path.join(root, filename))

        logger.debug(f"Found {len(matches)} files matching {', '.join(patterns)} in {in_dir}")
        return sorted(matches)

    @staticmethod
    def encode_header(name: str, locus=None) -> str:
        """
        Format a FASTA header for a record.

        Records with a locus are written as ``name.contig(strand):start-end``,
        others as the bare name.
        """
        if locus is None:
            return name
        return f"{name}.{locus.contig}({locus.strand}):{locus.start}-{locus.end}"

    @staticmethod
    def decode_header(header: str) -> Tuple[str, Optional["Locus"]]:
        """
        Split a header produced by encode_header into name and locus.

        Headers that do not follow the pattern come back unchanged with no
        locus.
        """
        from ..core.alignment import Locus

        match = HEADER_PATTERN.match(header)
        if not match:
            return header, None
        locus = Locus(
            contig=match.group('contig'),
            start=int(match.group('start')),
            end=int(match.group('end')),
            strand=match.group('strand'),
        )
        return match.group('name'), locus

    @staticmethod
    def read_fasta(filepath: str, parse_loci: bool = False):
        """
        Load one alignment from a FASTA file.

        Sequences may span several lines. Residue case is kept.

        Args:
            filepath: Path to a FASTA file (optionally gzip-compressed)
            parse_loci: Decode ``name.contig(strand):start-end`` headers

        Returns:
            Alignment: Records in file order

        Raises:
            FileError: If the file cannot be read
            ParseError: If sequence data precede the first header, a name
                repeats, sequence lengths differ or the file is not valid
                (gzip-compressed) text
        """
        from ..core.alignment import Alignment, SequenceRecord

        pairs = []
        header = None
        chunks = []

        try:
            with FileIO.open_text(filepath) as f:
                for line_number, line in enumerate(f, 1):
                    line = line.strip()
                    if not line:
                        continue
                    if line.startswith('>'):
                        if header is not None:
                            pairs.append((header, "".join(chunks)))
                        header = line[1:].strip()
                        chunks = []
                    elif header is None:
                        raise ParseError(f"Sequence data before first header in {filepath}, line {line_number}")
                    else:
                        chunks.append(line)
                if header is not None:
                    pairs.append((header, "".join(chunks)))
        except (OSError, EOFError) as e:
            error_msg = f"Error reading FASTA file {os.path.abspath(filepath)}: {str(e)}"
            logger.error(error_msg)
            logger.debug(f"Error details: {str(e)}", exc_info=True)
            raise FileError(error_msg) from e
        except (UnicodeDecodeError, zlib.error) as e:
            error_msg = f"Undecodable FASTA file {os.path.abspath(filepath)}: {str(e)}"
            logger.error(error_msg)
            logger.debug(f"Error details: {str(e)}", exc_info=True)
            raise ParseError(error_msg) from e

        records = []
        for header, seq in pairs:
            if parse_loci:
                name, locus = FileIO.decode_header(header)
            else:
                name, locus = header, None
            records.append(SequenceRecord(name=name, residues=seq, locus=locus))

        try:
            alignment = Alignment(records)
            alignment.check_consistency("reading")
        except ConsistencyError as e:
            raise ParseError(f"{filepath}: {e}") from e

        logger.debug(f"Loaded {len(alignment)} sequences from {filepath}")
        return alignment

    @staticmethod
    def iter_blocked_fasta(filepath: str):
        """
        Read a blocked FASTA file one alignment at a time.

        Within a block, header and sequence lines alternate. Sequence names
        are replaced by their index ("0", "1", ...) so that punctuation in
        real names cannot collide; the original headers are kept as the
        alignment's display names.

        Args:
            filepath: Path to the blocked FASTA file

        Yields:
            Alignment: One per block, in file order

        Raises:
            ParseError: If a block holds an odd number of lines, a header
                line does not start with '>', sequence lengths differ or
                the file cannot be decoded
            FileError: If the file cannot be read
        """
        from ..core.alignment import Alignment, SequenceRecord

        def build(lines, block_number):
            if len(lines) % 2:
                raise ParseError(
                    f"Headers not equal to sequences in {filepath}, block {block_number}"
                )
            records = []
            display_names = {}
            for index in range(len(lines) // 2):
                header, seq = lines[2 * index], lines[2 * index + 1]
                if not header.startswith('>') or seq.startswith('>'):
                    raise ParseError(
                        f"Malformed header/sequence pair in {filepath}, block {block_number}: {header[:40]}"
                    )
                name = str(index)
                display_names[name] = header[1:].strip()
                records.append(SequenceRecord(name=name, residues=seq))
            alignment = Alignment(records, display_names=display_names)
            try:
                alignment.check_consistency("reading")
            except ConsistencyError as e:
                raise ParseError(f"{filepath}, block {block_number}: {e}") from e
            return alignment

        lines = []
        block_number = 0
        try:
            with FileIO.open_text(filepath) as f:
                for line in f:
                    line = line.strip()
                    if line:
                        lines.append(line)
                        continue
                    if lines:
                        block_number += 1
                        yield build(lines, block_number)
                        lines = []
                if lines:
                    block_number += 1
                    yield build(lines, block_number)
        except (OSError, EOFError) as e:
            error_msg = f"Error reading FASTA file {os.path.abspath(filepath)}: {str(e)}"
            logger.error(error_msg)
            logger.debug(f"Error details: {str(e)}", exc_info=True)
            raise FileError(error_msg) from e
        except (UnicodeDecodeError, zlib.error) as e:
            error_msg = f"Undecodable FASTA file {os.path.abspath(filepath)}: {str(e)}"
            logger.error(error_msg)
            logger.debug(f"Error details: {str(e)}", exc_info=True)
            raise ParseError(error_msg) from e

    @staticmethod
    def write_alignment(handle: IO[str], alignment, blocked: bool = False) -> None:
        """
        Write one alignment to an open handle.

        Each record becomes a ``>header`` line and a single residue line;
        blocked output ends the alignment with a blank line.

        Args:
            handle: Writable text handle
            alignment: Alignment to write
            blocked: Append the block-separating blank line
        """
        for record in alignment:
            header = alignment.output_name(record)
            if record.locus is not None and record.name not in alignment.display_names:
                header = FileIO.encode_header(record.name, record.locus)
            handle.write(f">{header}\n")
            handle.write(f"{record.residues}\n")
        if blocked:
            handle.write("\n")

    @staticmethod
    def save_fasta(alignment, filepath: str) -> None:
        """
        Save one alignment as a plain FASTA file.

        Args:
            alignment: Alignment to save
            filepath: Destination path

        Raises:
            FileError: If the file cannot be written
        """
        if not len(alignment):
            logger.warning(f"Writing empty alignment to {filepath}")

        try:
            with open(filepath, 'w') as f:
                FileIO.write_alignment(f, alignment)
        except OSError as e:
            error_msg = f"Error writing FASTA file {filepath}: {str(e)}"
            logger.error(error_msg)
            logger.debug(f"Error details: {str(e)}", exc_info=True)
            raise FileError(error_msg) from e

        logger.debug(f"Successfully saved FASTA file: {filepath}")
