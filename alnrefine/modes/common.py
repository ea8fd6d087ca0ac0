#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shared driver functionality for alnrefine modes.

Contains functionality for:
1. Output directory preparation
2. Partial-output handling so a failed file is never mistaken for a result
3. Distribution of input files over worker processes, one file per task
4. Result collection and summary logging

Each task receives an input path, the output directory and an immutable
RefineSettings snapshot, and returns a FileResult. Workers share nothing
else; each one writes its own output file.
"""

import os
import shutil
import logging
import contextlib
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from tqdm import tqdm

from ..config import AlnRefineError, FileError

logger = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".partial"


@dataclass
class FileResult:
    """Outcome of processing one input file."""

    input_file: str
    output_file: Optional[str] = None
    alignments: int = 0
    skipped: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def prepare_output_directory(out_dir: str, clear: bool = False) -> str:
    """
    Create the output directory.

    Args:
        out_dir: Directory to create
        clear: Remove the directory first if it exists

    Returns:
        str: Absolute path of the directory

    Raises:
        FileError: If the directory exists and clear is not set, or it
            cannot be created
    """
    out_dir = os.path.abspath(out_dir)

    if os.path.exists(out_dir):
        if not clear:
            error_msg = f"Output directory already exists: {out_dir} (use --force to replace it)"
            logger.error(error_msg)
            raise FileError(error_msg)
        logger.warning(f"{out_dir} exists, removing it")
        shutil.rmtree(out_dir)

    try:
        os.makedirs(out_dir)
    except OSError as e:
        error_msg = f"Cannot create output directory: {out_dir}"
        logger.error(error_msg)
        logger.debug(f"Error details: {str(e)}", exc_info=True)
        raise FileError(error_msg) from e

    logger.debug(f"Output directory: {out_dir}")
    return out_dir


def check_output_names(files: Sequence[str], name_func: Callable[[str], str]) -> None:
    """
    Make sure no two input files map to the same output file name.

    Input discovery is recursive but output is flat, so ``a/locus.fa`` and
    ``b/locus.fa`` would write the same file.

    Args:
        files: Input file paths
        name_func: Maps an input path to its output file name

    Raises:
        FileError: If two inputs share an output name
    """
    owners = {}
    clashes = []
    for input_file in files:
        name = name_func(input_file)
        if name in owners:
            clashes.append(f"{name} ({owners[name]}, {input_file})")
        else:
            owners[name] = input_file

    if clashes:
        error_msg = f"Input files share output names: {'; '.join(clashes)}"
        logger.error(error_msg)
        raise FileError(error_msg)


@contextlib.contextmanager
def partial_output(output_file: str):
    """
    Open ``output_file`` for writing through a temporary ``.partial`` name.

    The file is renamed to its final name only when the block exits
    without an exception; otherwise the ``.partial`` file stays behind.

    Yields:
        Writable text handle
    """
    partial_file = output_file + PARTIAL_SUFFIX
    try:
        handle = open(partial_file, 'w')
    except OSError as e:
        raise FileError(f"Cannot create output file {output_file}: {str(e)}") from e

    with handle:
        yield handle

    os.replace(partial_file, output_file)


def _run_task(worker: Callable, input_file: str, out_dir: str, settings) -> FileResult:
    """Run one worker call, turning any error into a failed FileResult."""
    try:
        return worker(input_file, out_dir, settings)
    except (AlnRefineError, OSError) as e:
        logger.error(f"Failed to process {input_file}: {e}")
        logger.debug(f"Error details: {str(e)}", exc_info=True)
        return FileResult(input_file=input_file, error=str(e))
    except Exception as e:
        logger.error(f"Unexpected error processing {input_file}: {e}")
        logger.debug(f"Error details: {str(e)}", exc_info=True)
        return FileResult(input_file=input_file, error=f"{type(e).__name__}: {e}")


def run_files(files: Sequence[str], worker: Callable, out_dir: str, settings,
              processes: int = 1, show_progress: bool = True,
              description: str = "Processing files") -> List[FileResult]:
    """
    Process input files, one file per unit of work.

    With a single process, files are handled in order in the current
    process. Otherwise a process pool runs up to ``processes`` files at
    once and results arrive in completion order.

    Args:
        files: Input file paths
        worker: Top-level function (input_file, out_dir, settings) -> FileResult
        out_dir: Output directory shared by all workers
        settings: RefineSettings snapshot
        processes: Number of worker processes
        show_progress: Show a tqdm progress bar
        description: Progress bar label

    Returns:
        list: One FileResult per input file
    """
    results = []
    processes = max(1, int(processes))

    if processes == 1 or len(files) <= 1:
        iterator = tqdm(files, desc=description) if show_progress else files
        for input_file in iterator:
            logger.debug(f"Process {input_file}")
            results.append(_run_task(worker, input_file, out_dir, settings))
        return results

    logger.debug(f"Running {len(files)} files on {processes} worker processes")
    with ProcessPoolExecutor(max_workers=processes) as executor:
        future_to_file = {
            executor.submit(_run_task, worker, input_file, out_dir, settings): input_file
            for input_file in files
        }

        completed = as_completed(future_to_file)
        if show_progress:
            completed = tqdm(completed, total=len(future_to_file), desc=description)

        for future in completed:
            input_file = future_to_file[future]
            try:
                results.append(future.result())
            except Exception as e:
                logger.error(f"Worker for {input_file} terminated: {e}")
                logger.debug(f"Error details: {str(e)}", exc_info=True)
                results.append(FileResult(input_file=input_file, error=str(e)))

    return results


def summarize(results: Sequence[FileResult]) -> bool:
    """
    Log a summary of a run.

    Returns:
        bool: True if every file was processed successfully
    """
    failed = [result for result in results if not result.ok]
    alignments = sum(result.alignments for result in results)
    skipped = sum(result.skipped for result in results)

    logger.info(f"Processed {len(results) - len(failed)}/{len(results)} files, "
                f"{alignments} alignments written")
    if skipped:
        logger.info(f"{skipped} alignment blocks skipped by subset filtering")
    for result in failed:
        logger.error(f"FAILED {result.input_file}: {result.error}")

    return not failed
