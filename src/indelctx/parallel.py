"""Parallel processing of independent variant sets with joblib."""

import logging
import os
from collections.abc import Callable
from typing import Any

from joblib import Parallel, delayed
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

logger = logging.getLogger(__name__)

__all__ = ["parallel_map"]

# Threads share one reference provider; FastaReference keeps a handle per thread.
BACKEND = "threading"


def parallel_map(
    func: Callable,
    items: list[Any],
    n_jobs: int = 1,
    description: str = "Processing",
    show_progress: bool = False,
) -> list[Any]:
    """
    Map function over items in parallel.

    Results are returned in the order of ``items``.

    Args:
        func: Function to apply
        items: Items to process
        n_jobs: Number of parallel jobs (-1 for all CPUs)
        description: Description for progress bar
        show_progress: Whether to show progress bar

    Returns:
        List of results
    """
    if n_jobs < 1:
        n_jobs = os.cpu_count() or 1
    n_jobs = min(n_jobs, max(len(items), 1))
    logger.debug("Mapping %d item(s) over %d job(s)", len(items), n_jobs)

    if not show_progress:
        return Parallel(n_jobs=n_jobs, backend=BACKEND)(delayed(func)(item) for item in items)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
    ) as progress:
        task = progress.add_task(f"[cyan]{description}...", total=len(items))

        results = []
        with Parallel(n_jobs=n_jobs, backend=BACKEND, return_as="generator") as parallel:
            for result in parallel(delayed(func)(item) for item in items):
                results.append(result)
                progress.update(task, advance=1)

        return results
