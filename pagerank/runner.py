"""
runner.py

Runs the PageRank engine on a background thread so the Streamlit page (or any
other caller) is not blocked on large graphs. Only one run may be in flight.
"""
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures

from pagerank.pagerank import (
    DEFAULT_DAMPING_FACTOR,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    run_pagerank,
    validate_inputs,
)


class ComputationInProgress(RuntimeError):
    """A PageRank run was requested while another one is still running."""


class PageRankRunner:
    """
    Each run gets its own single-worker pool that is shut down right after
    submit; an idle runner holds no threads.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._future = None

    @property
    def is_computing(self) -> bool:
        with self._lock:
            return self._future is not None and not self._future.done()

    def submit(
        self,
        adjacency: dict,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        damping_factor: float = DEFAULT_DAMPING_FACTOR,
        tol: float = DEFAULT_TOLERANCE,
    ) -> Future:
        """
        Start a run and return a Future resolving to a PageRankResult.

        The adjacency dict is copied here, so the caller may edit its graph as
        soon as this returns.
        """
        with self._lock:
            if self._future is not None and not self._future.done():
                raise ComputationInProgress("PageRank is already being computed")
            validate_inputs(adjacency, max_iterations, damping_factor, tol)
            snapshot = {node: list(nbs) for node, nbs in adjacency.items()}
            self._cancel.clear()
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pagerank")
            self._future = executor.submit(
                run_pagerank,
                snapshot,
                max_iterations,
                damping_factor,
                tol,
                should_cancel=self._cancel.is_set,
            )
            executor.shutdown(wait=False)
            return self._future

    def cancel(self):
        """Ask the running computation to stop after its current iteration."""
        self._cancel.set()

    def shutdown(self, wait: bool = True):
        """Cancel any running computation, optionally waiting for it to stop."""
        self._cancel.set()
        with self._lock:
            future = self._future
        if wait and future is not None:
            wait_futures([future])
