"""Draw worker pool.

Bootstrap draws are partitioned into chunks. Each chunk owns a child
SeedSequence, so a chunk's draws depend only on the call's seed and the
chunk's position, never on which thread runs it or when. The pool runs
chunks sequentially in the caller (one worker) or on a thread pool, and
reassembles results in chunk order.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, TypeVar

import numpy as np

from ..determinism import make_generator, spawn_seed_sequences
from ..types import BootstrapCancelled, InvalidParameters

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DrawChunk:
    """A contiguous block of draws with its own seed."""

    chunk_id: int
    start: int
    size: int
    seed: np.random.SeedSequence

    @property
    def stop(self) -> int:
        return self.start + self.size

    def generator(self) -> np.random.Generator:
        return make_generator(self.seed)


def plan_draw_chunks(
    n_draws: int,
    chunk_size: int,
    seed: int | np.random.SeedSequence | None = None,
) -> List[DrawChunk]:
    """Split ``n_draws`` into chunks of at most ``chunk_size`` draws.

    Args:
        n_draws: Total number of draws (>= 1)
        chunk_size: Draws per chunk (>= 1)
        seed: Root seed for the run

    Returns:
        Chunks in draw order, each with a child SeedSequence
    """
    if n_draws < 1:
        raise InvalidParameters(f"n_draws must be >= 1, got {n_draws}")
    if chunk_size < 1:
        raise InvalidParameters(f"chunk_size must be >= 1, got {chunk_size}")

    n_chunks = -(-n_draws // chunk_size)
    seeds = spawn_seed_sequences(seed, n_chunks)

    chunks: List[DrawChunk] = []
    for chunk_id, child in enumerate(seeds):
        start = chunk_id * chunk_size
        size = min(chunk_size, n_draws - start)
        chunks.append(DrawChunk(chunk_id=chunk_id, start=start, size=size, seed=child))
    return chunks


ChunkFn = Callable[[DrawChunk, threading.Event], T]


class DrawPool:
    """Runs draw chunks sequentially or on a thread pool.

    The chunk function receives a stop event and must check it between
    draws. The event is set when the caller cancels or when another chunk
    fails, so a failing run stops promptly.
    """

    def __init__(self, max_workers: int = 1):
        if max_workers < 1:
            raise InvalidParameters(f"max_workers must be >= 1, got {max_workers}")
        self.max_workers = int(max_workers)

    def run(
        self,
        chunks: List[DrawChunk],
        fn: ChunkFn,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[T]:
        """Evaluate ``fn`` on every chunk and return results in chunk order.

        Raises:
            BootstrapCancelled: If ``cancel_event`` was set before completion
            Exception: The first error raised by a chunk, unchanged
        """
        stop = cancel_event if cancel_event is not None else threading.Event()

        if self.max_workers == 1 or len(chunks) == 1:
            results: List[T] = []
            for chunk in chunks:
                if stop.is_set():
                    raise BootstrapCancelled(f"cancelled before chunk {chunk.chunk_id}")
                results.append(fn(chunk, stop))
            return results

        return self._run_threaded(chunks, fn, cancel_event)

    def _run_threaded(
        self,
        chunks: List[DrawChunk],
        fn: ChunkFn,
        cancel_event: Optional[threading.Event],
    ) -> List[T]:
        # Internal stop event so a failing chunk halts its siblings without
        # touching the caller's event.
        stop = threading.Event()
        watcher_done = threading.Event()

        def _watch_cancel() -> None:
            while not watcher_done.is_set():
                if cancel_event.wait(timeout=0.05):
                    stop.set()
                    return

        watcher = None
        if cancel_event is not None:
            if cancel_event.is_set():
                raise BootstrapCancelled("cancelled before any chunk ran")
            watcher = threading.Thread(target=_watch_cancel, name="draw-pool-cancel", daemon=True)
            watcher.start()

        results: Dict[int, T] = {}
        first_error: Optional[BaseException] = None
        workers = min(self.max_workers, len(chunks))

        try:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="draw-worker") as executor:
                futures: Dict[Future, DrawChunk] = {
                    executor.submit(fn, chunk, stop): chunk for chunk in chunks
                }
                for future in as_completed(futures):
                    chunk = futures[future]
                    if future.cancelled():
                        continue
                    error = future.exception()
                    if error is None:
                        results[chunk.chunk_id] = future.result()
                        continue
                    if isinstance(error, BootstrapCancelled) and stop.is_set():
                        continue
                    if first_error is None:
                        first_error = error
                        logger.debug(f"Chunk {chunk.chunk_id} failed, stopping remaining chunks: {error}")
                        stop.set()
                        for pending in futures:
                            pending.cancel()
        finally:
            watcher_done.set()
            if watcher is not None:
                watcher.join()

        if first_error is not None:
            raise first_error
        if len(results) != len(chunks):
            raise BootstrapCancelled(
                f"cancelled after {len(results)} of {len(chunks)} chunks completed"
            )
        return [results[chunk.chunk_id] for chunk in chunks]


__all__ = [
    "DrawChunk",
    "plan_draw_chunks",
    "DrawPool",
]
