"""
Bounded worker pool with fail-fast cancellation.

Runs one blocking call per item on a fixed number of threads. Items are pulled
from the input iterable as tasks are submitted, so a directory walk and the
uploads it feeds overlap. On the first failure (from a task or from the input
iterable itself) queued tasks are cancelled, tasks already running are allowed
to finish, and the earliest failure to complete is re-raised unchanged.

Example usage:
    >>> from s3_spa_upload.utils.pool import run_bounded
    >>> run_bounded(lambda key: client.delete_object(Bucket="b", Key=key),
    ...             ["a.js", "b.js"], max_workers=8)
"""

import contextvars
import threading
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Callable, Iterable, List, TypeVar

from s3_spa_upload.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def _failed(future: Future) -> bool:
    return not future.cancelled() and future.exception() is not None


def run_bounded(
    func: Callable[[T], R],
    items: Iterable[T],
    max_workers: int,
) -> List[R]:
    """
    Apply ``func`` to every item with at most ``max_workers`` in flight.

    Args:
        func: Blocking callable applied to each item
        items: Items to process; consumed lazily
        max_workers: Concurrency cap (>= 1)

    Returns:
        Results in the order the items were produced

    Raises:
        ValueError: If max_workers < 1
        Exception: The earliest error raised by ``func`` (in completion
            order), or the error raised by ``items``
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}")

    executor = ThreadPoolExecutor(
        max_workers=max_workers, thread_name_prefix="s3-spa-upload"
    )
    futures: List[Future] = []
    first_failure: List[Future] = []
    failure_lock = threading.Lock()
    failure = threading.Event()

    def _on_done(future: Future) -> None:
        if not _failed(future):
            return
        with failure_lock:
            if not failure.is_set():
                first_failure.append(future)
                failure.set()

    try:
        for item in items:
            if failure.is_set():
                break
            # Each task gets its own copy so the run ID follows it into the thread
            context = contextvars.copy_context()
            future = executor.submit(context.run, func, item)
            future.add_done_callback(_on_done)
            futures.append(future)

        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        if any(_failed(future) for future in done):
            # Done-callbacks run just after waiters are woken
            failure.wait()
        if failure.is_set():
            raise first_failure[0].exception()  # type: ignore[misc]
    except BaseException:
        cancelled = sum(1 for future in futures if future.cancel())
        if cancelled:
            logger.warning(f"Cancelled {cancelled} queued task(s) after failure")
        executor.shutdown(wait=True, cancel_futures=True)
        raise

    executor.shutdown(wait=True)
    return [future.result() for future in futures]
