"""
Polling of asynchronous assistant runs until they reach a terminal status.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Iterator, Optional

from ..errors import RunCancelledError, RunFetchError, RunTimeoutError
from ..utils import handle_processing_error
import logging

logger = logging.getLogger(__name__)

PENDING_STATUSES = frozenset({"queued", "in_progress"})

DEFAULT_INITIAL_INTERVAL_MS = 10000
DEFAULT_STEP_MS = 2000
DEFAULT_MIN_INTERVAL_MS = 2000

RunFetcher = Callable[[str, str], Awaitable[Any]]


def is_pending(status: Optional[str]) -> bool:
    return status in PENDING_STATUSES


def backoff_intervals(
    initial_ms: int = DEFAULT_INITIAL_INTERVAL_MS,
    step_ms: int = DEFAULT_STEP_MS,
    floor_ms: int = DEFAULT_MIN_INTERVAL_MS,
) -> Iterator[int]:
    """Yield wait intervals that shrink by ``step_ms`` down to ``floor_ms`` and then repeat."""
    interval = initial_ms
    while True:
        yield interval
        if interval > floor_ms:
            interval = max(interval - step_ms, floor_ms)


async def _wait(seconds: float, cancel_event: Optional[asyncio.Event], sleep) -> None:
    if cancel_event is None:
        await sleep(seconds)
        return
    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return
    raise RunCancelledError("Run polling was cancelled")


async def await_run_completion(
    thread_id: str,
    run: Any,
    fetch_run: RunFetcher,
    *,
    initial_interval_ms: int = DEFAULT_INITIAL_INTERVAL_MS,
    step_ms: int = DEFAULT_STEP_MS,
    min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS,
    timeout: Optional[float] = None,
    cancel_event: Optional[asyncio.Event] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> Any:
    """
    Re-fetch ``run`` until its status is neither queued nor in progress.

    Args:
        thread_id: Thread the run belongs to
        run: Run as returned when it was created; needs ``id`` and ``status``
        fetch_run: Coroutine function ``(thread_id, run_id)`` returning the current run
        initial_interval_ms: First wait before re-fetching
        step_ms: Amount the wait shrinks by after every poll
        min_interval_ms: Smallest wait
        timeout: Seconds after which polling gives up, ``None`` for no deadline
        cancel_event: Setting this event interrupts the current wait
        sleep: Coroutine used to wait when no cancel event is given
        clock: Monotonic clock used for the deadline

    Returns:
        The run in its terminal status

    Raises:
        RunFetchError: If re-fetching the run fails
        RunTimeoutError: If the deadline passes first
        RunCancelledError: If ``cancel_event`` is set first
    """
    run_id = run.id
    deadline = clock() + timeout if timeout is not None else None
    intervals = backoff_intervals(initial_interval_ms, step_ms, min_interval_ms)
    polls = 0

    while is_pending(run.status):
        if cancel_event is not None and cancel_event.is_set():
            raise RunCancelledError("Run polling was cancelled")

        wait_seconds = next(intervals) / 1000
        if deadline is not None:
            remaining = deadline - clock()
            if remaining <= 0:
                raise RunTimeoutError(
                    f"Run {run_id} still {run.status} after {timeout} seconds"
                )
            wait_seconds = min(wait_seconds, remaining)

        logger.debug(f"Run {run_id} is {run.status}; next check in {wait_seconds:.1f}s")
        await _wait(wait_seconds, cancel_event, sleep)

        try:
            run = await fetch_run(thread_id, run_id)
        except RunFetchError:
            raise
        except Exception as e:
            handle_processing_error("run_fetch", e, {"thread_id": thread_id, "run_id": run_id})
            raise RunFetchError(f"Failed to fetch status of run {run_id}: {e}") from e
        polls += 1

    logger.info(f"Run {run_id} finished with status {run.status} after {polls} polls")
    return run
