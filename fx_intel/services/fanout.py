"""Join-all execution of independent upstream fetches."""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List

DEFAULT_MAX_WORKERS = 4


def gather(*calls: Callable[[], Any], max_workers: int = DEFAULT_MAX_WORKERS) -> List[Any]:
    """Run ``calls`` concurrently and return their results in call order.

    Every call runs to completion. If any call raised, the exception of the
    earliest failing call (in argument order) is re-raised and no results are
    returned.
    """

    if not calls:
        return []
    if len(calls) == 1:
        return [calls[0]()]

    workers = max(1, min(max_workers, len(calls)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fx-fanout") as executor:
        futures = [executor.submit(call) for call in calls]
    # Leaving the ``with`` block waits for every future.
    return [future.result() for future in futures]
