"""Keyed fan-out/fan-in over a dynamic set of awaitables."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Hashable, Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from taskflow_cli.config import FanOutPolicy
from taskflow_cli.errors import Unauthorized

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class FanOutResult(Generic[K, V]):
    """Results joined by key. ``failures`` is only populated in best-effort mode."""

    results: dict[K, V] = field(default_factory=dict)
    failures: dict[K, Exception] = field(default_factory=dict)


async def fan_out(
    keys: Iterable[K],
    fetch: Callable[[K], Awaitable[V]],
    *,
    policy: FanOutPolicy = FanOutPolicy.ALL_OR_NOTHING,
) -> FanOutResult[K, V]:
    """Run ``fetch(key)`` for every key concurrently and join the results by key.

    All requests are started before the single suspension point that waits for
    them, and completion order never affects the result.

    With ``ALL_OR_NOTHING`` the first failure cancels the remaining fetches and
    is raised as-is. With ``BEST_EFFORT`` failed keys are reported in
    ``failures``, except Unauthorized, which always aborts the group.
    """
    keys = list(dict.fromkeys(keys))
    if not keys:
        return FanOutResult()

    if policy is FanOutPolicy.ALL_OR_NOTHING:
        try:
            async with asyncio.TaskGroup() as group:
                tasks = {key: group.create_task(fetch(key)) for key in keys}
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None
        return FanOutResult(results={key: task.result() for key, task in tasks.items()})

    outcomes = await asyncio.gather(*(fetch(key) for key in keys), return_exceptions=True)
    result: FanOutResult[K, V] = FanOutResult()
    for key, outcome in zip(keys, outcomes):
        if isinstance(outcome, Unauthorized):
            raise outcome
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            result.failures[key] = outcome
        else:
            result.results[key] = outcome
    return result
