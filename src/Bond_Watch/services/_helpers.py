"""Settle-then-filter fan-out shared by the bond fetcher and price lookups.

``asyncio.gather(..., return_exceptions=True)`` already isolates failures;
these helpers tag each result so callers can filter and log without
``isinstance`` checks against ``BaseException`` scattered around.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fulfilled(Generic[T]):
    """A task that completed with a value."""

    value: T


@dataclass(frozen=True)
class Rejected:
    """A task that raised; ``error`` is the exception it raised.

    A cancelled child keeps its ``CancelledError`` here.
    """

    error: BaseException


Outcome: TypeAlias = "Fulfilled[T] | Rejected"


async def gather_settled(awaitables: Iterable[Awaitable[T]]) -> list[Outcome[T]]:
    """Await every awaitable concurrently and tag each result.

    A failure in one awaitable never cancels the others. Outcomes are listed
    in the order the awaitables were given.
    """
    results: list[T | BaseException] = await asyncio.gather(
        *awaitables, return_exceptions=True
    )

    outcomes: list[Outcome[T]] = []
    for result in results:
        if isinstance(result, BaseException):
            outcomes.append(Rejected(error=result))
        else:
            outcomes.append(Fulfilled(value=result))
    return outcomes


def fulfilled_values(outcomes: Sequence[Outcome[T]]) -> list[T]:
    """Keep the values of fulfilled outcomes, dropping rejections."""
    return [outcome.value for outcome in outcomes if isinstance(outcome, Fulfilled)]


def rejected_errors(outcomes: Sequence[Outcome[T]]) -> list[BaseException]:
    """Collect the errors of rejected outcomes."""
    return [outcome.error for outcome in outcomes if isinstance(outcome, Rejected)]
