"""
Helper Utilities
Lookup results, bounded fan-out and list helpers
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LookupResult(Generic[T]):
    """Outcome of one fallible secondary lookup"""
    name: str
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_default(self, default: T) -> T:
        """Value on success (falling back when it is None), default on failure"""
        if not self.ok or self.value is None:
            return default
        return self.value


async def attempt(name: str, awaitable: Awaitable[T]) -> LookupResult[T]:
    """
    Await a secondary lookup, capturing failure instead of raising

    Args:
        name: Label for logs and the result
        awaitable: The lookup to run

    Returns:
        LookupResult carrying either the value or the failure reason
    """
    try:
        return LookupResult(name=name, value=await awaitable)
    except Exception as e:
        logger.warning("Lookup %s failed: %r", name, e)
        return LookupResult(name=name, error=repr(e))


async def gather_in_batches(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[R]],
    batch_size: int,
) -> List[Any]:
    """
    Run ``fn`` over items with at most ``batch_size`` calls in flight

    Results keep input order; exceptions are returned in place.
    """
    size = max(batch_size, 1)
    results: List[Any] = []
    for i in range(0, len(items), size):
        batch = items[i:i + size]
        results.extend(await asyncio.gather(*(fn(item) for item in batch), return_exceptions=True))
    return results


def deduplicate(items: Iterable[T], key: Callable[[T], Any]) -> List[T]:
    """
    Remove duplicate items keeping the first occurrence

    Args:
        items: Items in order
        key: Function returning the identity of an item

    Returns:
        Deduplicated list maintaining original order
    """
    seen = set()
    result = []

    for item in items:
        item_key = key(item)
        if item_key and item_key not in seen:
            seen.add(item_key)
            result.append(item)

    return result


def skip_to_page(skip: Optional[Any], page_size: int) -> int:
    """Convert Stremio's "skip" extra into a 1-based page number"""
    try:
        skip_value = int(skip or 0)
    except (TypeError, ValueError):
        return 1
    return max(skip_value, 0) // page_size + 1
