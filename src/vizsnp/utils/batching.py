"""Split an ordered stream of items into size-bounded groups."""

from itertools import islice
from typing import Iterable, Iterator, TypeVar

from vizsnp.config import DEFAULT_BATCH_SIZE
from vizsnp.errors import ConfigError

T = TypeVar("T")


def batch(items: Iterable[T], size: int | None = DEFAULT_BATCH_SIZE) -> Iterator[list[T]]:
    """Return a lazy iterator of consecutive lists of at most ``size`` items.

    Order is preserved within and across batches and the last batch may be
    shorter. ``None`` falls back to the default size. The size is checked
    immediately, not on first iteration.

    Raises:
        ConfigError: If size is not a positive integer
    """
    if size is None:
        size = DEFAULT_BATCH_SIZE
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        raise ConfigError(f"Batch size must be a positive integer, got {size!r}")
    return _chunks(iter(items), size)


def _chunks(iterator: Iterator[T], size: int) -> Iterator[list[T]]:
    while chunk := list(islice(iterator, size)):
        yield chunk
