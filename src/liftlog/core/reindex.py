"""Shared reindexing for exercise-index keyed state."""

from typing import TypeVar

V = TypeVar("V")


def shift_indices_after_removal(entries: dict[int, V], removed: int) -> dict[int, V]:
    """
    Reindex an exercise-index keyed map after removing position ``removed``.

    The entry at ``removed`` is dropped, entries above it move down by one,
    entries below it are untouched. Every index-keyed structure of a session
    goes through this one routine so they cannot drift apart.
    """
    shifted: dict[int, V] = {}
    for index, value in entries.items():
        if index < removed:
            shifted[index] = value
        elif index > removed:
            shifted[index - 1] = value
    return shifted
