from __future__ import annotations

from typing import Hashable, Iterable, Tuple, TypeVar

from gantt_models import Task

T = TypeVar("T", bound=Hashable)


def unique_in_order(values: Iterable[T]) -> Tuple[T, ...]:
    """Distinct values, in order of first occurrence."""
    seen = set()
    out = []
    for v in values:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return tuple(out)


def extract_categories(tasks: Iterable[Task]) -> Tuple[str, ...]:
    """The ordered category set (distinct statuses) of a dataset. Empty input -> ()."""
    return unique_in_order(t.status for t in tasks)
