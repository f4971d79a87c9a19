from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Hashable, Iterable, List, Optional, Sequence, Tuple

from categories import unique_in_order


class DomainLookupError(LookupError):
    """Raised when a scale is asked for a value outside its domain."""

    def __init__(self, value, scale_name: str):
        self.value = value
        self.scale_name = scale_name
        super().__init__(f"{value!r} is not in the domain of the {scale_name} scale.")


@dataclass(frozen=True)
class Tick:
    value: Hashable
    position: float
    label: str


class BandScale:
    """
    Categorical scale: splits ``range_`` into one equal step per domain value.

    Each step keeps a fraction ``padding`` free, split evenly on both sides of
    the band, so:
        step      = span / n
        bandwidth = step * (1 - padding)
        scale(d)  = r0 + i * step + step * padding / 2
    Domain order is first-occurrence order of ``domain``.
    """

    def __init__(self, domain: Iterable[Hashable], range_: Tuple[float, float], padding: float = 0.0):
        if not 0.0 <= padding < 1.0:
            raise ValueError("padding must be in [0, 1).")
        r0, r1 = float(range_[0]), float(range_[1])
        if r1 < r0:
            raise ValueError("band scale range must be increasing.")

        self.domain: Tuple[Hashable, ...] = unique_in_order(domain)
        self.range: Tuple[float, float] = (r0, r1)
        self.padding = float(padding)
        self._index = {v: i for i, v in enumerate(self.domain)}

    def __call__(self, value: Hashable) -> float:
        i = self.index_of(value)
        step = self.step()
        left = self.range[0] + i * step + step * self.padding / 2.0
        # Rounding can push the last band a few ulps past the range end.
        bw = self.bandwidth()
        while left + bw > self.range[1] and left > self.range[0]:
            left = math.nextafter(left, -math.inf)
        return left

    def __len__(self) -> int:
        return len(self.domain)

    def index_of(self, value: Hashable) -> int:
        try:
            return self._index[value]
        except KeyError:
            raise DomainLookupError(value, "band") from None

    def step(self) -> float:
        if not self.domain:
            return 0.0
        return (self.range[1] - self.range[0]) / len(self.domain)

    def bandwidth(self) -> float:
        return self.step() * (1.0 - self.padding)

    def center(self, value: Hashable) -> float:
        return self(value) + self.bandwidth() / 2.0

    def ticks(self) -> List[Tick]:
        """One tick per band, at the band centre."""
        return [Tick(value=v, position=self.center(v), label=str(v)) for v in self.domain]


class RowScale:
    """
    Row index -> pixel y with a fixed pitch per row.

    Domain is ``[0, count]``: row ``i`` occupies ``[scale(i), scale(i + 1))``.
    y grows with the index (rows stack top-down in a y-down viewport).
    """

    def __init__(self, count: int, pitch: float, origin: float = 0.0):
        if count < 0:
            raise ValueError("row count cannot be negative.")
        if pitch <= 0:
            raise ValueError("row pitch must be positive.")
        self.count = int(count)
        self.pitch = float(pitch)
        self.origin = float(origin)

    def __call__(self, index: float) -> float:
        if not 0 <= index <= self.count:
            raise DomainLookupError(index, "row")
        return self.origin + index * self.pitch

    def __len__(self) -> int:
        return self.count

    @property
    def span(self) -> float:
        return self.count * self.pitch

    def invert(self, y: float) -> int:
        """Row index under pixel ``y``."""
        offset = y - self.origin
        if offset < 0 or offset >= self.span:
            raise DomainLookupError(y, "row")
        return int(offset // self.pitch)

    def ticks(self, labels: Optional[Sequence[str]] = None) -> List[Tick]:
        """One tick per row, at the row centre. ``labels`` defaults to the index."""
        if labels is not None and len(labels) != self.count:
            raise ValueError("need exactly one tick label per row.")
        out: List[Tick] = []
        for i in range(self.count):
            label = labels[i] if labels is not None else str(i)
            out.append(Tick(value=i, position=self(i) + self.pitch / 2.0, label=label))
        return out
