from __future__ import annotations

import math
from typing import Dict, Iterable, Sequence, Tuple

import matplotlib.colors as mcolors

# D65 reference white
_XN, _YN, _ZN = 0.95047, 1.0, 1.08883
_DELTA = 6.0 / 29.0

DEFAULT_COLOR_RANGE = ("#1F77B4", "#FF7F0E")


class CategoryNotFoundError(LookupError):
    """Raised when a status is not part of the category set the encoder was built from."""

    def __init__(self, status: str, categories: Sequence[str]):
        self.status = status
        self.categories = tuple(categories)
        known = ", ".join(self.categories) or "<none>"
        super().__init__(f"status '{status}' is not in the category set ({known}).")


# ---------------------------------------------------------------------------
# sRGB <-> CIE LCh(ab)
# ---------------------------------------------------------------------------

def _to_linear(c: float) -> float:
    return c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4


def _from_linear(c: float) -> float:
    c = 12.92 * c if c <= 0.0031308 else 1.055 * (c ** (1.0 / 2.4)) - 0.055
    return min(max(c, 0.0), 1.0)


def _f(t: float) -> float:
    return t ** (1.0 / 3.0) if t > _DELTA ** 3 else t / (3 * _DELTA ** 2) + 4.0 / 29.0


def _f_inv(t: float) -> float:
    return t ** 3 if t > _DELTA else 3 * _DELTA ** 2 * (t - 4.0 / 29.0)


def rgb_to_lch(rgb: Tuple[float, float, float]) -> Tuple[float, float, float]:
    r, g, b = (_to_linear(c) for c in rgb)
    x = 0.4124564 * r + 0.3575761 * g + 0.1804375 * b
    y = 0.2126729 * r + 0.7151522 * g + 0.0721750 * b
    z = 0.0193339 * r + 0.1191920 * g + 0.9503041 * b

    fx, fy, fz = _f(x / _XN), _f(y / _YN), _f(z / _ZN)
    lightness = 116.0 * fy - 16.0
    a = 500.0 * (fx - fy)
    bb = 200.0 * (fy - fz)
    chroma = math.hypot(a, bb)
    hue = math.degrees(math.atan2(bb, a)) % 360.0
    return lightness, chroma, hue


def lch_to_rgb(lch: Tuple[float, float, float]) -> Tuple[float, float, float]:
    lightness, chroma, hue = lch
    a = chroma * math.cos(math.radians(hue))
    bb = chroma * math.sin(math.radians(hue))

    fy = (lightness + 16.0) / 116.0
    fx = fy + a / 500.0
    fz = fy - bb / 200.0
    x, y, z = _XN * _f_inv(fx), _YN * _f_inv(fy), _ZN * _f_inv(fz)

    r = 3.2404542 * x - 1.5371385 * y - 0.4985314 * z
    g = -0.9692660 * x + 1.8760108 * y + 0.0415560 * z
    b = 0.0556434 * x - 0.2040259 * y + 1.0572252 * z
    return _from_linear(r), _from_linear(g), _from_linear(b)


def interpolate_hcl(low: str, high: str, t: float) -> str:
    """
    Blend two colours in CIE LCh (hue/chroma/lightness), taking the short way
    around the hue circle. Returns an upper-case ``#RRGGBB`` string.

    ``t <= 0`` and ``t >= 1`` return the endpoints themselves, so endpoint
    colours never pick up rounding drift from the colour-space round trip.
    """
    if t <= 0.0:
        return mcolors.to_hex(low).upper()
    if t >= 1.0:
        return mcolors.to_hex(high).upper()

    l0, c0, h0 = rgb_to_lch(mcolors.to_rgb(low))
    l1, c1, h1 = rgb_to_lch(mcolors.to_rgb(high))

    # Greys have no meaningful hue; borrow the other endpoint's.
    if c0 < 1e-6:
        h0 = h1
    if c1 < 1e-6:
        h1 = h0

    dh = h1 - h0
    if dh > 180.0:
        dh -= 360.0
    elif dh < -180.0:
        dh += 360.0

    lch = (l0 + (l1 - l0) * t, c0 + (c1 - c0) * t, (h0 + dh * t) % 360.0)
    return mcolors.to_hex(lch_to_rgb(lch)).upper()


def category_color(index: int, count: int, endpoints: Sequence[str] = DEFAULT_COLOR_RANGE) -> str:
    """Colour of the ``index``-th of ``count`` categories on the endpoint gradient."""
    if count <= 0:
        raise ValueError("category_color needs at least one category.")
    if not 0 <= index < count:
        raise ValueError(f"category index {index} is outside [0, {count}).")
    t = 0.0 if count == 1 else index / (count - 1)
    low, high = endpoints
    return interpolate_hcl(low, high, t)


class ColorEncoder:
    """Maps each status of an ordered category set to a fixed gradient colour."""

    def __init__(self, categories: Iterable[str], endpoints: Sequence[str] = DEFAULT_COLOR_RANGE):
        self.categories: Tuple[str, ...] = tuple(categories)
        self.endpoints: Tuple[str, str] = (endpoints[0], endpoints[1])
        self._index = {c: i for i, c in enumerate(self.categories)}
        n = len(self.categories)
        self._colors = {c: category_color(i, n, self.endpoints) for c, i in self._index.items()}

    def __call__(self, status: str) -> str:
        try:
            return self._colors[status]
        except KeyError:
            raise CategoryNotFoundError(status, self.categories) from None

    def __len__(self) -> int:
        return len(self.categories)

    def index_of(self, status: str) -> int:
        try:
            return self._index[status]
        except KeyError:
            raise CategoryNotFoundError(status, self.categories) from None

    def mapping(self) -> Dict[str, str]:
        return dict(self._colors)
