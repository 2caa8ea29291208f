"""Ordered boundary tables for banded clinical lookups.

Published scoring tables (age bands, cholesterol bands, point-to-risk
maps) are expressed as a sorted list of cut-offs plus one value per
band. Values outside the tabulated range fall into the first or last
band, so lookups never fail.
"""

from bisect import bisect_left, bisect_right
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


def find_band(value: float, cutoffs: Sequence[float], upper_inclusive: bool = False) -> int:
    """Return the index of the band containing ``value``.

    With ``upper_inclusive=False`` each cut-off is the inclusive lower
    bound of the next band (``[160, 200]`` -> ``<160``, ``160-199``,
    ``>=200``). With ``upper_inclusive=True`` each cut-off is the
    inclusive upper bound of its band (``[108, 118]`` -> ``<=108``,
    ``109-118``, ``>118``).
    """
    if upper_inclusive:
        return bisect_left(cutoffs, value)
    return bisect_right(cutoffs, value)


@dataclass(frozen=True)
class BandTable(Generic[T]):
    """Cut-offs with one value per band (``len(values) == len(cutoffs) + 1``)."""

    cutoffs: tuple[float, ...]
    values: tuple[T, ...]
    upper_inclusive: bool = False

    def __post_init__(self) -> None:
        if len(self.values) != len(self.cutoffs) + 1:
            raise ValueError(
                f"BandTable needs {len(self.cutoffs) + 1} values, got {len(self.values)}"
            )
        if list(self.cutoffs) != sorted(self.cutoffs):
            raise ValueError("BandTable cut-offs must be sorted ascending")

    def band(self, value: float) -> int:
        """Index of the band containing value."""
        return find_band(value, self.cutoffs, self.upper_inclusive)

    def lookup(self, value: float) -> T:
        """Value tabulated for the band containing value."""
        return self.values[self.band(value)]
