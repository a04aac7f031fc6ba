"""
Running statistic kinds and their merge rules.
Pure functions, no I/O. Everything else in the package folds through these.

Two kinds:
  NumericStatistic  {average, max, min}  lossy, no sample count.
  BooleanStatistic  {count, percent}     count-weighted fraction true; drives win-rate comparisons.

Absence (None) is the identity for numeric merges. A zero-count BooleanStatistic is the
identity for boolean merges.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class NumericStatistic:
    average: float
    max: float
    min: float

    def to_dict(self) -> dict[str, Any]:
        return {"average": self.average, "max": self.max, "min": self.min}

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> NumericStatistic | None:
        if not d:
            return None
        return cls(average=d["average"], max=d["max"], min=d["min"])


@dataclass(frozen=True)
class BooleanStatistic:
    count: int = 0
    percent: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"count": self.count, "percent": self.percent}

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> BooleanStatistic:
        if not d:
            return cls()
        return cls(count=d.get("count", 0), percent=d.get("percent", 0.0))

    def confidence_interval(self, z: float = 1.96) -> tuple[float, float]:
        """Normal-approximation interval around percent. Zero count gives (percent, percent)."""
        if self.count <= 0:
            return (self.percent, self.percent)
        se = standard_error(self.percent, self.count)
        return confidence_interval(self.percent, margin_of_error(z, se))


EMPTY_BOOLEAN = BooleanStatistic()


# ---------- Constructors ----------


def new_numeric(value: float | None) -> NumericStatistic | None:
    """
    Wrap a single observation. A falsy observation (None, 0) or NaN yields None:
    zero and "no data" are deliberately indistinguishable here.
    """
    if not value or (isinstance(value, float) and math.isnan(value)):
        return None
    return NumericStatistic(average=value, max=value, min=value)


def new_boolean(value: bool) -> BooleanStatistic:
    return BooleanStatistic(count=1, percent=1.0 if value else 0.0)


# ---------- Merges ----------


def merge_numeric(
    a: NumericStatistic | None, b: NumericStatistic | None
) -> NumericStatistic | None:
    """
    Two-way midpoint merge. average is (a + b) / 2, not a count-weighted mean, so
    repeated merging depends on order and grouping. If one side is None the other
    is returned unchanged.
    """
    if a is None:
        return b
    if b is None:
        return a
    return NumericStatistic(
        average=(a.average + b.average) / 2,
        max=max(a.max, b.max),
        min=min(a.min, b.min),
    )


def merge_boolean(a: BooleanStatistic, b: BooleanStatistic) -> BooleanStatistic:
    """Count-weighted merge. Commutative and associative."""
    count = a.count + b.count
    if count == 0:
        return EMPTY_BOOLEAN
    return BooleanStatistic(
        count=count,
        percent=(a.percent * a.count + b.percent * b.count) / count,
    )


# ---------- Win-rate intervals ----------


def standard_error(percent: float, count: int) -> float:
    return math.sqrt((percent * (1 - percent)) / count)


def margin_of_error(z: float, se: float) -> float:
    return z * se


def confidence_interval(percent: float, moe: float) -> tuple[float, float]:
    return (percent - moe, percent + moe)
