"""
Default-value and comparison policies for ThresholdDict.

A default policy decides what a query returns when no stored boundary
qualifies. Exactly one of ``Absent``, ``Static`` or ``Computed`` is active on
a dictionary at a time; the query path calls ``resolve`` once, at the end of
the search, whichever one it is.
"""

from dataclasses import dataclass
from enum import StrEnum, unique
from typing import Any, Generic

from threshdict.typings import KT, VT, DefaultFunc


@unique
class Comparison(StrEnum):
    # smallest stored key > query key
    STRICT = "strict"
    # smallest stored key >= query key
    INCLUSIVE = "inclusive"


@dataclass(frozen=True, slots=True)
class Absent:
    """Out-of-range queries return None."""

    def resolve(self, key: Any) -> None:
        return None


@dataclass(frozen=True, slots=True)
class Static(Generic[VT]):
    """Out-of-range queries return a fixed value."""

    value: VT

    def resolve(self, key: Any) -> VT:
        return self.value


@dataclass(frozen=True, slots=True)
class Computed(Generic[KT, VT]):
    """
    Out-of-range queries return ``func(key)``.

    The function must not depend on the dictionary it is attached to; its
    results are not cached, so it runs on every out-of-range query.

    Example::

        rates = ThresholdDict([(10, 1.0), (20, 2.0)], Computed(lambda k: k / 10))
        rates.query(35)  # 3.5
    """

    func: DefaultFunc[KT, VT]

    def resolve(self, key: KT) -> VT | None:
        return self.func(key)


type DefaultPolicy = Absent | Static[Any] | Computed[Any, Any]


def as_policy(default: Any) -> DefaultPolicy:
    """
    Coerce a constructor/setter argument into a default policy.

    Policy instances pass through unchanged, ``None`` becomes ``Absent()`` and
    any other value becomes ``Static(value)``. Callables are treated as plain
    values too; wrap them in ``Computed`` to have them invoked.
    """
    if isinstance(default, (Absent, Static, Computed)):
        return default
    if default is None:
        return Absent()
    return Static(default)


def as_comparison(comparison: Comparison | str) -> Comparison:
    try:
        return Comparison(comparison)
    except ValueError as e:
        choices = ", ".join(repr(c.value) for c in Comparison)
        raise ValueError(
            f"Unknown comparison policy {comparison!r}, expected one of {choices}"
        ) from e
