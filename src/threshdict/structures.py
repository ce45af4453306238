from __future__ import annotations

import logging
import os
from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Iterator, Mapping
from operator import itemgetter
from typing import Any, Self

from threshdict.config import (
    DEFAULT_COMPARISON,
    DEFAULT_STRATEGY_THRESHOLD,
    validate_strategy_threshold,
)
from threshdict.exceptions import InvalidKeyError
from threshdict.policies import Comparison, DefaultPolicy, as_comparison, as_policy
from threshdict.typings import VT, EntrySource, SupportsRichComparisonT

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", logging.INFO))


class ThresholdDict(Mapping[SupportsRichComparisonT, VT]):
    """
    An immutable mapping answering "which bracket does this key fall into".

    Entries are kept sorted by key. ``query(key)`` returns the value of the
    smallest stored key that is greater than ``key`` (``Comparison.STRICT``)
    or greater than or equal to it (``Comparison.INCLUSIVE``). Queries beyond
    the last key are answered by the default policy: ``Absent`` (None),
    ``Static`` (a fixed value) or ``Computed`` (a function of the query key).

    Collections smaller than ``strategy_threshold`` are scanned linearly,
    larger ones are bisected. Both strategies return the same result for every
    key; the threshold only trades off their cost.

    Keys must be totally ordered. NaN-like keys and keys of incomparable types
    raise ``InvalidKeyError``, both at construction and at query time.

    Example::

        tax = ThresholdDict({10: 100, 20: 150, 50: 300}, default=500)
        tax.query(0)  # 100
        tax.query(10)  # 150, an exact match moves on to the next bracket
        tax.query(60)  # 500
        tax[20]  # 150, plain exact-key lookup
    """

    __slots__ = (
        "_keys",
        "_values",
        "_default_policy",
        "_comparison",
        "_strategy_threshold",
    )

    def __init__(
        self,
        entries: EntrySource[SupportsRichComparisonT, VT] = (),
        default: Any = None,
        *,
        strategy_threshold: int | None = None,
        comparison: Comparison | str | None = None,
    ) -> None:
        """
        Build from (key, value) pairs in any order.

        Pairs are stably sorted by key. When a key occurs more than once, the
        first occurrence in input order is kept.
        """
        keys, values = _dedupe(_sort_entries(entries))
        self._setup(keys, values, default, strategy_threshold, comparison)

    @classmethod
    def from_ordered(
        cls,
        entries: EntrySource[SupportsRichComparisonT, VT],
        default: Any = None,
        *,
        strategy_threshold: int | None = None,
        comparison: Comparison | str | None = None,
    ) -> Self:
        """
        Build from pairs already in strictly ascending key order, skipping the
        sort. Raises InvalidKeyError if the input is out of order.
        """
        keys: list[SupportsRichComparisonT] = []
        values: list[VT] = []
        for key, value in _iter_items(entries):
            _check_orderable(key)
            if keys and not _lt(keys[-1], key):
                raise InvalidKeyError(
                    key, f"Key {key!r} does not follow {keys[-1]!r} in ascending order"
                )
            keys.append(key)
            values.append(value)

        instance = cls.__new__(cls)
        instance._setup(keys, values, default, strategy_threshold, comparison)
        return instance

    def _setup(
        self,
        keys: list[SupportsRichComparisonT],
        values: list[VT],
        default: Any,
        strategy_threshold: int | None,
        comparison: Comparison | str | None,
    ) -> None:
        if strategy_threshold is None:
            strategy_threshold = DEFAULT_STRATEGY_THRESHOLD
        self._keys = keys
        self._values = values
        self._default_policy: DefaultPolicy = as_policy(default)
        self._strategy_threshold = validate_strategy_threshold(strategy_threshold)
        self._comparison = (
            DEFAULT_COMPARISON if comparison is None else as_comparison(comparison)
        )
        logger.debug(
            "Built %s with %d entries (%s search, %s comparison, default %r)",
            self.__class__.__name__,
            len(keys),
            self.search_strategy,
            self._comparison,
            self._default_policy,
        )

    @property
    def default_policy(self) -> DefaultPolicy:
        return self._default_policy

    @property
    def comparison(self) -> Comparison:
        return self._comparison

    @property
    def strategy_threshold(self) -> int:
        return self._strategy_threshold

    @property
    def search_strategy(self) -> str:
        """'linear' or 'binary', whichever ``query`` dispatches to."""
        return "linear" if len(self._keys) < self._strategy_threshold else "binary"

    def replace_default_policy(self, default: Any) -> None:
        """
        Swap the default policy. Accepts a policy or a plain value, coerced the
        same way as the constructor's ``default``. Entries are left untouched.
        """
        self._default_policy = as_policy(default)
        logger.debug("Replaced default policy with %r", self._default_policy)

    def query(self, key: SupportsRichComparisonT) -> VT | None:
        """
        Return the value of the smallest stored key above ``key`` (or at it,
        under the inclusive comparison), else the default policy's value.
        """
        if not self._keys:
            return self._default_policy.resolve(key)

        if len(self._keys) < self._strategy_threshold:
            return self.linear_search(key)
        return self.binary_search(key)

    def linear_search(self, key: SupportsRichComparisonT) -> VT | None:
        return self._value_at(self._linear_index(key), key)

    def binary_search(self, key: SupportsRichComparisonT) -> VT | None:
        return self._value_at(self._bisect_index(key), key)

    def _linear_index(self, key: SupportsRichComparisonT) -> int:
        if not self._keys:
            return 0

        _check_orderable(key)
        strict = self._comparison is Comparison.STRICT
        try:
            # Only __lt__ is used, as bisect does.
            for i, stored in enumerate(self._keys):
                if (key < stored) if strict else not (stored < key):
                    return i
        except TypeError as e:
            raise InvalidKeyError(key, f"Key {key!r} cannot be compared: {e}") from e
        return len(self._keys)

    def _bisect_index(self, key: SupportsRichComparisonT) -> int:
        if not self._keys:
            return 0

        _check_orderable(key)
        try:
            if self._comparison is Comparison.STRICT:
                return bisect_right(self._keys, key)
            return bisect_left(self._keys, key)
        except TypeError as e:
            raise InvalidKeyError(key, f"Key {key!r} cannot be compared: {e}") from e

    def _value_at(self, index: int, key: SupportsRichComparisonT) -> VT | None:
        if index == len(self._keys):
            return self._default_policy.resolve(key)
        return self._values[index]

    def __getitem__(self, key: SupportsRichComparisonT) -> VT:
        try:
            index = bisect_left(self._keys, key)
        except TypeError:
            raise KeyError(key) from None
        if index < len(self._keys) and self._keys[index] == key:
            return self._values[index]
        raise KeyError(key)

    def __iter__(self) -> Iterator[SupportsRichComparisonT]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __setitem__(self, key: SupportsRichComparisonT, value: VT) -> None:
        raise TypeError(
            f"{self.__class__.__name__!r} object does not support item assignment"
        )

    def __delitem__(self, key: SupportsRichComparisonT) -> None:
        raise TypeError(
            f"{self.__class__.__name__!r} object does not support item deletion"
        )

    def entries(self) -> list[tuple[SupportsRichComparisonT, VT]]:
        """Return the (key, value) pairs in ascending key order."""
        return list(zip(self._keys, self._values))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ThresholdDict):
            return NotImplemented
        return (
            self._keys == other._keys
            and self._values == other._values
            and self._default_policy == other._default_policy
            and self._comparison is other._comparison
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.entries()!r}, "
            f"default={self._default_policy!r}, "
            f"comparison={self._comparison.value!r}, "
            f"strategy_threshold={self._strategy_threshold})"
        )


def _iter_items(entries: EntrySource[Any, Any]) -> Iterable[tuple[Any, Any]]:
    if isinstance(entries, Mapping):
        return entries.items()
    return entries


def _check_orderable(key: Any) -> None:
    # NaN-like: compares unequal to itself and unordered to everything.
    try:
        unordered = key != key
    except ArithmeticError as e:
        # signaling NaNs, e.g. Decimal("sNaN"), trap on any comparison
        raise InvalidKeyError(key, f"Key {key!r} cannot be compared: {e!r}") from e
    if unordered:
        raise InvalidKeyError(key, f"Key {key!r} is not equal to itself")


def _lt(lhs: Any, rhs: Any) -> bool:
    try:
        return lhs < rhs
    except TypeError as e:
        raise InvalidKeyError(rhs, f"Keys {lhs!r} and {rhs!r} cannot be compared") from e


def _sort_entries(entries: EntrySource[Any, Any]) -> list[tuple[Any, Any]]:
    pairs = [(key, value) for key, value in _iter_items(entries)]
    for key, _ in pairs:
        _check_orderable(key)
    try:
        # list.sort is stable, so equal keys keep their input order.
        pairs.sort(key=itemgetter(0))
    except TypeError as e:
        raise InvalidKeyError(None, f"Keys cannot be ordered: {e}") from e
    return pairs


def _dedupe(pairs: list[tuple[Any, Any]]) -> tuple[list[Any], list[Any]]:
    keys: list[Any] = []
    values: list[Any] = []
    for key, value in pairs:
        if keys:
            previous = keys[-1]
            if previous == key:
                logger.debug("Dropped duplicate key %r", key)
                continue
            if not _lt(previous, key):
                raise InvalidKeyError(
                    key, f"Key {key!r} cannot be ordered against {previous!r}"
                )
        keys.append(key)
        values.append(value)
    return keys, values
