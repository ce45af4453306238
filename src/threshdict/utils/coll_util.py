from collections.abc import Iterator, Mapping
from typing import Any

from threshdict.typings import KT, VT


class ReadonlyDict(Mapping[KT, VT]):
    """
    A dictionary-like mapping that rejects modification after creation.

    Nested dicts are wrapped as well, so a whole parsed TOML document can be
    shared without callers mutating it.

    Example::

        settings = ReadonlyDict({"search": {"strategy_threshold": 10}})
        settings["search"]["strategy_threshold"]  # 10
        settings["search"]["comparison"] = "strict"
            # TypeError: 'ReadonlyDict' object does not support item assignment
    """

    __slots__ = "_data"

    def __init__(self, data: Mapping[KT, VT]) -> None:
        self._data: dict[KT, Any] = {
            k: ReadonlyDict(v) if isinstance(v, dict) else v for k, v in data.items()
        }

    def __getitem__(self, key: KT) -> VT:
        return self._data[key]

    def __iter__(self) -> Iterator[KT]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __setitem__(self, key: KT, value: VT) -> None:
        raise TypeError(
            f"{self.__class__.__name__!r} object does not support item assignment"
        )

    def __delitem__(self, key: KT) -> None:
        raise TypeError(
            f"{self.__class__.__name__!r} object does not support item deletion"
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._data!r})"
