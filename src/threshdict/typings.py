from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol, TypeVar

KT = TypeVar("KT")
VT = TypeVar("VT")
_T_contra = TypeVar("_T_contra", contravariant=True)


class SupportsDunderLT(Protocol[_T_contra]):
    def __lt__(self, other: _T_contra, /) -> bool: ...


class SupportsDunderGT(Protocol[_T_contra]):
    def __gt__(self, other: _T_contra, /) -> bool: ...


type SupportsRichComparison = SupportsDunderLT[Any] | SupportsDunderGT[Any]
SupportsRichComparisonT = TypeVar(
    "SupportsRichComparisonT", bound=SupportsRichComparison
)

# A batch of entries: a mapping or any iterable of (key, value) pairs.
type EntrySource[K, V] = Mapping[K, V] | Iterable[tuple[K, V]]

# Value producer for keys beyond the last boundary.
type DefaultFunc[K, V] = Callable[[K], V | None]
