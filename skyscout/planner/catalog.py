from typing import Iterable, Iterator, Sequence

from skyscout.errors import CatalogError, UnknownTargetError

from .providers import CatalogProvider, get_catalog_providers
from .types import FocalLengthBand, Target, TargetType


class TargetCatalog:
    """Read-only, ordered collection of targets.

    Catalog order is significant: it is the tie-break when recommendations
    have equal scores.
    """

    def __init__(self, targets: Iterable[Target]):
        self._targets: tuple[Target, ...] = tuple(targets)
        self._by_id: dict[str, Target] = {}
        for target in self._targets:
            if target.id in self._by_id:
                raise CatalogError(f"Duplicate target id: {target.id}")
            self._by_id[target.id] = target

    def __iter__(self) -> Iterator[Target]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, target_id: object) -> bool:
        return target_id in self._by_id

    def __repr__(self) -> str:
        return f"TargetCatalog({len(self._targets)} targets)"

    @property
    def targets(self) -> tuple[Target, ...]:
        return self._targets

    def get(self, target_id: str) -> Target:
        try:
            return self._by_id[target_id]
        except KeyError:
            raise UnknownTargetError(f"Unknown target: {target_id}") from None

    def filter(
        self,
        types: Iterable[TargetType] | None = None,
        focal_length: FocalLengthBand | None = None,
    ) -> list[Target]:
        type_set = frozenset(types) if types else None
        return [
            t
            for t in self._targets
            if (type_set is None or t.type in type_set)
            and (focal_length is None or t.focal_length is focal_length)
        ]

    def in_season(self, month: int) -> list[Target]:
        return [t for t in self._targets if month in t.best_months]

    def search(self, text: str) -> list[Target]:
        needle = text.strip().lower()
        if not needle:
            return list(self._targets)
        return [t for t in self._targets if _matches(t, needle)]


def _matches(target: Target, needle: str) -> bool:
    names = (target.id, target.name) + target.alt_names
    return any(needle in n.lower() for n in names)


def load_catalog(providers: Sequence[CatalogProvider] | None = None) -> TargetCatalog:
    providers = get_catalog_providers() if providers is None else providers
    targets: list[Target] = []
    for provider in providers:
        targets.extend(provider.list_targets())
    return TargetCatalog(targets)
