"""Registry for dynamically registering and retrieving stores and annotators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from docsplit.annotation.base import BaseAnnotator
    from docsplit.storage.base import ArtifactStore


T = TypeVar("T")


class _Registry(Generic[T]):
    """Generic registry for named components."""

    def __init__(self) -> None:
        self._registry: dict[str, type[T]] = {}

    def register(self, name: str, cls: type[T]) -> None:
        self._registry[name] = cls

    def get(self, name: str) -> type[T]:
        if name not in self._registry:
            available = ", ".join(sorted(self._registry.keys()))
            raise KeyError(f"Unknown component '{name}'. Available: {available}")
        return self._registry[name]

    def list(self) -> list[str]:
        return list(self._registry.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._registry


StoreRegistry: _Registry[ArtifactStore] = _Registry()
AnnotatorRegistry: _Registry[BaseAnnotator] = _Registry()
