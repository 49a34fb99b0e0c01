"""Bean definitions: per-type metadata plus the cached singleton."""

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Type

from .scope import ScopeType


@dataclass(eq=False)
class BeanDefinition:
    """Metadata for one discovered component class.

    Attributes:
        bean_class: The component class
        name: Resolved bean name
        scope: Resolved lifecycle scope
        lazy: Whether singleton construction waits for the first lookup
        instance: Cached singleton, set at most once and never cleared
    """

    bean_class: Type
    name: str
    scope: ScopeType = ScopeType.SINGLETON
    lazy: bool = False
    instance: Optional[Any] = None
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.scope is ScopeType.PROTOTYPE and self.instance is not None:
            raise ValueError("Prototype definitions never cache an instance")

    @property
    def is_singleton(self) -> bool:
        return self.scope is ScopeType.SINGLETON

    @property
    def is_prototype(self) -> bool:
        return self.scope is ScopeType.PROTOTYPE

    @property
    def is_materialized(self) -> bool:
        return self.instance is not None

    def get_or_create(self, factory: Callable[[Type], Any]) -> Any:
        """Return the cached singleton, building it with ``factory`` on first use.

        The check is repeated under this definition's lock so concurrent first
        lookups construct exactly one instance.
        """
        if not self.is_singleton:
            raise ValueError(f"Bean '{self.name}' is not singleton-scoped")

        instance = self.instance
        if instance is not None:
            return instance

        with self._lock:
            if self.instance is None:
                self.instance = factory(self.bean_class)
            return self.instance
