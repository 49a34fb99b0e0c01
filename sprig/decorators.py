"""Class decorators that declare components and the scan root.

Markers are stored in the decorated class's own ``__dict__`` so a subclass
of a component is not itself a component unless it is decorated too.
Decorators may be stacked in any order.

Example:
    @component_scan
    class AppConfig:
        pass

    @component("svc")
    @scope("prototype")
    class Service:
        pass
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Type, TypeVar, Union

from loguru import logger

from .scope import ScopeType

T = TypeVar("T")

COMPONENT_ATTR = "__sprig_component__"
COMPONENT_SCAN_ATTR = "__sprig_component_scan__"
SCOPE_ATTR = "__sprig_scope__"
LAZY_ATTR = "__sprig_lazy__"


@dataclass(frozen=True)
class ComponentMarker:
    """Marks a class as eligible for discovery."""
    name: str = ""


@dataclass(frozen=True)
class ComponentScanMarker:
    """Marks a class as the scan root."""
    base_package: str = ""


@dataclass(frozen=True)
class ScopeMarker:
    """Raw scope value; parsed when the bean definition is built."""
    value: Union[str, ScopeType]


def _require_class(obj: Any, decorator_name: str) -> None:
    if not isinstance(obj, type):
        raise TypeError(f"@{decorator_name} can only decorate classes, got {obj!r}")


def _own_marker(cls: Type, attr: str) -> Any:
    return vars(cls).get(attr)


def component(
    cls_or_name: Union[Type[T], str, None] = None,
    *,
    name: str = "",
) -> Union[Type[T], Callable[[Type[T]], Type[T]]]:
    """Mark a class as a component.

    Supports ``@component``, ``@component()``, ``@component("name")`` and
    ``@component(name="name")``. A blank name means the bean name is derived
    from the class name.
    """
    if isinstance(cls_or_name, str):
        name, cls_or_name = cls_or_name, None

    def decorator(cls: Type[T]) -> Type[T]:
        _require_class(cls, "component")
        setattr(cls, COMPONENT_ATTR, ComponentMarker(name=name))
        logger.debug(f"Marked component: {cls.__qualname__} (name={name!r})")
        return cls

    if cls_or_name is None:
        return decorator
    return decorator(cls_or_name)


def component_scan(
    cls_or_package: Union[Type[T], str, None] = None,
    *,
    base_package: str = "",
) -> Union[Type[T], Callable[[Type[T]], Type[T]]]:
    """Mark a class as the root configuration to scan from.

    Without a base package the scan starts at the package that contains the
    decorated class.
    """
    if isinstance(cls_or_package, str):
        base_package, cls_or_package = cls_or_package, None

    def decorator(cls: Type[T]) -> Type[T]:
        _require_class(cls, "component_scan")
        setattr(cls, COMPONENT_SCAN_ATTR, ComponentScanMarker(base_package=base_package))
        return cls

    if cls_or_package is None:
        return decorator
    return decorator(cls_or_package)


def scope(value: Union[str, ScopeType]) -> Callable[[Type[T]], Type[T]]:
    """Declare the scope of a component: ``"singleton"`` or ``"prototype"``.

    The value is validated when the container builds the bean definition,
    not here.
    """
    def decorator(cls: Type[T]) -> Type[T]:
        _require_class(cls, "scope")
        setattr(cls, SCOPE_ATTR, ScopeMarker(value=value))
        return cls

    return decorator


def lazy(cls: Optional[Type[T]] = None) -> Union[Type[T], Callable[[Type[T]], Type[T]]]:
    """Defer singleton construction until the bean is first looked up."""
    def decorator(cls: Type[T]) -> Type[T]:
        _require_class(cls, "lazy")
        setattr(cls, LAZY_ATTR, True)
        return cls

    if cls is None:
        return decorator
    return decorator(cls)


def get_component_marker(cls: Type) -> Optional[ComponentMarker]:
    return _own_marker(cls, COMPONENT_ATTR)


def get_component_scan_marker(cls: Type) -> Optional[ComponentScanMarker]:
    return _own_marker(cls, COMPONENT_SCAN_ATTR)


def get_scope_marker(cls: Type) -> Optional[ScopeMarker]:
    return _own_marker(cls, SCOPE_ATTR)


def is_lazy(cls: Type) -> bool:
    return bool(_own_marker(cls, LAZY_ATTR))
