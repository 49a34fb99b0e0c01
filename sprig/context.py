"""Application context: scanning, bean definitions and bean lookup.

The context is built from a root configuration class carrying
``@component_scan``. Construction scans the base package, builds one
:class:`BeanDefinition` per component class and eagerly creates every
non-lazy singleton. Afterwards the registry never changes shape; only
singleton caches are filled in, each under its own definition's lock.
"""

import sys
from typing import Any, Dict, Iterator, List, Optional, Set, Type, TypeVar, Union, overload

from loguru import logger

from .config import ContainerSettings
from .decorators import get_component_marker, get_component_scan_marker, get_scope_marker, is_lazy
from .definition import BeanDefinition
from .errors import (
    BeanCreationError,
    BeanDefinitionError,
    BeanNotFoundError,
    ContainerStateError,
    ContextInitializationError,
    NoSuchBeanOfTypeError,
    SprigError,
)
from .scanner import ClasspathScanner
from .scope import ScopeType

T = TypeVar("T")


def default_bean_name(cls: Type) -> str:
    """Class name with its first character lower-cased."""
    class_name = cls.__name__
    return class_name[:1].lower() + class_name[1:]


def resolve_bean_name(cls: Type) -> str:
    """Explicit non-blank component name, or the default bean name."""
    marker = get_component_marker(cls)
    if marker is not None and marker.name.strip():
        return marker.name
    return default_bean_name(cls)


def resolve_scope(cls: Type) -> ScopeType:
    """Parse the scope marker, defaulting to singleton.

    Raises:
        UnknownScopeError: If the marker value is not a known scope
    """
    marker = get_scope_marker(cls)
    if marker is None:
        return ScopeType.SINGLETON
    return ScopeType.of_value(marker.value)


def default_base_package(config_class: Type) -> str:
    """Package containing the root configuration class.

    A class in a top-level module scans that module alone.
    """
    module_name = config_class.__module__
    package, _, _ = module_name.rpartition(".")
    return package or module_name


def _is_assignable(bean_class: Type, required_type: Type) -> bool:
    try:
        return issubclass(bean_class, required_type)
    except TypeError:
        # Non runtime-checkable protocols refuse issubclass; fall back to nominal
        return required_type in bean_class.__mro__


def create_bean(cls: Type[T]) -> T:
    """Instantiate a bean class with its zero-argument constructor.

    Raises:
        BeanCreationError: If construction fails for any reason
    """
    try:
        logger.debug(f"Creating bean instance for class: [{cls.__module__}.{cls.__qualname__}]")
        return cls()
    except Exception as e:
        logger.error(f"Failed to create bean instance for class: [{cls.__module__}.{cls.__qualname__}]: {e}")
        raise BeanCreationError(cls, cause=e) from e


class ApplicationContext:
    """Minimal IoC container.

    - discovers ``@component`` classes below the scan root
    - singleton beans are shared, prototype beans are built per lookup
    - non-lazy singletons are created during construction
    """

    def __init__(
        self,
        config_class: Type,
        settings: Optional[ContainerSettings] = None,
        scanner: Optional[ClasspathScanner] = None,
    ):
        """Build the context.

        Args:
            config_class: Root configuration class
            settings: Container settings (defaults apply when omitted)
            scanner: Scanner to use (mainly for testing)

        Raises:
            ContextInitializationError: If the component scan fails, or a
                definition fails while ``settings.strict`` is enabled
        """
        self.config_class = config_class
        self.settings = settings or ContainerSettings()
        self.scanner = scanner or ClasspathScanner()
        self.base_package: Optional[str] = None
        self._definitions: Dict[str, BeanDefinition] = {}
        self.definition_errors: List[BeanDefinitionError] = []

        try:
            self._add_search_paths()
            classes = self._scan(config_class)
            self._load_bean_definitions(classes)
        except SprigError as e:
            logger.error(f"Failed to initialize application context: {e}")
            raise ContextInitializationError("Application context initialization failed", cause=e) from e

        logger.info(f"Application context initialized with [{len(self._definitions)}] beans")

    def _add_search_paths(self) -> None:
        for path in reversed(self.settings.search_paths):
            entry = str(path)
            if entry not in sys.path:
                sys.path.insert(0, entry)
                logger.debug(f"Added search path: {entry}")

    def _scan(self, config_class: Type) -> List[Type]:
        marker = get_component_scan_marker(config_class)
        if marker is None:
            logger.debug(f"Config class [{config_class.__qualname__}] is not annotated with @component_scan")
            return []

        base_package = marker.base_package
        if not base_package:
            base_package = default_base_package(config_class)
            logger.debug(f"Using default base package: [{base_package}]")
        self.base_package = base_package

        classes: Set[Type] = self.scanner.scan(base_package)
        # Stable order so repeated runs register (and log) identically
        return sorted(classes, key=lambda c: (c.__module__, c.__qualname__))

    def _load_bean_definitions(self, classes: List[Type]) -> None:
        for cls in classes:
            try:
                definition = self.create_bean_definition(cls)
            except SprigError as e:
                error = BeanDefinitionError(cls, str(e), cause=e)
                if self.settings.strict:
                    raise error from e
                self.definition_errors.append(error)
                logger.opt(exception=e).error(error.message)
                continue

            if definition.name in self._definitions:
                logger.debug(f"Bean name [{definition.name}] redefined by {cls.__qualname__}")
            self._definitions[definition.name] = definition
            logger.debug(f"Registered bean: [{definition.name}] with scope: [{definition.scope.value}]")

    def create_bean_definition(self, cls: Type) -> BeanDefinition:
        """Build the definition for one component class.

        Non-lazy singletons are instantiated here.

        Raises:
            UnknownScopeError: If the scope marker is not a known scope
            BeanCreationError: If an eager singleton cannot be constructed
        """
        scope = resolve_scope(cls)
        definition = BeanDefinition(
            bean_class=cls,
            name=resolve_bean_name(cls),
            scope=scope,
            lazy=is_lazy(cls),
        )

        if definition.is_singleton and not definition.lazy:
            definition.instance = create_bean(cls)

        return definition

    @overload
    def get_bean(self, key: str) -> Any: ...

    @overload
    def get_bean(self, key: Type[T]) -> T: ...

    def get_bean(self, key: Union[str, Type[T]]) -> Any:
        """Look up a bean by name or by type.

        Raises:
            BeanNotFoundError: If no bean has the given name
            NoSuchBeanOfTypeError: If no bean is assignable to the given type
            BeanCreationError: If a prototype or lazy singleton cannot be built
        """
        if isinstance(key, str):
            return self._get_bean_by_name(key)
        if isinstance(key, type):
            return self._get_bean_by_type(key)
        raise TypeError(f"Bean key must be a name or a type, got {key!r}")

    def _get_bean_by_name(self, bean_name: str) -> Any:
        definition = self._definitions.get(bean_name)
        if definition is None:
            raise BeanNotFoundError(bean_name)

        if definition.scope is ScopeType.SINGLETON:
            return definition.get_or_create(create_bean)
        elif definition.scope is ScopeType.PROTOTYPE:
            return create_bean(definition.bean_class)
        else:
            raise ContainerStateError(f"Unknown scope: {definition.scope}")

    def _get_bean_by_type(self, required_type: Type[T]) -> T:
        for definition in self._definitions.values():
            if _is_assignable(definition.bean_class, required_type):
                return self._get_bean_by_name(definition.name)
        raise NoSuchBeanOfTypeError(required_type)

    def contains_bean(self, bean_name: str) -> bool:
        return bean_name in self._definitions

    def bean_names(self) -> List[str]:
        return list(self._definitions)

    def get_bean_definition(self, bean_name: str) -> BeanDefinition:
        """Return the definition registered under a name.

        Raises:
            BeanNotFoundError: If no bean has the given name
        """
        try:
            return self._definitions[bean_name]
        except KeyError:
            raise BeanNotFoundError(bean_name) from None

    def describe(self) -> Dict[str, Any]:
        """Summarize the registry.

        Returns:
            Base package, bean count and per-bean class, scope, laziness and
            materialization state
        """
        return {
            "config_class": f"{self.config_class.__module__}.{self.config_class.__qualname__}",
            "base_package": self.base_package,
            "bean_count": len(self._definitions),
            "beans": {
                name: {
                    "class": f"{definition.bean_class.__module__}.{definition.bean_class.__qualname__}",
                    "scope": definition.scope.value,
                    "lazy": definition.lazy,
                    "materialized": definition.is_materialized,
                }
                for name, definition in self._definitions.items()
            },
        }

    def __contains__(self, bean_name: object) -> bool:
        return bean_name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)
