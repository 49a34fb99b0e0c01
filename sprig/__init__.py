"""Minimal inversion-of-control container.

This package provides:
- Class decorators declaring components, their scope and laziness
- A classpath scanner that discovers components in directories and zip archives
- An application context with singleton/prototype lookup by name or type

Example:
    from sprig import ApplicationContext, component, component_scan

    @component_scan
    class AppConfig:
        pass

    context = ApplicationContext(AppConfig)
    service = context.get_bean("userService")
"""

from .config import ContainerSettings, load_settings
from .context import ApplicationContext, create_bean, default_bean_name
from .decorators import component, component_scan, lazy, scope
from .definition import BeanDefinition
from .errors import (
    BeanCreationError,
    BeanDefinitionError,
    BeanNotFoundError,
    ComponentScanError,
    ConfigurationError,
    ContainerStateError,
    ContextInitializationError,
    DiscoveryLoadError,
    NoSuchBeanOfTypeError,
    SprigError,
    UnknownScopeError,
)
from .logging_utils import configure_logging, level_filter
from .scanner import ArchiveLocator, ClasspathScanner, DirectoryLocator, is_component_class
from .scope import ScopeType

__version__ = "0.1.0"

__all__ = [
    # Context
    "ApplicationContext",
    "BeanDefinition",
    "ScopeType",
    "create_bean",
    "default_bean_name",

    # Decorators
    "component",
    "component_scan",
    "scope",
    "lazy",

    # Scanning
    "ClasspathScanner",
    "DirectoryLocator",
    "ArchiveLocator",
    "is_component_class",

    # Settings and logging
    "ContainerSettings",
    "load_settings",
    "configure_logging",
    "level_filter",

    # Errors
    "SprigError",
    "ContextInitializationError",
    "ComponentScanError",
    "ConfigurationError",
    "DiscoveryLoadError",
    "BeanDefinitionError",
    "BeanCreationError",
    "UnknownScopeError",
    "BeanNotFoundError",
    "NoSuchBeanOfTypeError",
    "ContainerStateError",
]
