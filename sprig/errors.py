"""Error types raised by the sprig container.

Initialization errors are fatal and abort context construction. Definition
and discovery errors are recovered per type and only logged. Lookup errors
propagate to the caller unchanged.
"""

from __future__ import annotations

import traceback
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorContext(BaseModel):
    """Context attached to every container error."""

    timestamp: datetime = Field(default_factory=datetime.now)
    bean_name: Optional[str] = None
    type_name: Optional[str] = None
    technical_details: Dict[str, Any] = Field(default_factory=dict)
    suggestions: List[str] = Field(default_factory=list)
    related_errors: List[Dict[str, Any]] = Field(default_factory=list)

    def add_suggestion(self, suggestion: str) -> None:
        """Add a hint for resolving the error."""
        self.suggestions.append(suggestion)

    def add_technical_detail(self, key: str, value: Any) -> None:
        self.technical_details[key] = value

    def add_related_error(self, error: BaseException) -> None:
        self.related_errors.append({
            "type": type(error).__name__,
            "message": str(error),
            "traceback": traceback.format_exception_only(type(error), error),
        })


class SprigError(Exception):
    """Base exception for all container errors."""

    recoverable: bool = True

    def __init__(
        self,
        message: str,
        *,
        context: Optional[ErrorContext] = None,
        cause: Optional[BaseException] = None,
        error_code: Optional[str] = None,
    ):
        """Initialize the error.

        Args:
            message: Human-readable error message
            context: Extra context about the failing bean or type
            cause: Original exception that caused this error
            error_code: Code for programmatic handling (derived from the class name by default)
        """
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.cause = cause
        self.error_code = error_code or self._generate_error_code()

        if cause is not None:
            self.__cause__ = cause
            self.context.add_related_error(cause)

    def _generate_error_code(self) -> str:
        """Convert CamelCase class name to an UPPER_SNAKE_CASE code."""
        class_name = self.__class__.__name__
        code = ""
        for i, char in enumerate(class_name):
            if i > 0 and char.isupper() and class_name[i - 1].islower():
                code += "_"
            code += char.upper()
        return code.replace("_ERROR", "")

    def with_context(self, **kwargs: Any) -> "SprigError":
        """Add technical details and return self for chaining."""
        for key, value in kwargs.items():
            self.context.add_technical_detail(key, value)
        return self

    def with_suggestion(self, suggestion: str) -> "SprigError":
        self.context.add_suggestion(suggestion)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "recoverable": self.recoverable,
            "context": self.context.model_dump(mode="json"),
        }


class ContextInitializationError(SprigError):
    """The application context could not be built."""

    recoverable = False


class ComponentScanError(SprigError):
    """The search roots for a base package could not be enumerated."""

    recoverable = False

    def __init__(self, base_package: str, reason: str, **kwargs: Any):
        self.base_package = base_package
        super().__init__(f"Component scan failed for package: {base_package}: {reason}", **kwargs)
        self.context.add_technical_detail("base_package", base_package)


class ConfigurationError(SprigError):
    """Container settings could not be loaded or validated."""

    recoverable = False


class DiscoveryLoadError(SprigError):
    """A candidate module could not be imported during scanning."""

    def __init__(self, module_name: str, **kwargs: Any):
        self.module_name = module_name
        super().__init__(f"Could not load candidate module: {module_name}", **kwargs)
        self.context.add_technical_detail("module", module_name)


class BeanDefinitionError(SprigError):
    """Building the definition for one discovered type failed."""

    def __init__(self, bean_class: type, reason: str, **kwargs: Any):
        self.bean_class = bean_class
        super().__init__(
            f"Failed to load bean metadata for class: {_qualified_name(bean_class)}: {reason}",
            **kwargs,
        )
        self.context.type_name = _qualified_name(bean_class)


class BeanCreationError(SprigError):
    """The zero-argument constructor of a bean class failed."""

    def __init__(self, bean_class: type, **kwargs: Any):
        self.bean_class = bean_class
        super().__init__(f"Bean creation failed for: {_qualified_name(bean_class)}", **kwargs)
        self.context.type_name = _qualified_name(bean_class)
        self.context.add_suggestion("Bean classes must be constructible without arguments")


class UnknownScopeError(SprigError, ValueError):
    """A scope marker carries a value outside the supported scopes."""

    def __init__(self, value: Any, **kwargs: Any):
        self.value = value
        super().__init__(f"Unknown scope: {value}", **kwargs)
        self.context.add_suggestion("Use one of: 'singleton', 'prototype'")


class BeanNotFoundError(SprigError, LookupError):
    """No bean is registered under the requested name."""

    def __init__(self, bean_name: str, **kwargs: Any):
        self.bean_name = bean_name
        super().__init__(f"Bean not found: {bean_name}", **kwargs)
        self.context.bean_name = bean_name


class NoSuchBeanOfTypeError(SprigError, LookupError):
    """No registered bean is assignable to the requested type."""

    def __init__(self, required_type: type, **kwargs: Any):
        self.required_type = required_type
        super().__init__(f"No bean found of type: {_qualified_name(required_type)}", **kwargs)
        self.context.type_name = _qualified_name(required_type)


class ContainerStateError(SprigError):
    """A definition is in a state the container cannot handle."""

    recoverable = False


def _qualified_name(cls: Any) -> str:
    module = getattr(cls, "__module__", None)
    qualname = getattr(cls, "__qualname__", None) or repr(cls)
    if module and module != "builtins":
        return f"{module}.{qualname}"
    return qualname
