"""Bean scopes."""

from enum import Enum
from typing import Union

from .errors import UnknownScopeError


class ScopeType(Enum):
    """Lifecycle scopes supported by the container."""

    SINGLETON = "singleton"
    PROTOTYPE = "prototype"

    @classmethod
    def of_value(cls, value: Union[str, "ScopeType"]) -> "ScopeType":
        """Parse a scope marker value, ignoring case.

        Raises:
            UnknownScopeError: If the value names no known scope
        """
        if isinstance(value, ScopeType):
            return value
        if isinstance(value, str):
            for scope in cls:
                if scope.value == value.lower():
                    return scope
        raise UnknownScopeError(value)
