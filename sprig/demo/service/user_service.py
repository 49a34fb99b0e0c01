"""Lazy singleton service resolved by the demo command."""

from ...decorators import component, lazy, scope


@component
@scope("singleton")
@lazy
class UserService:
    """Lazily created singleton."""

    def test(self) -> str:
        return "UserService.testSuccess!"
