"""Result values for operations with expected failure modes.

Storage and session operations hand back either ``Ok(value)`` or
``Err(message)`` instead of raising, so callers at the edges (API routes,
CLI commands) decide how a failure is presented.

Example usage:
    >>> result = session.set_status("id-42", NodeStatus.REVIEW)
    >>> if isinstance(result, Ok):
    ...     print(result.value.status)
    ... else:
    ...     print(f"refused: {result.error}")
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome carrying an error description."""

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007
