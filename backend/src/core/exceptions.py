"""
Typed failures raised by the scheduling services.

Expected outcomes such as "no slots" or an overbooked slot are returned as
values; these exceptions cover malformed input and missing references only.
"""

from typing import Optional, Union


class SchedulingError(Exception):
    """Base class for scheduling failures."""


class ValidationError(SchedulingError, ValueError):
    """
    Input to a store or editor is malformed or violates a schedule invariant.

    `field` names the offending input field (snake_case) so the caller can
    render the message next to it.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def __repr__(self) -> str:
        return f"ValidationError(field={self.field!r}, message={self.message!r})"


class NotFoundError(SchedulingError, LookupError):
    """A referenced doctor, schedule, leave or booking does not exist."""

    def __init__(self, resource: str, resource_id: Union[int, str]):
        self.resource = resource
        self.resource_id = resource_id
        self.message = f"{resource} {resource_id} not found"
        super().__init__(self.message)
