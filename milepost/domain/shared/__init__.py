"""Shared domain building blocks.

Example usage:
    >>> from milepost.domain.shared import Ok, Err, Result
    >>>
    >>> def lookup(node_id: str) -> Result[str, str]:
    ...     if node_id == "missing":
    ...         return Err("Item not found")
    ...     return Ok(node_id)
"""

from milepost.domain.shared.result import Err, Ok, Result

__all__ = [
    "Ok",
    "Err",
    "Result",
]
