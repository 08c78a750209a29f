"""Progress engine.

Derives a 0-100 completion value for any node and reports which rule
produced it. Pure functions: no I/O, no side effects.

Precedence, highest first:

1. ``progress_override`` - returned as is, children ignored
2. ``progress`` - a direct value on a leaf, a pinned value on a group
3. leaf without either - 100 if validated, else 0
4. weighted mean of the children's progress
"""

import math

from .models import Node, ProgressSource

PROGRESS_MIN = 0
PROGRESS_MAX = 100
DEFAULT_WEIGHT = 1


def _round_half_up(value: float) -> int:
    # Matches the browser's Math.round; the builtin round() is banker's rounding.
    return int(math.floor(value + 0.5))


def child_weight(node: Node) -> int | float:
    """Weight a parent gives ``node`` when averaging its children."""
    return node.progress_weight or DEFAULT_WEIGHT


def compute_progress(node: Node) -> int:
    """Compute the completion percentage of a node.

    Args:
        node: Any node of the tree

    Returns:
        Integer progress. Stored values are returned verbatim, so the
        result is in [0, 100] as long as stored values are.
    """
    if node.progress_override is not None:
        return node.progress_override
    if node.progress is not None:
        return node.progress

    children = node.children
    if not children:
        return PROGRESS_MAX if node.validated else PROGRESS_MIN

    weighted_sum = 0.0
    total_weight = 0.0
    for child in children:
        weight = child_weight(child)
        weighted_sum += compute_progress(child) * weight
        total_weight += weight
    return _round_half_up(weighted_sum / total_weight)


def progress_source(node: Node) -> ProgressSource:
    """Classify which branch of ``compute_progress`` applies to ``node``."""
    if node.progress_override is not None:
        return ProgressSource.OVERRIDE
    if node.progress is not None:
        return ProgressSource.DIRECT if node.is_leaf() else ProgressSource.MANUAL
    return ProgressSource.CALCULATED


def clamp_progress(value: int) -> int:
    """Clamp a progress value into [0, 100]."""
    return max(PROGRESS_MIN, min(PROGRESS_MAX, value))


def parse_progress_input(raw: object) -> int | None:
    """Parse a user-entered progress value.

    Numeric input (numbers or numeric strings) is truncated to an integer
    and clamped. Anything else, including booleans, NaN and infinities,
    is rejected.

    Returns:
        The value to write, or None if the input must be ignored
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        number = float(raw)
    elif isinstance(raw, str):
        try:
            number = float(raw.strip())
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return clamp_progress(int(number))
