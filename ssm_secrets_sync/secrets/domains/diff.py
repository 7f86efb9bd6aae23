"""Drift detection between local secrets and the remote store."""
import logging
from numbers import Number
from typing import Any

from .codec import decode_value

logger = logging.getLogger(__name__)


def deep_equal(left: Any, right: Any) -> bool:
    """
    Structural equality that is strict about scalar types.

    Mapping key order is ignored, sequence order is not. A number never
    equals a string or a boolean, but int and float compare by value.
    """
    if isinstance(left, dict) or isinstance(right, dict):
        if not (isinstance(left, dict) and isinstance(right, dict)):
            return False
        if set(left) != set(right):
            return False
        return all(deep_equal(left[key], right[key]) for key in left)

    if isinstance(left, (list, tuple)) or isinstance(right, (list, tuple)):
        if not (isinstance(left, (list, tuple)) and isinstance(right, (list, tuple))):
            return False
        if len(left) != len(right):
            return False
        return all(deep_equal(a, b) for a, b in zip(left, right))

    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right

    if isinstance(left, Number) and isinstance(right, Number):
        return left == right

    return type(left) is type(right) and left == right


async def has_changed(store, path: str, local_value: Any) -> bool:
    """
    Check whether local_value differs from what the store holds at path.

    Any failure to fetch or decode the remote value counts as a change,
    so an unreadable parameter is always re-written rather than skipped.

    Args:
        store: RemoteStore to read from
        path: Full remote path of the parameter
        local_value: Value decoded from the local secrets file

    Returns:
        False only when the remote value decodes to a deep-equal value
    """
    try:
        parameter = await store.get_parameter(path, with_decryption=True)
        current_value = decode_value(parameter.raw_value)
    except Exception as e:
        logger.debug(f"Treating {path} as changed: {e}")
        return True

    return not deep_equal(local_value, current_value)
