from __future__ import annotations

import math
from typing import Any, FrozenSet, Mapping, Tuple

import numpy as np

from graphunit.exceptions import InvalidPropertyValue

CanonicalValue = Tuple[str, Any]
CanonicalProperties = FrozenSet[Tuple[str, CanonicalValue]]

_BOOL = "bool"
_NUMBER = "number"
_TEXT = "text"
_ARRAY = "array"

# NaN has to compare equal to itself, otherwise no graph carrying one
# would ever match its own snapshot.
_NAN = "NaN"


# ---------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------


def _is_bool(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def _is_number(value: Any) -> bool:
    if _is_bool(value):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


def _is_array(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return value.ndim == 1
    return isinstance(value, (list, tuple))


def _category(value: Any) -> str | None:
    if _is_bool(value):
        return _BOOL
    if _is_number(value):
        return _NUMBER
    if _is_text(value):
        return _TEXT
    return None


# ---------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------


def validate_value(key: str, value: Any) -> None:
    """
    Raise ``InvalidPropertyValue`` unless ``value`` is a scalar or a
    homogeneous one-dimensional array of scalars.
    """
    if isinstance(value, np.ndarray) and value.ndim == 0:
        value = value.item()

    if _category(value) is not None:
        return

    if not _is_array(value):
        raise InvalidPropertyValue(key, value)

    categories = set()
    for element in value:
        category = _category(element)
        if category is None:
            raise InvalidPropertyValue(key, value)
        categories.add(category)

    if len(categories) > 1:
        raise InvalidPropertyValue(key, value)


# ---------------------------------------------------------------------
# Canonical forms
# ---------------------------------------------------------------------


def _canonical_scalar(value: Any) -> CanonicalValue:
    if isinstance(value, np.generic):
        value = value.item()

    if isinstance(value, bool):
        return (_BOOL, value)

    if isinstance(value, float):
        if math.isnan(value):
            return (_NUMBER, _NAN)
        if value.is_integer():
            return (_NUMBER, int(value))
        return (_NUMBER, value)

    if isinstance(value, int):
        return (_NUMBER, value)

    return (_TEXT, value)


def canonical_value(value: Any, key: str = "value") -> CanonicalValue:
    """
    Hashable form of a property value such that two values are ``equal``
    exactly when their canonical forms are ``==``.

    Numbers lose their concrete width (``np.int16(123)``, ``123`` and
    ``123.0`` share one form), arrays lose their container type but keep
    element order. Unsupported values raise ``InvalidPropertyValue``.
    """
    validate_value(key, value)
    if isinstance(value, np.ndarray) and value.ndim == 0:
        value = value.item()

    if _is_array(value):
        return (_ARRAY, tuple(_canonical_scalar(v) for v in value))

    return _canonical_scalar(value)


def canonical_properties(properties: Mapping[str, Any]) -> CanonicalProperties:
    return frozenset(
        (key, canonical_value(value, key)) for key, value in properties.items()
    )


# ---------------------------------------------------------------------
# Equality
# ---------------------------------------------------------------------


def equal(a: Any, b: Any) -> bool:
    """
    Semantic equality of two property values.

    Numbers are equal when they denote the same mathematical value,
    whatever their concrete type. Booleans never equal numbers. Arrays are
    compared element by element in order.
    """
    return canonical_value(a) == canonical_value(b)


def properties_equal(p: Mapping[str, Any], q: Mapping[str, Any]) -> bool:
    """
    Two property maps are equal when they have the same keys and every
    value is ``equal``. There is no subset matching.
    """
    if p.keys() != q.keys():
        return False
    return all(equal(p[key], q[key]) for key in p)


def _render_canonical(kind: str, payload: Any) -> str:
    if kind == _ARRAY:
        return "[" + ", ".join(_render_canonical(k, v) for k, v in payload) + "]"
    if kind == _TEXT:
        return repr(payload)
    if kind == _BOOL:
        return "true" if payload else "false"
    return str(payload)


def render_value(value: Any) -> str:
    """Short human-readable rendering used in diagnostics."""
    return _render_canonical(*canonical_value(value))
