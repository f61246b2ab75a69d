"""
Canonical field names.

Every lookup of a field by name goes through this module so that schema
inference, marshalling and record projections agree on what a column is
called.
"""

from typing import Any, Dict, Mapping, Optional, Tuple


# Canonical name -> aliases, in lookup priority order
CANONICAL_ALIASES: Dict[str, Tuple[str, ...]] = {
    "message": ("msg",),
    "level": ("lvl",),
    "time": ("timestamp",),
}

FIELD_ALIASES: Dict[str, str] = {
    alias: canonical
    for canonical, aliases in CANONICAL_ALIASES.items()
    for alias in aliases
}

_MISSING = object()


def normalize_field_name(name: str) -> str:
    """
    Map a raw field name to its canonical name.

    Names outside the alias table are returned unchanged, so the
    function is a fixed point on its own output.
    """
    return FIELD_ALIASES.get(name, name)


def candidate_names(canonical: str) -> Tuple[str, ...]:
    """Raw names that normalize to ``canonical``, highest priority first."""
    return (canonical,) + CANONICAL_ALIASES.get(canonical, ())


def resolve_field(fields: Mapping[str, Any], canonical: str) -> Tuple[bool, Any]:
    """
    Find the value stored under a canonical column name.

    When several raw names collapse onto the same column, the canonical
    name itself wins, then the aliases in table order. The result does
    not depend on the order of keys in ``fields``.

    Returns:
        (found, value) - ``found`` is False when no candidate is present
    """
    for name in candidate_names(canonical):
        value = fields.get(name, _MISSING)
        if value is not _MISSING:
            return True, value
    return False, None


def get_canonical(fields: Mapping[str, Any], canonical: str) -> Optional[Any]:
    """Shortcut for resolve_field that returns None when nothing is found."""
    _, value = resolve_field(fields, canonical)
    return value
