"""Pluralize entity type names into default collection names."""

_IRREGULAR = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "goose": "geese",
    "foot": "feet",
    "tooth": "teeth",
    "datum": "data",
    "index": "indices",
}

_UNCHANGED = {"data", "equipment", "information", "news", "series", "species", "sheep", "fish", "deer"}


def pluralize(name: str) -> str:
    """Return the plural of ``name``, preserving the casing of its first letter.

    Examples:
        >>> pluralize("User")
        'Users'
        >>> pluralize("Category")
        'Categories'
        >>> pluralize("Box")
        'Boxes'
    """
    if not name:
        return name
    lower = name.lower()
    if lower in _UNCHANGED:
        return name
    if lower in _IRREGULAR:
        plural = _IRREGULAR[lower]
        return plural[0].upper() + plural[1:] if name[0].isupper() else plural
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        return name[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return name + "es"
    return name + "s"
