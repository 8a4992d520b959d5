"""
Merge helpers for combining reduced field results.

Reduced results are plain ``dict``/``list``/``str`` values. Sibling fields are
combined with :func:`array_merge` (a shallow union where later keys win and
positional items are renumbered), while groups of a dynamic object are
combined with :func:`merge_recursive`, which never overwrites: colliding keys
accumulate both contributions.
"""

from typing import Any


def _as_mapping(value: list | dict) -> dict:
    if isinstance(value, dict):
        return value
    return dict(enumerate(value))


def array_merge(base: list | dict, extra: list | dict) -> list | dict:
    """Shallow-merge two reduced results.

    Two lists are concatenated. As soon as one side is a mapping the result is
    a mapping: string keys from ``extra`` replace those of ``base`` and
    positional (integer) keys are appended and renumbered.

    Params:
        base: Result accumulated so far.
        extra: Result contributed by the next sibling.

    Returns:
        A new list or dict; neither argument is modified.

    Examples:
        ``array_merge([], {"ID": ["a"]})`` -> ``{"ID": ["a"]}``
        ``array_merge(["x"], {"ID": ["a"]})`` -> ``{0: "x", "ID": ["a"]}``
    """
    if isinstance(base, list) and isinstance(extra, list):
        return [*base, *extra]

    merged: dict[Any, Any] = {}
    position = 0
    for source in (_as_mapping(base), _as_mapping(extra)):
        for key, value in source.items():
            if isinstance(key, int):
                merged[position] = value
                position += 1
            else:
                merged[key] = value
    return merged


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else [value]


def merge_recursive(base: list | dict, extra: list | dict) -> list | dict:
    """Deep-merge ``extra`` into a copy of ``base`` without overwriting.

    * two lists are concatenated;
    * positional (integer) entries are appended and renumbered, they never
      collide;
    * string keys present on one side only are copied over;
    * two containers under the same string key are merged recursively;
    * any other collision combines both values into one list (scalars are
      wrapped first).

    Params:
        base: Result accumulated so far.
        extra: Result contributed by the next group.

    Returns:
        A new list or dict; neither argument is modified.

    Examples:
        ``merge_recursive({}, ["a"])`` -> ``{0: "a"}``
        ``merge_recursive({"A": "x"}, {"A": "y"})`` -> ``{"A": ["x", "y"]}``
    """
    if isinstance(base, list) and isinstance(extra, list):
        return [*base, *extra]

    merged: dict[Any, Any] = {}
    position = 0
    for key, value in _as_mapping(base).items():
        if isinstance(key, int):
            merged[position] = value
            position += 1
        else:
            merged[key] = value

    for key, value in _as_mapping(extra).items():
        if isinstance(key, int):
            merged[position] = value
            position += 1
            continue
        if key not in merged:
            merged[key] = value
            continue

        current = merged[key]
        if isinstance(current, (list, dict)) and isinstance(value, (list, dict)):
            merged[key] = merge_recursive(current, value)
        else:
            merged[key] = [*_as_list(current), *_as_list(value)]
    return merged
