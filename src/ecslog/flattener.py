from typing import Dict, Any, Iterator, Sequence, Tuple, Union


Path = Union[str, Sequence[str]]

_MISSING = object()


def _keys(path: Path) -> Tuple[str, ...]:
    # dotted strings are split; key tuples keep keys that contain dots intact
    if isinstance(path, str):
        return tuple(path.split('.'))
    if isinstance(path, (tuple, list)):
        return tuple(path)
    return (path,)


def iter_leaves(data: Dict[str, Any], parents: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], Any]]:
    """
    Yield (key tuple, leaf value) for every leaf of a nested mapping.

    The key tuple is the leaf's original nested location, so keys that
    themselves contain dots can still be found again.
    """
    for key, value in data.items():
        keys = parents + (key,)
        if isinstance(value, dict):
            yield from iter_leaves(value, keys)
        else:
            yield keys, value


def join_path(keys: Sequence[Any]) -> str:
    return '.'.join(str(key) for key in keys)


def flatten(data: Dict[str, Any], prefix: str = '') -> Dict[str, Any]:
    """
    Flatten a nested mapping into dotted path -> leaf value.

    Mappings are descended into; every other value (lists, scalars, False,
    0, None) is a leaf. Empty mappings are dropped.
    """
    return {f"{prefix}{join_path(keys)}": value for keys, value in iter_leaves(data)}


def get_path(data: Dict[str, Any], path: Path, default: Any = None) -> Any:
    value: Any = data

    for key in _keys(path):
        if not isinstance(value, dict) or key not in value:
            return default
        value = value[key]

    return value


def is_free(data: Dict[str, Any], path: Path) -> bool:
    """True if writing at path would not replace an existing value."""
    keys = _keys(path)

    for depth in range(1, len(keys) + 1):
        value = get_path(data, keys[:depth], _MISSING)
        if value is _MISSING:
            return True
        if not isinstance(value, dict):
            return False

    return False


def set_path(data: Dict[str, Any], path: Path, value: Any) -> None:
    keys = _keys(path)
    target = data

    for key in keys[:-1]:
        if not isinstance(target.get(key), dict):
            target[key] = {}
        target = target[key]

    target[keys[-1]] = value


def unset_path(data: Dict[str, Any], path: Path) -> bool:
    """
    Remove the leaf at a path, pruning parents left empty.

    Returns:
        True if a value was removed
    """
    key, *rest = _keys(path)

    if key not in data:
        return False

    if not rest:
        del data[key]
        return True

    child = data[key]
    if not isinstance(child, dict) or not unset_path(child, rest):
        return False

    if not child:
        del data[key]
    return True


def merge_leaves(target: Dict[str, Any], value: Dict[str, Any]) -> Dict[str, Any]:
    """
    Write every leaf of value into target where its slot is free.

    Returns:
        Nested mapping of the leaves that would have replaced a value
    """
    rejected: Dict[str, Any] = {}

    for keys, leaf in iter_leaves(value):
        if is_free(target, keys):
            set_path(target, keys, leaf)
        else:
            set_path(rejected, keys, leaf)

    return rejected


def merge_values(existing: Any, incoming: Any) -> Any:
    """Combine two values without dropping either; clashing leaves become a list."""
    if isinstance(existing, dict) and isinstance(incoming, dict):
        merged = dict(existing)
        for key, value in incoming.items():
            merged[key] = merge_values(merged[key], value) if key in merged else value
        return merged

    return [existing, incoming]
