from typing import Dict, Any

from .flattener import merge_values


LABEL_KEY_REPLACEMENTS = ('.', ' ', '*', '\\')


def sanitize_label_key(key: Any) -> str:
    """Trim a caller-supplied label key and replace . space * and \\ with _."""
    sanitized = str(key).strip()

    for char in LABEL_KEY_REPLACEMENTS:
        sanitized = sanitized.replace(char, '_')

    return sanitized


def sanitize_labels(labels: Dict[Any, Any]) -> Dict[str, Any]:
    return {sanitize_label_key(key): value for key, value in labels.items()}


def merge_label(labels: Dict[str, Any], key: str, value: Any) -> None:
    """Add a label, combining with any value already held under the same key."""
    labels[key] = merge_values(labels[key], value) if key in labels else value
