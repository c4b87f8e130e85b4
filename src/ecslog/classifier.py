"""
Field Classification

Splits one namespace's context subtree into the fields the ECS schema knows
(structured, written at their canonical path) and whatever is left over
(routed to labels by the formatter).
"""

from dataclasses import dataclass, field
from typing import Dict, Any
import copy
import logging

from .flattener import flatten, is_free, iter_leaves, join_path, set_path, unset_path
from .schema import SchemaIndex


@dataclass
class Classification:
    structured: Dict[str, Any] = field(default_factory=dict)
    remaining: Any = field(default_factory=dict)

    @property
    def hasStructured(self) -> bool:
        return bool(self.structured)

    @property
    def hasRemaining(self) -> bool:
        return not is_empty(self.remaining)


def is_empty(value: Any) -> bool:
    # False, 0 and "" are real values
    return value is None or (isinstance(value, (dict, list)) and not value)


def _toText(value: Any) -> Any:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, list):
        return [_toText(item) for item in value]
    if value is None:
        return None
    return str(value)


class FieldClassifier:

    def __init__(self, schema: SchemaIndex):
        self.schema = schema
        self.logger = logging.getLogger(self.__class__.__name__)

    def classify(self, namespace: str, subtree: Any) -> Classification:
        """
        Partition a namespace subtree into structured and remaining fields.

        Nested items are flattened and every known path is moved, as text,
        to the structured output. Independently, an item whose own key is a
        known field is moved verbatim. The input is never mutated.

        Args:
            namespace: Top-level context key (e.g. "http")
            subtree: Raw context value under that key

        Returns:
            Classification with structured fields and the pruned remainder
        """
        if not isinstance(subtree, dict) or not self.schema.hasNamespace(namespace):
            return Classification(structured={}, remaining=subtree)

        knownPaths = self.schema.fieldsOf(namespace)
        remaining = copy.deepcopy(subtree)
        structured: Dict[str, Any] = {}

        for itemKey, itemValue in subtree.items():
            claimedElsewhere = not is_free(structured, itemKey)

            if isinstance(itemValue, dict):
                for keys, leafValue in iter_leaves({itemKey: itemValue}):
                    flatPath = join_path(keys)
                    # removed from where it was found, written at its canonical path
                    if flatPath in knownPaths and is_free(structured, flatPath):
                        unset_path(remaining, keys)
                        set_path(structured, flatPath, _toText(leafValue))

            if itemKey in knownPaths and not claimedElsewhere:
                set_path(structured, itemKey, copy.deepcopy(itemValue))
                remaining.pop(itemKey, None)

        if structured:
            self.logger.debug(f"Classified {namespace}: {sorted(flatten(structured))}")

        return Classification(structured=structured, remaining=remaining)
