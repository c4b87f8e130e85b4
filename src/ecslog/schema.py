"""
ECS Schema Index

Holds the dotted field names the Elastic Common Schema allows under each
top-level namespace. Built once from a parsed schema description and shared
read-only between formatter calls.
"""

from types import MappingProxyType
from typing import Dict, Any, FrozenSet, Iterable, Mapping
from pathlib import Path
import logging

import requests
import yaml


ECS_VERSION = '1.8.0'

ECS_SCHEMA_URL = 'https://raw.githubusercontent.com/elastic/ecs/master/generated/ecs/ecs_nested.yml'

logger = logging.getLogger(__name__)


class SchemaLoadError(Exception):
    """Raised when the ECS schema cannot be retrieved or parsed."""


class SchemaIndex:

    def __init__(self, fieldsByNamespace: Mapping[str, Iterable[str]]):
        self._fields = MappingProxyType({
            str(namespace): frozenset(paths)
            for namespace, paths in fieldsByNamespace.items()
        })

    @classmethod
    def from_schema(cls, schema: Mapping[str, Any]) -> 'SchemaIndex':
        """
        Build an index from a parsed nested schema description.

        Args:
            schema: Mapping shaped as {namespace: {fields: {...}}}

        Returns:
            SchemaIndex with every leaf path collected per namespace

        Raises:
            SchemaLoadError: If the description is not a non-empty mapping
        """
        if not isinstance(schema, Mapping) or not schema:
            raise SchemaLoadError("ECS schema description is empty or not a mapping")

        fieldsByNamespace = {}
        for namespace, definition in schema.items():
            if not isinstance(definition, Mapping):
                continue
            fields = definition.get('fields')
            if not isinstance(fields, Mapping):
                fields = {}
            fieldsByNamespace[namespace] = _collectFieldPaths(fields, str(namespace))

        return cls(fieldsByNamespace)

    @classmethod
    def from_source(cls, source: str = ECS_SCHEMA_URL, timeout: int = 30) -> 'SchemaIndex':
        return cls.from_schema(load_schema(source, timeout=timeout))

    def fieldsOf(self, namespace: str) -> FrozenSet[str]:
        return self._fields.get(namespace, frozenset())

    def hasNamespace(self, namespace: str) -> bool:
        return namespace in self._fields

    def namespaces(self) -> FrozenSet[str]:
        return frozenset(self._fields)

    def __contains__(self, namespace: object) -> bool:
        return namespace in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"SchemaIndex(namespaces={len(self._fields)})"


def _collectFieldPaths(fields: Mapping[str, Any], namespace: str, prefix: str = '') -> FrozenSet[str]:
    paths = set()

    for name, definition in fields.items():
        path = f"{prefix}{name}"

        if isinstance(definition, Mapping) and isinstance(definition.get('fields'), Mapping):
            paths |= _collectFieldPaths(definition['fields'], namespace, path + '.')
            continue

        # ecs_nested.yml keys leaves by their flat name
        flatName = definition.get('flat_name') if isinstance(definition, Mapping) else None
        if isinstance(flatName, str) and flatName.startswith(namespace + '.'):
            path = flatName[len(namespace) + 1:]

        paths.add(path)

    return frozenset(paths)


def load_schema(source: str = ECS_SCHEMA_URL, timeout: int = 30) -> Dict[str, Any]:
    """
    Retrieve and parse an ECS schema description.

    Args:
        source: Local file path or http(s) URL of a YAML schema
        timeout: Request timeout in seconds for remote sources

    Returns:
        Parsed schema mapping

    Raises:
        SchemaLoadError: If the source is unreachable or unparseable
    """
    try:
        if source.startswith(('http://', 'https://')):
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
            content = response.text
        else:
            content = Path(source).read_text(encoding='utf-8')

        schema = yaml.safe_load(content)

    except (requests.RequestException, OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load ECS schema from {source}: {e}")
        raise SchemaLoadError(f"Failed to load ECS schema from {source}: {e}") from e

    if not isinstance(schema, dict) or not schema:
        logger.error(f"ECS schema from {source} is empty or not a mapping")
        raise SchemaLoadError(f"ECS schema from {source} is empty or not a mapping")

    logger.info(f"Loaded ECS schema from {source} ({len(schema)} namespaces)")
    return schema
