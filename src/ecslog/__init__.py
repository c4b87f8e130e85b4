"""
ECS Log Formatting

Turns loosely structured log records into Elastic Common Schema documents.

Features:
- Schema index of known fields per ECS namespace
- Classification of namespaced context into structured fields or labels
- Label key sanitization
- log.origin derivation from caller keys
- stdlib logging integration
"""

from .schema import SchemaIndex, SchemaLoadError, load_schema, ECS_VERSION, ECS_SCHEMA_URL
from .flattener import flatten
from .classifier import FieldClassifier, Classification
from .labels import sanitize_label_key, sanitize_labels
from .origin import OriginExtractor
from .normalizer import RecordNormalizer
from .formatter import EcsFormatter, FormatterConfig, transform
from .handler import EcsLogFormatter

__all__ = [
    'SchemaIndex',
    'SchemaLoadError',
    'load_schema',
    'ECS_VERSION',
    'ECS_SCHEMA_URL',
    'flatten',
    'FieldClassifier',
    'Classification',
    'sanitize_label_key',
    'sanitize_labels',
    'OriginExtractor',
    'RecordNormalizer',
    'EcsFormatter',
    'FormatterConfig',
    'transform',
    'EcsLogFormatter',
]
