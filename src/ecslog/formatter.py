"""
ECS Record Formatter

Assembles one Elastic Common Schema document from a normalized log record:
builds the skeleton, classifies namespaced context against the schema,
routes leftovers to labels, promotes log origin keys and appends tags.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Mapping, Optional
import json
import logging

from .classifier import FieldClassifier, is_empty
from .flattener import flatten, merge_leaves, merge_values
from .labels import merge_label, sanitize_labels
from .normalizer import RecordNormalizer
from .origin import OriginExtractor
from .schema import SchemaIndex, ECS_VERSION


# Input record keys consumed by the skeleton, never passed through
RECORD_KEYS = ('datetime', 'level', 'level_name', 'channel', 'message', 'context', 'extra')

# Output keys owned by the skeleton
SKELETON_KEYS = ('@timestamp', 'ecs', 'log', 'message')

LABELS_KEY = 'labels'


@dataclass
class FormatterConfig:
    tags: List[str] = field(default_factory=list)
    use_log_origin_from_context: bool = True
    max_normalize_depth: int = 9

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'FormatterConfig':
        data = data or {}
        return cls(
            tags=list(data.get('tags') or []),
            use_log_origin_from_context=bool(data.get('use_log_origin_from_context', True)),
            max_normalize_depth=int(data.get('max_normalize_depth', 9)),
        )


class EcsFormatter:
    """
    Formats log records as ECS documents.

    The schema index is built once by the caller and only read here, so a
    formatter can be shared between threads; every call works on its own
    normalized copy of the record.
    """

    def __init__(
        self,
        schema: SchemaIndex,
        tags: Optional[List[str]] = None,
        use_log_origin_from_context: bool = True,
        normalizer: Optional[RecordNormalizer] = None
    ):
        self.schema = schema
        self.tags = list(tags or [])
        self.use_log_origin_from_context = use_log_origin_from_context
        self.normalizer = normalizer or RecordNormalizer()
        self.classifier = FieldClassifier(schema)
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_config(cls, schema: SchemaIndex, config: FormatterConfig) -> 'EcsFormatter':
        return cls(
            schema,
            tags=config.tags,
            use_log_origin_from_context=config.use_log_origin_from_context,
            normalizer=RecordNormalizer(max_depth=config.max_normalize_depth)
        )

    def useLogOriginFromContext(self, enabled: bool) -> 'EcsFormatter':
        self.use_log_origin_from_context = enabled
        return self

    def format(self, record: Mapping[str, Any]) -> str:
        return json.dumps(self.transform(record), ensure_ascii=False, default=str) + '\n'

    def transform(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Build the ECS document for one record.

        Args:
            record: Mapping with datetime, level_name, channel, optional
                message, context and extra

        Returns:
            ECS document as an ordered dict
        """
        inRecord = self.normalizer.normalize(dict(record))
        context = inRecord.get('context')
        context = context if isinstance(context, dict) else {}
        extra = inRecord.get('extra')
        extra = extra if isinstance(extra, dict) else {}
        labels: Dict[str, Any] = {}

        outRecord: Dict[str, Any] = {
            '@timestamp': inRecord.get('datetime'),
            'log': {
                'level': inRecord.get('level_name'),
                'logger': inRecord.get('channel'),
            },
            'ecs': {
                'version': ECS_VERSION,
            },
        }

        if inRecord.get('message') is not None:
            outRecord['message'] = inRecord['message']

        self._classifyContext(context, outRecord, labels)

        remainder = {key: value for key, value in inRecord.items() if key not in RECORD_KEYS}
        self._formatContext(remainder, outRecord, labels)
        self._formatContext(extra, outRecord, labels)
        self._formatContext(context, outRecord, labels)

        if self.tags and 'tags' in outRecord:
            merge_label(labels, 'tags', outRecord.pop('tags'))

        if labels:
            outRecord[LABELS_KEY] = labels

        if self.tags:
            outRecord['tags'] = self.normalizer.normalize(self.tags)

        return outRecord

    def _classifyContext(
        self,
        context: Dict[str, Any],
        outRecord: Dict[str, Any],
        labels: Dict[str, Any]
    ) -> None:
        for key in list(context):
            if key == LABELS_KEY:
                continue
            if self.use_log_origin_from_context and OriginExtractor.isOriginKey(key):
                continue

            value = context.pop(key)
            if key in ('@timestamp', 'ecs'):
                # never classified into the skeleton
                merge_label(labels, key, value)
                continue

            result = self.classifier.classify(key, value)
            remaining = result.remaining

            if result.hasStructured:
                rejected = merge_leaves(outRecord, {key: result.structured})
                if rejected:
                    self.logger.debug(f"Output already holds {sorted(flatten(rejected))}, keeping them as labels")
                    remaining = merge_values(remaining, rejected[key]) if remaining else rejected[key]

            if not is_empty(remaining):
                merge_label(labels, key, remaining)

    def _formatContext(
        self,
        inContext: Dict[str, Any],
        outRecord: Dict[str, Any],
        labels: Dict[str, Any]
    ) -> None:
        foundLogOriginKeys = False

        for key, value in inContext.items():
            if key == LABELS_KEY:
                if isinstance(value, dict):
                    for labelKey, labelValue in sanitize_labels(value).items():
                        merge_label(labels, labelKey, labelValue)
                else:
                    merge_label(labels, key, value)
                continue

            if self.use_log_origin_from_context and OriginExtractor.isOriginKey(key):
                foundLogOriginKeys = True
                continue

            if key in SKELETON_KEYS:
                merge_label(labels, key, value)
            elif key not in outRecord:
                outRecord[key] = value
            elif isinstance(value, dict) and isinstance(outRecord[key], dict):
                rejected = merge_leaves(outRecord[key], value)
                if rejected:
                    merge_label(labels, key, rejected)
            else:
                merge_label(labels, key, value)

        if foundLogOriginKeys:
            origin = OriginExtractor.extract(inContext)
            if origin:
                rejected = merge_leaves(outRecord['log'], {'origin': origin})
                if rejected:
                    merge_label(labels, 'log', rejected)


def transform(
    record: Mapping[str, Any],
    schema: SchemaIndex,
    config: Optional[FormatterConfig] = None
) -> Dict[str, Any]:
    return EcsFormatter.from_config(schema, config or FormatterConfig()).transform(record)
