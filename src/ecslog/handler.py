import logging
import traceback
from datetime import datetime, timezone
from typing import Dict, Any

from .formatter import EcsFormatter


# Attributes every LogRecord carries; anything else came in through extra=
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {'message', 'asctime'}


class EcsLogFormatter(logging.Formatter):
    """
    logging.Formatter that emits one ECS JSON document per record.

    Structured data passed as ``extra={"context": {...}}`` is classified
    against the schema; any other extra attribute lands in the record's
    ``extra`` mapping.
    """

    def __init__(self, ecs_formatter: EcsFormatter, include_origin: bool = True):
        super().__init__()
        self.ecs_formatter = ecs_formatter
        self.include_origin = include_origin

    def format(self, record: logging.LogRecord) -> str:
        return self.ecs_formatter.format(self.toRecord(record)).rstrip('\n')

    def toRecord(self, record: logging.LogRecord) -> Dict[str, Any]:
        context = dict(getattr(record, 'context', None) or {})

        if self.include_origin:
            context.setdefault('file', record.pathname)
            context.setdefault('line', record.lineno)
            context.setdefault('function', record.funcName)

        if record.exc_info and record.exc_info[0] is not None:
            context.setdefault('error', self._formatError(record))

        extra = {
            key: value for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and key != 'context'
        }

        return {
            'datetime': datetime.fromtimestamp(record.created, tz=timezone.utc),
            'level_name': record.levelname,
            'channel': record.name,
            'message': record.getMessage(),
            'context': context,
            'extra': extra,
        }

    def _formatError(self, record: logging.LogRecord) -> Dict[str, Any]:
        excType, excValue, excTraceback = record.exc_info

        return {
            'type': excType.__name__,
            'message': str(excValue),
            'stack_trace': ''.join(traceback.format_exception(excType, excValue, excTraceback)),
        }
