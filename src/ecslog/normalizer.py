from typing import Dict, Any
from datetime import datetime, date
import logging
import traceback


class RecordNormalizer:
    """
    Converts arbitrary values into plain JSON-friendly data.

    Mappings become dicts with string keys, sequences become lists,
    datetimes become ISO-8601 strings, exceptions become small dicts and
    anything else falls back to str(). Descent stops at max_depth.
    """

    def __init__(self, max_depth: int = 9, max_items: int = 1000):
        self.max_depth = max_depth
        self.max_items = max_items
        self.logger = logging.getLogger(self.__class__.__name__)

    def normalize(self, data: Any, depth: int = 0) -> Any:
        if depth > self.max_depth:
            return f"Over {self.max_depth} levels deep, aborting normalization"

        if data is None or isinstance(data, (bool, int, float, str)):
            return data

        if isinstance(data, datetime):
            return self.formatDate(data)

        if isinstance(data, date):
            return data.isoformat()

        if isinstance(data, bytes):
            return data.decode('utf-8', errors='replace')

        if isinstance(data, dict):
            return self._normalizeMapping(data, depth)

        if isinstance(data, (list, tuple, set, frozenset)):
            return [self.normalize(item, depth + 1) for item in data]

        if isinstance(data, BaseException):
            return self.normalizeException(data, depth)

        return str(data)

    def _normalizeMapping(self, data: Dict[Any, Any], depth: int) -> Dict[str, Any]:
        normalized = {}

        for count, (key, value) in enumerate(data.items()):
            if count >= self.max_items:
                normalized['...'] = f"Over {self.max_items} items ({len(data)} total), aborting normalization"
                self.logger.debug(f"Truncated mapping with {len(data)} items")
                break
            normalized[str(key)] = self.normalize(value, depth + 1)

        return normalized

    def normalizeException(self, error: BaseException, depth: int = 0) -> Dict[str, Any]:
        data = {
            'class': type(error).__name__,
            'message': str(error),
        }

        if error.__traceback__ is not None:
            data['trace'] = ''.join(traceback.format_tb(error.__traceback__))

        if error.__cause__ is not None and depth < self.max_depth:
            data['previous'] = self.normalizeException(error.__cause__, depth + 1)

        return data

    @staticmethod
    def formatDate(value: datetime) -> str:
        return value.isoformat(timespec='microseconds')
