"""
Log Origin Extraction

Promotes the reserved caller keys (file, line, class, function) of a
context-like mapping into an ECS ``log.origin`` object.
"""

from typing import Dict, Any, Mapping, Optional


ORIGIN_KEYS = ('file', 'line', 'class', 'function')


class OriginExtractor:

    @staticmethod
    def isOriginKey(key: Any) -> bool:
        return key in ORIGIN_KEYS

    @staticmethod
    def hasOriginKeys(data: Mapping[str, Any]) -> bool:
        return any(key in data for key in ORIGIN_KEYS)

    @staticmethod
    def extract(data: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Build the log.origin object from reserved keys.

        Values of the wrong type are skipped: file, function and class must
        be text, line must be an integer.

        Returns:
            Origin dict, or None when nothing usable was found
        """
        origin: Dict[str, Any] = {}

        fileVal = {}
        if isinstance(data.get('file'), str):
            fileVal['name'] = data['file']

        line = data.get('line')
        if isinstance(line, int) and not isinstance(line, bool):
            fileVal['line'] = line

        if fileVal:
            origin['file'] = fileVal

        function = data.get('function')
        if isinstance(function, str):
            className = data.get('class')
            if isinstance(className, str):
                origin['function'] = f"{className}::{function}"
            else:
                origin['function'] = function

        return origin or None
