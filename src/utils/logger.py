import logging
import sys
from pathlib import Path
from typing import Dict, Any, Optional
import json
from datetime import datetime, timezone

from ecslog.formatter import EcsFormatter
from ecslog.handler import EcsLogFormatter


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class TextFormatter(logging.Formatter):

    def __init__(self):
        fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        datefmt = '%Y-%m-%d %H:%M:%S'
        super().__init__(fmt=fmt, datefmt=datefmt)


def setup_logging(config: Dict[str, Any], ecs_formatter: Optional[EcsFormatter] = None) -> None:
    """
    Configure the root logger from the ``logging`` config section.

    The ``ecs`` format needs an EcsFormatter; without one it falls back to json.
    """
    logging_config = config.get('logging', {}) or {}

    log_level = logging_config.get('level', 'INFO')
    log_format = logging_config.get('format', 'text')  # text, json or ecs
    log_output = logging_config.get('output', 'console')  # file, console (stderr), or both
    log_file_path = logging_config.get('file_path', 'logs/ecslog.log')

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    root_logger.handlers = []

    if log_format == 'ecs' and ecs_formatter is not None:
        formatter = EcsLogFormatter(ecs_formatter)
    elif log_format in ('json', 'ecs'):
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter()

    if log_output in ['file', 'both']:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if log_output in ['console', 'both']:
        # stdout is reserved for formatted documents
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    logging.getLogger('urllib3').setLevel(logging.WARNING)

    root_logger.debug("Logging configured successfully")
