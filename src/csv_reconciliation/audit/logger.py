"""
Logger for CSV reconciliation runs.

Each run owns one ReconciliationLogger which is handed explicitly to the
manager, providers and engines. Records go through stdlib ``logging``
handlers, which serialize writes so lines from concurrent pairs never
interleave mid-line. JSON output is rendered with structlog.
"""

import logging
import sys
import uuid
from pathlib import Path
from typing import Any, Dict, Optional, Union

import structlog

from ..config.models import LoggingConfig

TEXT_FORMAT = "[%(asctime)s.%(msecs)03d] [%(levelname)s] [%(threadName)s] %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _json_formatter() -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.ExtraAdder(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def _text_formatter() -> logging.Formatter:
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


class ReconciliationLogger:
    """Leveled, thread-safe logger scoped to a single reconciliation run."""

    def __init__(self, name: str = "csv_reconciliation", run_id: Optional[str] = None):
        """
        Initialize the logger with a console handler at INFO level.

        Args:
            name: Logger name prefix
            run_id: Run identifier, used to keep this logger separate from others
        """
        self.name = name
        self.run_id = run_id or uuid.uuid4().hex
        self.log_file_path: Optional[Path] = None
        self._logger = logging.getLogger(f"{name}.{self.run_id}")
        self._logger.propagate = False
        self._logger.setLevel(logging.INFO)
        self._reset_handlers()
        self._add_handler(logging.StreamHandler(sys.stderr), _text_formatter())

    def setup_logging(
        self,
        logging_config: LoggingConfig,
        log_file_path: Optional[Union[str, Path]] = None,
        console: bool = True,
    ) -> None:
        """
        Configure level, format and destinations.

        Args:
            logging_config: Logging settings
            log_file_path: Log file used when ``log_to_file`` is set and the
                config names no path itself
            console: Echo log lines to stderr
        """
        self._reset_handlers()
        self._logger.setLevel(getattr(logging, logging_config.level))

        formatter_factory = (
            _json_formatter if logging_config.format == "json" else _text_formatter
        )

        if console:
            self._add_handler(logging.StreamHandler(sys.stderr), formatter_factory())

        file_path = logging_config.log_file_path or log_file_path
        if logging_config.log_to_file and file_path:
            path = Path(file_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._add_handler(
                logging.FileHandler(path, mode="w", encoding="utf-8"),
                formatter_factory(),
            )
            self.log_file_path = path

    def debug(self, msg: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        self._logger.debug(msg, extra=extra)

    def info(self, msg: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        self._logger.info(msg, extra=extra)

    def warning(self, msg: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        self._logger.warning(msg, extra=extra)

    def error(
        self,
        msg: str,
        *,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False,
    ) -> None:
        self._logger.error(msg, extra=extra, exc_info=exc_info)

    def close(self) -> None:
        """Flush and detach all handlers, then release the run's logger."""
        self._reset_handlers()
        logging.Logger.manager.loggerDict.pop(self._logger.name, None)

    def __enter__(self) -> "ReconciliationLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _add_handler(self, handler: logging.Handler, formatter: logging.Formatter) -> None:
        handler.setFormatter(formatter)
        self._logger.addHandler(handler)

    def _reset_handlers(self) -> None:
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()
