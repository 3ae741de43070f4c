"""Logging utilities for Typeport."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class ExportStats:
    """Statistics from one export run."""

    exported_count: int = 0
    failed_count: int = 0
    outputs: list[str] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate export duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("typeport")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class ExportLogger:
    """Logger for tracking exporter outcomes and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger("typeport.export")
        self._stats = ExportStats()

    def log_run_start(self, doc_exporters: int, artifact_exporters: int) -> None:
        """Log start of an export run."""
        self._stats.start_time = time.time()
        self._logger.info(
            "Export started",
            doc_exporters=doc_exporters,
            artifact_exporters=artifact_exporters,
        )

    def log_export_complete(self, exporter: str, target: str, duration_ms: float) -> None:
        """Log successful export."""
        self._logger.info(
            "Export complete",
            exporter=exporter,
            target=target,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.exported_count += 1
        self._stats.outputs.append(target)

    def log_export_error(
        self,
        exporter: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log exporter failure."""
        self._logger.error(
            "Export failed",
            exporter=exporter,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.failed_count += 1
        self._stats.errors.append((exporter, str(error)))

    def log_run_complete(self) -> None:
        """Log end of an export run."""
        self._stats.end_time = time.time()
        self._logger.info(
            "Export finished",
            exported=self._stats.exported_count,
            failed=self._stats.failed_count,
            duration_seconds=round(self._stats.duration_seconds, 2),
        )

    @property
    def stats(self) -> ExportStats:
        """Get current export statistics."""
        return self._stats
