"""
liveconfig Logging Configuration

Structured logging setup using structlog with JSON output for production
and human-readable output for development.
"""

import logging
import logging.config
import sys

import structlog


def setup_logging(
    log_level: str = "INFO",
    environment: str = "development",
    enable_json: bool = False,
) -> None:
    """Setup structured logging configuration."""

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Add environment-specific processors
    if environment == "production" or enable_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


class ReloadEventLogger:
    """Logger for config reload outcomes with structured data."""

    def __init__(self):
        self.logger = get_logger("liveconfig.reload")

    def log_reload(
        self,
        config_file: str,
        result: str,
        duration_ms: float,
        **kwargs
    ) -> None:
        """Log a finished reload attempt."""
        level = "info" if result == "success" else "warning"
        getattr(self.logger, level)(
            "config_reload",
            config_file=config_file,
            result=result,
            duration_ms=round(duration_ms, 3),
            **kwargs
        )

    def log_watcher_event(
        self,
        event_type: str,
        config_file: str,
        strategy: str,
        **kwargs
    ) -> None:
        """Log watcher lifecycle events (start, stop, restart)."""
        self.logger.info(
            "watcher_event",
            event_type=event_type,
            config_file=config_file,
            strategy=strategy,
            **kwargs
        )
