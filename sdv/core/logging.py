"""
Channel-Aware Structured Logging for SDV.

Provides semantic logging channels with level-based filtering:
- ENGINE: validation runs, phase start/end, timing
- METADATA: head metadata checks
- STRUCTURE: body grammar matching
- LOADER: HTML parsing
- CONFIG: profile loading
- SYSTEM: errors, warnings, status

Log Levels:
- SILENT (0): No logging
- INFO (1): Key milestones only
- VERBOSE (2): Detailed operations
- DEBUG (3): Everything

Configuration via environment:
- SDV_LOG_LEVEL: Global level (silent/info/verbose/debug)
- SDV_LOG_FORMAT: Output format (console/json)
- SDV_LOG_CHANNELS: Comma-separated channel filter (all if not set)

Logs are written to stderr; stdout belongs to the CLI report.
"""

import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Optional, Union

import structlog


# =============================================================================
# Enums
# =============================================================================

class LogLevel(IntEnum):
    """Log verbosity levels."""
    SILENT = 0
    INFO = 1
    VERBOSE = 2
    DEBUG = 3

    @classmethod
    def from_string(cls, s: str) -> "LogLevel":
        """Parse log level from string."""
        mapping = {
            "silent": cls.SILENT,
            "info": cls.INFO,
            "verbose": cls.VERBOSE,
            "debug": cls.DEBUG,
            # stdlib compatibility
            "warning": cls.INFO,
            "error": cls.INFO,
        }
        return mapping.get(s.lower(), cls.INFO)


class LogChannel(str, Enum):
    """Semantic log channels."""
    ENGINE = "ENGINE"         # Validation run orchestration
    METADATA = "METADATA"     # Head metadata checks
    STRUCTURE = "STRUCTURE"   # Body grammar
    LOADER = "LOADER"         # HTML parsing
    CONFIG = "CONFIG"         # Profile loading
    SYSTEM = "SYSTEM"         # Errors, warnings, status

    @classmethod
    def all(cls) -> list["LogChannel"]:
        """Return all channels."""
        return list(cls)

    @classmethod
    def from_string(cls, s: str) -> Optional["LogChannel"]:
        """Parse channel from string."""
        try:
            return cls(s.upper())
        except ValueError:
            return None


# =============================================================================
# Configuration
# =============================================================================

# Context variable for run-scoped logging
_run_context: ContextVar[dict] = ContextVar("sdv_log_context", default={})

_config = {
    "level": LogLevel.INFO,
    "format": "console",
    "channels": set(LogChannel.all()),
    "configured": False,
}


def _parse_channels(channels: list[Union[LogChannel, str]]) -> list[LogChannel]:
    parsed_channels = []
    for ch in channels:
        if isinstance(ch, str):
            parsed = LogChannel.from_string(ch.strip())
            if parsed:
                parsed_channels.append(parsed)
        else:
            parsed_channels.append(ch)
    return parsed_channels


def configure_logging(
    level: Union[LogLevel, str, None] = None,
    format: Optional[str] = None,
    channels: Optional[list[Union[LogChannel, str]]] = None,
    force: bool = False,
) -> None:
    """
    Configure the logging system.

    Args:
        level: Log level (LogLevel enum or string)
        format: Output format ("console" or "json")
        channels: List of channels to enable (all if None)
        force: Force reconfiguration if already configured
    """
    if _config["configured"] and not force:
        return

    if level is None:
        level = LogLevel.from_string(os.environ.get("SDV_LOG_LEVEL", "info"))
    elif isinstance(level, str):
        level = LogLevel.from_string(level)

    if format is None:
        format = os.environ.get("SDV_LOG_FORMAT", "console")

    if channels is None:
        channels_str = os.environ.get("SDV_LOG_CHANNELS", "")
        channels = _parse_channels(channels_str.split(",")) if channels_str else []
        channels = channels or LogChannel.all()
    else:
        channels = _parse_channels(channels)

    _config["level"] = level
    _config["format"] = format
    _config["channels"] = set(channels)

    stdlib_level = {
        LogLevel.SILENT: logging.CRITICAL + 10,  # Above critical = nothing
        LogLevel.INFO: logging.INFO,
        LogLevel.VERBOSE: logging.DEBUG,
        LogLevel.DEBUG: logging.DEBUG,
    }.get(level, logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=stdlib_level,
        force=True,
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    _config["configured"] = True


# =============================================================================
# Channel Logger
# =============================================================================

class ChannelLogger:
    """
    A logger bound to a specific channel.

    Provides level-aware logging methods:
    - info(): Key milestones (level >= INFO)
    - verbose(): Detailed operations (level >= VERBOSE)
    - debug(): Everything (level >= DEBUG)
    - error(): Always logged (unless SILENT)
    - warning(): Always logged (unless SILENT)
    """

    def __init__(self, channel: LogChannel, name: Optional[str] = None):
        self.channel = channel
        self.name = name or f"sdv.{channel.value.lower()}"
        self._logger = structlog.get_logger(self.name)

    def _should_log(self, msg_level: LogLevel) -> bool:
        configure_logging()
        if self.channel not in _config["channels"]:
            return False
        return _config["level"] >= msg_level

    def _make_event(self, **kwargs) -> dict:
        data = {"channel": self.channel.value, **kwargs}
        ctx = _run_context.get()
        if ctx:
            data.update(ctx)
        return data

    def info(self, event: str, **kwargs) -> None:
        """Log at INFO level (key milestones)."""
        if not self._should_log(LogLevel.INFO):
            return
        self._logger.info(event, **self._make_event(**kwargs))

    def verbose(self, event: str, **kwargs) -> None:
        """Log at VERBOSE level (detailed operations)."""
        if not self._should_log(LogLevel.VERBOSE):
            return
        self._logger.debug(event, **self._make_event(verbosity="verbose", **kwargs))

    def debug(self, event: str, **kwargs) -> None:
        """Log at DEBUG level (everything)."""
        if not self._should_log(LogLevel.DEBUG):
            return
        self._logger.debug(event, **self._make_event(verbosity="debug", **kwargs))

    def error(self, event: str, **kwargs) -> None:
        """Log an error (always logged unless SILENT)."""
        configure_logging()
        if _config["level"] == LogLevel.SILENT:
            return
        self._logger.error(event, **self._make_event(**kwargs))

    def warning(self, event: str, **kwargs) -> None:
        """Log a warning (always logged unless SILENT)."""
        configure_logging()
        if _config["level"] == LogLevel.SILENT:
            return
        self._logger.warning(event, **self._make_event(**kwargs))

    def bind(self, **kwargs) -> "ChannelLogger":
        """Create a new logger with additional bound context."""
        new_logger = ChannelLogger(channel=self.channel, name=self.name)
        new_logger._logger = self._logger.bind(**kwargs)
        return new_logger


def get_logger(channel: Union[LogChannel, str] = LogChannel.SYSTEM) -> ChannelLogger:
    """
    Get a channel-specific logger.

    Logging is configured on the first message, not at import time, so
    module-level loggers pick up the CLI's configuration.
    """
    if isinstance(channel, str):
        channel = LogChannel.from_string(channel) or LogChannel.SYSTEM
    return ChannelLogger(channel=channel)


# =============================================================================
# Run Context Management
# =============================================================================

def bind_run_context(**kwargs) -> None:
    """Bind context that will be included in all log messages."""
    ctx = _run_context.get().copy()
    ctx.update(kwargs)
    _run_context.set(ctx)


def clear_run_context() -> None:
    """Clear the run context."""
    _run_context.set({})


# =============================================================================
# ValidationLogger
# =============================================================================

class ValidationLogger:
    """
    Context-aware logger for a single validation run.

    Binds the document source to every message logged during the run.
    """

    def __init__(self, source: Optional[str]):
        self.source = source or "<memory>"
        self._engine_log = get_logger(LogChannel.ENGINE)
        self._start_time = datetime.now()
        self._phase_times: dict[str, float] = {}

        bind_run_context(source=self.source)

    def phase_start(self, phase: str) -> None:
        """Log the start of a validation phase."""
        self._phase_times[phase] = datetime.now().timestamp()
        self._engine_log.verbose("phase_started", phase=phase)

    def phase_end(self, phase: str, **metrics: Any) -> None:
        """Log the end of a validation phase with timing."""
        start = self._phase_times.get(phase, datetime.now().timestamp())
        duration_ms = (datetime.now().timestamp() - start) * 1000
        self._engine_log.verbose(
            "phase_completed",
            phase=phase,
            duration_ms=round(duration_ms, 2),
            **metrics,
        )

    def fatal(self, phase: str, reason: str) -> None:
        """Log a fatal abort."""
        self._engine_log.error("validation_fatal", phase=phase, reason=reason)

    def complete(self, status: str, **metrics: Any) -> float:
        """Log run completion; returns the total duration in milliseconds."""
        total_ms = (datetime.now() - self._start_time).total_seconds() * 1000
        self._engine_log.info(
            "validation_complete",
            status=status,
            total_duration_ms=round(total_ms, 2),
            **metrics,
        )
        clear_run_context()
        return total_ms


def get_current_config() -> dict:
    """Get the current logging configuration (for testing/debugging)."""
    return {
        "level": _config["level"].name,
        "format": _config["format"],
        "channels": [ch.value for ch in _config["channels"]],
    }
