"""Structured logging utilities for CasePilot."""

import logging
import sys
import time
from datetime import datetime
from typing import Any, Dict, Optional

import structlog
from rich.console import Console


def configure_logging(
    log_level: str = "INFO",
    verbose: bool = False,
    structured: bool = True
) -> None:
    """Configure structured logging for CasePilot.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        verbose: Force DEBUG level
        structured: Use JSON lines instead of the console renderer
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if structured:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    level = "DEBUG" if verbose else log_level.upper()

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level, logging.INFO)
        ),
        # Resolve stderr per logger so redirected streams are honoured
        logger_factory=lambda *args: structlog.PrintLogger(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = "casepilot") -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return structlog.get_logger(name)


class CasePilotLogger:
    """Logger that mirrors warnings and progress to a rich console."""

    def __init__(
        self,
        name: str = "casepilot",
        console: Optional[Console] = None,
        verbose: bool = False
    ):
        """Initialize CasePilot logger.

        Args:
            name: Logger name
            console: Rich console for output
            verbose: Echo debug messages to the console
        """
        self.name = name
        self.logger = get_logger(name)
        self.console = console or Console(stderr=True)
        self.verbose = verbose
        self._context: Dict[str, Any] = {}

    def bind(self, **kwargs) -> "CasePilotLogger":
        """Return a new logger with extra context bound."""
        new_logger = CasePilotLogger(
            name=self.name,
            console=self.console,
            verbose=self.verbose
        )
        new_logger.logger = self.logger.bind(**kwargs)
        new_logger._context = {**self._context, **kwargs}
        return new_logger

    def debug(self, message: str, **kwargs) -> None:
        if self.verbose:
            self.console.print(f"[dim]DEBUG: {message}[/dim]")
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self.console.print(f"[yellow]WARNING: {message}[/yellow]")
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self.console.print(f"[red]ERROR: {message}[/red]")
        self.logger.error(message, **kwargs)

    def success(self, message: str, **kwargs) -> None:
        self.console.print(f"[green]✓ {message}[/green]")
        self.logger.info(f"SUCCESS: {message}", **kwargs)

    def log_operation_start(self, operation: str, **context) -> "CasePilotLogger":
        """Log operation start and return a logger bound to it.

        Args:
            operation: Operation name
            **context: Additional context

        Returns:
            Logger bound with operation context
        """
        operation_logger = self.bind(
            operation=operation,
            operation_start=datetime.now().isoformat(),
            **context
        )
        operation_logger.info(f"Starting {operation}")
        return operation_logger

    def log_operation_end(
        self,
        operation: str,
        success: bool = True,
        duration: Optional[float] = None,
        **context
    ) -> None:
        """Log operation completion.

        Args:
            operation: Operation name
            success: Whether operation succeeded
            duration: Operation duration in seconds
            **context: Additional context
        """
        status = "completed" if success else "failed"
        message = f"Operation {operation} {status}"

        log_context = {
            "success": success,
            "operation_end": datetime.now().isoformat(),
            **context
        }

        if duration is not None:
            log_context["duration_seconds"] = duration
            message += f" in {duration:.2f}s"

        if success:
            self.success(message, **log_context)
        else:
            self.error(message, **log_context)

    def get_context(self) -> Dict[str, Any]:
        """Get current logger context."""
        return self._context.copy()


class LoggingContext:
    """Context manager timing and logging an operation."""

    def __init__(self, logger: CasePilotLogger, operation: str, **context):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.start_time: Optional[float] = None
        self.operation_logger: Optional[CasePilotLogger] = None
        self.manual_success: Optional[bool] = None

    def __enter__(self) -> CasePilotLogger:
        self.start_time = time.time()
        self.operation_logger = self.logger.log_operation_start(
            self.operation, **self.context
        )
        return self.operation_logger

    def set_success(self, success: bool) -> None:
        """Override the exception-based success status."""
        self.manual_success = success

    def __exit__(self, exc_type, exc_value, traceback):
        duration = time.time() - self.start_time if self.start_time is not None else None

        if self.manual_success is not None:
            success = self.manual_success
        else:
            success = exc_type is None

        if self.operation_logger:
            self.operation_logger.log_operation_end(
                self.operation,
                success=success,
                duration=duration
            )

        return False
