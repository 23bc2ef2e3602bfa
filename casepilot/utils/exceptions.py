"""Exception handling utilities for CasePilot."""

from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table


class CasePilotError(Exception):
    """Base exception for CasePilot errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
        error_code: Optional[str] = None
    ):
        """Initialize CasePilot error.

        Args:
            message: Error message
            details: Additional error details
            suggestion: Suggestion for fixing the error
            error_code: Error code for categorization
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.suggestion = suggestion
        self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary.

        Returns:
            Error dictionary representation
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "suggestion": self.suggestion,
            "error_code": self.error_code
        }


class InvalidInputError(CasePilotError, ValueError):
    """Endpoint or recommendation rejected before generation."""
    pass


class ConfigurationError(CasePilotError):
    """Configuration related errors."""
    pass


class DescriptorLoadError(CasePilotError):
    """Endpoint descriptor file errors."""
    pass


class RecommendationError(CasePilotError):
    """Strategy recommendation errors."""
    pass


class TestGenerationError(CasePilotError):
    """Test case synthesis errors."""

    __test__ = False


class FileOperationError(CasePilotError):
    """File operation errors."""
    pass


class ErrorHandler:
    """Centralized error reporting."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        """Initialize error handler.

        Args:
            console: Rich console for output
            verbose: Show tracebacks
        """
        self.console = console or Console(stderr=True)
        self.verbose = verbose
        self.error_counts: Dict[str, int] = {}

    def handle_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: Optional[bool] = None
    ) -> None:
        """Count and display an error.

        Args:
            error: Exception to handle
            context: Additional context information
            show_traceback: Whether to show traceback (defaults to verbose setting)
        """
        error_type = type(error).__name__
        self.error_counts[error_type] = self.error_counts.get(error_type, 0) + 1

        if show_traceback is None:
            show_traceback = self.verbose

        lines = [f"[red]{error.message if isinstance(error, CasePilotError) else error}[/red]"]

        if isinstance(error, CasePilotError) and error.details:
            lines.extend(["", "[bold]Details:[/bold]"])
            lines.extend(f"  {key}: {value}" for key, value in error.details.items())

        if context:
            lines.extend(["", "[bold]Context:[/bold]"])
            lines.extend(f"  {key}: {value}" for key, value in context.items())

        if isinstance(error, CasePilotError) and error.suggestion:
            lines.extend(["", f"[yellow]Suggestion: {error.suggestion}[/yellow]"])

        title = error_type
        if isinstance(error, CasePilotError) and error.error_code:
            title += f" ({error.error_code})"

        self.console.print(Panel("\n".join(lines), title=title, border_style="red"))

        if show_traceback:
            self.console.print("\n[dim]Traceback:[/dim]")
            self.console.print_exception(show_locals=True)

    def get_error_summary(self) -> Dict[str, int]:
        """Get summary of handled errors.

        Returns:
            Dictionary mapping error types to counts
        """
        return self.error_counts.copy()

    def show_error_summary(self) -> None:
        """Display error summary table."""
        if not self.error_counts:
            return

        table = Table(title="Error Summary", show_header=True, header_style="bold magenta")
        table.add_column("Error Type", style="cyan")
        table.add_column("Count", justify="right", style="red")

        for error_type, count in sorted(self.error_counts.items()):
            table.add_row(error_type, str(count))

        self.console.print(table)

    def clear_error_counts(self) -> None:
        """Clear error count tracking."""
        self.error_counts.clear()


class ErrorContext:
    """Context manager reporting exceptions to an ``ErrorHandler``."""

    def __init__(self, handler: ErrorHandler, operation: str, **context):
        self.handler = handler
        self.operation = operation
        self.context = {"operation": operation, **context}

    def __enter__(self) -> "ErrorContext":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is not None:
            self.handler.handle_error(exc_value, self.context)
        # Never suppress
        return False


def convert_exception_to_casepilot_error(
    exc: Exception,
    operation: str,
    suggestion: Optional[str] = None
) -> CasePilotError:
    """Convert generic exception to a CasePilot error.

    Args:
        exc: Original exception
        operation: Operation that caused the error
        suggestion: Optional suggestion for fixing

    Returns:
        CasePilot error with appropriate type
    """
    if isinstance(exc, CasePilotError):
        return exc

    error_mapping = {
        OSError: FileOperationError,
        PermissionError: FileOperationError,
        FileNotFoundError: FileOperationError,
        ValueError: InvalidInputError,
        TypeError: InvalidInputError,
    }

    error_class = error_mapping.get(type(exc), CasePilotError)

    return error_class(
        message=f"{operation} failed: {exc}",
        details={
            "original_exception": type(exc).__name__,
            "original_message": str(exc),
            "operation": operation
        },
        suggestion=suggestion
    )
