"""Output management for generated test suites."""

import json
from pathlib import Path
from typing import Dict, List, Optional, Union

import aiofiles
from rich.console import Console

from casepilot.models.config import OutputConfig
from casepilot.models.test_case import TestSuite
from casepilot.utils.concurrency import execute_with_concurrency
from casepilot.utils.exceptions import FileOperationError
from casepilot.utils.file_utils import (
    create_path_slug, ensure_directory, format_file_size,
    get_unique_filename, sanitize_filename
)


class OutputManager:
    """Writes one JSON file per test suite."""

    def __init__(self, config: Optional[OutputConfig] = None, console: Optional[Console] = None):
        """Initialize output manager.

        Args:
            config: Output configuration
            console: Rich console for output
        """
        self.config = config or OutputConfig()
        self.console = console or Console()

        self.generated_files: List[Path] = []
        self.total_size = 0

    async def save_suite(self, suite: TestSuite, custom_filename: Optional[str] = None) -> Path:
        """Save a test suite to a JSON file.

        Args:
            suite: Test suite to save
            custom_filename: Optional filename overriding the template

        Returns:
            Path to saved file

        Raises:
            FileOperationError: If the file cannot be written
        """
        output_path = None
        try:
            output_path = self._get_output_path(suite, custom_filename)
            content = self.format_suite(suite)

            async with aiofiles.open(output_path, 'w', encoding='utf-8') as f:
                await f.write(content)

            self.total_size += len(content.encode('utf-8'))
            return output_path

        except OSError as e:
            if output_path in self.generated_files:
                self.generated_files.remove(output_path)
            raise FileOperationError(
                f"Failed to save test suite for {suite.endpoint.get_endpoint_id()}: {e}",
                details={"directory": self.config.directory},
                suggestion="Check that the output directory is writable",
            ) from e

    async def save_suites(self, suites: List[TestSuite], max_workers: int = 4) -> List[Path]:
        """Save several suites concurrently; failures are reported and skipped."""
        results = await execute_with_concurrency(
            [self.save_suite(suite) for suite in suites], max_workers=max_workers
        )

        saved_paths = []
        for result in results:
            if isinstance(result, Exception):
                self.console.print(f"[red]Error saving suite: {result}[/red]")
            else:
                saved_paths.append(result)
        return saved_paths

    def format_suite(self, suite: TestSuite) -> str:
        return json.dumps(suite.to_export_dict(), indent=self.config.indent or None, ensure_ascii=False)

    def _get_output_path(self, suite: TestSuite, custom_filename: Optional[str] = None) -> Path:
        output_dir = ensure_directory(self.config.directory)

        filename = custom_filename or self._generate_filename(suite)
        if not filename.endswith(".json"):
            filename += ".json"

        # Paths claimed by concurrent saves count as taken
        output_path = get_unique_filename(output_dir / filename, reserved=set(self.generated_files))
        self.generated_files.append(output_path)
        return output_path

    def _generate_filename(self, suite: TestSuite) -> str:
        endpoint = suite.endpoint
        filename = self.config.filename_template.format(
            method=endpoint.method.lower(),
            path_slug=create_path_slug(endpoint.path),
            operation_id=endpoint.operation_id or "operation",
        )

        if self.config.include_timestamp:
            stem, dot, suffix = filename.rpartition(".")
            timestamp = suite.generated_at.strftime(self.config.timestamp_format)
            filename = f"{stem}_{timestamp}.{suffix}" if dot else f"{filename}_{timestamp}"

        return sanitize_filename(filename)

    def get_output_summary(self) -> Dict[str, Union[int, str, List[str]]]:
        """Summary of files written so far."""
        return {
            "files_generated": len(self.generated_files),
            "total_size": self.total_size,
            "total_size_formatted": format_file_size(self.total_size),
            "output_directory": str(Path(self.config.directory).resolve()),
            "files": [str(path) for path in self.generated_files],
        }

    def clear_tracking(self) -> None:
        self.generated_files.clear()
        self.total_size = 0
