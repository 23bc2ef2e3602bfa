"""File utility functions."""

import re
from pathlib import Path
from typing import Optional, Set, Union


def sanitize_filename(filename: str, replacement: str = "_") -> str:
    """Sanitize filename by removing invalid characters.

    Args:
        filename: Original filename
        replacement: Character to replace invalid chars with

    Returns:
        Sanitized filename
    """
    filename = re.sub(r'[<>:"/\\|?*]', replacement, filename)
    filename = "".join(char for char in filename if ord(char) >= 32)
    filename = filename.strip(" .")

    if not filename:
        filename = "unnamed"

    return filename[:200]


def ensure_directory(path: Union[str, Path]) -> Path:
    """Ensure directory exists, creating if necessary.

    Raises:
        OSError: If directory cannot be created
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_unique_filename(
    base_path: Union[str, Path],
    max_attempts: int = 1000,
    reserved: Optional[Set[Path]] = None
) -> Path:
    """Get unique filename by appending a counter if the file exists.

    Args:
        base_path: Base file path
        max_attempts: Maximum attempts to find unique name
        reserved: Paths already claimed but possibly not written yet

    Returns:
        Unique file path

    Raises:
        ValueError: If unable to find unique name within max_attempts
    """
    base_path = Path(base_path)
    reserved = reserved or set()

    if not base_path.exists() and base_path not in reserved:
        return base_path

    for i in range(1, max_attempts + 1):
        new_path = base_path.parent / f"{base_path.stem}_{i}{base_path.suffix}"
        if not new_path.exists() and new_path not in reserved:
            return new_path

    raise ValueError(f"Unable to find unique filename after {max_attempts} attempts")


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 ** 2:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 ** 3:
        return f"{size_bytes / (1024 ** 2):.1f} MB"
    return f"{size_bytes / (1024 ** 3):.1f} GB"


def create_path_slug(path: str) -> str:
    """Create a filesystem-safe slug from an API path.

    Args:
        path: API path like "/users/{id}/posts"

    Returns:
        Safe slug like "users_id_posts"
    """
    slug = path.strip("/").replace("/", "_").replace("{", "").replace("}", "")
    slug = re.sub(r"_+", "_", slug).strip("_")

    if not slug:
        slug = "root"

    return sanitize_filename(slug)
