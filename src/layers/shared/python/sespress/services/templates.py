"""Mail template lookup and rendering.

Templates are files containing ``{{variable}}`` placeholders. A resolver
maps a template name to a file in one of its search directories (the first
directory that has the file wins). A renderer fills in the placeholders.
"""

import os
import re
from pathlib import Path
from typing import Any, Protocol

import structlog

from sespress.utils.exceptions import TemplateError

logger = structlog.get_logger()

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


class TemplateResolver(Protocol):
    """Finds a template file by name."""

    def resolve(self, name: str) -> Path | None:
        """Return the template path, or None if not found."""
        ...


class TemplateRenderer(Protocol):
    """Renders a template file with a variable mapping."""

    def render(self, path: Path, variables: dict[str, Any]) -> str:
        """Return rendered output.

        Raises:
            TemplateError: If the template cannot be rendered.
        """
        ...


class FileTemplateResolver:
    """Resolve template names against an ordered list of directories."""

    def __init__(self, search_paths: list[str | Path] | None = None):
        """Initialize resolver.

        Args:
            search_paths: Directories to search, in priority order. Defaults
                to the ``SESPRESS_TEMPLATE_PATHS`` env var (os.pathsep separated).
        """
        if search_paths is None:
            raw = os.environ.get("SESPRESS_TEMPLATE_PATHS", "")
            search_paths = [p for p in raw.split(os.pathsep) if p]
        self.search_paths = [Path(p) for p in search_paths]

    def resolve(self, name: str) -> Path | None:
        if not name or Path(name).is_absolute():
            return None

        for base in self.search_paths:
            try:
                root = base.resolve()
                candidate = (root / name).resolve()
                # Names must not escape the search directory
                if not candidate.is_relative_to(root):
                    logger.warning("Template path escapes search directory", template=name[:100])
                    return None
                if candidate.is_file():
                    return candidate
            except (OSError, ValueError) as e:
                # Embedded NUL bytes, over-long names
                logger.warning("Invalid template name", template=name[:100], error=str(e))
                return None
        return None


class PlaceholderTemplateRenderer:
    """Render ``{{name}}`` placeholders. Unknown names render as empty strings."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def render(self, path: Path, variables: dict[str, Any]) -> str:
        try:
            source = Path(path).read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateError(f"Failed to read template: {e}", template=str(path)) from e

        return render_string(source, variables)


def render_string(template: str, variables: dict[str, Any]) -> str:
    """Substitute ``{{name}}`` placeholders in a template string.

    Args:
        template: Template source.
        variables: Placeholder values.

    Returns:
        Rendered string.
    """

    def replace_var(match: re.Match) -> str:
        value = variables.get(match.group(1).strip())
        return str(value) if value is not None else ""

    return PLACEHOLDER_PATTERN.sub(replace_var, template)
