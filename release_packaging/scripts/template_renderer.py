"""
Template rendering for release packaging.

Wraps pystache so that literal configuration values are returned as-is
and only values containing Mustache syntax are rendered. Rendering is
strict: a reference to a key missing from the context is an error rather
than an empty string.
"""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pystache
from pystache.common import PystacheError
from pystache.parser import ParsingError

from . import config
from .errors import ConfigurationError, TemplateError

TEMPLATE_DELIMITER = "{{"

DEFAULT_TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

_renderer = pystache.Renderer(
    missing_tags='strict',  # Raise error on missing variables
    escape=lambda x: x,     # Don't HTML-escape (JSON and markdown output)
)


def is_template(value: Any) -> bool:
    """Return True if value is a string containing Mustache syntax."""
    return isinstance(value, str) and TEMPLATE_DELIMITER in value


def render_text(
    template_text: str,
    context: Mapping[str, Any],
    target: str = "",
    field: str = "",
) -> str:
    """
    Render template text against a context.

    Args:
        template_text: Mustache template
        context: Release context; never modified
        target: Target name reported on failure
        field: Field or template name reported on failure

    Returns:
        Rendered text

    Raises:
        TemplateError: On unknown keys or template syntax errors
    """
    try:
        return _renderer.render(template_text, dict(context))
    except (PystacheError, ParsingError) as e:
        raise TemplateError(str(e) or type(e).__name__, target=target, field=field) from e


def render_field(
    raw_value: Any,
    context: Mapping[str, Any],
    target: str = "",
    field: str = "",
) -> Any:
    """
    Render a single configuration value.

    Values without template syntax are returned unchanged, so literals
    containing characters meaningful to the engine are never interpreted.
    """
    if not is_template(raw_value):
        return raw_value
    return render_text(raw_value, context, target=target, field=field)


def trim_tpl_extension(file_name: str) -> str:
    """Strip the template suffix from a template file name."""
    if file_name.endswith(config.TEMPLATE_SUFFIX):
        return file_name[: -len(config.TEMPLATE_SUFFIX)]
    return file_name


class TemplateLoader:
    """
    Loads the templates of one tool from a template directory.

    Example:
        loader = TemplateLoader("scoop")
        for name, text in loader.load_all().items():
            ...
    """

    def __init__(self, tool_name: str, template_dir: Optional[Path] = None):
        """
        Initialize template loader.

        Args:
            tool_name: Subdirectory holding the tool's templates
            template_dir: Root template directory (defaults to the bundled templates)
        """
        root = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
        self.template_dir = root / tool_name

    def list_templates(self) -> List[str]:
        """List template file names, sorted for deterministic output."""
        if not self.template_dir.exists():
            return []

        return sorted(
            f.name for f in self.template_dir.glob(f"*{config.TEMPLATE_SUFFIX}")
            if f.is_file()
        )

    def load_all(self) -> Dict[str, str]:
        """
        Read every template of the tool.

        Raises:
            FileNotFoundError: If the tool has no templates
            ConfigurationError: If a template cannot be read as UTF-8 text
        """
        names = self.list_templates()
        if not names:
            raise FileNotFoundError(f"No templates found in {self.template_dir}")

        templates = {}
        for name in names:
            path = self.template_dir / name
            try:
                templates[name] = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise ConfigurationError(f"Cannot read template {path}: {e}") from e
        return templates
