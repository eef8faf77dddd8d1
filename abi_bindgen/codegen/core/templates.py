"""Jinja2 rendering for generated bindings."""

from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import (
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError as JinjaTemplateError,
)


class TemplateError(Exception):
    """A binding template is missing or failed to render."""

    pass


def _python_literal(value: Any) -> str:
    return repr(value)


class TemplateEngine:
    """Loads templates from one directory and renders them strictly.

    Undefined variables raise instead of rendering as empty strings, so a
    context missing a key fails generation rather than emitting broken code.
    """

    def __init__(self, template_dir: Optional[Path] = None):
        self.template_dir = template_dir
        if template_dir is not None and template_dir.is_dir():
            loader = FileSystemLoader(str(template_dir))
        else:
            loader = DictLoader({})

        self.env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.env.filters["pyrepr"] = _python_literal

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render ``template_name`` with ``context``.

        Raises:
            TemplateError: If the template is missing or rendering fails
        """
        try:
            return self.env.get_template(template_name).render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, optionally backed by a template directory."""
    return TemplateEngine(template_dir)
