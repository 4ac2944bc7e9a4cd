"""
Jinja2 rendering of .tf templates.

Rendering is plain variable substitution: the output is not parsed or
validated, Terraform does that when it consumes the text. Undefined
variables are errors so a typo never renders as an empty string.
"""

import logging
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, TemplateNotFound

from tfgoogle import constants as CONSTANTS
from tfgoogle.core.exceptions import TemplateRenderError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


def _environment(loader=None) -> Environment:
    return Environment(
        loader=loader,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )


_file_environment = _environment(FileSystemLoader(str(TEMPLATES_DIR)))
_string_environment = _environment()


def template_source(template_name: str) -> str:
    """Raw text of a packaged template (without the .tf.j2 suffix)."""
    path = TEMPLATES_DIR / f"{template_name}{CONSTANTS.EXAMPLE_TEMPLATE_SUFFIX}"
    if not path.exists():
        raise TemplateRenderError(template_name, "template not found")
    return path.read_text(encoding="utf-8")


def render_template(template_name: str, context: Mapping[str, Any]) -> str:
    """
    Render a packaged template.

    Args:
        template_name: File name without the .tf.j2 suffix
        context: Template variables

    Raises:
        TemplateRenderError: If the template does not exist or a variable is undefined
    """
    try:
        template = _file_environment.get_template(f"{template_name}{CONSTANTS.EXAMPLE_TEMPLATE_SUFFIX}")
    except TemplateNotFound:
        raise TemplateRenderError(template_name, "template not found")

    try:
        rendered = template.render(**context)
    except TemplateError as e:
        raise TemplateRenderError(template_name, str(e))

    logger.debug(f"Rendered template {template_name} ({len(rendered)} chars)")
    return rendered


def render_string(text: str, context: Mapping[str, Any], name: str = "<string>") -> str:
    """Render an inline template string (used for acceptance test configs)."""
    try:
        return _string_environment.from_string(text).render(**context)
    except TemplateError as e:
        raise TemplateRenderError(name, str(e))
