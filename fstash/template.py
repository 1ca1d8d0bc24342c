"""Rendering of stash files against per-file JSON data with Jinja2."""

import json
import logging
import os
from typing import Any, Dict, Mapping, Optional

import jinja2

from .exceptions import TemplateDataError, TemplateRenderError, TemplateSyntaxError


logger = logging.getLogger(__name__)

ENCODING = "utf8"


def template_key(filename: str) -> str:
    """Return the template data key of `filename`: its base name with the
    last extension removed. Directories play no part, so ``a/config.yaml``
    and ``b/config.json`` share the key ``config``.
    """
    return os.path.splitext(os.path.basename(filename))[0]


def lookup(template_data: Optional[Mapping[str, str]], filename: str) -> str:
    """Return the stripped raw JSON text for `filename`, or ``""``."""
    if not template_data:
        return ""
    return (template_data.get(template_key(filename)) or "").strip()


def make_environment(strict: bool = False) -> jinja2.Environment:
    """Build the template environment.

    Missing fields render as empty strings unless `strict` is set, in which
    case they raise :class:`TemplateRenderError`.
    """
    return jinja2.Environment(
        undefined=jinja2.StrictUndefined if strict else jinja2.ChainableUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )


def load_data(raw: str, path: str) -> Dict[str, Any]:
    """Decode `raw` as a JSON object."""
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise TemplateDataError(path, "invalid JSON data: {0}".format(exc)) from exc

    if not isinstance(data, dict):
        raise TemplateDataError(
            path, "template data must be a JSON object, got {0}".format(type(data).__name__)
        )

    return data


def render(content: bytes,
           raw: str,
           path: str,
           env: Optional[jinja2.Environment] = None) -> bytes:
    """Render `content` as a template against the JSON object in `raw`.

    Args:
        content: Template source, UTF-8 encoded.
        raw: JSON object text holding the template variables.
        path: Name of the file being rendered, used in error messages.
        env: Environment to parse with. Defaults to a forgiving one.

    Returns:
        The rendered output, UTF-8 encoded.

    Raises:
        TemplateDataError: If `raw` is not a JSON object.
        TemplateSyntaxError: If `content` is not valid template source.
        TemplateRenderError: If rendering fails.
    """
    data = load_data(raw, path)

    if env is None:
        env = make_environment()

    try:
        text = content.decode(ENCODING)
    except UnicodeDecodeError as exc:
        raise TemplateSyntaxError(path, "not a {0} text file".format(ENCODING)) from exc

    # Jinja2 rewrites every line ending to newline_sequence.
    if "\r\n" in text:
        env = env.overlay(newline_sequence="\r\n")

    try:
        template = env.from_string(text)
    except jinja2.TemplateSyntaxError as exc:
        raise TemplateSyntaxError(
            path, "line {0}: {1}".format(exc.lineno, exc.message)
        ) from exc

    try:
        output = template.render(data)
    except (jinja2.TemplateError, ArithmeticError, LookupError, TypeError, ValueError) as exc:
        raise TemplateRenderError(path, str(exc)) from exc

    logger.debug("rendered %s with %d variable(s)", path, len(data))

    return output.encode(ENCODING)
