"""Policy templates: template text + variables -> list of PolicyDocument (Jinja).

Templates use Jinja syntax. For compatibility with templates written for
the Go tool, a leading-dot field reference such as ``{{ .ZoneID }}`` is
accepted and means the same as ``{{ ZoneID }}``. Booleans print as
``true``/``false`` and None as an empty string. Variables missing from
the context render as an empty string; guard optional ones with
``{% if Name %}``.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, TemplateError
from jinja2.ext import Extension
from pydantic import ValidationError

from cftoken.domain.entities.policy import PolicyDocument
from cftoken.domain.exceptions import (
    InvalidPolicyEffect,
    NoTemplateSource,
    TemplateOutputInvalid,
    TemplateReadError,
    TemplateSyntaxInvalid,
)
from cftoken.schemas.policy import PolicyListAdapter
from cftoken.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_TAG_RE = re.compile(r"(\{\{-?|\{%-?)(.*?)(-?\}\}|-?%\})", re.DOTALL)
_DOT_FIELD_RE = re.compile(r"(^|[\s(\[,=!<>+])\.([A-Za-z_]\w*)")


class DotFieldExtension(Extension):
    """Rewrites ``.Name`` at the start of an expression to ``Name`` inside tags."""

    def preprocess(
        self, source: str, name: str | None, filename: str | None = None
    ) -> str:
        return _TAG_RE.sub(
            lambda m: m.group(1) + _DOT_FIELD_RE.sub(r"\1\2", m.group(2)) + m.group(3),
            source,
        )


def _finalize(value: Any) -> Any:
    """Print booleans as JSON literals and None as an empty string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return value


def expand_path(path: str) -> str:
    """Expand a leading ~ to the home directory, then environment variables."""
    return os.path.expandvars(os.path.expanduser(path))


class PolicyTemplateRenderer:
    """Renders policy templates (file or inline) into PolicyDocuments."""

    def __init__(self, env: Environment | None = None) -> None:
        """Initialize with an optional Jinja environment (mainly for tests)."""
        self._env = env or Environment(
            autoescape=False,
            keep_trailing_newline=True,
            extensions=[DotFieldExtension],
            finalize=_finalize,
        )

    def render_text(
        self,
        template_text: str,
        variables: Mapping[str, Any],
        template_name: str = "inline",
    ) -> str:
        """Render template text with variables. Same input always gives the same output.

        Raises:
            TemplateSyntaxInvalid: If the template fails to parse or execute.
        """
        try:
            template = self._env.from_string(template_text)
            return template.render(dict(variables))
        except TemplateError as e:
            raise TemplateSyntaxInvalid(template_name, str(e)) from e

    def render(
        self,
        template_file: str | None,
        template_inline: str | None,
        variables: Mapping[str, Any],
    ) -> list[PolicyDocument]:
        """Render a template and parse its output as a JSON array of policies.

        The inline template is used when both sources are given.

        Raises:
            NoTemplateSource: If neither source is given.
            TemplateReadError: If the template file cannot be read.
            TemplateSyntaxInvalid: If the template fails to parse or execute.
            TemplateOutputInvalid: If the output is not a JSON array of policies.
              Also raised when a policy effect is not 'allow' or 'deny'.
        """
        if template_inline:
            if template_file:
                logger.warning(
                    "both template_file and template_inline given; using the inline template"
                )
            text, name = template_inline, "inline"
        elif template_file:
            path = expand_path(template_file)
            try:
                text = Path(path).read_text(encoding="utf-8")
            except OSError as e:
                raise TemplateReadError(path, e.strerror or str(e)) from e
            name = os.path.basename(path)
        else:
            raise NoTemplateSource()

        rendered = self.render_text(text, variables, name).strip()
        logger.debug("rendered policy template %s:\n%s", name, rendered)
        try:
            schemas = PolicyListAdapter.validate_json(rendered)
        except ValidationError as e:
            raise TemplateOutputInvalid(rendered, _summarize(e)) from e
        try:
            return [schema.to_entity() for schema in schemas]
        except InvalidPolicyEffect as e:
            raise TemplateOutputInvalid(rendered, e.message) from e


def _summarize(error: ValidationError) -> str:
    """One-line summary of the first validation problem."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"{first.get('msg', 'invalid')} at {location}"
    return first.get("msg", "invalid")


def render_policies(
    template_file: str | None,
    template_inline: str | None,
    variables: Mapping[str, Any],
) -> list[PolicyDocument]:
    """Render with a default PolicyTemplateRenderer (see PolicyTemplateRenderer.render)."""
    return PolicyTemplateRenderer().render(template_file, template_inline, variables)
