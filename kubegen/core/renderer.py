"""Minimal placeholder/loop template engine for manifest templates.

Supported syntax::

    {{KEY}}                  replaced by the scalar bound to KEY
    {{#NAME}} ... {{/NAME}}  body repeated once per item of the list bound to NAME

Loops are expanded first, then placeholders. Each loop item is rendered with
only its own variables. Unknown placeholders are left in place so templates
can be rendered in stages.
"""
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

# Value types a template variable may hold; lists feed loop blocks.
TemplateValue = Union[str, int, bool, List["TemplateVariables"]]
TemplateVariables = Dict[str, TemplateValue]

LOOP_PATTERN = re.compile(r"\{\{#(\w+)\}\}(.*?)\{\{/\1\}\}", re.DOTALL)
PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


def format_value(value: Any) -> str:
    """Return the text a scalar value renders as.

    Booleans become YAML literals (``true``/``false``).
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float))


class TemplateRenderer:
    """Renders manifest templates against a variable mapping."""

    def render(self, template: str, variables: Mapping[str, Any] = None) -> str:
        """Render template text.

        Args:
            template: Template source
            variables: Template variables; list values drive loop blocks

        Returns:
            Rendered text
        """
        variables = variables or {}
        result = self._expand_loops(template, variables)
        return self._substitute_placeholders(result, variables)

    def render_file(self, template_file: Path, variables: Mapping[str, Any] = None) -> str:
        """Read a template file and render it.

        Raises:
            FileNotFoundError: If template_file does not exist
        """
        template_file = Path(template_file)
        if not template_file.exists():
            raise FileNotFoundError(f"Template file not found: {template_file}")
        return self.render(template_file.read_text(encoding="utf-8"), variables)

    def _expand_loops(self, template: str, variables: Mapping[str, Any]) -> str:
        def expand(match: "re.Match[str]") -> str:
            name, body = match.group(1), match.group(2)
            items = variables.get(name)
            if not isinstance(items, list):
                return ""

            # Each item only sees its own keys
            return "".join(
                self.render(body, item) for item in items if isinstance(item, Mapping)
            )

        return LOOP_PATTERN.sub(expand, template)

    def _substitute_placeholders(self, template: str, variables: Mapping[str, Any]) -> str:
        def substitute(match: "re.Match[str]") -> str:
            value = variables.get(match.group(1))
            if not _is_scalar(value):
                return match.group(0)
            return format_value(value)

        return PLACEHOLDER_PATTERN.sub(substitute, template)
