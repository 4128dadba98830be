"""Substitution of ``{{dotted.path}}`` placeholders with event payload data.

Payload shapes vary by provider and by event subtype, so an unresolvable
path is replaced with an empty string instead of raising.
"""

from __future__ import annotations

import json
import re

from area.models.schemas import ConfigValue

_TOKEN_PATTERN = re.compile(r"\{\{\s*([^{}]*?)\s*\}\}")


def resolve_path(payload: ConfigValue, path: str) -> tuple[bool, ConfigValue]:
    """Walk ``payload`` along ``path``. Returns (found, value)."""
    value = payload
    for segment in path.split("."):
        if isinstance(value, dict):
            if segment not in value:
                return False, None
            value = value[segment]
        elif isinstance(value, (list, tuple)):
            if not (segment.isascii() and segment.isdigit()):
                return False, None
            index = int(segment)
            if index >= len(value):
                return False, None
            value = value[index]
        else:
            return False, None
    return True, value


def render_value(value: ConfigValue) -> str:
    """String form of a payload value as it appears inside a template."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return str(value)


def render_string(template: str, payload: ConfigValue) -> str:
    if "{{" not in template:
        return template

    def _replace(match: re.Match) -> str:
        found, value = resolve_path(payload, match.group(1))
        return render_value(value) if found else ""

    return _TOKEN_PATTERN.sub(_replace, template)


def substitute(value: ConfigValue, payload: ConfigValue) -> ConfigValue:
    """Return a copy of ``value`` with every leaf string rendered against ``payload``.

    Mappings stay mappings and sequences stay sequences; keys and non-string
    leaves are carried over unchanged. Neither argument is mutated.
    """
    if isinstance(value, str):
        return render_string(value, payload)
    if isinstance(value, dict):
        return {key: substitute(item, payload) for key, item in value.items()}
    if isinstance(value, list):
        return [substitute(item, payload) for item in value]
    if isinstance(value, tuple):
        return tuple(substitute(item, payload) for item in value)
    return value
