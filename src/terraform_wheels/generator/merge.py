"""Merge supplied flag values into an existing configuration body.

The body is treated as opaque lines. A supplied flag replaces the first line
that *contains* its name, which is a loose heuristic: a comment or a string
value mentioning the flag name is matched just as well as the assignment it
was meant for.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from terraform_wheels.errors import FlagValueError
from terraform_wheels.generator.flags import FlagVisit

logger = logging.getLogger(__name__)


def quote(value: str) -> str:
    """Render ``value`` as a JSON string literal, which HCL accepts as-is."""
    return json.dumps(value, ensure_ascii=False)


def remove_first_containing(lines: list[str], needle: str) -> bool:
    """Drop the first line containing ``needle``. Returns True if one was dropped."""
    for i, line in enumerate(lines):
        if needle in line:
            del lines[i]
            return True
    return False


def render_list_block(name: str, items: list[str]) -> list[str]:
    block = ["", f"{name} = ["]
    block.extend(f"  {quote(item)}," for item in items)
    block.append("]")
    return block


def render_map_block(name: str, entries: dict[str, str]) -> list[str]:
    block = ["", f"{name} = {{"]
    block.extend(f"  {key} = {quote(value)}" for key, value in entries.items())
    block.append("}")
    return block


@dataclass
class FlagMerger:
    """Applies supplied flags to a body of lines.

    Names in ``list_flags`` render as ``name = [...]`` blocks, names in
    ``map_flags`` as ``name = {...}`` blocks built from ``key=value`` values;
    every other flag becomes a ``name = "value"`` assignment. A name in both
    sets is treated as a list.
    """

    list_flags: frozenset[str] = field(default_factory=frozenset)
    map_flags: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        self.list_flags = frozenset(self.list_flags)
        self.map_flags = frozenset(self.map_flags)

    def is_list(self, name: str) -> bool:
        return name in self.list_flags

    def is_map(self, name: str) -> bool:
        return name in self.map_flags

    def merge(self, body: Iterable[str], visits: Iterable[FlagVisit]) -> list[str]:
        """Return a new body with ``visits`` applied; ``body`` is left untouched.

        Raises:
            FlagValueError: If a map flag value has no ``=``
        """
        lines = list(body)
        list_values: dict[str, list[str]] = {}
        map_values: dict[str, dict[str, str]] = {}
        errors: list[FlagValueError] = []
        seen: set[str] = set()
        scalar_lines: dict[str, str] = {}

        for visit in visits:
            # One line per flag, not per occurrence of a repeated flag
            if visit.name not in seen:
                seen.add(visit.name)
                if remove_first_containing(lines, visit.name):
                    logger.debug("Replacing existing line for '%s'", visit.name)

            if self.is_list(visit.name):
                list_values.setdefault(visit.name, []).append(visit.value)

            elif self.is_map(visit.name):
                key, sep, value = visit.value.partition("=")
                if not sep:
                    errors.append(
                        FlagValueError(
                            visit.name,
                            f"Could not parse '{visit.value}' for flag '{visit.name}': "
                            "Expected key=value format",
                        )
                    )
                    continue
                map_values.setdefault(visit.name, {})[key] = value

            else:
                rendered = f"{visit.name} = {quote(visit.value)}"
                previous = scalar_lines.get(visit.name)
                if previous is not None and previous in lines:
                    # Last value wins for a repeated scalar
                    lines[len(lines) - 1 - lines[::-1].index(previous)] = rendered
                else:
                    lines.append(rendered)
                scalar_lines[visit.name] = rendered

        if errors:
            if len(errors) == 1:
                raise errors[0]
            raise FlagValueError(errors[0].flag_name, "; ".join(str(e) for e in errors))

        for name in sorted(list_values):
            lines.extend(render_list_block(name, list_values[name]))

        for name in sorted(map_values):
            lines.extend(render_map_block(name, map_values[name]))

        return lines
