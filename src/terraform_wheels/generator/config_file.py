"""Generation of terraform configuration files from command flags."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from rich.console import Console
from rich.markup import escape

from terraform_wheels.errors import FormatError
from terraform_wheels.generator.flags import Flag, FlagSet
from terraform_wheels.generator.formatter import Formatter
from terraform_wheels.generator.merge import FlagMerger

logger = logging.getLogger(__name__)

HELP_LINE_WIDTH = 60
HELP_LABEL_WIDTH = 20


def wrap_long_lines(text: str, line_width: int) -> list[str]:
    """Greedy word wrap of ``text`` into lines of at most ``line_width`` columns.

    A single word longer than the width gets a line of its own. Text without
    any words is returned unchanged as the only line.
    """
    words = text.strip().split()
    if not words:
        return [text]

    lines: list[str] = []
    wrapped = words[0]
    space_left = line_width - len(wrapped)
    for word in words[1:]:
        if len(word) + 1 > space_left:
            lines.append(wrapped)
            wrapped = word
            space_left = line_width - len(word)
        else:
            wrapped += " " + word
            space_left -= 1 + len(word)

    lines.append(wrapped)
    return lines


def format_flag_help(flag: Flag) -> list[str]:
    """Help lines for one flag: ``-name=`` in a label column, usage wrapped beside it."""
    usage_lines = wrap_long_lines(flag.usage, HELP_LINE_WIDTH)
    label = f"-{flag.name}="
    blank = " " * HELP_LABEL_WIDTH

    out: list[str] = []
    for i, line in enumerate(usage_lines):
        if i > 0:
            out.append(f"  {blank} {line}")
        elif len(label) > HELP_LABEL_WIDTH:
            out.append(f"  {label}")
            out.append(f"  {blank} {line}")
        else:
            out.append(f"  {label:<{HELP_LABEL_WIDTH}} {line}")
    return out


@dataclass
class TerraformFileConfig:
    """One generation unit: flags plus the fixed and previous parts of a file.

    Attributes:
        flags: Flag set the command was parsed with
        list_flags: Flags rendered as ``name = [ ... ]`` blocks
        map_flags: Flags rendered as ``name = { ... }`` blocks
        pre_lines: Fixed header, e.g. a ``module "x" {`` opener
        body_lines: Previous or default body the flags are merged into
        post_lines: Fixed footer, e.g. the closing brace
    """

    flags: FlagSet
    list_flags: set[str] = field(default_factory=set)
    map_flags: set[str] = field(default_factory=set)
    pre_lines: list[str] = field(default_factory=list)
    body_lines: list[str] = field(default_factory=list)
    post_lines: list[str] = field(default_factory=list)

    def is_list(self, name: str) -> bool:
        return name in self.list_flags

    def is_map(self, name: str) -> bool:
        return name in self.map_flags

    def parse_args(self, args: Iterable[str]) -> list[str]:
        """Parse command arguments into :attr:`flags`, collecting list/map repeats."""
        return self.flags.parse(args, repeatable=self.list_flags | self.map_flags)

    def merged_body(self) -> list[str]:
        merger = FlagMerger(list_flags=frozenset(self.list_flags), map_flags=frozenset(self.map_flags))
        return merger.merge(self.body_lines, self.flags.visit())

    def compose(self) -> str:
        """Assemble header, merged body and footer, unformatted."""
        return "\n".join([*self.pre_lines, *self.merged_body(), *self.post_lines])

    def generate(self, formatter: Formatter) -> bytes:
        """Produce the formatted file content.

        Raises:
            FlagValueError: If a map flag value is malformed
            FormatError: If the formatter rejects the assembled text
        """
        content = self.compose().encode("utf-8")
        try:
            return formatter(content)
        except Exception as e:
            raise FormatError(f"Could not format output: {e}") from e

    def print_option_help(self, console: Console | None = None) -> None:
        console = console or Console()
        for flag in self.flags.visit_all():
            console.print("")
            for line in format_flag_help(flag):
                console.print(escape(line), highlight=False, soft_wrap=True)
