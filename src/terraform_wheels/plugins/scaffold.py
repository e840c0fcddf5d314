"""Helpers shared by plugins that write ``.tf`` files."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from terraform_wheels.errors import FlagValueError
from terraform_wheels.generator.config_file import TerraformFileConfig
from terraform_wheels.generator.formatter import Formatter, TerraformFormatter
from terraform_wheels.sandbox import ProjectSandbox
from terraform_wheels.terraform import TerraformWrapper

logger = logging.getLogger(__name__)

console = Console()


def find_block_body(text: str, opener: str) -> list[str] | None:
    """Lines inside the first top-level block whose first line starts with ``opener``.

    Braces are counted naively; good enough for files this tool wrote itself.
    Returns None if no such block exists.
    """
    lines = text.splitlines()
    for start, line in enumerate(lines):
        if not line.strip().startswith(opener):
            continue
        depth = line.count("{") - line.count("}")
        for end in range(start + 1, len(lines)):
            depth += lines[end].count("{") - lines[end].count("}")
            if depth <= 0:
                return [l.strip() for l in lines[start + 1 : end]]
        return [l.strip() for l in lines[start + 1 :]]
    return None


def drop_blocks(lines: list[str], names: set[str]) -> list[str]:
    """Remove multi-line ``name = [``/``name = {`` blocks for ``names``.

    The generator would otherwise only drop the opening line of a previously
    written list or map, leaving its items behind.
    """
    out: list[str] = []
    closing: str | None = None
    for line in lines:
        if closing is not None:
            if line.strip() == closing:
                closing = None
            continue
        match = re.match(r"^\s*([A-Za-z0-9_-]+)\s*=\s*([\[{])\s*$", line)
        if match and match.group(1) in names:
            closing = "]" if match.group(2) == "[" else "}"
            continue
        out.append(line)
    return out


def previous_body(
    sandbox: ProjectSandbox, filename: str, opener: str, default: list[str]
) -> list[str]:
    """Body of ``opener`` in an existing ``filename``, or ``default`` for a new file."""
    text = sandbox.read_file(filename)
    if text is None:
        return list(default)
    body = find_block_body(text, opener)
    if body is None:
        logger.warning("%s has no '%s' block, starting from defaults", filename, opener)
        return list(default)
    return [line for line in body if line]


def write_generated(
    sandbox: ProjectSandbox,
    filename: str,
    config: TerraformFileConfig,
    tf: TerraformWrapper,
    formatter: Formatter | None = None,
) -> Path:
    """Generate ``config`` through terraform's formatter and write it to ``filename``."""
    content = config.generate(formatter or TerraformFormatter(tf))
    existed = sandbox.read_file(filename) is not None
    path = sandbox.write_file(filename, content)
    verb = "Updated" if existed else "Created"
    console.print(f"[bold green]==>[/bold green] {verb} [bold]{filename}[/bold]")
    return path


def show_option_help(config: TerraformFileConfig, usage: str) -> None:
    console.print(f"\nUsage: {escape(usage)}", highlight=False)
    config.print_option_help(console)


def parse_command_args(config: TerraformFileConfig, args: list[str], usage: str) -> list[str]:
    """Parse ``args`` into ``config``, listing the command's options if they are invalid.

    Raises:
        FlagValueError: If a flag is unknown or lacks its value
    """
    try:
        return config.parse_args(args)
    except FlagValueError:
        show_option_help(config, usage)
        raise
