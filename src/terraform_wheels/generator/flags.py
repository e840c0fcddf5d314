"""Command flag declarations and parsing.

Plugin commands take terraform-style flags (``-name=value``, ``--name value``).
Parsing is delegated to click; on top of it the :class:`FlagSet` remembers
which flags the user set explicitly and every value a repeatable flag received,
which is what the file generator merges into a body.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import click
from click.core import ParameterSource

from terraform_wheels.errors import FlagValueError

logger = logging.getLogger(__name__)


@dataclass
class Flag:
    """A declared string flag."""

    name: str
    usage: str = ""
    default: str = ""
    repeatable: bool = False


@dataclass(frozen=True)
class FlagVisit:
    """One explicitly supplied flag value."""

    name: str
    value: str


class FlagSet:
    """An ordered set of flags for a single plugin command."""

    def __init__(self, name: str, flags: Iterable[Flag] = ()) -> None:
        self.name = name
        self._flags: dict[str, Flag] = {}
        self._supplied: dict[str, list[str]] = {}
        self._args: list[str] = []
        self._parsed = False
        for flag in flags:
            self.add(flag)

    def add(self, flag: Flag) -> Flag:
        # click would read "-x=1" as short option -x with value "=1"
        if len(flag.name) < 2:
            raise ValueError(f"{self.name}: flag name '{flag.name}' must be at least two characters")
        if flag.name in self._flags:
            raise ValueError(f"{self.name}: flag redefined: {flag.name}")
        self._flags[flag.name] = flag
        return flag

    def define(self, name: str, usage: str = "", default: str = "", repeatable: bool = False) -> Flag:
        """Declare a string flag and return it."""
        return self.add(Flag(name=name, usage=usage, default=default, repeatable=repeatable))

    @property
    def parsed(self) -> bool:
        return self._parsed

    @property
    def args(self) -> list[str]:
        """Positional arguments left over after the flags."""
        return list(self._args)

    def lookup(self, name: str) -> Flag | None:
        return self._flags.get(name)

    def is_set(self, name: str) -> bool:
        return name in self._supplied

    def value(self, name: str) -> str:
        """Last supplied value of ``name``, or its default."""
        if name not in self._flags:
            raise KeyError(name)
        supplied = self._supplied.get(name)
        if supplied:
            return supplied[-1]
        return self._flags[name].default

    def values(self, name: str) -> list[str]:
        """Every supplied value of ``name``, in the order given."""
        if name not in self._flags:
            raise KeyError(name)
        return list(self._supplied.get(name, []))

    def parse(self, args: Iterable[str], repeatable: Iterable[str] = ()) -> list[str]:
        """Parse ``args`` and return the positional leftovers.

        Flag parsing stops at the first positional argument, like terraform's.
        Names in ``repeatable`` collect every occurrence regardless of how the
        flag was declared.

        Raises:
            FlagValueError: If an unknown flag is given or a value is missing
        """
        args = list(args)
        self._check_known(args)
        forced = set(repeatable)
        command, param_to_flag = self._build_command(forced)

        try:
            ctx = command.make_context(self.name, args)
        except click.ClickException as e:
            flag_name = (getattr(e, "option_name", None) or "").lstrip("-")
            raise FlagValueError(flag_name, f"{self.name}: {e.format_message()}") from e

        self._supplied = {}
        for param_name, flag_name in param_to_flag.items():
            if ctx.get_parameter_source(param_name) != ParameterSource.COMMANDLINE:
                continue
            raw = ctx.params[param_name]
            if isinstance(raw, tuple):
                self._supplied[flag_name] = [str(v) for v in raw]
            else:
                self._supplied[flag_name] = [str(raw)]

        self._args = list(ctx.args)
        self._parsed = True
        logger.debug("%s: supplied flags %s", self.name, sorted(self._supplied))
        return self.args

    def visit(self) -> Iterator[FlagVisit]:
        """Yield explicitly supplied values, flags in lexicographic order.

        A repeatable flag yields one visit per occurrence, in the order given.
        """
        for name in sorted(self._supplied):
            for value in self._supplied[name]:
                yield FlagVisit(name=name, value=value)

    def visit_all(self) -> Iterator[Flag]:
        """Yield every declared flag in lexicographic order."""
        for name in sorted(self._flags):
            yield self._flags[name]

    def _check_known(self, args: list[str]) -> None:
        i = 0
        while i < len(args):
            arg = args[i]
            if arg in ("-", "--") or not arg.startswith("-"):
                return
            name, sep, _ = arg.lstrip("-").partition("=")
            if name not in self._flags:
                raise FlagValueError(name, f"{self.name}: flag provided but not defined: -{name}")
            # Without "=" the next argument is the value
            i += 1 if sep else 2

    def _build_command(self, forced: set[str]) -> tuple[click.Command, dict[str, str]]:
        params: list[click.Parameter] = []
        param_to_flag: dict[str, str] = {}

        for flag in self._flags.values():
            option = click.Option(
                [f"-{flag.name}", f"--{flag.name}"],
                multiple=flag.repeatable or flag.name in forced,
                default=None,
                type=str,
            )
            param_to_flag[option.name] = flag.name
            params.append(option)

        command = click.Command(
            self.name,
            params=params,
            add_help_option=False,
            context_settings={"allow_extra_args": True, "allow_interspersed_args": False},
        )
        return command, param_to_flag
