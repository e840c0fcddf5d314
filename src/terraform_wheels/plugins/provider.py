"""Pins provider versions and settings in ``provider-<name>.tf``."""

from __future__ import annotations

import re

from terraform_wheels.errors import PluginError
from terraform_wheels.generator.config_file import TerraformFileConfig
from terraform_wheels.generator.flags import FlagSet
from terraform_wheels.plugins.base import Command, Plugin
from terraform_wheels.plugins.scaffold import (
    parse_command_args,
    previous_body,
    show_option_help,
    write_generated,
)
from terraform_wheels.sandbox import ProjectSandbox
from terraform_wheels.terraform import TerraformWrapper

_PROVIDER_NAME_RE = re.compile(r"^[a-z][a-z0-9_-]*$")

USAGE = "pin-provider <name> [options]"


def provider_flags() -> FlagSet:
    flags = FlagSet("pin-provider")
    flags.define("version", 'Version constraint for the provider, e.g. "~> 0.2"')
    flags.define("alias", "Alias, when configuring more than one instance of the provider")
    flags.define("region", "Region, for providers that take one")
    flags.define("profile", "Credentials profile, for providers that take one")
    flags.define("cluster", "DC/OS cluster name, for the dcos provider")
    return flags


def provider_file(provider: str) -> str:
    return f"provider-{provider}.tf"


class ProviderPlugin(Plugin):
    """Adds ``pin-provider <name> [flags]``."""

    name = "provider"

    def commands(self) -> list[Command]:
        return [
            Command(
                name="pin-provider",
                description="Pin a provider version and settings (provider-<name>.tf)",
                handler=self.pin_provider,
            )
        ]

    def is_used(self, sandbox: ProjectSandbox) -> bool:
        return False

    def pin_provider(self, args: list[str], sandbox: ProjectSandbox, tf: TerraformWrapper) -> None:
        if not args or args[0].startswith("-"):
            show_option_help(TerraformFileConfig(flags=provider_flags()), USAGE)
            raise PluginError(self.name, "pin-provider needs a provider name, e.g. pin-provider aws")
        provider, rest = args[0], args[1:]
        if not _PROVIDER_NAME_RE.match(provider):
            raise PluginError(self.name, f"'{provider}' is not a valid provider name")

        opener = f'provider "{provider}"'
        config = TerraformFileConfig(
            flags=provider_flags(),
            pre_lines=[f"{opener} {{"],
            body_lines=previous_body(sandbox, provider_file(provider), opener, []),
            post_lines=["}"],
        )
        parse_command_args(config, rest, USAGE)
        write_generated(sandbox, provider_file(provider), config, tf)
