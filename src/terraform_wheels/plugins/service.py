"""Scaffolds DC/OS package installations as ``service-<name>.tf`` files."""

from __future__ import annotations

import logging
import re

from terraform_wheels.errors import PluginError
from terraform_wheels.generator.config_file import TerraformFileConfig
from terraform_wheels.generator.flags import FlagSet
from terraform_wheels.plugins.base import Command, Plugin
from terraform_wheels.plugins.scaffold import (
    drop_blocks,
    parse_command_args,
    previous_body,
    show_option_help,
    write_generated,
)
from terraform_wheels.sandbox import ProjectSandbox
from terraform_wheels.terraform import TerraformWrapper

logger = logging.getLogger(__name__)

SERVICE_FILE_PREFIX = "service-"
_SERVICE_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")

USAGE = "add-service <name> [options]"


def service_flags() -> FlagSet:
    flags = FlagSet("add-service")
    flags.define("package", "Name of the package in the DC/OS catalog")
    flags.define("version", "Package version to install (default: latest)")
    flags.define("app_id", "Marathon app id of the service (default: the service name)")
    flags.define(
        "config",
        "Package option in key=value form. Repeat the flag to set several options",
        repeatable=True,
    )
    flags.define(
        "depends_on_services",
        "Another service that must be installed first. Repeat the flag for more",
        repeatable=True,
    )
    return flags


def service_file(name: str) -> str:
    return f"{SERVICE_FILE_PREFIX}{name}.tf"


class ServicePlugin(Plugin):
    """Adds ``add-service <name> [flags]`` and checks services have a dcos provider."""

    name = "dcos-service"

    def commands(self) -> list[Command]:
        return [
            Command(
                name="add-service",
                description="Install a DC/OS package on the cluster (service-<name>.tf)",
                handler=self.add_service,
            )
        ]

    def is_used(self, sandbox: ProjectSandbox) -> bool:
        return any(f.startswith(SERVICE_FILE_PREFIX) for f in sandbox.project.files)

    def before_run(self, sandbox: ProjectSandbox, tf: TerraformWrapper, is_init: bool) -> None:
        if is_init:
            return
        if not sandbox.project.uses_provider("dcos"):
            raise PluginError(
                self.name,
                "services need the dcos provider, run 'pin-provider dcos -cluster=<name>' first",
            )

    def add_service(self, args: list[str], sandbox: ProjectSandbox, tf: TerraformWrapper) -> None:
        if not args or args[0].startswith("-"):
            show_option_help(TerraformFileConfig(flags=service_flags()), USAGE)
            raise PluginError(self.name, "add-service needs a service name, e.g. add-service kafka")
        service, rest = args[0], args[1:]
        if not _SERVICE_NAME_RE.match(service):
            raise PluginError(self.name, f"'{service}' is not a valid service name")

        opener = f'resource "dcos_package" "{service}"'
        default = [f'app_id = "{service}"', f'package = "{service}"']
        config = TerraformFileConfig(
            flags=service_flags(),
            list_flags={"depends_on_services"},
            map_flags={"config"},
            pre_lines=[f"{opener} {{"],
            body_lines=previous_body(sandbox, service_file(service), opener, default),
            post_lines=["}"],
        )
        parse_command_args(config, rest, USAGE)

        supplied_blocks = {n for n in ("config", "depends_on_services") if config.flags.is_set(n)}
        config.body_lines = drop_blocks(config.body_lines, supplied_blocks)

        write_generated(sandbox, service_file(service), config, tf)
