"""Scaffolds a DC/OS cluster on AWS through the dcos-terraform module."""

from __future__ import annotations

import logging

from terraform_wheels.generator.config_file import TerraformFileConfig
from terraform_wheels.generator.flags import FlagSet
from terraform_wheels.plugins.base import Command, Plugin
from terraform_wheels.plugins.scaffold import (
    drop_blocks,
    parse_command_args,
    previous_body,
    write_generated,
)
from terraform_wheels.sandbox import ProjectSandbox
from terraform_wheels.terraform import TerraformWrapper

logger = logging.getLogger(__name__)

CLUSTER_FILE = "cluster.tf"
MODULE_OPENER = 'module "dcos"'
MODULE_SOURCE = "dcos-terraform/dcos/aws"
USAGE = "add-aws-cluster [options]"

DEFAULT_BODY = [
    f'source = "{MODULE_SOURCE}"',
    'version = "~> 0.2.0"',
    'cluster_name = "dcos-example"',
    'num_masters = "1"',
    'num_private_agents = "2"',
    'num_public_agents = "1"',
    'dcos_version = "1.13.4"',
    'ssh_public_key_file = "~/.ssh/id_rsa.pub"',
]


def cluster_flags() -> FlagSet:
    flags = FlagSet("add-aws-cluster")
    flags.define("cluster_name", "Name of the cluster, used as a prefix for every AWS resource")
    flags.define("num_masters", "Number of master nodes (1, 3 or 5)")
    flags.define("num_private_agents", "Number of private agent nodes")
    flags.define("num_public_agents", "Number of public agent nodes")
    flags.define("dcos_version", "DC/OS version to install")
    flags.define("dcos_variant", "DC/OS variant: open or ee")
    flags.define("dcos_license_key_contents", "Enterprise license key, required when dcos_variant is ee")
    flags.define("ssh_public_key_file", "Path to the SSH public key installed on every node")
    flags.define("aws_region", "AWS region to launch the cluster in")
    flags.define(
        "admin_ips",
        "CIDR allowed to reach the admin endpoints. Repeat the flag to allow several ranges",
        repeatable=True,
    )
    flags.define(
        "tags",
        "Extra AWS tag in key=value form added to every resource. Repeat the flag for more tags",
        repeatable=True,
    )
    return flags


class AwsClusterPlugin(Plugin):
    """Adds ``add-aws-cluster``, which writes and updates ``cluster.tf``."""

    name = "dcos-aws"

    def commands(self) -> list[Command]:
        return [
            Command(
                name="add-aws-cluster",
                description="Create or update a DC/OS cluster on AWS (cluster.tf)",
                handler=self.add_cluster,
            )
        ]

    def is_used(self, sandbox: ProjectSandbox) -> bool:
        return sandbox.project.uses_module(MODULE_SOURCE)

    def config_for(self, sandbox: ProjectSandbox) -> TerraformFileConfig:
        return TerraformFileConfig(
            flags=cluster_flags(),
            list_flags={"admin_ips"},
            map_flags={"tags"},
            pre_lines=[f"{MODULE_OPENER} {{"],
            body_lines=previous_body(sandbox, CLUSTER_FILE, MODULE_OPENER, DEFAULT_BODY),
            post_lines=["}"],
        )

    def add_cluster(self, args: list[str], sandbox: ProjectSandbox, tf: TerraformWrapper) -> None:
        config = self.config_for(sandbox)
        parse_command_args(config, args, USAGE)

        supplied_blocks = {
            name for name in config.list_flags | config.map_flags if config.flags.is_set(name)
        }
        config.body_lines = drop_blocks(config.body_lines, supplied_blocks)

        write_generated(sandbox, CLUSTER_FILE, config, tf)
