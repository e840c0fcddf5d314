"""Tests for the scaffolding plugins shipped with terraform-wheels."""

import pytest

from terraform_wheels.errors import FlagValueError, PluginError
from terraform_wheels.plugins.aws_cluster import CLUSTER_FILE, AwsClusterPlugin
from terraform_wheels.plugins.provider import ProviderPlugin
from terraform_wheels.plugins.scaffold import drop_blocks, find_block_body
from terraform_wheels.plugins.service import ServicePlugin


class TestScaffoldHelpers:
    def test_find_block_body(self):
        text = 'module "dcos" {\n  source = "x"\n  tags = {\n    a = "b"\n  }\n}\n\nmodule "other" {}\n'

        assert find_block_body(text, 'module "dcos"') == ['source = "x"', "tags = {", 'a = "b"', "}"]

    def test_find_block_body_missing(self):
        assert find_block_body('provider "aws" {}\n', 'module "dcos"') is None

    def test_drop_blocks(self):
        lines = ['a = "1"', "admin_ips = [", '"1.1.1.1/32",', "]", "tags = {", 'x = "y"', "}", 'b = "2"']

        assert drop_blocks(lines, {"admin_ips"}) == ['a = "1"', "tags = {", 'x = "y"', "}", 'b = "2"']

    def test_drop_blocks_ignores_other_names(self):
        lines = ["keep = [", '"v",', "]"]
        assert drop_blocks(lines, {"other"}) == lines


class TestAwsClusterPlugin:
    def test_command(self):
        [command] = AwsClusterPlugin().commands()
        assert command.name == "add-aws-cluster"

    def test_creates_cluster_file(self, sandbox, fake_tf):
        plugin = AwsClusterPlugin()

        plugin.add_cluster(
            ["-cluster_name=prod", "-admin_ips=1.2.3.4/32", "-admin_ips=10.0.0.0/8", "-tags=team=infra"],
            sandbox,
            fake_tf,
        )

        content = sandbox.read_file(CLUSTER_FILE)
        lines = content.splitlines()
        assert lines[0] == 'module "dcos" {'
        assert lines[-1] == "}"
        assert 'cluster_name = "prod"' in lines
        assert 'cluster_name = "dcos-example"' not in lines
        assert 'source = "dcos-terraform/dcos/aws"' in lines
        assert lines.index("admin_ips = [") < lines.index("tags = {")
        assert '  "1.2.3.4/32",' in lines
        assert '  "10.0.0.0/8",' in lines
        assert '  team = "infra"' in lines
        fake_tf.fmt.assert_called_once()

    def test_is_used_after_reload(self, sandbox, fake_tf):
        plugin = AwsClusterPlugin()
        assert not plugin.is_used(sandbox)

        plugin.add_cluster([], sandbox, fake_tf)
        sandbox.reload_terraform_project()

        assert plugin.is_used(sandbox)

    def test_rerun_updates_previous_values(self, sandbox, fake_tf):
        plugin = AwsClusterPlugin()
        plugin.add_cluster(["-cluster_name=prod", "-admin_ips=1.2.3.4/32"], sandbox, fake_tf)

        plugin.add_cluster(["-num_masters=3"], sandbox, fake_tf)

        lines = sandbox.read_file(CLUSTER_FILE).splitlines()
        assert 'cluster_name = "prod"' in lines
        assert 'num_masters = "3"' in lines
        assert 'num_masters = "1"' not in lines
        assert sum(line.strip() == "admin_ips = [" for line in lines) == 1
        assert any("1.2.3.4/32" in line for line in lines)

    def test_rerun_replaces_list_block(self, sandbox, fake_tf):
        plugin = AwsClusterPlugin()
        plugin.add_cluster(["-admin_ips=1.2.3.4/32"], sandbox, fake_tf)

        plugin.add_cluster(["-admin_ips=5.6.7.8/32"], sandbox, fake_tf)

        content = sandbox.read_file(CLUSTER_FILE)
        assert "5.6.7.8/32" in content
        assert "1.2.3.4/32" not in content
        assert content.count("admin_ips = [") == 1

    def test_unknown_flag(self, sandbox, fake_tf):
        with pytest.raises(FlagValueError, match="flag provided but not defined"):
            AwsClusterPlugin().add_cluster(["-bogus=1"], sandbox, fake_tf)

        assert sandbox.read_file(CLUSTER_FILE) is None

    def test_unknown_flag_lists_options(self, sandbox, fake_tf, capsys):
        with pytest.raises(FlagValueError):
            AwsClusterPlugin().add_cluster(["-bogus=1"], sandbox, fake_tf)

        out = capsys.readouterr().out
        assert "Usage: add-aws-cluster" in out
        assert "-cluster_name=" in out
        assert "-admin_ips=" in out

    def test_missing_value_lists_options(self, sandbox, fake_tf, capsys):
        with pytest.raises(FlagValueError):
            AwsClusterPlugin().add_cluster(["-cluster_name"], sandbox, fake_tf)

        assert "-num_masters=" in capsys.readouterr().out

    def test_valid_flags_print_no_options(self, sandbox, fake_tf, capsys):
        AwsClusterPlugin().add_cluster(["-cluster_name=prod"], sandbox, fake_tf)

        assert "-num_masters=" not in capsys.readouterr().out

    def test_malformed_tag_writes_nothing(self, sandbox, fake_tf):
        with pytest.raises(FlagValueError, match="Expected key=value format"):
            AwsClusterPlugin().add_cluster(["-tags=oops"], sandbox, fake_tf)

        assert sandbox.read_file(CLUSTER_FILE) is None


class TestServicePlugin:
    def test_creates_service_file(self, sandbox, fake_tf):
        ServicePlugin().add_service(
            ["kafka", "-version=2.9.0", "-config=brokers=3", "-depends_on_services=zookeeper"],
            sandbox,
            fake_tf,
        )

        lines = sandbox.read_file("service-kafka.tf").splitlines()
        assert lines[0] == 'resource "dcos_package" "kafka" {'
        assert 'app_id = "kafka"' in lines
        assert 'package = "kafka"' in lines
        assert 'version = "2.9.0"' in lines
        assert '  brokers = "3"' in lines
        assert '  "zookeeper",' in lines
        assert lines.index("depends_on_services = [") < lines.index("config = {")

    def test_missing_name(self, sandbox, fake_tf):
        with pytest.raises(PluginError, match="needs a service name"):
            ServicePlugin().add_service(["-version=1"], sandbox, fake_tf)

    def test_missing_name_lists_options(self, sandbox, fake_tf, capsys):
        with pytest.raises(PluginError):
            ServicePlugin().add_service([], sandbox, fake_tf)

        out = capsys.readouterr().out
        assert "Usage: add-service <name>" in out
        assert "-depends_on_services=" in out

    def test_unknown_flag_lists_options(self, sandbox, fake_tf, capsys):
        with pytest.raises(FlagValueError):
            ServicePlugin().add_service(["kafka", "-nope=1"], sandbox, fake_tf)

        assert "-app_id=" in capsys.readouterr().out
        assert sandbox.read_file("service-kafka.tf") is None

    def test_invalid_name(self, sandbox, fake_tf):
        with pytest.raises(PluginError, match="not a valid service name"):
            ServicePlugin().add_service(["Kafka!"], sandbox, fake_tf)

    def test_is_used_with_service_files(self, sandbox, project_dir):
        plugin = ServicePlugin()
        assert not plugin.is_used(sandbox)

        (project_dir / "service-kafka.tf").write_text('resource "dcos_package" "kafka" {}\n')
        sandbox.reload_terraform_project()

        assert plugin.is_used(sandbox)

    def test_requires_dcos_provider(self, sandbox, fake_tf):
        with pytest.raises(PluginError, match="pin-provider dcos"):
            ServicePlugin().before_run(sandbox, fake_tf, is_init=False)

    def test_init_does_not_require_provider(self, sandbox, fake_tf):
        ServicePlugin().before_run(sandbox, fake_tf, is_init=True)

    def test_dcos_provider_satisfies_check(self, sandbox, project_dir, fake_tf):
        (project_dir / "provider-dcos.tf").write_text('provider "dcos" {\n  cluster = "prod"\n}\n')
        sandbox.reload_terraform_project()

        ServicePlugin().before_run(sandbox, fake_tf, is_init=False)


class TestProviderPlugin:
    def test_pins_provider(self, sandbox, fake_tf):
        ProviderPlugin().pin_provider(["aws", "-version=~> 2.0", "-region=us-east-1"], sandbox, fake_tf)

        lines = sandbox.read_file("provider-aws.tf").splitlines()
        assert lines == ['provider "aws" {', 'region = "us-east-1"', 'version = "~> 2.0"', "}"]

    def test_repin_keeps_other_settings(self, sandbox, fake_tf):
        plugin = ProviderPlugin()
        plugin.pin_provider(["aws", "-version=~> 2.0", "-region=us-east-1"], sandbox, fake_tf)

        plugin.pin_provider(["aws", "-version=~> 2.7"], sandbox, fake_tf)

        lines = sandbox.read_file("provider-aws.tf").splitlines()
        assert 'region = "us-east-1"' in lines
        assert 'version = "~> 2.7"' in lines
        assert 'version = "~> 2.0"' not in lines

    def test_never_wraps_runs(self, sandbox):
        assert ProviderPlugin().is_used(sandbox) is False

    def test_missing_name_lists_options(self, sandbox, fake_tf, capsys):
        with pytest.raises(PluginError):
            ProviderPlugin().pin_provider(["-region=eu"], sandbox, fake_tf)

        assert "-region=" in capsys.readouterr().out

    @pytest.mark.parametrize("args", [[], ["-version=1"], ["AWS"]])
    def test_bad_provider_name(self, sandbox, fake_tf, args):
        with pytest.raises(PluginError):
            ProviderPlugin().pin_provider(args, sandbox, fake_tf)
