"""terraform-wheels - Plugin-driven scaffolding on top of terraform.

terraform-wheels forwards every terraform command untouched, while letting
plugins add their own commands (cluster and service scaffolding, provider
pinning) and wrap terraform runs with pre/post hooks.

Key modules:

- :mod:`terraform_wheels.cli` - Command routing, plugin lifecycle and the entry point
- :mod:`terraform_wheels.generator` - Flag merging and ``.tf`` file generation
- :mod:`terraform_wheels.plugins` - Plugin base classes, registry and built-in plugins
- :mod:`terraform_wheels.sandbox` - Project directory state
- :mod:`terraform_wheels.terraform` - Subprocess wrapper around the terraform binary
"""

__version__ = "0.4.0"
