"""Default settings for flowmodel-io.

Maps to keys in config.example.yaml. Override via config.local.yaml.
"""

from pathlib import Path

from platformdirs import user_config_dir

# Platform-appropriate config directory (resolved by platformdirs)
config_dir = Path(user_config_dir("flowmodel-io"))

# Console output: quiet, normal or debug
output_mode = "normal"

# Command suggested when an input cannot be read as a capability
validate_command = "flowmodel-io validate"

# Standard input is buffered in memory; None means no limit
stdin_max_bytes = None
