#!/usr/bin/env python3
"""
Validate every environment config (config/*.yaml) of the frontend project.

Each file is checked against schema/env_config.schema.json and then loaded
into a SiteConfig, so a file that passes here will also pass ``cdk synth``.
Designed to be used as a pre-commit hook.
"""

import sys
from pathlib import Path

from frontend_cdk.configs.config_manager import ConfigManager
from frontend_cdk.configs.error_handler import ConfigurationError
from frontend_cdk.configs.frontend_cfg import SiteConfig


def validate_environment(manager: ConfigManager, environment: str) -> bool:
    """Validate one environment config, printing the result."""
    path = manager.get_config_path(environment)
    try:
        raw = manager.load_env_config(environment)
        SiteConfig.from_dict(raw, environment)
    except ConfigurationError as e:
        print(f"[X] {path}: {e}")
        return False

    print(f"[OK] {path}: OK")
    return True


def main():
    """Main validation function."""
    project_root = Path(__file__).parent.parent
    manager = ConfigManager(project_root)
    environments = sorted(p.stem for p in (project_root / ConfigManager.CONFIG_DIR).glob("*.yaml"))

    if not environments:
        print("No environment configs found! [X]")
        sys.exit(1)

    print(f"Validating against {ConfigManager.SCHEMA_FILE}:")
    results = [validate_environment(manager, env) for env in environments]
    print()

    if all(results):
        print("All configuration files are valid! [OK]")
        sys.exit(0)
    else:
        print("Some configuration files have validation errors! [X]")
        sys.exit(1)


if __name__ == "__main__":
    main()
