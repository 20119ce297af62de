#!/usr/bin/env python3
"""
Validate arbitrary config files (YAML or JSON) against the environment schema.

    python scripts/validate_config.py config/dev.yaml other.json
    python scripts/validate_config.py --schema my.schema.json file.yaml
"""

import argparse
import sys

import yaml

from frontend_cdk.configs.config_manager import ConfigManager
from frontend_cdk.configs.error_handler import ConfigurationError


def validate_file(manager: ConfigManager, path: str, schema_path=None) -> bool:
    try:
        data = manager.load_yaml(path)
    except (ConfigurationError, OSError, yaml.YAMLError) as e:
        print(f"[X] {path}: unreadable ({e})")
        return False

    errors = manager.schema_errors(data, schema_path)
    if errors:
        print(f"[X] {path}: {len(errors)} error(s)")
        for error in errors:
            print(f"  - {error}")
        return False

    print(f"[OK] {path}: OK")
    return True


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--schema", default=None, help=f"defaults to {ConfigManager.SCHEMA_FILE}")
    ap.add_argument("files", nargs="+")
    args = ap.parse_args()

    manager = ConfigManager()
    results = [validate_file(manager, f, args.schema) for f in args.files]
    sys.exit(0 if all(results) else 1)


if __name__ == "__main__":
    main()
