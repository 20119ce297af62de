from __future__ import annotations
import json, re
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union
import yaml
from jsonschema import Draft202012Validator
from frontend_cdk.configs.error_handler import ConfigurationError, ErrorHandler

logger = logging.getLogger(__name__)

_VAR = re.compile(r"\$\{([A-Za-z0-9_]+)\}")

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class ConfigManager:
    """
    Centralized configuration management for the frontend CDK project.

    Handles:
    - Path resolution for environment configs and their schema
    - YAML loading with ${VAR} placeholder expansion
    - JSON schema validation of the loaded document
    """

    CONFIG_DIR = "config"
    SCHEMA_FILE = "schema/env_config.schema.json"

    def __init__(self, root: Union[str, Path, None] = None):
        self.root = Path(root) if root is not None else PROJECT_ROOT

    def get_config_path(self, environment: str) -> Path:
        """
        Get the path of an environment config file (``config/<env>.yaml``).
        """
        return self.root / self.CONFIG_DIR / f"{environment}.yaml"

    def get_schema_path(self) -> Path:
        return self.root / self.SCHEMA_FILE

    def expand_placeholders(self, obj: Any, vars: Mapping[str, str]) -> Any:
        """
        Recursively expand ${VAR} placeholders in strings, lists, and dicts.

        Unknown placeholders are left untouched.
        """
        if isinstance(obj, str):
            return _VAR.sub(lambda m: str(vars.get(m.group(1), m.group(0))), obj)
        if isinstance(obj, list):
            return [self.expand_placeholders(x, vars) for x in obj]
        if isinstance(obj, dict):
            return {k: self.expand_placeholders(v, vars) for k, v in obj.items()}
        return obj

    def load_yaml(self, filepath: Union[str, Path]) -> dict:
        """
        Load a YAML (or JSON) mapping from disk.

        Raises:
            ConfigurationError: If the file is missing or is not a mapping
        """
        ErrorHandler.validate_file_exists(filepath, "Config file")

        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{filepath} must contain a mapping at the top level")
        return data

    def schema_errors(
            self,
            data: dict,
            schema_path: Union[str, Path, None] = None
        ) -> List[str]:
        """
        Validate a config document against the environment config schema.

        Args:
            data: Parsed config document
            schema_path: Schema to use instead of ``SCHEMA_FILE``

        Returns:
            Formatted "<path>: <message>" strings, empty when the document is valid
        """
        with open(schema_path or self.get_schema_path(), "r", encoding="utf-8") as f:
            schema = json.load(f)
        validator = Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
        return [f"{'/'.join(map(str, e.path)) or '(root)'}: {e.message}" for e in errors]

    def load_env_config(
            self,
            environment: str,
            extra_vars: Optional[Mapping[str, str]] = None
        ) -> dict:
        """
        Load, expand and validate ``config/<env>.yaml``.

        ``${EnvName}`` is always available as a placeholder.

        Args:
            environment: Environment name
            extra_vars: Additional placeholder variables

        Returns:
            The validated config document

        Raises:
            ConfigurationError: If the file is missing or fails validation
        """
        path = self.get_config_path(environment)
        logger.info("Loading %s config from %s", environment, path)

        vars = {"EnvName": environment}
        if extra_vars:
            vars.update({k: str(v) for k, v in extra_vars.items()})

        data = self.expand_placeholders(self.load_yaml(path), vars)
        ErrorHandler.validate_schema_errors(self.schema_errors(data), str(path))
        return data
