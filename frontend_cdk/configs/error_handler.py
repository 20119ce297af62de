"""
Centralized error handling for the frontend CDK project.

This module defines the exception hierarchy raised while building the
frontend resource graph and the validation helpers used by the config
loader and the builders. Every error is fatal: nothing here is caught or
retried, the synth run simply stops with a descriptive message.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, List, Union


class ProvisioningError(Exception):
    """Base class for every error raised while planning the frontend stack."""


class ConfigurationError(ProvisioningError, ValueError):
    """A required configuration field is absent or invalid."""


class ResolutionError(ProvisioningError, ValueError):
    """A value could not be derived from the configuration (e.g. root domain)."""


class HostedZoneLookupError(ProvisioningError, LookupError):
    """The hosted zone lookup returned no match or more than one match."""


class BackendError(ProvisioningError):
    """The provisioning backend rejected a resource specification."""


class ErrorHandler:
    """
    Validation helpers shared by the config loader and the builders.

    All helpers raise ConfigurationError so callers never need to care
    which check failed.
    """

    @staticmethod
    def validate_file_exists(
            file_path: Union[str, Path],
            file_type: str = "File"
        ) -> None:
        """
        Validate that a file exists.

        Args:
            file_path: File path to validate
            file_type: Type description for error messages

        Raises:
            ConfigurationError: If file does not exist
        """
        if not Path(file_path).is_file():
            raise ConfigurationError(f"{file_type} not found: {file_path}")

    @staticmethod
    def validate_string_not_empty(
            value: Any,
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is a non-empty string.

        Args:
            value: Value to validate
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            ConfigurationError: If value is not a non-empty string
        """
        if not isinstance(value, str) or value.strip() == "":
            raise ConfigurationError(
                f"{context} field '{field_name}' must be a non-empty string"
            )

    @staticmethod
    def validate_boolean(
            value: Any,
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is a boolean.

        Args:
            value: Value to validate
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            ConfigurationError: If value is not a boolean
        """
        if not isinstance(value, bool):
            raise ConfigurationError(f"{context} field '{field_name}' must be a boolean")

    @staticmethod
    def validate_context_keys(
            missing_keys: List[str],
            context: str = "Configuration"
        ) -> None:
        """
        Validate that required keys are present.

        Args:
            missing_keys: List of missing key names
            context: Context description for error messages

        Raises:
            ConfigurationError: If any required keys are missing
        """
        if missing_keys:
            raise ConfigurationError(
                f"Missing required keys in {context}: {', '.join(missing_keys)}"
            )

    @staticmethod
    def validate_schema_errors(
            errors: List[str],
            source: str
        ) -> None:
        """
        Fail when schema validation produced any error.

        Args:
            errors: Formatted "<path>: <message>" strings
            source: File the errors belong to

        Raises:
            ConfigurationError: If errors is not empty
        """
        if errors:
            details = "; ".join(errors)
            raise ConfigurationError(f"{source} is invalid: {details}")
