"""
Project configuration for the frontend CDK project.

This module provides the typed, immutable view of one environment's
settings. The environment name comes from CDK context (``-c env=dev``), the
rest from ``config/<env>.yaml`` loaded through the ConfigManager.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Mapping, Optional
from frontend_cdk.configs.config_manager import ConfigManager
from frontend_cdk.configs.error_handler import ConfigurationError, ErrorHandler

if TYPE_CHECKING:
    from constructs import Construct

DEFAULT_PROJECT_TAG = "frontend"


@dataclass(frozen=True)
class AppCfg:
    """
    Application settings.

    Attributes:
        app_id: App ID used to mark AWS resources and export names
        domain_name: Domain used to access the app (optional)
        enabled: Whether the distribution accepts viewer requests
        create_custom_domain: Whether to request a certificate and DNS record
            for domain_name
    """
    app_id: str
    domain_name: Optional[str] = None
    enabled: bool = True
    create_custom_domain: bool = False


@dataclass(frozen=True)
class SiteConfig:
    """
    Validated provisioning input for one environment.

    Attributes:
        account_id: AWS account ID
        region: AWS region of the stack
        environment: Environment name
        app_prefix: Prefix of every logical id in the stack
        app: Application settings
        project_tag: Value of the ``project`` tag
    """
    account_id: str
    region: str
    environment: str
    app_prefix: str
    app: AppCfg
    project_tag: str = DEFAULT_PROJECT_TAG

    @property
    def app_id(self) -> str:
        return self.app.app_id

    @property
    def domain_name(self) -> Optional[str]:
        return self.app.domain_name

    @property
    def enabled(self) -> bool:
        return self.app.enabled

    @property
    def create_custom_domain(self) -> bool:
        return self.app.create_custom_domain

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], environment: str) -> "SiteConfig":
        """
        Build a SiteConfig from the camelCase document of ``config/<env>.yaml``.

        Raises:
            ConfigurationError: If awsAccountId, awsRegion, appPrefix or
                app.appId is missing
            ConfigurationError: If awsAccountId is not a string
        """
        missing = [key for key in ("awsAccountId", "awsRegion", "appPrefix")
                   if not raw.get(key)]
        app = raw.get("app") or {}
        if not app.get("appId"):
            missing.append("app.appId")
        ErrorHandler.validate_context_keys(missing, f"{environment} config")
        ErrorHandler.validate_string_not_empty(
            raw["awsAccountId"], "awsAccountId", f"{environment} config"
        )

        enabled = app.get("enabled", True)
        create_custom_domain = app.get("createCustomDomain", False)
        ErrorHandler.validate_boolean(enabled, "app.enabled", f"{environment} config")
        ErrorHandler.validate_boolean(
            create_custom_domain, "app.createCustomDomain", f"{environment} config"
        )

        return cls(
            account_id=raw["awsAccountId"],
            region=raw["awsRegion"],
            environment=environment,
            app_prefix=raw["appPrefix"],
            app=AppCfg(
                app_id=app["appId"],
                domain_name=app.get("domainName") or None,
                enabled=enabled,
                create_custom_domain=create_custom_domain,
            ),
            project_tag=raw.get("projectTag") or DEFAULT_PROJECT_TAG,
        )


def get_context_variable(obj: Construct, context_key: str) -> str:
    """
    Get a variable from CDK context.

    Args:
        obj: CDK App, Stack or any construct in the tree
        context_key: Name of the context variable

    Returns:
        Value of the context variable

    Raises:
        ConfigurationError: If the variable was not passed
    """
    value = obj.node.try_get_context(context_key)
    if not value:
        raise ConfigurationError(
            f"Context variable {context_key} is missing in CDK command. "
            f"Pass it as -c {context_key}=VALUE"
        )
    return value


@lru_cache(maxsize=1)
def get_cfg(obj: Construct) -> SiteConfig:
    """
    Load the configuration of the environment selected with ``-c env=<name>``.

    Args:
        obj: CDK App, Stack or any construct in the tree

    Returns:
        Validated site configuration
    """
    environment = get_context_variable(obj, "env")
    raw = ConfigManager().load_env_config(environment)
    return SiteConfig.from_dict(raw, environment)
