import pytest

from frontend_cdk.configs.frontend_cfg import AppCfg, SiteConfig

ROOT_DOMAIN = "frontend.example.com"
DOMAIN = f"app.{ROOT_DOMAIN}"


@pytest.fixture
def make_config():
    """Factory for SiteConfig; keyword arguments override AppCfg fields."""

    def _make(environment="prod", region="eu-west-1", **app):
        app.setdefault("app_id", "frontend-prod")
        app.setdefault("domain_name", DOMAIN)
        return SiteConfig(
            account_id="222222222222",
            region=region,
            environment=environment,
            app_prefix="Frontend",
            app=AppCfg(**app),
        )

    return _make
