import logging
import os

import aws_cdk as cdk
from aws_cdk import Environment, Tags
from frontend_cdk.configs.frontend_cfg import get_cfg
from frontend_cdk.stacks.frontend_stack import FrontendStack

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = cdk.App()
cfg = get_cfg(app)

Tags.of(app).add("environment", cfg.environment)

APP_ENV = Environment(account=cfg.account_id, region=cfg.region)

stack = FrontendStack(
    app,
    f"{cfg.environment}FrontendApp",
    env=APP_ENV,
    config=cfg,
)

Tags.of(stack).add("project", cfg.project_tag)

app.synth()
