"""
Frontend stack for the frontend CDK project.

This stack declares the infrastructure serving the single-page application:

1. S3 bucket to store application code
2. CloudFront origin access identity, the only reader of that bucket
3. CloudFront distribution to serve application code
4. Route53 record and ACM certificate for the application domain (optional)
"""

from __future__ import annotations

from aws_cdk import Stack
from constructs import Construct

from frontend_cdk.backends.cdk_backend import CdkBackend
from frontend_cdk.builders.frontend_builder import FrontendBuilder
from frontend_cdk.configs.frontend_cfg import SiteConfig


class FrontendStack(Stack):
    """
    Stack for one environment of the frontend application.

    The FrontendBuilder decides which resources exist; this stack only
    provides the CDK scope they are declared in.
    """

    def __init__(self, scope: Construct, construct_id: str, *, config: SiteConfig, **kwargs) -> None:
        """
        Initialize the frontend stack.

        Args:
            scope: CDK construct scope
            construct_id: Construct ID
            config: Site configuration
            **kwargs: Additional stack properties
        """
        super().__init__(scope, construct_id, **kwargs)
        self.builder = FrontendBuilder(CdkBackend(self))
        self.frontend_outputs = self.builder.build_stack(config)
