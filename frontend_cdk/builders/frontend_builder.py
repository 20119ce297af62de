"""
Frontend resource builder for the frontend CDK project.

This module assembles the infrastructure that serves a single-page
application: a private S3 bucket, a CloudFront distribution that is the
only reader of that bucket, and, when a custom domain is requested, an
ACM certificate and a Route53 alias record. Everything is declared through
a ProvisioningBackend in dependency order:

    bucket -> origin access identity / read grant / header policy
           -> certificate -> distribution -> DNS record -> outputs

All checks that can fail (missing domain name, underivable root domain,
hosted zone lookup) run in ``plan_cdn`` before the first resource is
declared.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Optional
from frontend_cdk.backends.base import ProvisioningBackend
from frontend_cdk.backends.specs import (
    BucketReadGrantSpec,
    BucketSpec,
    CertificateSpec,
    DistributionSpec,
    DnsRecordSpec,
    ErrorResponse,
    HeadersPolicySpec,
    OriginAccessSpec,
    OutputSpec,
    ParameterSpec,
    ResourceHandle,
    ResourceKind,
)
from frontend_cdk.builders.cdn_plan import BasicCdnPlan, CdnPlan, CustomDomainCdnPlan
from frontend_cdk.builders.domain import HostedZoneLookup, root_domain_name
from frontend_cdk.configs.error_handler import ErrorHandler, ResolutionError
from frontend_cdk.configs.frontend_cfg import SiteConfig

logger = logging.getLogger(__name__)

# CloudFront only accepts certificates issued in us-east-1.
CERTIFICATE_REGION = "us-east-1"

SECURITY_HEADERS = HeadersPolicySpec(
    comment="Security headers response header policy",
    hsts_max_age_seconds=2 * 365 * 24 * 60 * 60,
    hsts_include_subdomains=True,
    hsts_preload=True,
    content_type_options=True,
    referrer_policy="STRICT_ORIGIN_WHEN_CROSS_ORIGIN",
    xss_protection=True,
    xss_mode_block=True,
    frame_option="DENY",
)

# Client-side routing fallback: unknown paths are answered by the SPA entry document.
SPA_ERROR_RESPONSES = (
    ErrorResponse(http_status=404, response_http_status=200,
                  response_page_path="/index.html", ttl_seconds=10),
    ErrorResponse(http_status=403, response_http_status=200,
                  response_page_path="/index.html", ttl_seconds=10),
)


@dataclass(frozen=True)
class StackOutputs:
    bucket_name: str
    distribution_id: str
    domain_name: str


def export_names(app_id: str) -> dict[str, str]:
    """CloudFormation export names of the stack outputs."""
    return {
        "bucket_name": f"{app_id}-bucket-name",
        "distribution_id": f"{app_id}-distribution-id",
        "domain_name": f"{app_id}-domain-name",
    }


def deploy_params_path(environment: str, domain_name: str) -> str:
    return f"/{environment}/deploy/{domain_name}/env"


def deploy_params_blob(bucket_name: str, distribution_id: str) -> str:
    """
    Render the parameter read by the deployment tooling.

    The format is fixed: two KEY=VALUE lines joined by a single newline and
    no trailing newline.
    """
    return "\n".join([
        f"AWS_S3_BUCKET={bucket_name}",
        f"DISTRIBUTION_ID={distribution_id}",
    ])


class FrontendBuilder:
    """
    Builds the frontend resource graph for one environment.

    Args:
        backend: Backend every resource is declared through
        zone_lookup: Hosted zone lookup, defaults to a memoized lookup on backend
    """

    def __init__(
            self,
            backend: ProvisioningBackend,
            zone_lookup: Optional[HostedZoneLookup] = None
        ) -> None:
        self.backend = backend
        self.zone_lookup = zone_lookup or HostedZoneLookup(backend)

    def _create(self, kind: ResourceKind, logical_id: str, spec: Any) -> ResourceHandle:
        logger.debug("Submitting %s %s", kind.value, logical_id)
        return self.backend.create_resource(kind, logical_id, spec)

    # -----------------------------
    # Planning
    # -----------------------------

    def plan_cdn(self, config: SiteConfig) -> CdnPlan:
        """
        Validate and derive everything the CDN needs before declaring it.

        Args:
            config: Site configuration

        Returns:
            BasicCdnPlan, or CustomDomainCdnPlan when a custom domain is requested

        Raises:
            ConfigurationError: If a custom domain is requested without domain name
            ResolutionError: If the root domain cannot be derived
            HostedZoneLookupError: If the root domain's zone cannot be resolved
        """
        if not config.create_custom_domain:
            logger.info("%s: serving on the default CloudFront domain", config.app_id)
            return BasicCdnPlan()

        ErrorHandler.validate_string_not_empty(
            config.domain_name,
            "app.domainName",
            f"{config.environment} config (required when app.createCustomDomain is true)",
        )

        root = root_domain_name(config.domain_name)
        if not root or "" in root.split("."):
            raise ResolutionError(
                f"Cannot determine root domain of '{config.domain_name}', "
                "hosted zone can not be imported"
            )

        logger.info("%s: custom domain %s in zone %s", config.app_id, config.domain_name, root)
        zone = self.zone_lookup.lookup(root, f"{config.app_prefix}RootHz")
        return CustomDomainCdnPlan(
            domain_name=config.domain_name,
            root_domain_name=root,
            zone=zone,
        )

    # -----------------------------
    # Resources
    # -----------------------------

    def build_bucket(self, config: SiteConfig) -> ResourceHandle:
        """Private bucket holding the built frontend assets."""
        return self._create(
            ResourceKind.BUCKET,
            f"{config.app_prefix}WebsiteBucket",
            BucketSpec(),
        )

    def build_origin_access(self, config: SiteConfig, bucket: ResourceHandle) -> ResourceHandle:
        """
        Create the origin access identity and make it the bucket's only reader.
        """
        oai = self._create(
            ResourceKind.ORIGIN_ACCESS,
            f"{config.app_prefix}CloudFrontOAI",
            OriginAccessSpec(comment=f"{config.app_id} CloudFront access to {bucket.logical_id}"),
        )
        self._create(
            ResourceKind.BUCKET_READ_GRANT,
            f"{config.app_prefix}CloudFrontOAIRead",
            BucketReadGrantSpec(bucket=bucket, principal=oai),
        )
        return oai

    def build_cdn(
            self,
            config: SiteConfig,
            bucket: ResourceHandle,
            plan: Optional[CdnPlan] = None
        ) -> ResourceHandle:
        """
        Declare the CloudFront distribution in front of ``bucket``.

        Args:
            config: Site configuration
            bucket: Asset bucket handle
            plan: Precomputed plan; derived from config when omitted

        Returns:
            Distribution handle
        """
        if plan is None:
            plan = self.plan_cdn(config)

        oai = self.build_origin_access(config, bucket)
        headers_policy = self._create(
            ResourceKind.HEADERS_POLICY,
            f"{config.app_prefix}ResponseHeaderPolicy",
            SECURITY_HEADERS,
        )

        certificate = None
        domain_names: tuple[str, ...] = ()
        if isinstance(plan, CustomDomainCdnPlan):
            certificate = self._create(
                ResourceKind.CERTIFICATE,
                f"{config.app_prefix}WebsiteCertificate",
                CertificateSpec(
                    domain_name=plan.domain_name,
                    zone=plan.zone,
                    region=CERTIFICATE_REGION,
                ),
            )
            domain_names = (plan.domain_name,)

        distribution = self._create(
            ResourceKind.DISTRIBUTION,
            f"{config.app_prefix}CloudFrontDistribution",
            DistributionSpec(
                bucket=bucket,
                origin_access=oai,
                headers_policy=headers_policy,
                enabled=config.enabled,
                error_responses=SPA_ERROR_RESPONSES,
                certificate=certificate,
                domain_names=domain_names,
            ),
        )

        if isinstance(plan, CustomDomainCdnPlan):
            self._create(
                ResourceKind.DNS_RECORD,
                f"{config.app_prefix}CloudfrontARecord",
                DnsRecordSpec(
                    record_name=plan.domain_name,
                    zone=plan.zone,
                    target=distribution,
                ),
            )

        return distribution

    def build_outputs(
            self,
            config: SiteConfig,
            bucket: ResourceHandle,
            distribution: ResourceHandle
        ) -> StackOutputs:
        """
        Export bucket name, distribution id and domain name, and publish the
        deployment parameter consumed by the deploy tooling.

        Without a configured domain name the distribution's own domain is
        exported and the parameter path uses the app id instead.
        """
        outputs = StackOutputs(
            bucket_name=bucket.attr("bucket_name"),
            distribution_id=distribution.attr("distribution_id"),
            domain_name=config.domain_name or distribution.attr("domain_name"),
        )
        names = export_names(config.app_id)

        for suffix, key in (
            ("BucketName", "bucket_name"),
            ("CloudfrontId", "distribution_id"),
            ("DomainName", "domain_name"),
        ):
            self._create(
                ResourceKind.OUTPUT,
                f"{config.app_prefix}{suffix}",
                OutputSpec(export_name=names[key], value=getattr(outputs, key)),
            )

        self._create(
            ResourceKind.PARAMETER,
            f"{config.app_prefix}{config.app_id}DeployParams",
            ParameterSpec(
                parameter_name=deploy_params_path(
                    config.environment, config.domain_name or config.app_id
                ),
                string_value=deploy_params_blob(outputs.bucket_name, outputs.distribution_id),
            ),
        )
        return outputs

    def build_stack(self, config: SiteConfig) -> StackOutputs:
        """
        Declare the complete frontend stack.

        Args:
            config: Site configuration

        Returns:
            Bucket name, distribution id and domain name as exported
        """
        plan = self.plan_cdn(config)
        bucket = self.build_bucket(config)
        distribution = self.build_cdn(config, bucket, plan)
        outputs = self.build_outputs(config, bucket, distribution)
        logger.info("%s: frontend stack declared for %s", config.app_id, config.environment)
        return outputs
