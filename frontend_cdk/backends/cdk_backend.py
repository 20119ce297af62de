"""
CDK provisioning backend.

Turns resource specs into aws-cdk-lib constructs inside one Stack. Each
``_create_<kind>`` method maps a spec to the matching L2 construct and
returns a handle exposing the construct's tokens as attributes.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Dict
from aws_cdk import (
    aws_certificatemanager as acm,
    aws_cloudfront as cloudfront,
    aws_cloudfront_origins as origins,
    aws_iam as iam,
    aws_route53 as route53,
    aws_route53_targets as route53_targets,
    aws_s3 as s3,
    aws_ssm as ssm,
    CfnOutput,
    Duration,
    RemovalPolicy,
)
from constructs import Construct
from jsii.errors import JSIIError
from frontend_cdk.backends.specs import (
    SPEC_TYPES,
    BucketReadGrantSpec,
    BucketSpec,
    CertificateSpec,
    DistributionSpec,
    DnsRecordSpec,
    HeadersPolicySpec,
    OriginAccessSpec,
    OutputSpec,
    ParameterSpec,
    ResourceHandle,
    ResourceKind,
)
from frontend_cdk.configs.error_handler import BackendError, HostedZoneLookupError

logger = logging.getLogger(__name__)


class CdkBackend:
    """
    Declares resources as CDK constructs under ``scope``.

    Args:
        scope: Construct (normally the Stack) that owns every resource
    """

    def __init__(self, scope: Construct) -> None:
        self.scope = scope
        self._creators: Dict[ResourceKind, Callable[[str, Any], ResourceHandle]] = {
            ResourceKind.BUCKET: self._create_bucket,
            ResourceKind.ORIGIN_ACCESS: self._create_origin_access,
            ResourceKind.BUCKET_READ_GRANT: self._create_bucket_read_grant,
            ResourceKind.HEADERS_POLICY: self._create_headers_policy,
            ResourceKind.CERTIFICATE: self._create_certificate,
            ResourceKind.DISTRIBUTION: self._create_distribution,
            ResourceKind.DNS_RECORD: self._create_dns_record,
            ResourceKind.OUTPUT: self._create_output,
            ResourceKind.PARAMETER: self._create_parameter,
        }

    def create_resource(
            self,
            kind: ResourceKind,
            logical_id: str,
            spec: Any
        ) -> ResourceHandle:
        creator = self._creators.get(kind)
        if creator is None:
            raise BackendError(f"Unsupported resource kind: {kind}")
        if not isinstance(spec, SPEC_TYPES[kind]):
            raise BackendError(
                f"{kind.value} '{logical_id}' expects {SPEC_TYPES[kind].__name__}, "
                f"got {type(spec).__name__}"
            )

        logger.debug("Declaring %s %s", kind.value, logical_id)
        try:
            return creator(logical_id, spec)
        except JSIIError as e:
            raise BackendError(f"CDK rejected {kind.value} '{logical_id}': {e}") from e

    def lookup_zone(self, domain_name: str, logical_id: str) -> ResourceHandle:
        try:
            zone = route53.HostedZone.from_lookup(
                self.scope,
                logical_id,
                domain_name=domain_name,
            )
        except JSIIError as e:
            raise HostedZoneLookupError(
                f"Hosted zone lookup for {domain_name} failed: {e}"
            ) from e

        return ResourceHandle(
            kind=ResourceKind.HOSTED_ZONE,
            logical_id=logical_id,
            native=zone,
            attributes={"zone_id": zone.hosted_zone_id, "zone_name": zone.zone_name},
        )

    # -----------------------------
    # Storage & access
    # -----------------------------

    def _create_bucket(self, logical_id: str, spec: BucketSpec) -> ResourceHandle:
        bucket = s3.Bucket(
            self.scope,
            logical_id,
            public_read_access=spec.public_read_access,
            block_public_access=getattr(s3.BlockPublicAccess, spec.block_public_access),
            removal_policy=getattr(RemovalPolicy, spec.removal_policy),
            access_control=getattr(s3.BucketAccessControl, spec.access_control),
            object_ownership=getattr(s3.ObjectOwnership, spec.object_ownership),
            encryption=getattr(s3.BucketEncryption, spec.encryption),
        )
        return ResourceHandle(
            kind=ResourceKind.BUCKET,
            logical_id=logical_id,
            native=bucket,
            attributes={"bucket_name": bucket.bucket_name, "bucket_arn": bucket.bucket_arn},
        )

    def _create_origin_access(self, logical_id: str, spec: OriginAccessSpec) -> ResourceHandle:
        oai = cloudfront.OriginAccessIdentity(self.scope, logical_id, comment=spec.comment)
        return ResourceHandle(
            kind=ResourceKind.ORIGIN_ACCESS,
            logical_id=logical_id,
            native=oai,
            attributes={
                "canonical_user_id": oai.cloud_front_origin_access_identity_s3_canonical_user_id,
            },
        )

    def _create_bucket_read_grant(
            self,
            logical_id: str,
            spec: BucketReadGrantSpec
        ) -> ResourceHandle:
        bucket: s3.IBucket = spec.bucket.native
        statement = iam.PolicyStatement(
            sid=logical_id,
            actions=list(spec.actions),
            resources=[bucket.arn_for_objects(spec.object_pattern)],
            principals=[iam.CanonicalUserPrincipal(spec.principal.attr("canonical_user_id"))],
        )
        bucket.add_to_resource_policy(statement)
        return ResourceHandle(
            kind=ResourceKind.BUCKET_READ_GRANT,
            logical_id=logical_id,
            native=statement,
        )

    # -----------------------------
    # Edge
    # -----------------------------

    def _create_headers_policy(self, logical_id: str, spec: HeadersPolicySpec) -> ResourceHandle:
        policy = cloudfront.ResponseHeadersPolicy(
            self.scope,
            logical_id,
            comment=spec.comment,
            security_headers_behavior=cloudfront.ResponseSecurityHeadersBehavior(
                strict_transport_security=cloudfront.ResponseHeadersStrictTransportSecurity(
                    override=spec.override,
                    access_control_max_age=Duration.seconds(spec.hsts_max_age_seconds),
                    include_subdomains=spec.hsts_include_subdomains,
                    preload=spec.hsts_preload,
                ),
                content_type_options=cloudfront.ResponseHeadersContentTypeOptions(
                    override=spec.override,
                ) if spec.content_type_options else None,
                referrer_policy=cloudfront.ResponseHeadersReferrerPolicy(
                    override=spec.override,
                    referrer_policy=getattr(cloudfront.HeadersReferrerPolicy, spec.referrer_policy),
                ),
                xss_protection=cloudfront.ResponseHeadersXSSProtection(
                    override=spec.override,
                    protection=spec.xss_protection,
                    mode_block=spec.xss_mode_block,
                ),
                frame_options=cloudfront.ResponseHeadersFrameOptions(
                    override=spec.override,
                    frame_option=getattr(cloudfront.HeadersFrameOption, spec.frame_option),
                ),
            ),
        )
        return ResourceHandle(
            kind=ResourceKind.HEADERS_POLICY,
            logical_id=logical_id,
            native=policy,
            attributes={"policy_id": policy.response_headers_policy_id},
        )

    def _create_certificate(self, logical_id: str, spec: CertificateSpec) -> ResourceHandle:
        # Edge certificates must live in spec.region whatever the stack region is.
        certificate = acm.DnsValidatedCertificate(
            self.scope,
            logical_id,
            domain_name=spec.domain_name,
            hosted_zone=spec.zone.native,
            region=spec.region,
        )
        return ResourceHandle(
            kind=ResourceKind.CERTIFICATE,
            logical_id=logical_id,
            native=certificate,
            attributes={"certificate_arn": certificate.certificate_arn},
        )

    def _create_distribution(self, logical_id: str, spec: DistributionSpec) -> ResourceHandle:
        # The origin gets an imported view of the bucket so CDK does not add a
        # second read statement; the BUCKET_READ_GRANT spec is the only one.
        bucket: s3.IBucket = spec.bucket.native
        origin_bucket = s3.Bucket.from_bucket_attributes(
            self.scope,
            f"{logical_id}OriginBucket",
            bucket_name=bucket.bucket_name,
            bucket_arn=bucket.bucket_arn,
            bucket_regional_domain_name=bucket.bucket_regional_domain_name,
        )
        origin = origins.S3BucketOrigin.with_origin_access_identity(
            origin_bucket,
            origin_access_identity=spec.origin_access.native,
        )
        distribution = cloudfront.Distribution(
            self.scope,
            logical_id,
            default_root_object=spec.default_root_object,
            default_behavior=cloudfront.BehaviorOptions(
                origin=origin,
                viewer_protocol_policy=getattr(
                    cloudfront.ViewerProtocolPolicy, spec.viewer_protocol_policy
                ),
                response_headers_policy=spec.headers_policy.native,
                allowed_methods=getattr(cloudfront.AllowedMethods, spec.allowed_methods),
                cached_methods=getattr(cloudfront.CachedMethods, spec.cached_methods),
                compress=spec.compress,
            ),
            enabled=spec.enabled,
            error_responses=[
                cloudfront.ErrorResponse(
                    http_status=r.http_status,
                    response_http_status=r.response_http_status,
                    response_page_path=r.response_page_path,
                    ttl=Duration.seconds(r.ttl_seconds),
                )
                for r in spec.error_responses
            ],
            certificate=spec.certificate.native if spec.certificate else None,
            domain_names=list(spec.domain_names) or None,
        )
        return ResourceHandle(
            kind=ResourceKind.DISTRIBUTION,
            logical_id=logical_id,
            native=distribution,
            attributes={
                "distribution_id": distribution.distribution_id,
                "domain_name": distribution.distribution_domain_name,
            },
        )

    def _create_dns_record(self, logical_id: str, spec: DnsRecordSpec) -> ResourceHandle:
        record = route53.ARecord(
            self.scope,
            logical_id,
            record_name=spec.record_name,
            zone=spec.zone.native,
            target=route53.RecordTarget.from_alias(
                route53_targets.CloudFrontTarget(spec.target.native)
            ),
        )
        return ResourceHandle(
            kind=ResourceKind.DNS_RECORD,
            logical_id=logical_id,
            native=record,
            attributes={"domain_name": record.domain_name},
        )

    # -----------------------------
    # Outputs
    # -----------------------------

    def _create_output(self, logical_id: str, spec: OutputSpec) -> ResourceHandle:
        output = CfnOutput(
            self.scope,
            logical_id,
            export_name=spec.export_name,
            value=spec.value,
            description=spec.description,
        )
        return ResourceHandle(kind=ResourceKind.OUTPUT, logical_id=logical_id, native=output)

    def _create_parameter(self, logical_id: str, spec: ParameterSpec) -> ResourceHandle:
        parameter = ssm.StringParameter(
            self.scope,
            logical_id,
            parameter_name=spec.parameter_name,
            string_value=spec.string_value,
        )
        return ResourceHandle(
            kind=ResourceKind.PARAMETER,
            logical_id=logical_id,
            native=parameter,
            attributes={"parameter_arn": parameter.parameter_arn},
        )
