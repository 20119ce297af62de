"""
Backend-neutral descriptions of the resources in the frontend stack.

The builders only ever produce these specs and hand them to a
ProvisioningBackend; the backend decides how a spec becomes a real
resource. Specs are frozen dataclasses, so two plans built from the same
config compare equal field by field.

Enum-like values (referrer policy, frame option, ...) use the member names
of the matching aws_cdk enums.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Iterator, Mapping, Optional, Tuple


class ResourceKind(str, Enum):
    BUCKET = "bucket"
    ORIGIN_ACCESS = "origin_access"
    BUCKET_READ_GRANT = "bucket_read_grant"
    HEADERS_POLICY = "headers_policy"
    HOSTED_ZONE = "hosted_zone"
    CERTIFICATE = "certificate"
    DISTRIBUTION = "distribution"
    DNS_RECORD = "dns_record"
    OUTPUT = "output"
    PARAMETER = "parameter"


@dataclass(frozen=True)
class ResourceHandle:
    """
    Reference to a resource a backend has already declared or looked up.

    Only kind and logical_id take part in equality; ``native`` is whatever
    object the backend created (a CDK construct, a recorded spec, ...) and
    ``attributes`` holds the values other resources may reference.
    """
    kind: ResourceKind
    logical_id: str
    native: Any = field(default=None, compare=False, repr=False)
    attributes: Mapping[str, str] = field(default_factory=dict, compare=False, repr=False)

    def attr(self, name: str) -> str:
        try:
            return self.attributes[name]
        except KeyError:
            raise KeyError(
                f"{self.kind.value} '{self.logical_id}' has no attribute '{name}'"
            ) from None


@dataclass(frozen=True)
class BucketSpec:
    """Private asset bucket; every public path is closed."""
    public_read_access: bool = False
    block_public_access: str = "BLOCK_ALL"
    access_control: str = "PRIVATE"
    object_ownership: str = "BUCKET_OWNER_ENFORCED"
    encryption: str = "S3_MANAGED"
    removal_policy: str = "DESTROY"


@dataclass(frozen=True)
class OriginAccessSpec:
    comment: str


@dataclass(frozen=True)
class BucketReadGrantSpec:
    """Resource policy statement letting exactly one principal read objects."""
    bucket: ResourceHandle
    principal: ResourceHandle
    actions: Tuple[str, ...] = ("s3:GetObject",)
    object_pattern: str = "*"


@dataclass(frozen=True)
class HeadersPolicySpec:
    comment: str
    hsts_max_age_seconds: int
    hsts_include_subdomains: bool
    hsts_preload: bool
    content_type_options: bool
    referrer_policy: str
    xss_protection: bool
    xss_mode_block: bool
    frame_option: str
    override: bool = True


@dataclass(frozen=True)
class CertificateSpec:
    domain_name: str
    zone: ResourceHandle
    region: str


@dataclass(frozen=True)
class ErrorResponse:
    http_status: int
    response_http_status: int
    response_page_path: str
    ttl_seconds: int


@dataclass(frozen=True)
class DistributionSpec:
    bucket: ResourceHandle
    origin_access: ResourceHandle
    headers_policy: ResourceHandle
    enabled: bool
    error_responses: Tuple[ErrorResponse, ...]
    default_root_object: str = "index.html"
    viewer_protocol_policy: str = "REDIRECT_TO_HTTPS"
    allowed_methods: str = "ALLOW_ALL"
    cached_methods: str = "CACHE_GET_HEAD"
    compress: bool = True
    certificate: Optional[ResourceHandle] = None
    domain_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DnsRecordSpec:
    """A alias record pointing record_name at a distribution."""
    record_name: str
    zone: ResourceHandle
    target: ResourceHandle


@dataclass(frozen=True)
class OutputSpec:
    export_name: str
    value: str
    description: Optional[str] = None


@dataclass(frozen=True)
class ParameterSpec:
    parameter_name: str
    string_value: str


SPEC_TYPES = {
    ResourceKind.BUCKET: BucketSpec,
    ResourceKind.ORIGIN_ACCESS: OriginAccessSpec,
    ResourceKind.BUCKET_READ_GRANT: BucketReadGrantSpec,
    ResourceKind.HEADERS_POLICY: HeadersPolicySpec,
    ResourceKind.CERTIFICATE: CertificateSpec,
    ResourceKind.DISTRIBUTION: DistributionSpec,
    ResourceKind.DNS_RECORD: DnsRecordSpec,
    ResourceKind.OUTPUT: OutputSpec,
    ResourceKind.PARAMETER: ParameterSpec,
}


def iter_references(spec: Any) -> Iterator[ResourceHandle]:
    """Yield every ResourceHandle a spec points at."""
    for f in fields(spec):
        value = getattr(spec, f.name)
        if isinstance(value, ResourceHandle):
            yield value
        elif isinstance(value, tuple):
            for item in value:
                if isinstance(item, ResourceHandle):
                    yield item
