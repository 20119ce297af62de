"""
In-memory provisioning backend.

Records every declared resource in submission order instead of creating
anything. It rejects the same things a real deployment would trip over:
unknown kinds, mismatched specs, duplicate logical ids and references to
resources that were not declared yet. Used by the tests and by
``scripts/plan.py``.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from frontend_cdk.backends.specs import (
    SPEC_TYPES,
    ResourceHandle,
    ResourceKind,
    iter_references,
)
from frontend_cdk.configs.error_handler import BackendError, HostedZoneLookupError

logger = logging.getLogger(__name__)

# Attributes each kind exposes to the rest of the graph.
ATTRIBUTES: Dict[ResourceKind, Tuple[str, ...]] = {
    ResourceKind.BUCKET: ("bucket_name", "bucket_arn"),
    ResourceKind.ORIGIN_ACCESS: ("canonical_user_id",),
    ResourceKind.BUCKET_READ_GRANT: (),
    ResourceKind.HEADERS_POLICY: ("policy_id",),
    ResourceKind.CERTIFICATE: ("certificate_arn",),
    ResourceKind.DISTRIBUTION: ("distribution_id", "domain_name"),
    ResourceKind.DNS_RECORD: ("domain_name",),
    ResourceKind.OUTPUT: (),
    ResourceKind.PARAMETER: ("parameter_arn",),
}


@dataclass(frozen=True)
class RecordedResource:
    kind: ResourceKind
    logical_id: str
    spec: Any


class InMemoryBackend:
    """
    Backend that keeps the declared graph in a list.

    Args:
        zones: (domain name, zone id) pairs that lookup_zone can resolve;
            repeating a domain makes its lookup ambiguous
        attribute_values: Overrides for resource attributes, keyed by
            (logical id, attribute name). Unset attributes resolve to
            "<logical id>.<attribute name>".
    """

    def __init__(
            self,
            zones: Iterable[Tuple[str, str]] = (),
            attribute_values: Optional[Mapping[Tuple[str, str], str]] = None
        ) -> None:
        self.zones: List[Tuple[str, str]] = list(zones)
        self.attribute_values = dict(attribute_values or {})
        self.resources: List[RecordedResource] = []
        self.lookups: List[str] = []
        self._handles: Dict[str, ResourceHandle] = {}

    def _attributes(self, kind: ResourceKind, logical_id: str) -> Dict[str, str]:
        return {
            name: self.attribute_values.get((logical_id, name), f"{logical_id}.{name}")
            for name in ATTRIBUTES[kind]
        }

    def create_resource(
            self,
            kind: ResourceKind,
            logical_id: str,
            spec: Any
        ) -> ResourceHandle:
        if kind not in SPEC_TYPES:
            raise BackendError(f"Unsupported resource kind: {kind}")
        if not isinstance(spec, SPEC_TYPES[kind]):
            raise BackendError(
                f"{kind.value} '{logical_id}' expects {SPEC_TYPES[kind].__name__}, "
                f"got {type(spec).__name__}"
            )
        if logical_id in self._handles:
            raise BackendError(f"Duplicate logical id: {logical_id}")

        for ref in iter_references(spec):
            if self._handles.get(ref.logical_id) != ref:
                raise BackendError(
                    f"{kind.value} '{logical_id}' references undeclared "
                    f"{ref.kind.value} '{ref.logical_id}'"
                )

        handle = ResourceHandle(
            kind=kind,
            logical_id=logical_id,
            native=spec,
            attributes=self._attributes(kind, logical_id),
        )
        self._handles[logical_id] = handle
        self.resources.append(RecordedResource(kind, logical_id, spec))
        logger.debug("Recorded %s %s", kind.value, logical_id)
        return handle

    def lookup_zone(self, domain_name: str, logical_id: str) -> ResourceHandle:
        self.lookups.append(domain_name)
        matches = [zone_id for name, zone_id in self.zones if name == domain_name]
        if not matches:
            raise HostedZoneLookupError(f"No hosted zone found for {domain_name}")
        if len(matches) > 1:
            raise HostedZoneLookupError(
                f"Found {len(matches)} hosted zones for {domain_name}, expected exactly one"
            )

        handle = self._handles.get(logical_id)
        if handle is not None:
            if handle.kind != ResourceKind.HOSTED_ZONE:
                raise BackendError(f"Duplicate logical id: {logical_id}")
            return handle

        handle = ResourceHandle(
            kind=ResourceKind.HOSTED_ZONE,
            logical_id=logical_id,
            native=matches[0],
            attributes={"zone_id": matches[0], "zone_name": domain_name},
        )
        self._handles[logical_id] = handle
        return handle

    def of_kind(self, kind: ResourceKind) -> List[RecordedResource]:
        return [r for r in self.resources if r.kind == kind]

    def graph(self) -> List[Tuple[ResourceKind, str, Any]]:
        """Submission-ordered (kind, logical id, spec) triples."""
        return [(r.kind, r.logical_id, r.spec) for r in self.resources]

    def read_principals(self, bucket_logical_id: str) -> List[str]:
        """Logical ids of every principal granted read on a bucket."""
        return [
            r.spec.principal.logical_id
            for r in self.of_kind(ResourceKind.BUCKET_READ_GRANT)
            if r.spec.bucket.logical_id == bucket_logical_id
        ]
