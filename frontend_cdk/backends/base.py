"""
Provisioning backend interface.

The frontend builder is written against this protocol only, so the same
resource graph can be declared as CDK constructs (CdkBackend) or recorded
in memory (InMemoryBackend) for tests and dry runs.
"""

from __future__ import annotations
from typing import Any, Protocol, runtime_checkable
from frontend_cdk.backends.specs import ResourceHandle, ResourceKind


@runtime_checkable
class ProvisioningBackend(Protocol):

    def create_resource(
            self,
            kind: ResourceKind,
            logical_id: str,
            spec: Any
        ) -> ResourceHandle:
        """
        Declare one resource.

        Raises:
            BackendError: If the spec is rejected
        """
        ...

    def lookup_zone(self, domain_name: str, logical_id: str) -> ResourceHandle:
        """
        Resolve an existing hosted zone; never creates one.

        Raises:
            HostedZoneLookupError: If no zone or several zones match
        """
        ...
