"""
Domain helpers for the frontend CDK project.

``root_domain_name`` is a pure function of its argument. HostedZoneLookup
wraps the backend's zone lookup and remembers the result per domain, so
asking twice for the same zone never declares a second lookup.
"""

from __future__ import annotations
import logging
from typing import Dict, Optional
from frontend_cdk.backends.base import ProvisioningBackend
from frontend_cdk.backends.specs import ResourceHandle

logger = logging.getLogger(__name__)


def root_domain_name(domain_name: Optional[str]) -> Optional[str]:
    """
    Derive the root domain that holds the hosted zone for ``domain_name``.

    The first label is dropped only when more than two labels remain, so
    ``app.staging.example.com`` gives ``staging.example.com`` while
    ``app.example.com`` and ``example.com`` are returned unchanged.

    Multi-label public suffixes are not special-cased: ``app.example.co.uk``
    gives ``example.co.uk`` but ``shop.co.uk`` gives ``shop.co.uk``.

    Args:
        domain_name: Fully qualified domain name

    Returns:
        Root domain name, or None when domain_name is empty
    """
    if not domain_name:
        return None

    _, *rest = domain_name.split(".")
    return ".".join(rest) if len(rest) > 2 else domain_name


class HostedZoneLookup:
    """
    Memoized hosted zone lookup.

    Args:
        backend: Backend that performs the actual lookup
    """

    def __init__(self, backend: ProvisioningBackend) -> None:
        self.backend = backend
        self._zones: Dict[str, ResourceHandle] = {}

    def lookup(self, domain_name: str, logical_id: Optional[str] = None) -> ResourceHandle:
        """
        Return the existing hosted zone for ``domain_name``.

        Args:
            domain_name: Zone (root domain) name
            logical_id: Logical id of the lookup, defaults to "<domain>HZ"

        Raises:
            HostedZoneLookupError: If the backend cannot resolve exactly one zone
        """
        zone = self._zones.get(domain_name)
        if zone is None:
            logger.info("Looking up hosted zone for %s", domain_name)
            zone = self.backend.lookup_zone(domain_name, logical_id or f"{domain_name}HZ")
            self._zones[domain_name] = zone
        return zone
