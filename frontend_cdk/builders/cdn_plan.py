"""
CDN plan variants.

A plan is derived from the config before anything is declared. It carries
every value the custom-domain branch needs, so the builder never has to
re-check flags or optional fields while it creates resources.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union
from frontend_cdk.backends.specs import ResourceHandle


@dataclass(frozen=True)
class BasicCdnPlan:
    """Distribution on the default CloudFront domain only."""


@dataclass(frozen=True)
class CustomDomainCdnPlan:
    """
    Distribution served on a custom domain.

    Attributes:
        domain_name: Domain the distribution answers on
        root_domain_name: Root domain of the hosted zone
        zone: Hosted zone the certificate is validated in and the record goes to
    """
    domain_name: str
    root_domain_name: str
    zone: ResourceHandle


CdnPlan = Union[BasicCdnPlan, CustomDomainCdnPlan]
