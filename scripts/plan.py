#!/usr/bin/env python3
"""
Dry run of the frontend stack.

Builds the resource graph of one environment against the in-memory backend
and prints what would be declared, in submission order. The hosted zone of
the root domain is assumed to exist.

    python scripts/plan.py prod
"""

import argparse
import logging
import sys

from frontend_cdk.backends.memory import InMemoryBackend
from frontend_cdk.builders.domain import root_domain_name
from frontend_cdk.builders.frontend_builder import FrontendBuilder
from frontend_cdk.configs.config_manager import ConfigManager
from frontend_cdk.configs.error_handler import ProvisioningError
from frontend_cdk.configs.frontend_cfg import SiteConfig


def main():
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    ap.add_argument("environment")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SiteConfig.from_dict(
            ConfigManager().load_env_config(args.environment), args.environment
        )
        root = root_domain_name(config.domain_name)
        backend = InMemoryBackend(zones=[(root, "Z-PLAN")] if root else [])
        outputs = FrontendBuilder(backend).build_stack(config)
    except ProvisioningError as e:
        print(f"[X] {args.environment}: {e}")
        sys.exit(1)

    for zone in backend.lookups:
        print(f"  lookup      hosted_zone        {zone}")
    for i, resource in enumerate(backend.resources, start=1):
        print(f"  {i:>2}. {resource.kind.value:<18} {resource.logical_id}")
    print()
    print(f"bucket_name:     {outputs.bucket_name}")
    print(f"distribution_id: {outputs.distribution_id}")
    print(f"domain_name:     {outputs.domain_name}")


if __name__ == "__main__":
    main()
