"""Tests for the frontend resource graph built against the in-memory backend"""

import pytest

from frontend_cdk.backends.memory import InMemoryBackend
from frontend_cdk.backends.specs import ResourceKind
from frontend_cdk.builders.cdn_plan import BasicCdnPlan, CustomDomainCdnPlan
from frontend_cdk.builders.frontend_builder import (
    CERTIFICATE_REGION,
    SECURITY_HEADERS,
    FrontendBuilder,
    deploy_params_blob,
    deploy_params_path,
    export_names,
)
from frontend_cdk.configs.error_handler import (
    ConfigurationError,
    HostedZoneLookupError,
    ResolutionError,
)

ROOT_DOMAIN = "frontend.example.com"
DOMAIN = f"app.{ROOT_DOMAIN}"


def _backend(**kwargs):
    return InMemoryBackend(zones=[(ROOT_DOMAIN, "Z-FRONTEND")], **kwargs)


def _only(backend, kind):
    resources = backend.of_kind(kind)
    assert len(resources) == 1
    return resources[0]


class TestDefaultDomain:
    def test_plan_is_basic(self, make_config):
        plan = FrontendBuilder(_backend()).plan_cdn(make_config(create_custom_domain=False))
        assert plan == BasicCdnPlan()

    def test_no_zone_lookup_certificate_or_record(self, make_config):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config(create_custom_domain=False))

        assert backend.lookups == []
        assert backend.of_kind(ResourceKind.CERTIFICATE) == []
        assert backend.of_kind(ResourceKind.DNS_RECORD) == []

    def test_distribution_has_no_certificate(self, make_config):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config(create_custom_domain=False))

        distribution = _only(backend, ResourceKind.DISTRIBUTION).spec
        assert distribution.certificate is None
        assert distribution.domain_names == ()

    def test_works_without_domain_name(self, make_config):
        backend = _backend()
        outputs = FrontendBuilder(backend).build_stack(
            make_config(create_custom_domain=False, domain_name=None)
        )

        assert outputs.domain_name == "FrontendCloudFrontDistribution.domain_name"
        parameter = _only(backend, ResourceKind.PARAMETER).spec
        assert parameter.parameter_name == "/prod/deploy/frontend-prod/env"


class TestCustomDomain:
    def test_plan_carries_zone(self, make_config):
        plan = FrontendBuilder(_backend()).plan_cdn(make_config(create_custom_domain=True))

        assert isinstance(plan, CustomDomainCdnPlan)
        assert plan.domain_name == DOMAIN
        assert plan.root_domain_name == ROOT_DOMAIN
        assert plan.zone.logical_id == "FrontendRootHz"
        assert plan.zone.attr("zone_id") == "Z-FRONTEND"

    def test_one_certificate_in_fixed_region(self, make_config):
        backend = _backend()
        FrontendBuilder(backend).build_stack(
            make_config(create_custom_domain=True, region="ap-southeast-2")
        )

        certificate = _only(backend, ResourceKind.CERTIFICATE).spec
        assert certificate.region == CERTIFICATE_REGION == "us-east-1"
        assert certificate.domain_name == DOMAIN
        assert certificate.zone.logical_id == "FrontendRootHz"

    def test_one_alias_record_to_distribution(self, make_config):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config(create_custom_domain=True))

        record = _only(backend, ResourceKind.DNS_RECORD).spec
        assert record.record_name == DOMAIN
        assert record.target.logical_id == "FrontendCloudFrontDistribution"
        assert record.zone.attr("zone_name") == ROOT_DOMAIN

    def test_distribution_uses_certificate_and_domain(self, make_config):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config(create_custom_domain=True))

        distribution = _only(backend, ResourceKind.DISTRIBUTION).spec
        assert distribution.certificate.logical_id == "FrontendWebsiteCertificate"
        assert distribution.domain_names == (DOMAIN,)

    def test_zone_looked_up_once(self, make_config):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config(create_custom_domain=True))
        assert backend.lookups == [ROOT_DOMAIN]

    def test_submission_order(self, make_config):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config(create_custom_domain=True))

        assert [r.kind for r in backend.resources] == [
            ResourceKind.BUCKET,
            ResourceKind.ORIGIN_ACCESS,
            ResourceKind.BUCKET_READ_GRANT,
            ResourceKind.HEADERS_POLICY,
            ResourceKind.CERTIFICATE,
            ResourceKind.DISTRIBUTION,
            ResourceKind.DNS_RECORD,
            ResourceKind.OUTPUT,
            ResourceKind.OUTPUT,
            ResourceKind.OUTPUT,
            ResourceKind.PARAMETER,
        ]


class TestFailures:
    @pytest.mark.parametrize("domain_name", [None, "", "   "])
    def test_missing_domain_name(self, make_config, domain_name):
        backend = _backend()
        config = make_config(create_custom_domain=True, domain_name=domain_name)

        with pytest.raises(ConfigurationError, match="app.domainName"):
            FrontendBuilder(backend).build_stack(config)

        assert backend.resources == []
        assert backend.lookups == []

    def test_malformed_domain_name(self, make_config):
        backend = _backend()
        config = make_config(create_custom_domain=True, domain_name="app..example.com")

        with pytest.raises(ResolutionError, match="root domain"):
            FrontendBuilder(backend).build_stack(config)

        assert backend.resources == []

    def test_unknown_zone(self, make_config):
        backend = InMemoryBackend()

        with pytest.raises(HostedZoneLookupError):
            FrontendBuilder(backend).build_stack(make_config(create_custom_domain=True))

        assert backend.resources == []

    def test_ambiguous_zone(self, make_config):
        backend = InMemoryBackend(zones=[(ROOT_DOMAIN, "Z1"), (ROOT_DOMAIN, "Z2")])

        with pytest.raises(HostedZoneLookupError):
            FrontendBuilder(backend).build_stack(make_config(create_custom_domain=True))

        assert backend.resources == []


class TestBucketAndAccess:
    def test_bucket_is_private(self, make_config):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config())

        bucket = _only(backend, ResourceKind.BUCKET)
        assert bucket.logical_id == "FrontendWebsiteBucket"
        assert bucket.spec.public_read_access is False
        assert bucket.spec.block_public_access == "BLOCK_ALL"
        assert bucket.spec.encryption == "S3_MANAGED"
        assert bucket.spec.object_ownership == "BUCKET_OWNER_ENFORCED"
        assert bucket.spec.removal_policy == "DESTROY"

    @pytest.mark.parametrize("create_custom_domain", [False, True])
    def test_single_read_principal(self, make_config, create_custom_domain):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config(create_custom_domain=create_custom_domain))

        assert backend.read_principals("FrontendWebsiteBucket") == ["FrontendCloudFrontOAI"]
        grant = _only(backend, ResourceKind.BUCKET_READ_GRANT).spec
        assert grant.actions == ("s3:GetObject",)

    def test_distribution_reads_through_same_principal(self, make_config):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config())

        distribution = _only(backend, ResourceKind.DISTRIBUTION).spec
        assert distribution.origin_access.logical_id == "FrontendCloudFrontOAI"
        assert distribution.bucket.logical_id == "FrontendWebsiteBucket"

    def test_build_cdn_derives_plan_when_omitted(self, make_config):
        backend = _backend()
        builder = FrontendBuilder(backend)
        config = make_config(create_custom_domain=True)

        distribution = builder.build_cdn(config, builder.build_bucket(config))

        assert distribution.kind == ResourceKind.DISTRIBUTION
        assert len(backend.of_kind(ResourceKind.CERTIFICATE)) == 1
        assert len(backend.of_kind(ResourceKind.DNS_RECORD)) == 1


class TestDistribution:
    def test_security_headers(self, make_config):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config())

        policy = _only(backend, ResourceKind.HEADERS_POLICY).spec
        assert policy == SECURITY_HEADERS
        assert policy.hsts_max_age_seconds == 63072000
        assert policy.frame_option == "DENY"
        assert policy.referrer_policy == "STRICT_ORIGIN_WHEN_CROSS_ORIGIN"

    def test_spa_fallback(self, make_config):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config())

        distribution = _only(backend, ResourceKind.DISTRIBUTION).spec
        assert distribution.default_root_object == "index.html"
        assert distribution.viewer_protocol_policy == "REDIRECT_TO_HTTPS"
        assert sorted(r.http_status for r in distribution.error_responses) == [403, 404]
        for response in distribution.error_responses:
            assert response.response_http_status == 200
            assert response.response_page_path == "/index.html"
            assert response.ttl_seconds == 10

    @pytest.mark.parametrize("enabled", [True, False])
    def test_enabled_flag(self, make_config, enabled):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config(enabled=enabled))
        assert _only(backend, ResourceKind.DISTRIBUTION).spec.enabled is enabled


class TestOutputs:
    def test_deploy_params_blob(self):
        assert deploy_params_blob("b1", "d1") == "AWS_S3_BUCKET=b1\nDISTRIBUTION_ID=d1"

    def test_deploy_params_path(self):
        assert deploy_params_path("prod", "app.example.com") == "/prod/deploy/app.example.com/env"

    def test_export_names(self):
        assert export_names("site") == {
            "bucket_name": "site-bucket-name",
            "distribution_id": "site-distribution-id",
            "domain_name": "site-domain-name",
        }

    def test_parameter_published(self, make_config):
        backend = _backend(attribute_values={
            ("FrontendWebsiteBucket", "bucket_name"): "b1",
            ("FrontendCloudFrontDistribution", "distribution_id"): "d1",
        })
        config = make_config(domain_name="app.example.com", create_custom_domain=False)

        outputs = FrontendBuilder(backend).build_stack(config)

        parameter = _only(backend, ResourceKind.PARAMETER)
        assert parameter.logical_id == "Frontendfrontend-prodDeployParams"
        assert parameter.spec.parameter_name == "/prod/deploy/app.example.com/env"
        assert parameter.spec.string_value == "AWS_S3_BUCKET=b1\nDISTRIBUTION_ID=d1"
        assert (outputs.bucket_name, outputs.distribution_id, outputs.domain_name) == (
            "b1", "d1", "app.example.com",
        )

    def test_exports(self, make_config):
        backend = _backend()
        FrontendBuilder(backend).build_stack(make_config())

        exports = {r.spec.export_name: r.spec.value for r in backend.of_kind(ResourceKind.OUTPUT)}
        assert exports == {
            "frontend-prod-bucket-name": "FrontendWebsiteBucket.bucket_name",
            "frontend-prod-distribution-id": "FrontendCloudFrontDistribution.distribution_id",
            "frontend-prod-domain-name": DOMAIN,
        }


class TestRepeatability:
    @pytest.mark.parametrize("create_custom_domain", [False, True])
    def test_identical_graph_for_identical_config(self, make_config, create_custom_domain):
        first, second = _backend(), _backend()

        FrontendBuilder(first).build_stack(make_config(create_custom_domain=create_custom_domain))
        FrontendBuilder(second).build_stack(make_config(create_custom_domain=create_custom_domain))

        assert first.graph() == second.graph()
        assert first.lookups == second.lookups
