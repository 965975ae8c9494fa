"""
Tests for the simulated deployment service
"""
from datetime import datetime

import pytest

from conftest import make_code
from models.deployment import DeploymentOptions, DeploymentProvider
from services.deployment_service import (
    build_deployment_url,
    deploy_to_hosting,
    generate_deployment_id,
    get_available_providers,
    slugify_project_name,
)
from services.exceptions import ValidationError


class TestDeploymentUrl:
    @pytest.mark.parametrize("provider, expected", [
        (DeploymentProvider.VERCEL, "https://my-cool-site.vercel.app"),
        (DeploymentProvider.NETLIFY, "https://my-cool-site.netlify.app"),
        (DeploymentProvider.GITHUB_PAGES, "https://my-cool-site.github.io"),
    ])
    def test_provider_domains(self, provider, expected):
        options = DeploymentOptions(provider=provider, project_name="My  Cool Site")
        assert build_deployment_url(options) == expected

    def test_custom_domain_wins(self):
        options = DeploymentOptions(provider="vercel", project_name="Site", custom_domain="www.bakery.com")
        assert build_deployment_url(options) == "https://www.bakery.com"

    def test_slugify(self):
        assert slugify_project_name("  Hello\tWorld Again ") == "hello-world-again"


class TestDeploy:
    @pytest.mark.asyncio
    async def test_returns_result(self):
        options = DeploymentOptions(provider=DeploymentProvider.NETLIFY, project_name="Bakery")

        result = await deploy_to_hosting(make_code(), options, delay=0)

        assert result.url == "https://bakery.netlify.app"
        assert result.provider == DeploymentProvider.NETLIFY
        assert len(result.deployment_id) == 13
        assert datetime.fromisoformat(result.timestamp).tzinfo is not None

    @pytest.mark.asyncio
    async def test_blank_project_name_rejected(self):
        options = DeploymentOptions(provider=DeploymentProvider.VERCEL, project_name="   ")
        with pytest.raises(ValidationError):
            await deploy_to_hosting(make_code(), options, delay=0)

    def test_deployment_ids_are_base36(self):
        ids = {generate_deployment_id() for _ in range(20)}
        assert len(ids) > 1
        assert all(len(i) == 13 and i.isalnum() and i == i.lower() for i in ids)

    def test_available_providers(self):
        providers = get_available_providers()
        assert [p.id for p in providers] == [
            DeploymentProvider.VERCEL,
            DeploymentProvider.NETLIFY,
            DeploymentProvider.GITHUB_PAGES,
        ]
        assert providers[2].name == "GitHub Pages"
