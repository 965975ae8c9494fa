"""
Simulated deployment for SiteCraft.

Nothing is uploaded anywhere: deploying waits a few seconds and returns a
provider-style URL built from the project name. This is a stand-in for a
real hosting integration, not one.
"""
import re
import asyncio
import logging
import random
import string
from datetime import datetime, timezone
from typing import List, Optional

from config import settings
from models.deployment import DeploymentOptions, DeploymentProvider, DeploymentResult, ProviderInfo
from models.generation import GeneratedCode
from services.exceptions import ValidationError

logger = logging.getLogger(__name__)

PROVIDER_DOMAINS = {
    DeploymentProvider.VERCEL: "vercel.app",
    DeploymentProvider.NETLIFY: "netlify.app",
    DeploymentProvider.GITHUB_PAGES: "github.io",
}

AVAILABLE_PROVIDERS = [
    {"id": DeploymentProvider.VERCEL, "name": "Vercel", "logo": "/logos/vercel.svg"},
    {"id": DeploymentProvider.NETLIFY, "name": "Netlify", "logo": "/logos/netlify.svg"},
    {"id": DeploymentProvider.GITHUB_PAGES, "name": "GitHub Pages", "logo": "/logos/github.svg"},
]

DEPLOYMENT_ID_ALPHABET = string.ascii_lowercase + string.digits
DEPLOYMENT_ID_LENGTH = 13


def slugify_project_name(project_name: str) -> str:
    """Lower-case the name and turn whitespace runs into single dashes."""
    return re.sub(r"\s+", "-", project_name.strip().lower())


def build_deployment_url(options: DeploymentOptions) -> str:
    if options.custom_domain:
        return f"https://{options.custom_domain}"
    domain = PROVIDER_DOMAINS.get(options.provider)
    slug = slugify_project_name(options.project_name)
    if domain is None:
        return f"https://example.com/{slug}"
    return f"https://{slug}.{domain}"


def generate_deployment_id() -> str:
    return "".join(random.choice(DEPLOYMENT_ID_ALPHABET) for _ in range(DEPLOYMENT_ID_LENGTH))


def get_available_providers() -> List[ProviderInfo]:
    return [ProviderInfo(**provider) for provider in AVAILABLE_PROVIDERS]


async def deploy_to_hosting(
    code: GeneratedCode,
    options: DeploymentOptions,
    delay: Optional[float] = None,
) -> DeploymentResult:
    """
    Pretend to deploy the code and return where it would live.
    """
    if not options.project_name or not options.project_name.strip():
        raise ValidationError("Project name is required for deployment")

    delay = settings.DEPLOY_DELAY_SECONDS if delay is None else delay
    logger.info(
        f"Simulating {options.provider.value} deployment of '{options.project_name}' "
        f"({len(code.full_code)} characters, {delay}s)"
    )
    await asyncio.sleep(delay)

    result = DeploymentResult(
        url=build_deployment_url(options),
        deployment_id=generate_deployment_id(),
        provider=options.provider,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
    logger.info(f"Deployment {result.deployment_id} available at {result.url}")
    return result
