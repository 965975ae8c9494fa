"""
Deployment models for SiteCraft. Deployment is simulated; see services/deployment_service.py.
"""
from pydantic import Field
from typing import Optional
from enum import Enum

from models.generation import CamelModel, GeneratedCode


class DeploymentProvider(str, Enum):
    VERCEL = "vercel"
    NETLIFY = "netlify"
    GITHUB_PAGES = "github-pages"


class DeploymentOptions(CamelModel):
    provider: DeploymentProvider
    project_name: str = Field(..., description="Used to build the deployment URL")
    is_public: bool = True
    custom_domain: Optional[str] = Field(default=None, description="Replaces the provider domain when set")


class DeploymentResult(CamelModel):
    url: str
    deployment_id: str
    provider: DeploymentProvider
    timestamp: str


class DeployRequest(CamelModel):
    code: GeneratedCode
    options: DeploymentOptions


class ProviderInfo(CamelModel):
    id: DeploymentProvider
    name: str
    logo: str
