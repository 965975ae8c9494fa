"""
Deployment routes for SiteCraft. Deployments are simulated.
"""
from fastapi import APIRouter, HTTPException, status
from typing import List
import logging

from models.deployment import DeploymentResult, DeployRequest, ProviderInfo
from services.deployment_service import deploy_to_hosting, get_available_providers
from services.exceptions import ValidationError

router = APIRouter(prefix="/api/deploy", tags=["Deployment"])
logger = logging.getLogger(__name__)


@router.post("", response_model=DeploymentResult)
async def deploy(request: DeployRequest):
    """
    Simulate deploying generated code. No files leave the server; the
    response carries the URL the site would have on the chosen provider.
    """
    try:
        return await deploy_to_hosting(request.code, request.options)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error deploying code: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to deploy code"
        )


@router.get("/providers", response_model=List[ProviderInfo])
async def list_providers():
    """Get the hosting providers a deployment can target."""
    return get_available_providers()
