"""
Code generation, preview and export routes for SiteCraft
"""
from fastapi import APIRouter, HTTPException, status, Depends
from fastapi.responses import Response, StreamingResponse
from typing import List
import io
import logging

from config.device_presets import DEFAULT_DEVICE, get_device_info_for_frontend
from models.conversation import GenerateRequest
from models.generation import (
    ComponentsRequest,
    ExportRequest,
    ExtractedComponent,
    FormatRequest,
    FormatResponse,
    GeneratedCode,
    PreviewRequest,
)
from routes.dependencies import (
    check_rate_limit,
    get_export_service,
    get_generation_service,
    get_preview_service,
)
from services.code_utils import format_code, react_components_from_html
from services.exceptions import ValidationError
from services.export_service import ExportService
from services.generation_service import GenerationService
from services.preview_service import PreviewService

router = APIRouter(prefix="/api", tags=["Generation"])
logger = logging.getLogger(__name__)


@router.post("/generate", response_model=GeneratedCode)
async def generate_code(
    request: GenerateRequest,
    _: None = Depends(check_rate_limit),
    generation_service: GenerationService = Depends(get_generation_service),
):
    """
    Generate website code from a description. Sending prior conversation
    messages turns the request into a refinement of the earlier result.
    """
    if not request.prompt or not request.prompt.strip():
        logger.info("Generation request without a prompt")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt is required")

    logger.info(
        f"Received generation request: prompt={request.prompt[:100]!r}, "
        f"conversation length={len(request.conversation)}"
    )

    try:
        return await generation_service.generate(request.prompt, request.options, request.conversation)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating code: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate code"
        )


@router.get("/devices")
async def get_devices():
    """Get the device viewports available for previews."""
    return {
        "devices": get_device_info_for_frontend(),
        "default_device": DEFAULT_DEVICE,
    }


@router.post("/preview")
async def render_preview(
    request: PreviewRequest,
    preview_service: PreviewService = Depends(get_preview_service),
    export_service: ExportService = Depends(get_export_service),
):
    """Render the generated document as an image at a device viewport."""
    image_format = request.format.lower()
    if image_format not in export_service.supported_formats:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unsupported format: {request.format}")

    try:
        png_bytes = await preview_service.render(request.code.full_code, request.device)
        image_bytes = export_service.convert_image(png_bytes, image_format)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error rendering preview: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to render preview"
        )

    return Response(
        content=image_bytes,
        media_type=export_service.get_content_type(image_format),
        headers={"Cache-Control": "no-cache"}
    )


@router.post("/export")
async def export_project(
    request: ExportRequest,
    export_service: ExportService = Depends(get_export_service),
):
    """Download the generated project as a zip archive."""
    try:
        archive = export_service.build_project_archive(request.code, request.project_name)
    except Exception as e:
        logger.error(f"Error building project archive: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to export project"
        )

    file_name = f"{export_service.get_archive_name(request.project_name)}.zip"
    return StreamingResponse(
        io.BytesIO(archive),
        media_type=export_service.get_content_type("zip"),
        headers={"Content-Disposition": f"attachment; filename={file_name}"}
    )


@router.post("/format", response_model=FormatResponse)
async def format_source(request: FormatRequest):
    """Re-indent HTML, CSS or JavaScript for display in the editor."""
    logger.debug(f"Formatting {len(request.code)} characters of {request.language.value}")
    return FormatResponse(code=format_code(request.code, request.language.value), language=request.language)


@router.post("/components", response_model=List[ExtractedComponent])
async def extract_react_components(request: ComponentsRequest):
    """Split an HTML page into its component blocks, each converted to a React component."""
    components = react_components_from_html(request.html)
    logger.info(f"Extracted {len(components)} components")
    return [ExtractedComponent(**component) for component in components]
