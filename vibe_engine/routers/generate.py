"""
Generation API router
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from slowapi import Limiter
from slowapi.util import get_remote_address

from vibe_engine.config import settings
from vibe_engine.logging_config import logger
from vibe_engine.services.catalog import get_available_models, get_available_templates, get_template
from vibe_engine.services.errors import InvalidRequest, UpstreamError
from vibe_engine.services.generation_orchestrator import GenerationOrchestrator
from vibe_engine.services.usage_counter import UsageCounter

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


class GenerateRequest(BaseModel):
    """Request model for generating a file set"""
    prompt: Optional[str] = None
    model: Optional[str] = None
    context: Optional[List[Any]] = None
    files: Optional[List[Any]] = None  # Accepted from the UI, not used


class TemplateGenerateRequest(BaseModel):
    """Request model for generating from a component template"""
    model: Optional[str] = None
    context: Optional[List[Any]] = None


class TemplateInfo(BaseModel):
    """Component template information model"""
    id: str
    name: str
    category: str
    prompt: str
    preview: str


class TemplatesResponse(BaseModel):
    """Response model for templates list"""
    success: bool
    templates: List[TemplateInfo]


class ModelInfo(BaseModel):
    id: str
    name: str
    provider: str
    default: bool = False


class ModelsResponse(BaseModel):
    success: bool
    models: List[ModelInfo]


def get_usage_counter(request: Request) -> UsageCounter:
    """The process-wide counter owned by the application"""
    return request.app.state.usage_counter


def get_orchestrator(usage_counter: UsageCounter = Depends(get_usage_counter)) -> GenerationOrchestrator:
    return GenerationOrchestrator(usage_counter=usage_counter)


async def run_generation(
    orchestrator: GenerationOrchestrator,
    prompt: Optional[str],
    model: Optional[str] = None,
    context: Optional[List[Any]] = None
) -> JSONResponse:
    """Run the orchestrator and map its outcome onto HTTP responses"""
    try:
        result = await orchestrator.generate(prompt, model=model, context=context)
    except InvalidRequest as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except UpstreamError as e:
        logger.error("Error in generate route", error=str(e), status_code=e.status_code)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to generate component", "code": e.fallback_code}
        )

    return JSONResponse(content=result.to_response())


@router.post("/generate")
@limiter.limit(settings.GENERATE_RATE_LIMIT)
async def generate(
    request: Request,
    data: GenerateRequest,
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator)
):
    """
    Generate a project file set from a natural-language prompt.

    Uses the configured AIMLAPI model when a key is present, otherwise
    scaffolds the project from local templates.

    Returns {code, model, usage, files}. A missing prompt is a 400; an
    upstream failure is a 500 that still carries fallback component code.
    """
    logger.info(
        "Generation request received",
        prompt_length=len(data.prompt or ""),
        model=data.model,
        context_length=len(data.context or [])
    )
    return await run_generation(orchestrator, data.prompt, data.model, data.context)


@router.get("/generate")
async def get_usage(usage_counter: UsageCounter = Depends(get_usage_counter)) -> Dict[str, Any]:
    """Current in-memory usage counters (advisory, reset on restart)"""
    return {"usage": usage_counter.snapshot().to_dict()}


@router.get("/templates", response_model=TemplatesResponse)
async def list_templates(category: Optional[str] = None):
    """
    Get the component template library.

    Optionally filtered by category (case-insensitive).
    """
    templates = get_available_templates(category)
    return TemplatesResponse(
        success=True,
        templates=[TemplateInfo(**t) for t in templates]
    )


@router.get("/templates/{template_id}", response_model=TemplateInfo)
async def read_template(template_id: str):
    template = get_template(template_id)
    if not template:
        raise HTTPException(status_code=404, detail=f"Template {template_id} not found")
    return TemplateInfo(**template)


@router.post("/templates/{template_id}/generate")
@limiter.limit(settings.GENERATE_RATE_LIMIT)
async def generate_from_template(
    request: Request,
    template_id: str,
    data: Optional[TemplateGenerateRequest] = None,
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator)
):
    """Generate with a library template's prompt."""
    template = get_template(template_id)
    if not template:
        raise HTTPException(status_code=404, detail=f"Template {template_id} not found")

    data = data or TemplateGenerateRequest()
    logger.info("Template generation request received", template_id=template_id, model=data.model)
    return await run_generation(orchestrator, template["prompt"], data.model, data.context)


@router.get("/models", response_model=ModelsResponse)
async def list_models():
    """Model identifiers offered by the UI. Any identifier is accepted by /generate."""
    return ModelsResponse(
        success=True,
        models=[ModelInfo(**m) for m in get_available_models()]
    )
