"""
Project export API router
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field
from typing import List, Optional

from vibe_engine.logging_config import logger
from vibe_engine.services.errors import InvalidRequest
from vibe_engine.services.generation_types import GeneratedFile
from vibe_engine.services.project_exporter import (
    DEFAULT_PROJECT_NAME,
    build_project_archive,
    slugify_project_name,
)

router = APIRouter()


class ExportRequest(BaseModel):
    """Request model for exporting a file set"""
    files: List[GeneratedFile] = []
    project_name: Optional[str] = Field(None, alias="projectName")

    class Config:
        populate_by_name = True


@router.post("/export")
async def export_project(data: ExportRequest):
    """
    Download a generated file set as a ZIP archive.

    A README.md is added unless the file set already has one.
    """
    project_name = data.project_name or DEFAULT_PROJECT_NAME
    try:
        archive = build_project_archive(data.files, project_name)
    except InvalidRequest as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    filename = f"{slugify_project_name(project_name)}.zip"
    logger.info("Project exported", filename=filename, file_count=len(data.files))

    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
