"""
Pack a generated file set into a downloadable ZIP archive.
"""
import io
import posixpath
import re
import zipfile
from typing import Iterable

from vibe_engine.logging_config import logger
from vibe_engine.services.errors import InvalidRequest
from vibe_engine.services.generation_types import GeneratedFile


DEFAULT_PROJECT_NAME = "generated-project"


def slugify_project_name(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (name or "").lower()).strip("-")
    return slug or DEFAULT_PROJECT_NAME


def normalize_archive_path(path: str) -> str:
    """Relative POSIX path inside the archive; rejects absolute and parent paths"""
    cleaned = (path or "").replace("\\", "/").strip()
    if not cleaned or cleaned.startswith("/") or re.match(r"^[a-zA-Z]:", cleaned):
        raise InvalidRequest(f"Invalid file path: {path!r}")

    parts = [p for p in cleaned.split("/") if p not in ("", ".")]
    if not parts or ".." in parts:
        raise InvalidRequest(f"Invalid file path: {path!r}")
    return posixpath.join(*parts)


def render_readme(project_name: str, files: Iterable[GeneratedFile]) -> str:
    listing = "\n".join(f"- `{f.path}` ({f.language})" for f in files)
    return f"""# {project_name}

Generated by eT's AI Builder.

## Files

{listing}

## Getting Started

1. `npm install`
2. Copy `.env.example` to `.env.local` and fill in the values
3. `npm run dev`
"""


def build_project_archive(files: Iterable[GeneratedFile], project_name: str = DEFAULT_PROJECT_NAME) -> bytes:
    """Return the bytes of a deflated ZIP holding every file"""
    files = list(files)
    if not files:
        raise InvalidRequest("At least one file is required")

    entries = {}
    for f in files:
        entries[normalize_archive_path(f.path)] = f.content

    zip_buffer = io.BytesIO()
    with zipfile.ZipFile(zip_buffer, "w", zipfile.ZIP_DEFLATED) as zip_file:
        for path, content in entries.items():
            zip_file.writestr(path, content)
        if "README.md" not in entries:
            zip_file.writestr("README.md", render_readme(project_name, files))

    logger.info("Project archive built", file_count=len(entries), size=zip_buffer.tell())
    return zip_buffer.getvalue()
