"""
Data shapes shared by the generation pipeline and the API routers
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class GeneratedFile(BaseModel):
    """A single generated source file"""
    path: str
    content: str
    language: str = "text"

    class Config:
        frozen = True


class UsageInfo(BaseModel):
    """Usage details attached to a remote-backed generation"""
    provider: str
    requests: int
    limit: int
    tokens_used: int = Field(0, alias="tokensUsed")

    class Config:
        populate_by_name = True


class GenerationResult(BaseModel):
    """Uniform result of one generation call"""
    primary_code: str
    files: List[GeneratedFile]
    model: str
    usage: Optional[UsageInfo] = None

    def to_response(self) -> dict:
        """Serialize to the public wire shape {code, model, usage, files}"""
        return {
            "code": self.primary_code,
            "model": self.model,
            "usage": self.usage.model_dump(by_alias=True) if self.usage else None,
            "files": [f.model_dump() for f in self.files],
        }
