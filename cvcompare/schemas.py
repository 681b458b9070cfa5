from pathlib import PurePath
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = 0
    strengths: Tuple[str, ...] = ()
    weaknesses: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()

    @field_validator("score")
    @classmethod
    def clamp_score(cls, v: int) -> int:
        return max(0, min(100, v))


class RawResponse(BaseModel):
    """Body of a successful call to the analysis endpoint."""

    model_config = ConfigDict(frozen=True)

    result: StrictStr


class ResumeFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return PurePath(self.name).suffix.lower()


class Notice(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    severity: Literal["default", "destructive"] = "default"


class InputBundle(BaseModel):
    """What the user has supplied so far; kept across attempts for retries."""

    resume: Optional[ResumeFile] = None
    job_description: str = ""
