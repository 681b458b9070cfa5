import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from .config import Settings
from .errors import MalformedResponseError, ServerError, TransportError
from .normalize import normalize_job_description
from .schemas import RawResponse, ResumeFile

logger = logging.getLogger(__name__)


def build_multipart(resume: ResumeFile, job_description: str) -> tuple[dict, dict]:
    """Return the ``data`` and ``files`` arguments for the analysis POST."""
    data = {"jobDescription": normalize_job_description(job_description)}
    files = {"resume": (resume.name, resume.content, resume.content_type)}
    return data, files


async def submit_analysis(
    resume: ResumeFile,
    job_description: str,
    *,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RawResponse:
    """POST the résumé and job description to the analysis endpoint once.

    The body is read as text whatever the status, so a failing server's
    diagnostics end up on the raised ``ServerError``.  The ``result`` field
    is returned untouched; turning it into an ``AnalysisResult`` is the
    parser's job.
    """
    if not settings.analysis_endpoint:
        raise TransportError("Analysis endpoint is not configured.")

    data, files = build_multipart(resume, job_description)
    logger.info(
        "Submitting %s (%d bytes) with %d chars of job description",
        resume.name,
        resume.size,
        len(data["jobDescription"]),
    )

    try:
        async with httpx.AsyncClient(
            timeout=settings.analysis_timeout, transport=transport
        ) as client:
            response = await client.post(
                settings.analysis_endpoint, data=data, files=files
            )
            body = response.text
    except httpx.HTTPError as exc:
        logger.warning("Analysis request failed: %s", exc)
        raise TransportError(str(exc) or exc.__class__.__name__) from exc

    if not response.is_success:
        logger.warning("Analysis service answered %d", response.status_code)
        raise ServerError(response.status_code, body)

    try:
        return RawResponse.model_validate_json(body)
    except ValidationError as exc:
        logger.warning("Analysis service sent a malformed body (%d chars)", len(body))
        raise MalformedResponseError(body) from exc
