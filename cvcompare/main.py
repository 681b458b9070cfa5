import logging
from contextlib import asynccontextmanager
from functools import partial
from typing import Any, Dict, Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .client import submit_analysis
from .config import Settings, load_settings
from .errors import ListingFetchError
from .lifecycle import Failed, SubmissionState, Succeeded
from .listing import fetch_job_listing
from .schemas import ResumeFile
from .session import AnalyzerSession, Submitter

logger = logging.getLogger(__name__)


def describe_state(state: SubmissionState) -> Dict[str, Any]:
    info: Dict[str, Any] = {"status": state.status}
    if isinstance(state, Failed):
        info["error"] = {
            "kind": state.error.kind.value,
            "message": state.error.user_message,
            "status_code": getattr(state.error, "status_code", None),
            "body": getattr(state.error, "body", None),
        }
    if isinstance(state, Succeeded):
        info["raw"] = state.raw.model_dump()
    return info


def snapshot(session: AnalyzerSession) -> Dict[str, Any]:
    resume = session.inputs.resume
    notices = [n.model_dump() for n in session.notices]
    session.notices.clear()
    return {
        "state": describe_state(session.state),
        "can_analyze": session.can_analyze,
        "resume": {"name": resume.name, "size": resume.size} if resume else None,
        "job_description": session.inputs.job_description,
        "notices": notices,
    }


def create_app(
    settings: Optional[Settings] = None, submitter: Optional[Submitter] = None
) -> FastAPI:
    settings = settings or load_settings()
    submit = submitter or partial(submit_analysis, settings=settings)
    limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.session = AnalyzerSession(submit)
        yield
        app.state.session.cancel()
        await app.state.session.wait()

    app = FastAPI(title="CV Compare", lifespan=lifespan)
    app.state.limiter = limiter
    app.state.settings = settings

    # ------------------------------------------------------------------
    # Exception handlers
    # ------------------------------------------------------------------

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            {"detail": "Rate limit exceeded. Please slow down and try again later."},
            status_code=429,
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    @app.get("/state")
    async def get_state(request: Request):
        return snapshot(request.app.state.session)

    @app.put("/resume")
    async def select_resume(request: Request, resume: UploadFile = File(...)):
        name = resume.filename or ""
        candidate = ResumeFile(
            name=name,
            content=await resume.read(),
            content_type=resume.content_type or "application/octet-stream",
        )
        if candidate.extension not in settings.resume_extensions:
            raise HTTPException(
                status_code=400,
                detail="Please upload a valid resume file (PDF, DOC, DOCX)",
            )
        if candidate.size == 0:
            raise HTTPException(status_code=400, detail="Uploaded resume is empty.")
        if candidate.size > settings.max_resume_bytes:
            limit_mb = settings.max_resume_bytes / 1024 / 1024
            raise HTTPException(
                status_code=400, detail=f"Resume must be under {limit_mb:.0f} MB."
            )

        session: AnalyzerSession = request.app.state.session
        session.select_resume(candidate)
        return snapshot(session)

    @app.delete("/resume")
    async def clear_resume(request: Request):
        session: AnalyzerSession = request.app.state.session
        session.select_resume(None)
        return snapshot(session)

    @app.put("/job-description")
    async def set_job_description(request: Request, job_description: str = Form("")):
        session: AnalyzerSession = request.app.state.session
        session.set_job_description(job_description)
        return snapshot(session)

    @app.post("/job-description/import")
    async def import_job_description(request: Request, url: str = Form(...)):
        try:
            text = await fetch_job_listing(url, timeout=settings.listing_timeout)
        except ListingFetchError as exc:
            logger.warning("Job listing import failed for %s: %s", url, exc)
            raise HTTPException(status_code=422, detail=str(exc)) from exc

        session: AnalyzerSession = request.app.state.session
        session.set_job_description(text)
        return snapshot(session)

    @app.post("/analyze")
    @limiter.limit(settings.rate_limit)
    async def analyze(request: Request, wait: bool = False):
        session: AnalyzerSession = request.app.state.session
        if session.busy:
            return JSONResponse(
                {"detail": "Analysis already in progress.", **snapshot(session)},
                status_code=409,
            )

        task = session.request_analysis()
        if task is None:
            # Validation failed; the notice explains what is missing.
            return JSONResponse(snapshot(session), status_code=400)

        if wait:
            await session.wait()
            return snapshot(session)
        return JSONResponse(snapshot(session), status_code=202)

    @app.delete("/analysis")
    async def cancel_analysis(request: Request):
        session: AnalyzerSession = request.app.state.session
        if not session.cancel():
            raise HTTPException(status_code=409, detail="No analysis is in progress.")
        return snapshot(session)

    @app.get("/result")
    async def get_result(request: Request):
        session: AnalyzerSession = request.app.state.session
        result = session.result()
        if result is None:
            raise HTTPException(status_code=404, detail="No analysis results to display.")
        return result.model_dump()

    return app


_settings = load_settings()
logging.basicConfig(level=_settings.log_level, format="%(levelname)s %(name)s: %(message)s")

app = create_app(_settings)
