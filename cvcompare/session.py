import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from .errors import AnalysisError, TransportError
from .lifecycle import (
    AnalyzeRequested,
    Event,
    Idle,
    InFlight,
    InputsChecked,
    Step,
    SubmissionState,
    SubmitCancelled,
    SubmitFailed,
    SubmitSucceeded,
    Succeeded,
    is_busy,
    transition,
)
from .result_parser import parse_analysis
from .schemas import AnalysisResult, InputBundle, Notice, RawResponse, ResumeFile

logger = logging.getLogger(__name__)

Submitter = Callable[[ResumeFile, str], Awaitable[RawResponse]]


class AnalyzerSession:
    """Holds the user's inputs and drives one submission at a time.

    All state changes go through ``lifecycle.transition``; this class only
    feeds it events and carries out the ``submit`` effect as an asyncio task
    whose outcome comes back as another event.
    """

    def __init__(
        self,
        submit: Submitter,
        on_notice: Optional[Callable[[Notice], None]] = None,
    ):
        self._submit = submit
        self._on_notice = on_notice
        self._state: SubmissionState = Idle()
        self._attempts = 0
        self._task: Optional[asyncio.Task] = None
        self.inputs = InputBundle()
        self.notices: List[Notice] = []

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def busy(self) -> bool:
        return is_busy(self._state)

    @property
    def can_analyze(self) -> bool:
        return (
            not self.busy
            and self.inputs.resume is not None
            and bool(self.inputs.job_description.strip())
        )

    def select_resume(self, resume: Optional[ResumeFile]) -> None:
        self.inputs.resume = resume

    def set_job_description(self, text: str) -> None:
        self.inputs.job_description = text

    def request_analysis(self) -> Optional[asyncio.Task]:
        """Handle the analyze trigger.

        Returns the task running the submission, or ``None`` when the
        trigger was inert or the inputs failed validation.  Must be called
        from a running event loop.
        """
        if self.busy:
            logger.debug("Analyze trigger ignored, attempt %d still running", self._attempts)
            return None

        loop = asyncio.get_running_loop()
        self._attempts += 1
        self._apply(AnalyzeRequested(attempt=self._attempts))
        step = self._apply(InputsChecked(missing=self._missing_input()))
        if not step.submit:
            return None

        attempt = self._attempts
        resume = self.inputs.resume
        text = self.inputs.job_description
        self._task = loop.create_task(self._run_attempt(attempt, resume, text))
        return self._task

    async def wait(self) -> SubmissionState:
        task = self._task
        if task is not None and not task.done():
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
        return self._state

    def cancel(self) -> bool:
        """Abort the in-flight attempt, if any, and go back to idle."""
        state = self._state
        if not isinstance(state, InFlight):
            return False
        self._apply(SubmitCancelled(attempt=state.attempt))
        if self._task is not None and not self._task.done():
            self._task.cancel()
        logger.info("Cancelled analysis attempt %d", state.attempt)
        return True

    def result(self) -> Optional[AnalysisResult]:
        """Parse the stored response on demand; ``None`` unless succeeded."""
        state = self._state
        if not isinstance(state, Succeeded):
            return None
        return parse_analysis(state.raw.result)

    async def _run_attempt(self, attempt: int, resume: ResumeFile, text: str) -> None:
        try:
            raw = await self._submit(resume, text)
        except AnalysisError as exc:
            outcome: Event = SubmitFailed(attempt=attempt, error=exc)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error during resume analysis")
            error = TransportError(f"unexpected {type(exc).__name__}")
            error.__cause__ = exc
            outcome = SubmitFailed(attempt=attempt, error=error)
        else:
            outcome = SubmitSucceeded(attempt=attempt, raw=raw)
        self._apply(outcome)

    def _missing_input(self) -> Optional[str]:
        if self.inputs.resume is None:
            return "resume"
        if not self.inputs.job_description.strip():
            return "job_description"
        return None

    def _apply(self, event: Event) -> Step:
        step = transition(self._state, event)
        self._state = step.state
        if step.notice is not None:
            self.notices.append(step.notice)
            if self._on_notice is not None:
                self._on_notice(step.notice)
        return step
