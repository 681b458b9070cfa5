"""States, events and the transition function for one analyzer session.

``transition`` is pure: it takes the current state and an event and returns
a ``Step`` describing the next state, an optional notice for the user and
whether the submitter must be started.  Events that make no sense for the
current state (a second trigger while in flight, a completion for an
attempt that was cancelled) leave the state untouched.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .errors import AnalysisError
from .schemas import Notice, RawResponse

logger = logging.getLogger(__name__)

MISSING_RESUME = Notice(
    title="Missing Resume",
    description="Please upload your resume file first.",
    severity="destructive",
)
MISSING_JOB_DESCRIPTION = Notice(
    title="Missing Job Description",
    description="Please provide a job description for analysis.",
    severity="destructive",
)
ANALYSIS_COMPLETE = Notice(
    title="Analysis Complete!",
    description="Your resume has been analyzed successfully.",
    severity="default",
)


def failure_notice(error: AnalysisError) -> Notice:
    return Notice(
        title="Analysis Failed", description=error.user_message, severity="destructive"
    )


# --- States ---


@dataclass(frozen=True)
class Idle:
    status = "idle"


@dataclass(frozen=True)
class Validating:
    attempt: int
    status = "validating"


@dataclass(frozen=True)
class InFlight:
    attempt: int
    status = "in_flight"


@dataclass(frozen=True)
class Succeeded:
    attempt: int
    raw: RawResponse
    status = "succeeded"


@dataclass(frozen=True)
class Failed:
    attempt: int
    error: AnalysisError
    status = "failed"


SubmissionState = Union[Idle, Validating, InFlight, Succeeded, Failed]


# --- Events ---


@dataclass(frozen=True)
class AnalyzeRequested:
    attempt: int


@dataclass(frozen=True)
class InputsChecked:
    # "resume", "job_description" or None when both are present
    missing: Optional[str] = None


@dataclass(frozen=True)
class SubmitSucceeded:
    attempt: int
    raw: RawResponse


@dataclass(frozen=True)
class SubmitFailed:
    attempt: int
    error: AnalysisError


@dataclass(frozen=True)
class SubmitCancelled:
    attempt: int


Event = Union[AnalyzeRequested, InputsChecked, SubmitSucceeded, SubmitFailed, SubmitCancelled]


@dataclass(frozen=True)
class Step:
    state: SubmissionState
    notice: Optional[Notice] = None
    submit: bool = False


def is_busy(state: SubmissionState) -> bool:
    return isinstance(state, (Validating, InFlight))


def transition(state: SubmissionState, event: Event) -> Step:
    if isinstance(event, AnalyzeRequested):
        if is_busy(state):
            return _ignore(state, event)
        return Step(Validating(attempt=event.attempt))

    if isinstance(event, InputsChecked):
        if not isinstance(state, Validating):
            return _ignore(state, event)
        if event.missing == "resume":
            return Step(Idle(), notice=MISSING_RESUME)
        if event.missing == "job_description":
            return Step(Idle(), notice=MISSING_JOB_DESCRIPTION)
        return Step(InFlight(attempt=state.attempt), submit=True)

    # Everything below completes an attempt and only applies to the live one.
    if not isinstance(state, InFlight) or state.attempt != event.attempt:
        return _ignore(state, event)

    if isinstance(event, SubmitSucceeded):
        return Step(Succeeded(attempt=event.attempt, raw=event.raw), notice=ANALYSIS_COMPLETE)
    if isinstance(event, SubmitFailed):
        return Step(
            Failed(attempt=event.attempt, error=event.error),
            notice=failure_notice(event.error),
        )
    if isinstance(event, SubmitCancelled):
        return Step(Idle())
    return _ignore(state, event)


def _ignore(state: SubmissionState, event: Event) -> Step:
    logger.debug("Ignoring %s while %s", type(event).__name__, state.status)
    return Step(state)
