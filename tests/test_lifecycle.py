import unittest

from cvcompare.errors import ServerError
from cvcompare.lifecycle import (
    ANALYSIS_COMPLETE,
    MISSING_JOB_DESCRIPTION,
    MISSING_RESUME,
    AnalyzeRequested,
    Failed,
    Idle,
    InFlight,
    InputsChecked,
    SubmitCancelled,
    SubmitFailed,
    SubmitSucceeded,
    Succeeded,
    Validating,
    transition,
)
from cvcompare.schemas import RawResponse

RAW = RawResponse(result="**Match Percentage:** 50%")


class TransitionTests(unittest.TestCase):
    def test_trigger_from_idle_starts_validating(self):
        step = transition(Idle(), AnalyzeRequested(attempt=1))
        self.assertEqual(step.state, Validating(attempt=1))
        self.assertFalse(step.submit)
        self.assertIsNone(step.notice)

    def test_missing_inputs_return_to_idle_with_notice(self):
        step = transition(Validating(attempt=1), InputsChecked(missing="resume"))
        self.assertEqual(step.state, Idle())
        self.assertEqual(step.notice, MISSING_RESUME)

        step = transition(Validating(attempt=1), InputsChecked(missing="job_description"))
        self.assertEqual(step.state, Idle())
        self.assertEqual(step.notice, MISSING_JOB_DESCRIPTION)

    def test_valid_inputs_go_in_flight_and_submit(self):
        step = transition(Validating(attempt=3), InputsChecked())
        self.assertEqual(step.state, InFlight(attempt=3))
        self.assertTrue(step.submit)

    def test_trigger_while_busy_is_inert(self):
        for state in (Validating(attempt=1), InFlight(attempt=1)):
            step = transition(state, AnalyzeRequested(attempt=2))
            self.assertIs(step.state, state)
            self.assertFalse(step.submit)
            self.assertIsNone(step.notice)

    def test_success_and_failure(self):
        step = transition(InFlight(attempt=1), SubmitSucceeded(attempt=1, raw=RAW))
        self.assertEqual(step.state, Succeeded(attempt=1, raw=RAW))
        self.assertEqual(step.notice, ANALYSIS_COMPLETE)

        error = ServerError(500, "internal error")
        step = transition(InFlight(attempt=1), SubmitFailed(attempt=1, error=error))
        self.assertIsInstance(step.state, Failed)
        self.assertIs(step.state.error, error)
        self.assertEqual(step.notice.title, "Analysis Failed")
        self.assertEqual(step.notice.severity, "destructive")
        self.assertIn("500", step.notice.description)

    def test_completion_for_another_attempt_is_ignored(self):
        state = InFlight(attempt=2)
        step = transition(state, SubmitSucceeded(attempt=1, raw=RAW))
        self.assertIs(step.state, state)
        step = transition(Idle(), SubmitSucceeded(attempt=1, raw=RAW))
        self.assertEqual(step.state, Idle())

    def test_retry_from_finished_states(self):
        done = Succeeded(attempt=1, raw=RAW)
        self.assertEqual(transition(done, AnalyzeRequested(attempt=2)).state, Validating(attempt=2))
        failed = Failed(attempt=1, error=ServerError(502, ""))
        self.assertEqual(transition(failed, AnalyzeRequested(attempt=2)).state, Validating(attempt=2))

    def test_cancel_returns_to_idle_silently(self):
        step = transition(InFlight(attempt=4), SubmitCancelled(attempt=4))
        self.assertEqual(step.state, Idle())
        self.assertIsNone(step.notice)


if __name__ == "__main__":
    unittest.main()
