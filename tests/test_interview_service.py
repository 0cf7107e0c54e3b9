from datetime import datetime
from unittest.mock import patch

import pytest

from services.interview_service import InterviewService


@pytest.fixture
def interview(db):
    return InterviewService.create_interview(
        db,
        title="Backend Engineer",
        start_time=datetime(2026, 11, 2, 15, 30),
        stream_call_id="call-1",
        candidate_id="cand-1",
        interviewer_ids=["int-1"],
    )


def test_feedback_completes_interview_with_its_result(db, interview):
    updated, comment = InterviewService.submit_feedback(db, interview.id, "int-1", "Good work", 3)

    assert (updated.status, updated.result, updated.overall_rating) == ("completed", "passed", 3)
    assert updated.end_time is not None
    assert comment.interview_id == interview.id
    assert [c.id for c in InterviewService.list_comments(db, interview.id)] == [comment.id]


def test_feedback_for_unknown_interview(db):
    assert InterviewService.submit_feedback(db, "nope", "int-1", "Good work", 4) is None


def test_failed_feedback_leaves_interview_untouched(db, interview):
    with patch.object(db, "commit", side_effect=RuntimeError("store unavailable")):
        with pytest.raises(RuntimeError):
            InterviewService.submit_feedback(db, interview.id, "int-1", "Weak", 1)

    stored = InterviewService.get_interview(db, interview.id)
    assert (stored.status, stored.result, stored.overall_rating, stored.end_time) == (
        "upcoming", None, None, None
    )
    assert InterviewService.list_comments(db, interview.id) == []
    assert not InterviewService.has_commented(db, interview.id, "int-1")
