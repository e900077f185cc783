"""
Unit tests for Pydantic model validation.

Tests input validation and sanitization for request payloads.
"""

import pytest
from pydantic import ValidationError

from playbook.models.lesson import LessonRequestCreate, LessonInviteCreate, InviteReply, ParticipantUpdate
from playbook.models.program import (
    AssignmentComplete,
    EnrollmentCreate,
    EnrollmentStatusUpdate,
    FocusCreate,
    SubmissionCreate,
    SubmissionReview
)
from playbook.models.roster import (
    ClaimTokenRegenerate,
    JoinTeamRequest,
    PendingPlayerCreate,
    PlayerActiveUpdate,
    PlayerModeUpdate,
    TeamPreviewRequest
)

COACH_ID = "123e4567-e89b-12d3-a456-426614174000"
START_AT = "2030-05-01T17:00:00+00:00"


@pytest.mark.unit
class TestLessonValidation:
    """Test lesson request models."""

    def test_lesson_request_valid(self):
        lesson = LessonRequestCreate(coach_user_id=COACH_ID, start_at=START_AT, minutes=60, note="Shooting")

        assert lesson.minutes == 60
        assert lesson.start_at.year == 2030

    @pytest.mark.parametrize("minutes", [0, 14, 181, 600])
    def test_lesson_minutes_out_of_range(self, minutes):
        with pytest.raises(ValidationError):
            LessonRequestCreate(coach_user_id=COACH_ID, start_at=START_AT, minutes=minutes)

    def test_lesson_invite_requires_uuid(self):
        with pytest.raises(ValidationError):
            LessonInviteCreate(player_user_id="player-1", start_at=START_AT, minutes=30)

    def test_ids_are_lowercased(self):
        lesson = LessonRequestCreate(coach_user_id=COACH_ID.upper(), start_at=START_AT, minutes=60)
        invite = LessonInviteCreate(player_user_id=COACH_ID.upper(), start_at=START_AT, minutes=60)

        assert lesson.coach_user_id == COACH_ID
        assert invite.player_user_id == COACH_ID

    def test_invite_reply_is_strict_bool(self):
        """String booleans are rejected rather than coerced."""
        with pytest.raises(ValidationError):
            InviteReply(accept="yes")

        assert InviteReply(accept=False).accept is False

    def test_participant_update_requires_present(self):
        with pytest.raises(ValidationError):
            ParticipantUpdate(player_user_id=COACH_ID)


@pytest.mark.unit
class TestProgramValidation:
    """Test program models."""

    def test_focus_trims_name_and_cleans_cues(self):
        focus = FocusCreate(
            name="  Balance  ",
            description="  Stay square  ",
            cues=["  Elbow in ", "", "   ", "Follow through"]
        )

        assert focus.name == "Balance"
        assert focus.description == "Stay square"
        assert focus.cues == ["Elbow in", "Follow through"]

    def test_focus_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            FocusCreate(name="    ")

    def test_focus_name_too_long(self):
        with pytest.raises(ValidationError):
            FocusCreate(name="x" * 121)

    def test_focus_name_at_limit_after_trim(self):
        focus = FocusCreate(name="  " + "x" * 120 + "  ")

        assert len(focus.name) == 120

    def test_focus_null_cues(self):
        assert FocusCreate(name="Footwork", cues=None).cues == []

    def test_enrollment_status_enum(self):
        assert EnrollmentStatusUpdate(status="paused").status == "paused"

        with pytest.raises(ValidationError):
            EnrollmentStatusUpdate(status="archived")

    def test_submission_requires_media_ref(self):
        with pytest.raises(ValidationError):
            SubmissionCreate(enrollment_id=COACH_ID, media_ref="")


@pytest.mark.unit
class TestRosterValidation:
    """Test roster onboarding models."""

    def test_preview_code_trimmed(self):
        assert TeamPreviewRequest(access_code="  abcd2345 ").access_code == "abcd2345"

    @pytest.mark.parametrize("code", ["abc", "x" * 33, "    "])
    def test_preview_code_length(self, code):
        with pytest.raises(ValidationError):
            TeamPreviewRequest(access_code=code)

    def test_join_requires_display_name(self):
        with pytest.raises(ValidationError):
            JoinTeamRequest(access_code="ABCD2345", display_name="   ")

    def test_pending_player_defaults(self):
        pending = PendingPlayerCreate(first_name=" Jordan ")

        assert pending.first_name == "Jordan"
        assert pending.expires_in_days == 30

    @pytest.mark.parametrize("days", [0, 366])
    def test_pending_player_expiry_bounds(self, days):
        with pytest.raises(ValidationError):
            PendingPlayerCreate(first_name="Jordan", expires_in_days=days)

    def test_player_mode_enum(self):
        assert PlayerModeUpdate(mode="hybrid").mode == "hybrid"

        with pytest.raises(ValidationError):
            PlayerModeUpdate(mode="online")

    def test_claim_regenerate_defaults(self):
        assert ClaimTokenRegenerate().expires_in_days == 30

        with pytest.raises(ValidationError):
            ClaimTokenRegenerate(expires_in_days=0)


@pytest.mark.unit
class TestIdNormalization:
    """Test that every payload id is stored in lowercase."""

    UPPER = COACH_ID.upper()

    def test_program_ids(self):
        enrollment = EnrollmentCreate(template_id=self.UPPER, player_user_id=self.UPPER)

        assert enrollment.template_id == COACH_ID
        assert enrollment.player_user_id == COACH_ID
        assert AssignmentComplete(assignment_id=self.UPPER).assignment_id == COACH_ID
        assert SubmissionReview(submission_id=self.UPPER).submission_id == COACH_ID

    def test_roster_ids(self):
        assert PlayerActiveUpdate(user_id=self.UPPER, active=False).user_id == COACH_ID

    @pytest.mark.parametrize("value", ["player-1", "", COACH_ID + "0", "g23e4567-e89b-12d3-a456-426614174000"])
    def test_malformed_ids_rejected(self, value):
        with pytest.raises(ValidationError):
            PlayerActiveUpdate(user_id=value, active=True)
