"""
Unit tests for the program workflow.
"""

import uuid

import pytest

from playbook.errors import Forbidden, InvalidInput, InvalidState, NotFound
from tests.utils import profile_of


@pytest.fixture
def coach(store, world):
    return profile_of(store, world["coach_id"])


@pytest.fixture
def player(store, world):
    return profile_of(store, world["player_id"])


@pytest.fixture
async def enrollment(programs, coach, world):
    return await programs.enroll(coach, {
        "template_id": world["template_id"],
        "player_user_id": world["player_id"]
    })


@pytest.fixture
async def submission(programs, player, enrollment):
    return await programs.submit_video(player, {
        "enrollment_id": enrollment.id,
        "media_ref": "submissions/jamie/form-shooting.mp4",
        "note": "Week 1 day 1"
    })


@pytest.mark.unit
class TestEnrollment:
    """Test enrollment creation and status changes."""

    async def test_enroll_creates_active_enrollment(self, enrollment, store):
        assert enrollment.status == "active"
        assert store.enrollments[enrollment.id]["status"] == "active"

    async def test_enroll_scenario_pause_then_complete(self, programs, coach, player, enrollment, store, world):
        """Completing while paused still records the completion."""
        paused = await programs.set_enrollment_status(coach, enrollment.id, {"status": "paused"})
        assert paused.status == "paused"

        result = await programs.complete_assignment(player, {"assignment_id": world["assignment_id"]})

        assert result.already_completed is False
        assert (world["assignment_id"], world["player_id"]) in store.completions

    async def test_completed_enrollment_can_be_reactivated(self, programs, coach, enrollment):
        await programs.set_enrollment_status(coach, enrollment.id, {"status": "completed"})

        result = await programs.set_enrollment_status(coach, enrollment.id, {"status": "active"})

        assert result.status == "active"

    async def test_status_for_other_team_is_invalid_state(self, programs, coach, store, world):
        other_enrollment = await programs.enroll(profile_of(store, world["other_coach_id"]), {
            "template_id": world["other_template_id"],
            "player_user_id": world["other_player_id"]
        })

        with pytest.raises(InvalidState):
            await programs.set_enrollment_status(coach, other_enrollment.id, {"status": "paused"})

        assert store.enrollments[other_enrollment.id]["status"] == "active"

    async def test_status_for_missing_enrollment(self, programs, coach):
        with pytest.raises(NotFound):
            await programs.set_enrollment_status(coach, str(uuid.uuid4()), {"status": "paused"})

    async def test_unknown_status_never_reaches_store(self, programs, coach, enrollment, store):
        with pytest.raises(InvalidInput):
            await programs.set_enrollment_status(coach, enrollment.id, {"status": "archived"})

        assert store.enrollments[enrollment.id]["status"] == "active"

    async def test_duplicate_enrollments_are_store_policy(self, programs, coach, enrollment, world):
        second = await programs.enroll(coach, {
            "template_id": world["template_id"],
            "player_user_id": world["player_id"]
        })

        assert second.id != enrollment.id

    async def test_template_from_other_team(self, programs, coach, world):
        with pytest.raises(NotFound):
            await programs.enroll(coach, {
                "template_id": world["other_template_id"],
                "player_user_id": world["player_id"]
            })

    async def test_player_cannot_enroll(self, programs, player, world):
        with pytest.raises(Forbidden):
            await programs.enroll(player, {
                "template_id": world["template_id"],
                "player_user_id": world["player_id"]
            })


@pytest.mark.unit
class TestAssignmentCompletion:
    """Test idempotent completion."""

    async def test_complete_twice_records_one_fact(self, programs, player, enrollment, store, world, clock):
        first = await programs.complete_assignment(player, {"assignment_id": world["assignment_id"]})
        clock.advance(hours=1)
        second = await programs.complete_assignment(player, {"assignment_id": world["assignment_id"]})

        assert first.already_completed is False
        assert second.already_completed is True
        assert second.completed_at == first.completed_at
        assert len(store.completions) == 1

    async def test_completion_event_emitted_once(self, programs, player, enrollment, store, world):
        await programs.complete_assignment(player, {"assignment_id": world["assignment_id"]})
        await programs.complete_assignment(player, {"assignment_id": world["assignment_id"]})

        actions = [e["action"] for e in store.events]
        assert actions.count("program_assignment_completed") == 1

    async def test_not_enrolled_is_not_found(self, programs, store, world, enrollment):
        with pytest.raises(NotFound):
            await programs.complete_assignment(
                profile_of(store, world["player_2_id"]),
                {"assignment_id": world["assignment_id"]}
            )

    async def test_coach_cannot_complete(self, programs, coach, world):
        with pytest.raises(Forbidden):
            await programs.complete_assignment(coach, {"assignment_id": world["assignment_id"]})


@pytest.mark.unit
class TestSubmissionsAndReviews:
    """Test submissions and first-review-wins reviews."""

    async def test_submit_video(self, submission, store):
        row = store.submissions[submission.id]

        assert row["reviewed_at"] is None
        assert row["media_ref"] == "submissions/jamie/form-shooting.mp4"
        assert "program_submission_created" in [e["action"] for e in store.events]

    async def test_submit_to_someone_elses_enrollment(self, programs, enrollment, store, world):
        with pytest.raises(NotFound):
            await programs.submit_video(profile_of(store, world["player_2_id"]), {
                "enrollment_id": enrollment.id,
                "media_ref": "submissions/sam/clip.mp4"
            })

    async def test_second_review_keeps_first(self, programs, coach, submission, store, clock):
        first = await programs.mark_submission_reviewed(coach, {"submission_id": submission.id, "note": "good work"})
        clock.advance(minutes=30)
        second = await programs.mark_submission_reviewed(coach, {"submission_id": submission.id, "note": "different note"})

        assert first.already_reviewed is False
        assert second.already_reviewed is True
        assert second.reviewed_at == first.reviewed_at
        assert second.review_note == "good work"
        assert store.submissions[submission.id]["review_note"] == "good work"

    async def test_other_team_coach_cannot_review(self, programs, submission, store, world):
        with pytest.raises(NotFound):
            await programs.mark_submission_reviewed(
                profile_of(store, world["other_coach_id"]),
                {"submission_id": submission.id}
            )

        assert store.submissions[submission.id]["reviewed_at"] is None


@pytest.mark.unit
class TestProgramContent:
    """Test focuses and coach-owned deletions."""

    async def test_create_focus_cleans_input(self, programs, coach, store):
        created = await programs.create_focus(coach, {
            "name": "  Shooting balance ",
            "description": "  Base first ",
            "cues": [" Feet set", "", "  ", "Hold follow through "]
        })

        focus = store.focuses[created.id]
        assert focus["name"] == "Shooting balance"
        assert focus["description"] == "Base first"
        assert focus["cues"] == ["Feet set", "Hold follow through"]

    async def test_blank_focus_name(self, programs, coach, store):
        with pytest.raises(InvalidInput):
            await programs.create_focus(coach, {"name": "   "})

        assert store.focuses == {}

    async def test_delete_assignment_ignores_path_template(self, programs, coach, store, world):
        """Ownership comes from the assignment, not from the template id given."""
        result = await programs.delete_template_assignment(coach, world["other_template_id"], world["assignment_id"])

        assert result.deleted is True
        assert world["assignment_id"] not in store.template_assignments

    async def test_cannot_delete_other_teams_assignment(self, programs, coach, store, world):
        with pytest.raises(NotFound):
            await programs.delete_template_assignment(coach, world["template_id"], world["other_assignment_id"])

        assert world["other_assignment_id"] in store.template_assignments

    async def test_delete_drill_media(self, programs, coach, store, world):
        result = await programs.delete_drill_media(coach, world["media_id"])

        assert result.deleted is True
        assert world["media_id"] not in store.drill_media

    async def test_cannot_delete_other_teams_media(self, programs, coach, store, world):
        with pytest.raises(NotFound):
            await programs.delete_drill_media(coach, world["other_media_id"])

        assert world["other_media_id"] in store.drill_media

    async def test_player_cannot_delete_media(self, programs, player, store, world):
        with pytest.raises(Forbidden):
            await programs.delete_drill_media(player, world["media_id"])

        assert world["media_id"] in store.drill_media
