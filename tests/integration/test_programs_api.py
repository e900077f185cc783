"""
Integration tests for the program endpoints.
"""

import pytest


@pytest.fixture
async def enrollment_id(async_client, coach_headers, world):
    response = await async_client.post("/programs/enrollments", headers=coach_headers, json={
        "template_id": world["template_id"],
        "player_user_id": world["player_id"]
    })
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.integration
class TestEnrollments:
    """Test enrollment endpoints."""

    async def test_enroll(self, enrollment_id, store, world):
        """Test enrolling a player in a template."""
        enrollment = store.enrollments[enrollment_id]

        assert enrollment["status"] == "active"
        assert enrollment["player_user_id"] == world["player_id"]

    async def test_pause_and_resume(self, async_client, coach_headers, enrollment_id):
        paused = await async_client.patch(
            f"/programs/enrollments/{enrollment_id}/status", headers=coach_headers, json={"status": "paused"}
        )
        resumed = await async_client.patch(
            f"/programs/enrollments/{enrollment_id}/status", headers=coach_headers, json={"status": "active"}
        )

        assert paused.status_code == 200
        assert paused.json()["status"] == "paused"
        assert resumed.json()["status"] == "active"

    async def test_other_team_coach_gets_conflict(self, async_client, other_coach_headers, enrollment_id):
        response = await async_client.patch(
            f"/programs/enrollments/{enrollment_id}/status", headers=other_coach_headers, json={"status": "paused"}
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Enrollment belongs to another team."

    async def test_invalid_status(self, async_client, coach_headers, enrollment_id):
        response = await async_client.patch(
            f"/programs/enrollments/{enrollment_id}/status", headers=coach_headers, json={"status": "done"}
        )

        assert response.status_code == 400


@pytest.mark.integration
class TestProgress:
    """Test assignment completion and submissions."""

    async def test_complete_assignment_twice(self, async_client, player_headers, enrollment_id, world):
        payload = {"assignment_id": world["assignment_id"]}

        first = await async_client.post("/programs/assignments/complete", headers=player_headers, json=payload)
        second = await async_client.post("/programs/assignments/complete", headers=player_headers, json=payload)

        assert first.status_code == 200
        assert second.status_code == 200
        assert first.json()["already_completed"] is False
        assert second.json()["already_completed"] is True
        assert second.json()["completed_at"] == first.json()["completed_at"]

    async def test_submit_and_review(self, async_client, coach_headers, player_headers, enrollment_id):
        response = await async_client.post("/programs/submissions", headers=player_headers, json={
            "enrollment_id": enrollment_id,
            "media_ref": "submissions/jamie/day1.mp4"
        })
        assert response.status_code == 201
        submission_id = response.json()["id"]

        first = await async_client.post("/programs/reviews", headers=coach_headers, json={
            "submission_id": submission_id,
            "note": "Nice arc"
        })
        second = await async_client.post("/programs/reviews", headers=coach_headers, json={
            "submission_id": submission_id,
            "note": "Changed my mind"
        })

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["already_reviewed"] is True
        assert second.json()["review_note"] == "Nice arc"
        assert second.json()["reviewed_at"] == first.json()["reviewed_at"]

    async def test_submit_requires_media_ref(self, async_client, player_headers, enrollment_id):
        response = await async_client.post("/programs/submissions", headers=player_headers, json={
            "enrollment_id": enrollment_id
        })

        assert response.status_code == 400


@pytest.mark.integration
class TestProgramContent:
    """Test focuses and coach-owned deletions."""

    async def test_create_focus(self, async_client, coach_headers, store):
        response = await async_client.post("/programs/focuses", headers=coach_headers, json={
            "name": "Finishing",
            "cues": ["Eyes on rim", " "]
        })

        assert response.status_code == 201
        assert store.focuses[response.json()["id"]]["cues"] == ["Eyes on rim"]

    async def test_delete_assignment(self, async_client, coach_headers, world):
        response = await async_client.delete(
            f"/programs/templates/{world['template_id']}/assignments/{world['assignment_2_id']}",
            headers=coach_headers
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True, "deleted": True}

    async def test_delete_other_teams_assignment(self, async_client, coach_headers, world):
        response = await async_client.delete(
            f"/programs/templates/{world['template_id']}/assignments/{world['other_assignment_id']}",
            headers=coach_headers
        )

        assert response.status_code == 404

    async def test_delete_drill_media(self, async_client, coach_headers, world, store):
        response = await async_client.delete(f"/programs/drills/media/{world['media_id']}", headers=coach_headers)

        assert response.status_code == 200
        assert world["media_id"] not in store.drill_media
