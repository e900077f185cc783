"""
Test utilities and helper functions.

Provides a controllable clock, seeding of a small two-team world in the
memory store, and helpers for authenticated requests.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from playbook.auth import create_access_token
from playbook.models.profile import Profile
from playbook.store import MemoryStore


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime.now(timezone.utc).replace(microsecond=0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def seed_world(store: MemoryStore) -> Dict[str, str]:
    """
    Create two teams with coaches, players and program/media content.

    Returns:
        Dictionary of the created ids
    """
    team_id = store.add_team("Riverside Hawks")
    coach_id = store.add_profile(team_id, "coach", "Coach Carter")
    coach_2_id = store.add_profile(team_id, "coach", "Coach Reed")
    player_id = store.add_profile(team_id, "player", "Jamie Lee")
    player_2_id = store.add_profile(team_id, "player", "Sam Ortiz")
    inactive_player_id = store.add_profile(team_id, "player", "Alex Benched", is_active=False)

    other_team_id = store.add_team("Hillcrest Owls")
    other_coach_id = store.add_profile(other_team_id, "coach", "Coach Morgan")
    other_player_id = store.add_profile(other_team_id, "player", "Riley Park")

    template_id = store.add_template(team_id, "Shooting Foundations", created_by=coach_id)
    assignment_id = store.add_template_assignment(template_id, week_index=1, day_index=1)
    assignment_2_id = store.add_template_assignment(template_id, week_index=1, day_index=2)
    other_template_id = store.add_template(other_team_id, "Owls Conditioning", created_by=other_coach_id)
    other_assignment_id = store.add_template_assignment(other_template_id)

    drill_id = store.add_drill(team_id, "Form shooting")
    media_id = store.add_drill_media(drill_id)
    other_drill_id = store.add_drill(other_team_id, "Defensive slides")
    other_media_id = store.add_drill_media(other_drill_id)

    video_id = store.add_video(team_id, owner_user_id=player_id)
    player_2_video_id = store.add_video(team_id, owner_user_id=player_2_id)
    other_video_id = store.add_video(other_team_id, owner_user_id=other_player_id)
    comment_id = store.add_comment(video_id, author_user_id=player_id, body="Elbow in on this one")

    return {
        "team_id": team_id,
        "coach_id": coach_id,
        "coach_2_id": coach_2_id,
        "player_id": player_id,
        "player_2_id": player_2_id,
        "inactive_player_id": inactive_player_id,
        "other_team_id": other_team_id,
        "other_coach_id": other_coach_id,
        "other_player_id": other_player_id,
        "template_id": template_id,
        "assignment_id": assignment_id,
        "assignment_2_id": assignment_2_id,
        "other_template_id": other_template_id,
        "other_assignment_id": other_assignment_id,
        "drill_id": drill_id,
        "media_id": media_id,
        "other_media_id": other_media_id,
        "video_id": video_id,
        "player_2_video_id": player_2_video_id,
        "other_video_id": other_video_id,
        "comment_id": comment_id,
    }


def profile_of(store: MemoryStore, user_id: str) -> Profile:
    """Resolve a caller the way the HTTP layer does."""
    return Profile(**store.profiles[user_id])


def auth_headers(user_id: str) -> Dict[str, str]:
    """Bearer header for a user id."""
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def lesson_slot(clock: FakeClock, days: int = 2, hour: int = 17) -> str:
    """ISO start time a few days ahead of the clock."""
    start = (clock() + timedelta(days=days)).replace(hour=hour, minute=0, second=0, microsecond=0)
    return start.isoformat()
