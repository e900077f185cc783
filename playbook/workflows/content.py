"""
Lifecycle of shared media: soft delete and restore of videos and comments,
permanent purge of trashed videos, and per-viewer "last seen" watermarks.
"""

from typing import Optional

from playbook.auth.gate import require_member
from playbook.models.common import DeleteResponse
from playbook.models.content import ContentStateResponse, SeenResponse
from playbook.models.profile import Profile
from playbook.utils.audit_log import log_sensitive_operation
from .base import Workflow, check_id


def _state(result) -> ContentStateResponse:
    deleted_by = result.get("deleted_by_user_id")
    return ContentStateResponse(
        id=str(result["id"]),
        deleted_at=result.get("deleted_at"),
        deleted_by_user_id=str(deleted_by) if deleted_by else None
    )


class ContentLifecycle(Workflow):
    """
    Soft delete and restore for videos and comments.

    Allowed for the uploader/author or any coach of the team. Deleting twice
    keeps the first deletion; restoring simply clears the deletion fields.
    """

    subject_type = "video"

    async def soft_delete_video(self, caller: Optional[Profile], video_id: str) -> ContentStateResponse:
        caller = require_member(caller, action="soft_delete_video")
        video_id = check_id(video_id)
        result = await self._invoke(
            "soft_delete_video",
            {"p_video_id": video_id},
            caller_id=caller.user_id,
            not_found="Video not found."
        )
        await self._emit("video_delete", video_id, caller)
        return _state(result)

    async def restore_video(self, caller: Optional[Profile], video_id: str) -> ContentStateResponse:
        caller = require_member(caller, action="restore_video")
        video_id = check_id(video_id)
        result = await self._invoke(
            "restore_video",
            {"p_video_id": video_id},
            caller_id=caller.user_id,
            not_found="Video not found."
        )
        await self._emit("video_restore", video_id, caller)
        return _state(result)

    async def purge_video(self, caller: Optional[Profile], video_id: str) -> DeleteResponse:
        """
        Permanently delete a video that is already in the trash.

        Its comments and view marks go with it. A video that was never soft
        deleted is refused.
        """
        caller = require_member(caller, action="purge_video")
        video_id = check_id(video_id)
        deleted = await self._invoke(
            "purge_video",
            {"p_video_id": video_id},
            caller_id=caller.user_id,
            failure="Move to Trash first.",
            not_found="Video not found."
        )
        log_sensitive_operation(
            operation="video_purge",
            user_id=caller.user_id,
            role=caller.role,
            details=f"video_id={video_id}"
        )
        await self._emit("video_purge", video_id, caller)
        return DeleteResponse(deleted=bool(deleted))

    async def soft_delete_comment(self, caller: Optional[Profile], comment_id: str) -> ContentStateResponse:
        caller = require_member(caller, action="soft_delete_comment")
        comment_id = check_id(comment_id)
        result = await self._invoke(
            "soft_delete_comment",
            {"p_comment_id": comment_id},
            caller_id=caller.user_id,
            not_found="Comment not found."
        )
        await self._emit("comment_delete", comment_id, caller, subject_type="comment")
        return _state(result)

    async def restore_comment(self, caller: Optional[Profile], comment_id: str) -> ContentStateResponse:
        caller = require_member(caller, action="restore_comment")
        comment_id = check_id(comment_id)
        result = await self._invoke(
            "restore_comment",
            {"p_comment_id": comment_id},
            caller_id=caller.user_id,
            not_found="Comment not found."
        )
        await self._emit("comment_restore", comment_id, caller, subject_type="comment")
        return _state(result)

    async def touch_seen(self, caller: Optional[Profile], video_id: str) -> SeenResponse:
        """Move the caller's watermark for a video to now. Last write wins."""
        caller = require_member(caller, action="touch_video_seen")
        video_id = check_id(video_id)
        seen_at = await self._invoke(
            "touch_video_seen",
            {"p_video_id": video_id},
            caller_id=caller.user_id,
            not_found="Video not found."
        )
        return SeenResponse(last_seen_at=seen_at)

    async def touch_last_seen_feed(self, caller: Optional[Profile]) -> SeenResponse:
        caller = require_member(caller, action="touch_last_seen_feed")
        seen_at = await self._invoke("touch_last_seen_feed", caller_id=caller.user_id)
        return SeenResponse(last_seen_at=seen_at)
