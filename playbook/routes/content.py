"""
Shared media routes: soft delete/restore, purge and view tracking.
"""

from fastapi import APIRouter

from playbook.dependencies import Caller, Content
from playbook.models.common import DeleteResponse
from playbook.models.content import ContentStateResponse, SeenResponse

router = APIRouter(tags=["Content"])


@router.delete("/videos/{video_id}", response_model=ContentStateResponse)
async def delete_video(video_id: str, caller: Caller, content: Content):
    """
    Soft delete a video.

    Allowed for the uploader or a coach of the team.
    """
    return await content.soft_delete_video(caller, video_id)


@router.post("/videos/{video_id}/restore", response_model=ContentStateResponse)
async def restore_video(video_id: str, caller: Caller, content: Content):
    return await content.restore_video(caller, video_id)


@router.post("/videos/{video_id}/purge", response_model=DeleteResponse)
async def purge_video(video_id: str, caller: Caller, content: Content):
    """
    Permanently delete a trashed video and its comments.

    The video must be soft deleted first. Allowed for the uploader or a coach.
    """
    return await content.purge_video(caller, video_id)


@router.post("/videos/{video_id}/touch", response_model=SeenResponse)
async def touch_video(video_id: str, caller: Caller, content: Content):
    """Record that the current user has seen this video."""
    return await content.touch_seen(caller, video_id)


@router.post("/feed/touch", response_model=SeenResponse)
async def touch_feed(caller: Caller, content: Content):
    return await content.touch_last_seen_feed(caller)


@router.delete("/comments/{comment_id}", response_model=ContentStateResponse)
async def delete_comment(comment_id: str, caller: Caller, content: Content):
    """Soft delete a comment (author or team coach)."""
    return await content.soft_delete_comment(caller, comment_id)


@router.post("/comments/{comment_id}/restore", response_model=ContentStateResponse)
async def restore_comment(comment_id: str, caller: Caller, content: Content):
    return await content.restore_comment(caller, comment_id)
