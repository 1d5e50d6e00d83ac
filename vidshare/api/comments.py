# =============================================================================
# Comment API Routes
# =============================================================================
#
# Endpoints:
#   GET    /api/video/{video_id}/comments               - List comments
#   POST   /api/video/{video_id}/comments               - Add a comment
#   DELETE /api/video/{video_id}/comments/{comment_id}  - Delete own comment
#
# =============================================================================

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from vidshare.api.dependencies import get_storage
from vidshare.api.videos import load_video
from vidshare.auth.context import AuthContext
from vidshare.auth.policies import ensure_owner, require_auth
from vidshare.core.models import Comment, CommentCreate
from vidshare.errors import NotFound, ValidationError
from vidshare.storage import Collections, StorageProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/video/{video_id}/comments", tags=["comment"])


@router.get("")
async def get_comments(
    video_id: str,
    storage: StorageProvider = Depends(get_storage),
):
    comments = await storage.metadata.query(Collections.COMMENTS, {"video_id": video_id})
    return {"success": True, "data": comments}


@router.post("")
async def add_new_comment(
    video_id: str,
    data: CommentCreate,
    ctx: AuthContext = Depends(require_auth),
    storage: StorageProvider = Depends(get_storage),
):
    if not data.description:
        raise ValidationError("Please provide a description")

    video = await load_video(storage, video_id)
    if video.comments_closed:
        raise ValidationError("Comments are closed for this video.")

    comment = Comment(owner_id=ctx.account_id, video_id=video_id, description=data.description)
    await storage.metadata.save(Collections.COMMENTS, comment.id, comment.model_dump(mode="json"))

    return {"success": True, "comment": comment.model_dump(mode="json")}


@router.delete("/{comment_id}")
async def delete_comment(
    video_id: str,
    comment_id: str,
    ctx: AuthContext = Depends(require_auth),
    storage: StorageProvider = Depends(get_storage),
):
    doc = await storage.metadata.get(Collections.COMMENTS, comment_id)
    if doc is None or doc.get("video_id") != video_id:
        raise NotFound("Comment couldn't be found.")

    comment = Comment.model_validate(doc)
    ensure_owner(ctx, comment.owner_id, "You cannot delete this comment.")

    await storage.metadata.delete(Collections.COMMENTS, comment_id)
    logger.info(f"Account {ctx.account_id} deleted comment {comment_id}")
    return {"success": True, "message": "Your comment has been deleted."}
