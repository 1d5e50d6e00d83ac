# =============================================================================
# Video API Routes
# =============================================================================
#
# Endpoints:
#   POST   /api/video                      - Upload a video (multipart)
#   GET    /api/video/find/random          - Random selection of videos
#   GET    /api/video/find/{account_id}    - Videos owned by an account
#   PUT    /api/video/view/{video_id}      - Count a view
#   GET    /api/video/{video_id}           - Single video
#   PUT    /api/video/{video_id}           - Update own video
#   DELETE /api/video/{video_id}           - Delete own video (and its comments)
#
# =============================================================================

from __future__ import annotations

import logging
import random
from pathlib import PurePath

from fastapi import APIRouter, Depends, File, Form, UploadFile

from vidshare.api.dependencies import get_settings, get_storage
from vidshare.auth.context import AuthContext
from vidshare.auth.policies import ensure_owner, require_auth
from vidshare.config import Settings
from vidshare.core.models import Video, VideoUpdate
from vidshare.core.utils import generate_id, utc_now
from vidshare.errors import NotFound
from vidshare.storage import Collections, StorageProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/video", tags=["video"])

RANDOM_SAMPLE_SIZE = 40


async def load_video(storage: StorageProvider, video_id: str) -> Video:
    doc = await storage.metadata.get(Collections.VIDEOS, video_id)
    if doc is None:
        raise NotFound("The video you are looking for could not be found.")
    return Video.model_validate(doc)


async def _store_upload(storage: StorageProvider, folder: str, upload: UploadFile) -> str:
    """Save an upload under `folder/`, return the stored file name."""
    suffix = PurePath(upload.filename or "").suffix
    name = f"{generate_id(folder.rstrip('s'))}{suffix}"
    await storage.content.put(
        f"{folder}/{name}",
        await upload.read(),
        content_type=upload.content_type or "application/octet-stream",
    )
    return name


# =============================================================================
# Public Endpoints
# =============================================================================


@router.get("/find/random")
async def get_random_videos(storage: StorageProvider = Depends(get_storage)):
    videos = await storage.metadata.query(Collections.VIDEOS, limit=10_000)
    sample = random.sample(videos, min(RANDOM_SAMPLE_SIZE, len(videos)))
    return {"success": True, "data": sample}


@router.get("/find/{account_id}")
async def get_videos_by_account(
    account_id: str,
    storage: StorageProvider = Depends(get_storage),
):
    videos = await storage.metadata.query(Collections.VIDEOS, {"owner_id": account_id})
    return {"success": True, "data": videos}


@router.put("/view/{video_id}")
async def add_view_to_video(
    video_id: str,
    storage: StorageProvider = Depends(get_storage),
):
    video = await load_video(storage, video_id)
    await storage.metadata.update(Collections.VIDEOS, video_id, {"views": video.views + 1})
    return {"success": True, "message": "The view has been increased."}


@router.get("/{video_id}")
async def get_single_video(
    video_id: str,
    storage: StorageProvider = Depends(get_storage),
):
    video = await load_video(storage, video_id)
    return {"success": True, "data": video.model_dump(mode="json")}


# =============================================================================
# Protected Endpoints
# =============================================================================


@router.post("", status_code=201)
async def add_new_video(
    title: str = Form(...),
    description: str = Form(...),
    image: UploadFile = File(...),
    file: UploadFile = File(...),
    ctx: AuthContext = Depends(require_auth),
    storage: StorageProvider = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    """
    Upload a thumbnail and a video file and create the video record.

    Files already stored are removed again if a later step fails.
    """
    stored: list[str] = []
    try:
        image_name = await _store_upload(storage, "images", image)
        stored.append(f"images/{image_name}")
        video_name = await _store_upload(storage, "videos", file)
        stored.append(f"videos/{video_name}")

        base_url = settings.public_base_url.rstrip("/")
        video = Video(
            owner_id=ctx.account_id,
            title=title,
            description=description,
            img_url=f"{base_url}/images/{image_name}",
            video_url=f"{base_url}/videos/{video_name}",
        )
        await storage.metadata.save(Collections.VIDEOS, video.id, video.model_dump(mode="json"))
    except Exception:
        for key in stored:
            await storage.content.delete(key)
        logger.warning(f"Upload by {ctx.account_id} failed, removed {len(stored)} stored files")
        raise

    logger.info(f"Account {ctx.account_id} uploaded video {video.id}")
    return {"message": "Your new video has been generated!", "video": video.model_dump(mode="json")}


@router.put("/{video_id}")
async def update_single_video(
    video_id: str,
    data: VideoUpdate,
    ctx: AuthContext = Depends(require_auth),
    storage: StorageProvider = Depends(get_storage),
):
    video = await load_video(storage, video_id)
    ensure_owner(ctx, video.owner_id, "You can update only your video.")

    updates = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    updates["updated_at"] = utc_now().isoformat()
    await storage.metadata.update(Collections.VIDEOS, video_id, updates)

    video = await load_video(storage, video_id)
    return {"success": True, "data": video.model_dump(mode="json")}


@router.delete("/{video_id}")
async def delete_single_video(
    video_id: str,
    ctx: AuthContext = Depends(require_auth),
    storage: StorageProvider = Depends(get_storage),
):
    video = await load_video(storage, video_id)
    ensure_owner(ctx, video.owner_id, "You can delete only your video.")

    await storage.metadata.delete(Collections.VIDEOS, video_id)
    removed = await storage.metadata.delete_many(Collections.COMMENTS, {"video_id": video_id})

    logger.info(f"Deleted video {video_id} and {removed} comments")
    return {"success": True, "data": "Your video has been deleted."}
