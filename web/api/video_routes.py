"""Video highlights: multipart upload to local disk, listing, view/like counters."""
from __future__ import annotations

import asyncio
import logging
import os
import secrets
import time
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

import config
from talent.errors import ValidationError
from talent.storage import Storage, get_storage
from web.api.schemas import ApiModel, VideoOut
from web.auth import Principal, require_user

logger = logging.getLogger("talent.api")

router = APIRouter(prefix="/api/videos", tags=["videos"])

VIDEO_SUBDIR = "videos"
MAX_UPLOAD_BYTES = config.MAX_VIDEO_UPLOAD_MB * 1024 * 1024


class VideoEnvelope(ApiModel):
    video: VideoOut


class VideoList(ApiModel):
    videos: list[VideoOut]


def _stored_name(original: Optional[str]) -> str:
    """<epoch-ms>-<random><ext>, keeping the client's extension."""
    ext = os.path.splitext(original or "")[1].lower()
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"


def _write_file(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


def _upload_error(message: str) -> ValidationError:
    return ValidationError(message, errors=[{"path": "videoFile", "message": message}])


@router.get("", response_model=VideoList)
async def list_videos(limit: int = Query(50, ge=1, le=100), storage: Storage = Depends(get_storage)):
    """Most recent uploads."""
    return VideoList(videos=await storage.list_videos(limit=limit))


@router.get("/user/{user_id}", response_model=VideoList)
async def list_user_videos(user_id: int, storage: Storage = Depends(get_storage)):
    return VideoList(videos=await storage.get_videos_by_user(user_id))


@router.get("/{video_id}", response_model=VideoEnvelope)
async def get_video(video_id: int, storage: Storage = Depends(get_storage)):
    """Fetch a video. Every fetch counts as one view."""
    video = await storage.increment_video_views(video_id)
    if not video:
        raise HTTPException(404, "Video not found")
    return VideoEnvelope(video=video)


@router.post("", response_model=VideoEnvelope, status_code=201)
async def upload_video(
    video_file: Optional[UploadFile] = File(None, alias="videoFile"),
    title: str = Form(..., max_length=200),
    description: Optional[str] = Form(None),
    duration: Optional[int] = Form(None, ge=0),
    thumbnail: Optional[str] = Form(None),
    user: Principal = Depends(require_user),
    storage: Storage = Depends(get_storage),
):
    """Store an uploaded clip under UPLOAD_DIR/videos and record it for the caller."""
    title = title.strip()
    if not title:
        raise ValidationError("Title is required", errors=[{"path": "title", "message": "Title is required"}])
    if video_file is None:
        raise _upload_error("No video file uploaded")
    if not (video_file.content_type or "").startswith("video/"):
        raise _upload_error("Only video files are allowed")
    content = await video_file.read()
    if not content:
        raise _upload_error("Uploaded file is empty")
    if len(content) > MAX_UPLOAD_BYTES:
        raise _upload_error(f"File size exceeds maximum of {config.MAX_VIDEO_UPLOAD_MB}MB")

    name = _stored_name(video_file.filename)
    await asyncio.to_thread(_write_file, Path(config.UPLOAD_DIR) / VIDEO_SUBDIR / name, content)

    video = await storage.create_video(
        user_id=user.id,
        title=title,
        url=f"/uploads/{VIDEO_SUBDIR}/{name}",
        description=description,
        thumbnail=thumbnail,
        duration=duration,
    )
    logger.info("User %s uploaded video %s (%d bytes)", user.id, video.id, len(content))
    return VideoEnvelope(video=video)


@router.post("/{video_id}/like", response_model=VideoEnvelope)
async def like_video(video_id: int, user: Principal = Depends(require_user), storage: Storage = Depends(get_storage)):
    video = await storage.increment_video_likes(video_id)
    if not video:
        raise HTTPException(404, "Video not found")
    return VideoEnvelope(video=video)
