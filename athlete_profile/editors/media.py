"""
media.py — Media handles, link thumbnails and the MEDIA tab's context-aware editor.

Handle acceptance mirrors an upload endpoint:
  1. size check BEFORE anything else            → FILE_TOO_LARGE
  2. MIME sniffed from content bytes, never the
     caller-declared type (spoofable)           → INVALID_MIME_TYPE

Media context:
  GENERAL_CONTEXT ("general")  the profile-wide gallery + player journey
  <participation id>           that tournament's own media list + story
An unknown participation id makes every write a no-op.
"""
from __future__ import annotations

import logging
import re
from enum import Enum
from typing import AbstractSet, Callable, Optional, Set

from athlete_profile.config import settings
from athlete_profile.editors.collections import RecordCollection
from athlete_profile.profile.schemas import (
    MediaHandle,
    MediaItem,
    MediaType,
    ParticipationRecord,
    ProfileState,
    new_id,
)

logger = logging.getLogger(__name__)

GENERAL_CONTEXT = "general"

IMAGE_MIMES = frozenset({"image/jpeg", "image/png"})
IDENTITY_MIMES = frozenset({"application/pdf", "image/jpeg", "image/png"})
MEDIA_MIMES: dict[MediaType, frozenset[str]] = {
    MediaType.image: frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"}),
    MediaType.video: frozenset({"video/mp4", "video/webm", "video/quicktime"}),
    MediaType.certificate: IDENTITY_MIMES,
}

YOUTUBE_THUMBNAIL = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"

_YOUTUBE_WATCH_RE = re.compile(r"v=([^&]+)")
_YOUTUBE_SHORT_RE = re.compile(r"youtu\.be/([^?]+)")


class UploadRejected(ValueError):
    """A file handle refused at the acceptance boundary."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


# ---------------------------------------------------------------------------
# Handles
# ---------------------------------------------------------------------------

def handle_from_bytes(
    name: str,
    contents: bytes,
    allowed_mimes: AbstractSet[str] = IDENTITY_MIMES,
    url: Optional[str] = None,
) -> MediaHandle:
    """
    Wrap raw file bytes in a MediaHandle after the size and MIME checks.

    Raises:
        UploadRejected: FILE_TOO_LARGE or INVALID_MIME_TYPE.
    """
    if len(contents) > settings.max_upload_size:
        raise UploadRejected(
            "FILE_TOO_LARGE",
            f"File size exceeds maximum allowed {settings.max_upload_size // (1024 * 1024)} MB",
        )

    # libmagic is only needed once bytes actually arrive
    import magic

    detected_mime = magic.from_buffer(contents[:2048], mime=True)
    if detected_mime not in allowed_mimes:
        raise UploadRejected(
            "INVALID_MIME_TYPE",
            f"Unsupported file type '{detected_mime}'. Allowed: {', '.join(sorted(allowed_mimes))}",
        )

    logger.info("Accepted media handle mime=%s size=%d", detected_mime, len(contents))
    return MediaHandle.with_reader(
        name=name,
        url=url or f"memory://{new_id()}",
        mime_type=detected_mime,
        reader=lambda: contents,
        size=len(contents),
    )


class PreviewKind(str, Enum):
    image = "image"
    pdf = "pdf"
    unsupported = "unsupported"
    none = "none"


def preview_kind(handle: Optional[MediaHandle]) -> PreviewKind:
    """How an identity document (or any handle) can be previewed inline."""
    if handle is None:
        return PreviewKind.none
    if handle.is_image:
        return PreviewKind.image
    if handle.is_pdf:
        return PreviewKind.pdf
    return PreviewKind.unsupported


# ---------------------------------------------------------------------------
# Link thumbnails and captions
# ---------------------------------------------------------------------------

class LinkKind(str, Enum):
    youtube = "youtube"
    vimeo = "vimeo"
    drive = "drive"
    pdf = "pdf"
    generic = "generic"


def link_kind(url: str) -> LinkKind:
    lower = url.lower()
    if "youtube.com" in lower or "youtu.be" in lower:
        return LinkKind.youtube
    if "vimeo.com" in lower:
        return LinkKind.vimeo
    if "drive.google.com" in lower:
        return LinkKind.drive
    if ".pdf" in lower:
        return LinkKind.pdf
    return LinkKind.generic


def youtube_video_id(url: str) -> Optional[str]:
    pattern = _YOUTUBE_WATCH_RE if "youtube.com" in url.lower() else _YOUTUBE_SHORT_RE
    match = pattern.search(url)
    return match.group(1) if match else None


def thumbnail_for_url(url: str) -> str:
    """
    YouTube links resolve to the video's hosted thumbnail; every other link
    kind gets a "placeholder:<kind>" marker for the renderer to draw.
    """
    kind = link_kind(url)
    if kind is LinkKind.youtube:
        video_id = youtube_video_id(url)
        if video_id:
            return YOUTUBE_THUMBNAIL.format(video_id=video_id)
    return f"placeholder:{kind.value}"


def default_link_caption(url: str) -> str:
    return "Certificate PDF" if ".pdf" in url else "Drive Link"


# ---------------------------------------------------------------------------
# MediaEditor
# ---------------------------------------------------------------------------

class MediaEditor:
    """
    Context-aware add/remove/update over general and per-event media.

    One retired-id set is shared by every context, so a removed media id can
    never come back anywhere in the profile.
    """

    def __init__(self, state_getter: Callable[[], ProfileState]) -> None:
        self._state = state_getter
        self._retired: Set[str] = set()

    def _event(self, context: str) -> Optional[ParticipationRecord]:
        return self._state().find_participation(context)

    def collection(self, context: str = GENERAL_CONTEXT) -> Optional[RecordCollection[MediaItem]]:
        if context == GENERAL_CONTEXT:
            return RecordCollection("media", MediaItem, lambda: self._state().media, self._retired)
        event = self._event(context)
        if event is None:
            return None
        return RecordCollection("event_media", MediaItem, lambda: event.media, self._retired)

    # ---- writes -------------------------------------------------------------

    def add(self, item: MediaItem, context: str = GENERAL_CONTEXT) -> Optional[MediaItem]:
        collection = self.collection(context)
        if collection is None:
            logger.info("Ignored media add for unknown context")
            return None
        return collection.add(item)

    def add_upload(
        self,
        handle: MediaHandle,
        media_type: MediaType,
        context: str = GENERAL_CONTEXT,
    ) -> Optional[MediaItem]:
        """File uploads are captioned with the file's name."""
        item = MediaItem(type=media_type, url=handle.resolve(), caption=handle.name, handle=handle)
        return self.add(item, context)

    def upload(
        self,
        name: str,
        contents: bytes,
        media_type: MediaType,
        context: str = GENERAL_CONTEXT,
    ) -> Optional[MediaItem]:
        """
        Accept raw bytes for a file-backed media type and attach them.

        Raises:
            UploadRejected: size or sniffed MIME type not allowed for media_type.
            ValueError: media_type is not file-backed (links are URLs).
        """
        if media_type not in MEDIA_MIMES:
            raise ValueError(f"Media type '{media_type.value}' is not uploaded as a file")
        handle = handle_from_bytes(name, contents, MEDIA_MIMES[media_type])
        return self.add_upload(handle, media_type, context)

    def add_video_link(self, url: str, context: str = GENERAL_CONTEXT) -> Optional[MediaItem]:
        if not url:
            return None
        item = MediaItem(
            type=MediaType.video,
            url=url,
            caption="External Video",
            thumbnail=thumbnail_for_url(url),
        )
        return self.add(item, context)

    def add_link(self, url: str, context: str = GENERAL_CONTEXT) -> Optional[MediaItem]:
        if not url:
            return None
        item = MediaItem(
            type=MediaType.link,
            url=url,
            caption=default_link_caption(url),
            thumbnail=thumbnail_for_url(url),
        )
        return self.add(item, context)

    def remove(self, media_id: str, context: str = GENERAL_CONTEXT) -> bool:
        collection = self.collection(context)
        return collection.remove(media_id) if collection is not None else False

    def update(self, media_id: str, context: str = GENERAL_CONTEXT, **fields) -> Optional[MediaItem]:
        collection = self.collection(context)
        return collection.update(media_id, **fields) if collection is not None else None

    # ---- stories ------------------------------------------------------------

    def story(self, context: str = GENERAL_CONTEXT) -> str:
        if context == GENERAL_CONTEXT:
            return self._state().player_journey
        event = self._event(context)
        return event.story if event is not None else ""

    def set_story(self, text: str, context: str = GENERAL_CONTEXT) -> bool:
        if context == GENERAL_CONTEXT:
            self._state().player_journey = text
            return True
        event = self._event(context)
        if event is None:
            return False
        event.story = text
        return True


__all__ = [
    "GENERAL_CONTEXT",
    "IMAGE_MIMES",
    "IDENTITY_MIMES",
    "MEDIA_MIMES",
    "UploadRejected",
    "handle_from_bytes",
    "PreviewKind",
    "preview_kind",
    "LinkKind",
    "link_kind",
    "youtube_video_id",
    "thumbnail_for_url",
    "default_link_caption",
    "MediaEditor",
]
