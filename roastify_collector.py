"""
Roastify Input Collector
========================
Gathers the stuff people want roasted:
- Images (selfies, outfits, that one LinkedIn screenshot)
- Audio (singing, rants, voice notes)
- Video

Each accepted file becomes an Attachment with a preview handle. Handles are
cheap local references (think browser object URLs) and MUST be released when
the attachment goes away, otherwise the preview store slowly fills up.

Encoding for the API happens lazily, right before a roast is requested:
every attachment is turned into a base64 data URI concurrently, and the
roast only goes out once all of them are done.
"""

import asyncio
import base64
import io
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from PIL import Image, UnidentifiedImageError

from roastify_state import RoastifyStore

# Media families the collector accepts (same as the drop zone: image/*, audio/*, video/*)
ACCEPTED_MEDIA = ("image/", "audio/", "video/")


@dataclass(frozen=True)
class UploadedFile:
    """A blob the user handed us, with the MIME type it was declared as."""
    name: str
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class Attachment:
    """An accepted file plus the preview handle used to show it."""
    raw_file: UploadedFile
    preview_handle: str
    mime_type: str

    @property
    def name(self) -> str:
        return self.raw_file.name


@dataclass(frozen=True)
class EncodedAttachment:
    """Transport form of an attachment: a self-describing data URI."""
    data: str
    mime_type: str


class PreviewStore:
    """
    Issues and revokes local preview handles.

    A handle looks like "preview://<uuid>" and resolves to the original file
    until it is released.
    """

    def __init__(self):
        self._previews: Dict[str, UploadedFile] = {}

    def create(self, upload: UploadedFile) -> str:
        handle = f"preview://{uuid.uuid4().hex}"
        self._previews[handle] = upload
        return handle

    def resolve(self, handle: str) -> Optional[UploadedFile]:
        return self._previews.get(handle)

    def release(self, handle: str) -> bool:
        """Release a handle. Returns False if it was already gone."""
        return self._previews.pop(handle, None) is not None

    def __len__(self) -> int:
        return len(self._previews)

    def __contains__(self, handle: str) -> bool:
        return handle in self._previews


def is_accepted_mime(mime_type: str) -> bool:
    """Check whether a MIME type is an image, audio or video type."""
    return bool(mime_type) and mime_type.lower().startswith(ACCEPTED_MEDIA)


def guess_mime_type(name: str, data: bytes = b"") -> str:
    """
    Work out the MIME type of a file.

    Extension first, then a peek at the signature bytes for the usual
    suspects (PNG and JPEG) when the name doesn't help.
    """
    mime_type, _ = mimetypes.guess_type(name)
    if mime_type:
        return mime_type

    if data[:8] == b'\x89PNG\r\n\x1a\n':
        return "image/png"
    if data[:3] == b'\xff\xd8\xff':
        return "image/jpeg"
    return "application/octet-stream"


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a data:<mime>;base64,<payload> URI."""
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


async def encode_for_transport(attachment: Attachment) -> EncodedAttachment:
    """
    Encode one attachment as a data URI.

    Base64 of a big video isn't free, so it runs in a worker thread and the
    event loop stays responsive.
    """
    data = await asyncio.to_thread(
        to_data_uri, attachment.raw_file.data, attachment.mime_type
    )
    return EncodedAttachment(data=data, mime_type=attachment.mime_type)


async def encode_all(attachments: Sequence[Attachment]) -> List[EncodedAttachment]:
    """Encode every attachment concurrently; results keep the input order."""
    if not attachments:
        return []
    return list(await asyncio.gather(*(encode_for_transport(a) for a in attachments)))


class InputCollector:
    """
    Owns the current list of attachments and their preview handles.
    """

    def __init__(self, previews: PreviewStore = None, store: RoastifyStore = None):
        """
        Args:
            previews: Where preview handles live (a fresh store by default)
            store: Optional app state store to publish attachment changes to
        """
        self.previews = previews or PreviewStore()
        self.store = store
        self._attachments: List[Attachment] = []

    @property
    def attachments(self) -> List[Attachment]:
        """A copy of the current attachments, in submission order."""
        return list(self._attachments)

    def __len__(self) -> int:
        return len(self._attachments)

    def accept_files(self, files: Iterable[UploadedFile]) -> List[Attachment]:
        """
        Accept any number of image/audio/video blobs.

        Args:
            files: Uploaded blobs, each with its declared MIME type

        Returns:
            The attachments that were actually added (in order)
        """
        added = []
        for upload in files:
            if not is_accepted_mime(upload.mime_type):
                print(f"   ⚠️ Skipping {upload.name}: {upload.mime_type or 'unknown type'} isn't image, audio or video")
                continue

            attachment = Attachment(
                raw_file=upload,
                preview_handle=self.previews.create(upload),
                mime_type=upload.mime_type,
            )
            self._attachments.append(attachment)
            added.append(attachment)
            print(f"   📎 Attached: {upload.name} ({upload.mime_type})")

        if added:
            self._publish()
        return added

    def accept_paths(self, paths: Iterable[str]) -> List[Attachment]:
        """Read files from disk and accept them."""
        uploads = []
        for path in paths:
            file_path = Path(path).expanduser()
            try:
                data = file_path.read_bytes()
            except OSError as e:
                print(f"   ⚠️ Could not read {file_path}: {e}")
                continue
            uploads.append(UploadedFile(
                name=file_path.name,
                data=data,
                mime_type=guess_mime_type(file_path.name, data),
            ))
        return self.accept_files(uploads)

    def remove_attachment(self, index: int) -> Attachment:
        """
        Remove the attachment at `index` and release its preview handle.

        Raises:
            IndexError: if there is no attachment at that position
        """
        if not 0 <= index < len(self._attachments):
            raise IndexError(
                f"No attachment #{index} (have {len(self._attachments)})"
            )

        removed = self._attachments.pop(index)
        self.previews.release(removed.preview_handle)
        print(f"   🗑️ Removed: {removed.name}")
        self._publish()
        return removed

    def clear(self):
        """Drop every attachment and release all handles (session end)."""
        for attachment in self._attachments:
            self.previews.release(attachment.preview_handle)
        self._attachments = []
        self._publish()

    def describe(self, attachment: Attachment) -> str:
        """
        One-line summary for the terminal listing.
        Images also get their pixel size.
        """
        size_kb = len(attachment.raw_file.data) / 1024
        summary = f"{attachment.name} ({attachment.mime_type}, {size_kb:.0f} KB)"

        if attachment.mime_type.startswith("image/"):
            try:
                with Image.open(io.BytesIO(attachment.raw_file.data)) as img:
                    summary += f" {img.width}x{img.height}"
            except (UnidentifiedImageError, OSError):
                summary += " [unreadable image]"

        return summary

    def _publish(self):
        if self.store is not None:
            self.store.update(
                attachment_names=tuple(a.name for a in self._attachments)
            )
