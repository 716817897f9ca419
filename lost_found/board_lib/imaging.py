"""Image ingestion: size-capped conversion of pictures to data URIs."""
from __future__ import annotations

import asyncio
import base64
import binascii
import io
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .errors import ImageReadFailed, ImageTooLarge

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class ImageBlob:
    """A picture attached to a submission, either on disk or in memory."""

    name: str = ""
    path: Optional[Path] = None
    data: Optional[bytes] = None
    content_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path, content_type: Optional[str] = None) -> "ImageBlob":
        path = Path(path)
        return cls(name=path.name, path=path, content_type=content_type)

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "", content_type: Optional[str] = None) -> "ImageBlob":
        return cls(name=name, data=bytes(data), content_type=content_type)

    @property
    def size(self) -> int:
        """Byte size, taken from the file's metadata for on-disk blobs."""
        if self.data is not None:
            return len(self.data)
        if self.path is None:
            return 0
        return self.path.stat().st_size

    def read(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            return b""
        return self.path.read_bytes()


async def encode_image(blob: Optional[ImageBlob], max_bytes: int) -> Optional[str]:
    """Convert an optional picture to a data URI.

    The size check runs before any read is scheduled, so an oversized blob
    is rejected without touching its content.

    Args:
        blob: Picture to encode, or None
        max_bytes: Largest accepted payload in bytes

    Returns:
        ``data:<mime>;base64,...`` text, or None when no blob was given

    Raises:
        ImageTooLarge: If the blob is larger than max_bytes
        ImageReadFailed: If the content could not be read
    """
    if blob is None:
        return None
    try:
        size = blob.size
    except OSError as exc:
        raise ImageReadFailed(blob.name, exc) from exc
    if size > max_bytes:
        raise ImageTooLarge(size, max_bytes)

    try:
        payload = await asyncio.to_thread(blob.read)
    except OSError as exc:
        raise ImageReadFailed(blob.name, exc) from exc
    if len(payload) > max_bytes:
        # file grew between stat and read
        raise ImageTooLarge(len(payload), max_bytes)

    content_type = blob.content_type or detect_content_type(payload, blob.name)
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def detect_content_type(payload: bytes, name: str = "") -> str:
    """Best-effort MIME type: Pillow's format sniffing, then the file name."""
    try:
        with Image.open(io.BytesIO(payload)) as img:
            mime = img.get_format_mimetype()
            if mime:
                return mime
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError):
        pass
    guessed, _ = mimetypes.guess_type(name) if name else (None, None)
    return guessed or DEFAULT_CONTENT_TYPE


def decode_data_uri(text: str) -> Tuple[str, bytes]:
    """Split a base64 data URI into (mime, payload).

    Raises:
        ValueError: If the text is not a base64 data URI
    """
    if not text or not text.startswith("data:"):
        raise ValueError("not a data URI")
    header, sep, body = text[len("data:"):].partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("data URI is not base64 encoded")
    mime = header[: -len(";base64")] or DEFAULT_CONTENT_TYPE
    try:
        return mime, base64.b64decode(body, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 payload: {exc}") from exc


def extension_for(mime: str) -> str:
    return mimetypes.guess_extension(mime) or ".bin"
