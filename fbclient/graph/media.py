from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional


@dataclass
class MediaObject:
    content_type: Optional[str] = None
    file_name: Optional[str] = None
    value: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: str | Path, content_type: Optional[str] = None) -> "MediaObject":
        file_path = Path(path)
        guessed = content_type or mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        return cls(content_type=guessed, file_name=file_path.name, value=file_path.read_bytes())


@dataclass
class MediaStream:
    """Attachment whose payload is read from a caller-owned stream.

    The stream is read from its current position when the request body is
    sent and is never closed by the client.
    """

    content_type: Optional[str] = None
    file_name: Optional[str] = None
    stream: Optional[BinaryIO] = None


__all__ = ["MediaObject", "MediaStream"]
