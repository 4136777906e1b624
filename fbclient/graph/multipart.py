from __future__ import annotations

import asyncio
import io
import uuid
from dataclasses import dataclass
from typing import Any, AsyncIterator, BinaryIO, Dict, Iterator, List, Mapping

from fbclient.core.exceptions import InvalidOperation
from fbclient.graph.media import MediaObject, MediaStream
from fbclient.graph.parameters import build_http_query, url_encode

CHUNK_SIZE = 4 * 1024
PREFIX = "--"
NEWLINE = "\r\n"

ATTACHMENT_MUST_HAVE_PROPERTIES = (
    "Attachment (MediaObject/MediaStream) must have a content type, file name, and value set."
)


def new_boundary() -> str:
    return uuid.uuid4().hex


@dataclass
class Segment:
    stream: BinaryIO
    owned: bool = True

    @classmethod
    def from_text(cls, text: str) -> "Segment":
        return cls(io.BytesIO(text.encode("utf-8")))

    @classmethod
    def from_bytes(cls, data: bytes) -> "Segment":
        return cls(io.BytesIO(data))

    def chunks(self, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
        while True:
            chunk = self.stream.read(chunk_size)
            if not chunk:
                return
            yield chunk


class MultipartBody:
    """Single-pass ``multipart/form-data`` body assembled from segments.

    Segments are read lazily, one chunk at a time. ``close`` releases the
    segments the body owns; streams borrowed from ``MediaStream`` attachments
    stay open.
    """

    def __init__(self, boundary: str, segments: List[Segment]) -> None:
        self.boundary = boundary
        self.segments = segments

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def __iter__(self) -> Iterator[bytes]:
        for segment in self.segments:
            yield from segment.chunks()

    async def aiter_chunks(self) -> AsyncIterator[bytes]:
        for segment in self.segments:
            if segment.owned:
                for chunk in segment.chunks():
                    yield chunk
                continue
            # caller streams are read off the event loop thread
            while True:
                chunk = await asyncio.to_thread(segment.stream.read, CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk

    def read(self) -> bytes:
        return b"".join(self)

    def close(self) -> None:
        for segment in self.segments:
            if segment.owned:
                segment.stream.close()

    def __enter__(self) -> "MultipartBody":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _part_header(boundary: str, name: str, file_name: str, content_type: str) -> str:
    return (
        f"{PREFIX}{boundary}{NEWLINE}"
        f'Content-Disposition: form-data; name="{name}"; filename="{file_name}"{NEWLINE}'
        f"Content-Type: {content_type}{NEWLINE}{NEWLINE}"
    )


def build_multipart_body(
    parameters: Mapping[str, Any],
    media_objects: Dict[str, MediaObject],
    media_streams: Dict[str, MediaStream],
    boundary: str,
) -> MultipartBody:
    for media in media_objects.values():
        if not media.content_type or not media.value or not media.file_name:
            raise InvalidOperation(ATTACHMENT_MUST_HAVE_PROPERTIES)
    for media in media_streams.values():
        if not media.content_type or media.stream is None or not media.file_name:
            raise InvalidOperation(ATTACHMENT_MUST_HAVE_PROPERTIES)

    fields = []
    for key, value in parameters.items():
        fields.append(f"{PREFIX}{boundary}{NEWLINE}")
        fields.append(f'Content-Disposition: form-data; name="{key}"{NEWLINE}{NEWLINE}')
        fields.append(build_http_query(value, url_encode))
        fields.append(NEWLINE)
    segments: List[Segment] = [Segment.from_text("".join(fields))]

    for name, media in media_objects.items():
        segments.append(Segment.from_text(_part_header(boundary, name, media.file_name, media.content_type)))
        segments.append(Segment.from_bytes(media.value))
        segments.append(Segment.from_text(NEWLINE))

    for name, media in media_streams.items():
        segments.append(Segment.from_text(_part_header(boundary, name, media.file_name, media.content_type)))
        segments.append(Segment(media.stream, owned=False))
        segments.append(Segment.from_text(NEWLINE))

    segments.append(Segment.from_text(f"{NEWLINE}{PREFIX}{boundary}{PREFIX}{NEWLINE}"))
    return MultipartBody(boundary, segments)


__all__ = [
    "ATTACHMENT_MUST_HAVE_PROPERTIES",
    "CHUNK_SIZE",
    "MultipartBody",
    "Segment",
    "build_multipart_body",
    "new_boundary",
]
