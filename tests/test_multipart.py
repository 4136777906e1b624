import asyncio
import io
import threading

import pytest

from fbclient.core.exceptions import InvalidOperation
from fbclient.graph.media import MediaObject, MediaStream
from fbclient.graph.multipart import CHUNK_SIZE, build_multipart_body


def test_segments_follow_parameter_then_object_then_stream_order():
    photo = MediaObject(content_type="image/jpeg", file_name="p.jpg", value=b"JPEG")
    caller_stream = io.BytesIO(b"VIDEO")
    video = MediaStream(content_type="video/mp4", file_name="v.mp4", stream=caller_stream)

    body = build_multipart_body(
        {"title": "Trip", "tags": ["a", "b"]},
        {"photo": photo},
        {"video": video},
        "B",
    )

    assert body.content_type == "multipart/form-data; boundary=B"
    assert len(body.segments) == 8
    assert body.read() == (
        b"--B\r\n"
        b'Content-Disposition: form-data; name="title"\r\n\r\n'
        b"Trip\r\n"
        b"--B\r\n"
        b'Content-Disposition: form-data; name="tags"\r\n\r\n'
        b"a,b\r\n"
        b"--B\r\n"
        b'Content-Disposition: form-data; name="photo"; filename="p.jpg"\r\n'
        b"Content-Type: image/jpeg\r\n\r\n"
        b"JPEG\r\n"
        b"--B\r\n"
        b'Content-Disposition: form-data; name="video"; filename="v.mp4"\r\n'
        b"Content-Type: video/mp4\r\n\r\n"
        b"VIDEO\r\n"
        b"\r\n--B--\r\n"
    )


def test_close_releases_owned_segments_only():
    caller_stream = io.BytesIO(b"VIDEO")
    video = MediaStream(content_type="video/mp4", file_name="v.mp4", stream=caller_stream)
    with build_multipart_body({}, {}, {"video": video}, "B") as body:
        body.read()
        owned = [segment.stream for segment in body.segments if segment.owned]

    assert not caller_stream.closed
    assert owned and all(stream.closed for stream in owned)


def test_large_values_are_chunked():
    payload = b"x" * (CHUNK_SIZE * 2 + 10)
    photo = MediaObject(content_type="image/png", file_name="big.png", value=payload)
    body = build_multipart_body({}, {"photo": photo}, {}, "B")
    chunks = list(body)
    assert max(len(chunk) for chunk in chunks) <= CHUNK_SIZE
    assert payload in b"".join(chunks)


def test_async_chunks_match_sync_body():
    photo = MediaObject(content_type="image/png", file_name="a.png", value=b"PNG")
    expected = build_multipart_body({"caption": "hi"}, {"photo": photo}, {}, "B").read()
    body = build_multipart_body({"caption": "hi"}, {"photo": photo}, {}, "B")

    async def collect() -> bytes:
        return b"".join([chunk async for chunk in body.aiter_chunks()])

    assert asyncio.run(collect()) == expected


class RecordingStream(io.BytesIO):
    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.threads = set()

    def read(self, size=-1):
        self.threads.add(threading.get_ident())
        return super().read(size)


def test_async_chunks_read_caller_streams_off_the_loop():
    payload = b"v" * (CHUNK_SIZE + 5)
    stream = RecordingStream(payload)
    video = MediaStream(content_type="video/mp4", file_name="v.mp4", stream=stream)
    body = build_multipart_body({"title": "clip"}, {}, {"video": video}, "B")

    async def collect():
        chunks = [chunk async for chunk in body.aiter_chunks()]
        return b"".join(chunks), threading.get_ident()

    data, loop_thread = asyncio.run(collect())
    assert payload in data
    assert data.endswith(b"\r\n--B--\r\n")
    assert stream.threads and loop_thread not in stream.threads
    assert not stream.closed


@pytest.mark.parametrize(
    "media",
    [
        MediaObject(content_type="", file_name="a.png", value=b"1"),
        MediaObject(content_type="image/png", file_name="", value=b"1"),
        MediaObject(content_type="image/png", file_name="a.png", value=b""),
    ],
)
def test_incomplete_media_object_is_rejected(media):
    with pytest.raises(InvalidOperation):
        build_multipart_body({}, {"photo": media}, {}, "B")


def test_incomplete_media_stream_is_rejected():
    with pytest.raises(InvalidOperation):
        build_multipart_body({}, {}, {"video": MediaStream(content_type="video/mp4", file_name="v.mp4")}, "B")
    with pytest.raises(InvalidOperation):
        build_multipart_body(
            {}, {}, {"video": MediaStream(content_type="video/mp4", file_name="", stream=io.BytesIO(b"1"))}, "B"
        )


def test_media_object_from_path(tmp_path):
    path = tmp_path / "cover.png"
    path.write_bytes(b"\x89PNG")
    media = MediaObject.from_path(path)
    assert media.file_name == "cover.png"
    assert media.content_type == "image/png"
    assert media.value == b"\x89PNG"
