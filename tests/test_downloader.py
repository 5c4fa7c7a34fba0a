"""Tests for the streaming downloader."""

import asyncio

import aiohttp
import pytest

from modcat.media.downloader import Downloader


class FakeContent:
    def __init__(self, chunks, fail_after=None):
        self.chunks = chunks
        self.fail_after = fail_after
        self.requested_sizes: list[int] = []

    async def iter_chunked(self, size):
        self.requested_sizes.append(size)
        for i, chunk in enumerate(self.chunks):
            if self.fail_after is not None and i == self.fail_after:
                raise aiohttp.ClientPayloadError("connection reset")
            yield chunk


class FakeResponse:
    def __init__(self, content, headers=None, status=200):
        self.content = content
        self.headers = headers or {}
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientConnectionError(f"HTTP {self.status}")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.urls: list[str] = []
        self.closed = False

    def get(self, url, **kwargs):
        self.urls.append(url)
        return self.response

    async def close(self):
        self.closed = True


class RecordingProgress:
    def __init__(self):
        self.totals: list[int | None] = []
        self.completed: list[int] = []
        self.finished: list[int] = []

    def add_file(self, name, total):
        self.totals.append(total)
        return 1

    def update_task_progress(self, task_id, completed):
        self.completed.append(completed)

    def finish_file(self, task_id, completed):
        self.finished.append(completed)


def test_streams_chunks_to_file(tmp_path):
    session = FakeSession(FakeResponse(FakeContent([b"abc", b"def", b"g"])))
    downloader = Downloader(chunk_size=4096, session=session)
    destination = tmp_path / "mod.jar"

    written = asyncio.run(downloader.stream("https://files.example/mod.jar", destination, 7))

    assert written == 7
    assert destination.read_bytes() == b"abcdefg"
    assert session.urls == ["https://files.example/mod.jar"]
    assert session.response.content.requested_sizes == [4096]


def test_truncates_existing_file(tmp_path):
    destination = tmp_path / "mod.jar"
    destination.write_bytes(b"x" * 100)
    downloader = Downloader(session=FakeSession(FakeResponse(FakeContent([b"new"]))))

    asyncio.run(downloader.stream("u", destination))

    assert destination.read_bytes() == b"new"


def test_progress_is_monotonic_against_expected_length(tmp_path):
    progress = RecordingProgress()
    downloader = Downloader(
        session=FakeSession(FakeResponse(FakeContent([b"aa", b"bb", b"cc"])))
    )

    asyncio.run(downloader.stream("u", tmp_path / "f.jar", 6, progress))

    assert progress.totals == [6]
    assert progress.completed == [2, 4, 6]
    assert progress.finished == [6]


def test_unknown_length_uses_content_length_header(tmp_path):
    progress = RecordingProgress()
    response = FakeResponse(FakeContent([b"1234"]), headers={"Content-Length": "4"})
    downloader = Downloader(session=FakeSession(response))

    asyncio.run(downloader.stream("u", tmp_path / "f.jar", None, progress))

    assert progress.totals == [4]


def test_malformed_content_length_is_indeterminate(tmp_path):
    progress = RecordingProgress()
    response = FakeResponse(FakeContent([b"12", b"34"]), headers={"Content-Length": "4 bytes"})
    downloader = Downloader(session=FakeSession(response))

    written = asyncio.run(downloader.stream("u", tmp_path / "f.jar", None, progress))

    assert written == 4
    assert progress.totals == [None]
    assert (tmp_path / "f.jar").read_bytes() == b"1234"


def test_unknown_length_without_header_is_indeterminate(tmp_path):
    progress = RecordingProgress()
    downloader = Downloader(session=FakeSession(FakeResponse(FakeContent([b"12", b"3"]))))

    written = asyncio.run(downloader.stream("u", tmp_path / "f.jar", None, progress))

    assert written == 3
    assert progress.totals == [None]
    assert progress.completed == [2, 3]


def test_transport_error_propagates_and_may_leave_partial_file(tmp_path):
    destination = tmp_path / "f.jar"
    content = FakeContent([b"part", b"rest"], fail_after=1)
    downloader = Downloader(session=FakeSession(FakeResponse(content)))

    with pytest.raises(aiohttp.ClientPayloadError):
        asyncio.run(downloader.stream("u", destination, 8))

    assert destination.read_bytes() == b"part"


def test_http_error_propagates_without_writing(tmp_path):
    destination = tmp_path / "f.jar"
    downloader = Downloader(session=FakeSession(FakeResponse(FakeContent([]), status=404)))

    with pytest.raises(aiohttp.ClientError):
        asyncio.run(downloader.stream("u", destination))

    assert not destination.exists()


def test_missing_directory_raises_os_error(tmp_path):
    downloader = Downloader(session=FakeSession(FakeResponse(FakeContent([b"x"]))))

    with pytest.raises(OSError):
        asyncio.run(downloader.stream("u", tmp_path / "missing" / "f.jar"))
