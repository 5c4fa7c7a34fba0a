"""Shared fixtures and fakes for modcat tests."""

import io
from pathlib import Path

import pytest
from rich.console import Console

from modcat.exceptions import RemoteNotFound
from modcat.models.mod import FileRecord, ModRecord


def make_file(
    file_id: int,
    versions: list[str],
    url: str | None = None,
    deps: list[tuple[int, int]] = (),
    length: int | None = None,
) -> FileRecord:
    return FileRecord(
        id=file_id,
        download_url=url or f"https://files.example/{file_id}.jar",
        file_name_on_disk=f"file-{file_id}.jar",
        file_length=length,
        game_versions=versions,
        dependencies=[{"addonId": target, "type": kind} for target, kind in deps],
    )


def make_mod(mod_id: int, files: list[FileRecord] = (), name: str | None = None) -> ModRecord:
    return ModRecord(
        id=mod_id,
        name=name or f"Mod {mod_id}",
        summary=f"Summary of mod {mod_id}",
        website_url=f"https://mods.example/{mod_id}",
        download_count=1000 * mod_id,
        latest_files=list(files),
    )


class FakeCatalog:
    """Catalog double that serves records from memory and logs every call."""

    def __init__(
        self,
        records: dict[int, ModRecord] | None = None,
        files: dict[tuple[int, int], FileRecord] | None = None,
        search_results: list[ModRecord] | None = None,
    ):
        self.records = records or {}
        self.files = files or {}
        self.search_results = search_results or []
        self.calls: list[tuple] = []
        self.closed = False

    async def fetch_by_id(self, mod_id: int) -> ModRecord:
        self.calls.append(("fetch", mod_id))
        if mod_id not in self.records:
            raise RemoteNotFound(f"Catalog has no entry at 'addon/{mod_id}'.")
        return self.records[mod_id]

    async def fetch_file_detail(self, mod_id: int, file_id: int) -> FileRecord:
        self.calls.append(("file", mod_id, file_id))
        if (mod_id, file_id) not in self.files:
            raise RemoteNotFound(f"No file {file_id} for mod {mod_id}.")
        return self.files[(mod_id, file_id)]

    async def search(self, query: str) -> list[ModRecord]:
        self.calls.append(("search", query))
        return list(self.search_results)

    async def close(self) -> None:
        self.closed = True

    @property
    def fetched_ids(self) -> list[int]:
        return [call[1] for call in self.calls if call[0] == "fetch"]


class FakeDownloader:
    """Downloader double that writes a small payload and records each call."""

    def __init__(self, payload: bytes = b"jar-bytes"):
        self.payload = payload
        self.calls: list[tuple[str, Path, int | None]] = []
        self.closed = False

    async def stream(self, url, destination_path, expected_length=None, progress_manager=None):
        self.calls.append((url, destination_path, expected_length))
        destination_path.write_bytes(self.payload)
        return len(self.payload)

    async def close(self) -> None:
        self.closed = True

    @property
    def urls(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def quiet_console():
    return Console(file=io.StringIO(), width=200, force_terminal=False)


def console_text(console: Console) -> str:
    return console.file.getvalue()
