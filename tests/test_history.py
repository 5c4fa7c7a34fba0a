"""Tests for the shell history file."""

from modcat.storage.history import CommandHistory


def test_load_without_file_reports_no_history(tmp_path):
    history = CommandHistory(tmp_path / "history.line")

    assert history.load() is False
    assert history.entries == []


def test_append_save_and_reload(tmp_path):
    path = tmp_path / "history.line"
    history = CommandHistory(path)
    history.load()
    history.append("search jei")
    history.append("search jei")
    history.append("  ")
    history.append("download 238222")
    history.save()

    reloaded = CommandHistory(path)

    assert reloaded.load() is True
    assert reloaded.entries == ["search jei", "download 238222"]


def test_save_without_load_keeps_existing_file(tmp_path):
    path = tmp_path / "history.line"
    path.write_text("search foo\ndownload 10\n", encoding="utf-8")
    history = CommandHistory(path)
    history.append("clear")

    history.save()

    assert path.read_text(encoding="utf-8") == "search foo\ndownload 10\n"


def test_unreadable_file_is_not_overwritten(tmp_path):
    path = tmp_path / "history.line"
    path.write_bytes(b"\xff\xfe not utf-8\n")
    history = CommandHistory(path)

    assert history.load() is False
    history.append("save")
    history.save()

    assert path.read_bytes() == b"\xff\xfe not utf-8\n"


def test_entries_are_capped(tmp_path):
    history = CommandHistory(tmp_path / "history.line", max_entries=3)
    for i in range(5):
        history.append(f"print {i}")

    assert history.entries == ["print 2", "print 3", "print 4"]
