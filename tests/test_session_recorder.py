# tests/test_session_recorder.py
# Record line formatting and best-effort appends

from datetime import datetime

from core.session import Destination
from core.session_recorder import SessionRecorder, format_record_line

START = datetime(2024, 5, 17, 9, 30, 0)
END = datetime(2024, 5, 17, 10, 15, 42)


def test_record_line_format():
    assert format_record_line(START, END) == "- 2024-05-17 09:30:00 - 2024-05-17 10:15:42\n"


def test_record_appends_and_creates_folders(resolver, vault):
    recorder = SessionRecorder(resolver)

    assert recorder.record(Destination.DAILY_NOTE, START, END) is True
    assert recorder.record(Destination.DAILY_NOTE, START, END) is True

    note = vault / "Daily Notes" / "2024-05-17.md"
    assert note.read_text(encoding="utf-8").splitlines() == [
        "- 2024-05-17 09:30:00 - 2024-05-17 10:15:42",
        "- 2024-05-17 09:30:00 - 2024-05-17 10:15:42",
    ]


def test_daily_note_follows_the_end_instant(resolver, vault):
    recorder = SessionRecorder(resolver)

    recorder.record(Destination.DAILY_NOTE, datetime(2024, 5, 17, 23, 59, 50), datetime(2024, 5, 18, 0, 0, 10))

    assert (vault / "Daily Notes" / "2024-05-18.md").exists()
    assert not (vault / "Daily Notes" / "2024-05-17.md").exists()


def test_existing_note_content_is_preserved(resolver, vault):
    inbox = vault / "Inbox" / "Inbox.md"
    inbox.parent.mkdir()
    inbox.write_text("# Inbox\n", encoding="utf-8")

    SessionRecorder(resolver).record(Destination.INBOX, START, END)

    assert inbox.read_text(encoding="utf-8") == "# Inbox\n- 2024-05-17 09:30:00 - 2024-05-17 10:15:42\n"


def test_missing_vault_is_logged_not_raised(resolver, settings_store, log_records):
    settings_store.update_settings(vault_path="")

    assert SessionRecorder(resolver).record(Destination.INBOX, START, END) is False
    assert any(level == "WARNING" and "No vault selected" in message for level, message in log_records)


def test_filesystem_failure_is_logged_not_raised(resolver, vault, log_records):
    # A file where the folder should be makes directory creation fail.
    (vault / "Daily Notes").write_text("not a folder", encoding="utf-8")

    assert SessionRecorder(resolver).record(Destination.DAILY_NOTE, START, END) is False
    assert any(level == "WARNING" and "Unable to create folder" in message for level, message in log_records)
