"""
Soft delete, restore and expiry of notes.

A note is either active (a row in ``notes``) or a tombstone (a row in
``deleted_notes``), never both. Deleting turns a note into a tombstone that
stays restorable for ``RETENTION``; restoring re-creates the note under a
new id. Expiry is lazy: nothing sweeps old tombstones, every read checks
the deadline instead.

Every operation takes an optional ``now``. Naive values are read as UTC.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta

from .db import as_utc, is_row_id, to_iso, utc_now
from .errors import ExpiredError, NotFoundError
from .logging import get_logger
from .repo import get_note, insert_note
from .schemas import DeletedNote, Note

logger = get_logger("lifecycle")

RETENTION = timedelta(days=30)

# folder name/color ride along so the history view can show where a note lived
DELETED_SELECT = """
SELECT d.id, d.original_id, d.title, d.content, d.pinned, d.tags, d.folder_id,
       d.deleted_at, d.expires_at, f.name AS folder_name, f.color AS folder_color
FROM deleted_notes d
LEFT JOIN folders f ON f.id = d.folder_id
"""


def _resolve_now(now: datetime | None) -> datetime:
    return as_utc(now) if now is not None else utc_now()


def _row_to_deleted(row: sqlite3.Row) -> DeletedNote:
    return DeletedNote(
        id=int(row["id"]),
        original_id=int(row["original_id"]),
        title=str(row["title"]),
        content=str(row["content"]),
        pinned=bool(row["pinned"]),
        tags=str(row["tags"] or ""),
        folder_id=row["folder_id"],
        folder_name=row["folder_name"],
        folder_color=row["folder_color"],
        deleted_at=str(row["deleted_at"]),
        expires_at=str(row["expires_at"]),
    )


def _fetch_deleted(conn: sqlite3.Connection, deleted_id: int) -> DeletedNote | None:
    if not is_row_id(deleted_id):
        return None
    row = conn.execute(DELETED_SELECT + "WHERE d.id = ?", (deleted_id,)).fetchone()
    return _row_to_deleted(row) if row else None


def get_deleted(conn: sqlite3.Connection, deleted_id: int, now: datetime | None = None) -> DeletedNote:
    now = _resolve_now(now)
    tombstone = _fetch_deleted(conn, deleted_id)
    if tombstone is None:
        raise NotFoundError("Deleted note not found")
    if tombstone.is_expired(now):
        raise ExpiredError("Note has expired")
    return tombstone


def delete_note(conn: sqlite3.Connection, note_id: int, now: datetime | None = None) -> DeletedNote:
    """Move an active note into the deleted history."""
    note = get_note(conn, note_id)
    deleted_at = _resolve_now(now)
    expires_at = deleted_at + RETENTION

    cur = conn.execute(
        "INSERT INTO deleted_notes(original_id, title, content, pinned, tags, folder_id, deleted_at, expires_at) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        (
            note.id,
            note.title,
            note.content,
            int(note.pinned),
            note.tags,
            note.folder_id,
            to_iso(deleted_at),
            to_iso(expires_at),
        ),
    )
    tombstone_id = int(cur.lastrowid)

    if conn.execute("DELETE FROM notes WHERE id = ?", (note.id,)).rowcount == 0:
        # someone else deleted it between our read and now
        raise NotFoundError("Note not found")

    logger.info("Deleted note %s into history entry %s", note.id, tombstone_id)
    return _fetch_deleted(conn, tombstone_id)


def restore_note(conn: sqlite3.Connection, deleted_id: int, now: datetime | None = None) -> Note:
    """
    Re-create a note from its tombstone.

    The restored note gets a new id and fresh timestamps. Raises
    ExpiredError rather than NotFoundError when the tombstone is still
    stored but past its deadline.
    """
    tombstone = get_deleted(conn, deleted_id, now=now)

    note = insert_note(
        conn,
        title=tombstone.title,
        content=tombstone.content,
        pinned=tombstone.pinned,
        tags=tombstone.tags,
        folder_id=tombstone.folder_id,
    )

    if conn.execute("DELETE FROM deleted_notes WHERE id = ?", (tombstone.id,)).rowcount == 0:
        # lost a race with another restore or a purge
        raise NotFoundError("Deleted note not found")

    logger.info("Restored history entry %s as note %s (was %s)", tombstone.id, note.id, tombstone.original_id)
    return note


def list_deleted(conn: sqlite3.Connection, now: datetime | None = None) -> list[DeletedNote]:
    now = _resolve_now(now)
    rows = conn.execute(
        DELETED_SELECT + "WHERE d.expires_at > ? ORDER BY d.deleted_at DESC, d.id DESC",
        (to_iso(now),),
    ).fetchall()
    return [_row_to_deleted(r) for r in rows]


def purge_expired(conn: sqlite3.Connection, now: datetime | None = None) -> int:
    """Physically remove expired tombstones. Only run on explicit request."""
    now = _resolve_now(now)
    removed = conn.execute("DELETE FROM deleted_notes WHERE expires_at < ?", (to_iso(now),)).rowcount
    logger.info("Purged %s expired history entries", removed)
    return removed
