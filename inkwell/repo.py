from __future__ import annotations

import sqlite3
from typing import Any, Literal, Mapping, Union

from .db import is_row_id, to_iso, utc_now
from .errors import NotFoundError, ValidationError
from .schemas import Note

NOTE_COLUMNS = "id, title, content, pinned, tags, folder_id, created_at, updated_at"

# pinned first, then newest first
NOTE_ORDER = "pinned DESC, created_at DESC, id DESC"

FolderFilter = Union[int, Literal["uncategorized"], None]


def require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"Missing {field}")
    return value


def row_to_note(row: sqlite3.Row) -> Note:
    return Note(
        id=int(row["id"]),
        title=str(row["title"]),
        content=str(row["content"]),
        pinned=bool(row["pinned"]),
        tags=str(row["tags"] or ""),
        folder_id=row["folder_id"],
        created_at=str(row["created_at"]),
        updated_at=str(row["updated_at"]),
    )


def folder_exists(conn: sqlite3.Connection, folder_id: int) -> bool:
    if not is_row_id(folder_id):
        return False
    row = conn.execute("SELECT 1 FROM folders WHERE id = ?", (folder_id,)).fetchone()
    return row is not None


def _check_folder_ref(conn: sqlite3.Connection, folder_id: int | None) -> None:
    if folder_id is not None and not folder_exists(conn, folder_id):
        raise ValidationError(f"Unknown folder: {folder_id}")


def insert_note(
    conn: sqlite3.Connection,
    title: str,
    content: str,
    pinned: bool,
    tags: str,
    folder_id: int | None,
) -> Note:
    """Insert a note row with fresh timestamps. Callers validate first."""
    now = to_iso(utc_now())
    cur = conn.execute(
        "INSERT INTO notes(title, content, pinned, tags, folder_id, created_at, updated_at) "
        "VALUES (?, ?, ?, ?, ?, ?, ?)",
        (title, content, int(pinned), tags, folder_id, now, now),
    )
    return get_note(conn, int(cur.lastrowid))


def create_note(
    conn: sqlite3.Connection,
    title: str | None,
    content: str | None,
    pinned: bool = False,
    tags: str = "",
    folder_id: int | None = None,
) -> Note:
    title = require_text(title, "title").strip()
    content = require_text(content, "content")
    _check_folder_ref(conn, folder_id)
    return insert_note(conn, title, content, pinned, tags or "", folder_id)


def get_note(conn: sqlite3.Connection, note_id: int) -> Note:
    if not is_row_id(note_id):
        raise NotFoundError("Note not found")
    row = conn.execute(f"SELECT {NOTE_COLUMNS} FROM notes WHERE id = ?", (note_id,)).fetchone()
    if not row:
        raise NotFoundError("Note not found")
    return row_to_note(row)


def update_note(conn: sqlite3.Connection, note_id: int, fields: Mapping[str, Any]) -> Note:
    """
    Apply a partial update.

    ``fields`` holds only what the caller sent. title and content are
    required every time; pinned/tags/folder_id overwrite when present. A
    present ``folder_id`` of None moves the note out of its folder.
    """
    title = require_text(fields.get("title"), "title").strip()
    content = require_text(fields.get("content"), "content")
    current = get_note(conn, note_id)

    pinned = current.pinned
    if fields.get("pinned") is not None:
        pinned = bool(fields["pinned"])
    tags = current.tags
    if fields.get("tags") is not None:
        tags = str(fields["tags"])
    folder_id = current.folder_id
    if "folder_id" in fields:
        folder_id = fields["folder_id"]
        _check_folder_ref(conn, folder_id)

    conn.execute(
        "UPDATE notes SET title = ?, content = ?, pinned = ?, tags = ?, folder_id = ?, updated_at = ? "
        "WHERE id = ?",
        (title, content, int(pinned), tags, folder_id, to_iso(utc_now()), note_id),
    )
    return get_note(conn, note_id)


def list_notes(
    conn: sqlite3.Connection,
    folder: FolderFilter = None,
    query: str | None = None,
) -> list[Note]:
    where: list[str] = []
    params: list[Any] = []

    if folder == "uncategorized":
        where.append("folder_id IS NULL")
    elif folder is not None:
        if not is_row_id(int(folder)):
            return []
        where.append("folder_id = ?")
        params.append(int(folder))

    q = (query or "").strip().lower()
    if q:
        # naive substring match, no index
        where.append("(instr(lower(title), ?) > 0 OR instr(lower(content), ?) > 0 OR instr(lower(tags), ?) > 0)")
        params.extend([q, q, q])

    sql = f"SELECT {NOTE_COLUMNS} FROM notes"
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += f" ORDER BY {NOTE_ORDER}"

    rows = conn.execute(sql, params).fetchall()
    return [row_to_note(r) for r in rows]


def export_all(conn: sqlite3.Connection) -> dict:
    folders = conn.execute(
        "SELECT id, name, color, created_at, updated_at FROM folders ORDER BY created_at DESC, id DESC"
    ).fetchall()
    return {
        "folders": [
            {
                "id": int(r["id"]),
                "name": str(r["name"]),
                "color": str(r["color"]),
                "created_at": str(r["created_at"]),
                "updated_at": str(r["updated_at"]),
            }
            for r in folders
        ],
        "notes": [n.model_dump() for n in list_notes(conn)],
    }
