"""Folder registry and the delete cascade."""

from __future__ import annotations

import sqlite3

from .db import is_row_id, to_iso, utc_now
from .errors import NotFoundError
from .logging import get_logger
from .repo import NOTE_COLUMNS, NOTE_ORDER, require_text, row_to_note
from .schemas import DEFAULT_FOLDER_COLOR, Folder, FolderWithNotes

logger = get_logger("folders")

FOLDER_COLUMNS = "id, name, color, created_at, updated_at"


def _row_to_folder(row: sqlite3.Row) -> Folder:
    return Folder(
        id=int(row["id"]),
        name=str(row["name"]),
        color=str(row["color"]),
        created_at=str(row["created_at"]),
        updated_at=str(row["updated_at"]),
    )


def _with_notes(conn: sqlite3.Connection, folder: Folder) -> FolderWithNotes:
    rows = conn.execute(
        f"SELECT {NOTE_COLUMNS} FROM notes WHERE folder_id = ? ORDER BY {NOTE_ORDER}",
        (folder.id,),
    ).fetchall()
    return FolderWithNotes(**folder.model_dump(), notes=[row_to_note(r) for r in rows])


def _get_folder_row(conn: sqlite3.Connection, folder_id: int) -> Folder:
    if not is_row_id(folder_id):
        raise NotFoundError("Folder not found")
    row = conn.execute(f"SELECT {FOLDER_COLUMNS} FROM folders WHERE id = ?", (folder_id,)).fetchone()
    if not row:
        raise NotFoundError("Folder not found")
    return _row_to_folder(row)


def create_folder(conn: sqlite3.Connection, name: str | None, color: str | None = None) -> Folder:
    name = require_text(name, "folder name").strip()
    now = to_iso(utc_now())
    cur = conn.execute(
        "INSERT INTO folders(name, color, created_at, updated_at) VALUES (?, ?, ?, ?)",
        (name, color or DEFAULT_FOLDER_COLOR, now, now),
    )
    return _get_folder_row(conn, int(cur.lastrowid))


def get_folder(conn: sqlite3.Connection, folder_id: int) -> FolderWithNotes:
    return _with_notes(conn, _get_folder_row(conn, folder_id))


def list_folders(conn: sqlite3.Connection) -> list[FolderWithNotes]:
    rows = conn.execute(f"SELECT {FOLDER_COLUMNS} FROM folders ORDER BY created_at DESC, id DESC").fetchall()
    return [_with_notes(conn, _row_to_folder(r)) for r in rows]


def update_folder(
    conn: sqlite3.Connection,
    folder_id: int,
    name: str | None,
    color: str | None = None,
) -> Folder:
    name = require_text(name, "folder name").strip()
    current = _get_folder_row(conn, folder_id)
    conn.execute(
        "UPDATE folders SET name = ?, color = ?, updated_at = ? WHERE id = ?",
        (name, color or current.color, to_iso(utc_now()), folder_id),
    )
    return _get_folder_row(conn, folder_id)


def delete_folder(conn: sqlite3.Connection, folder_id: int) -> int:
    """
    Delete a folder, moving its notes to uncategorized first.

    Tombstones that remember the folder are cleared as well, so restoring
    them later cannot point at a missing folder. Must run inside a single
    ``connect()`` block: if the final delete fails, the reassignment is
    rolled back with it.

    :return: Number of active notes that were uncategorized
    """
    _get_folder_row(conn, folder_id)

    moved = conn.execute(
        "UPDATE notes SET folder_id = NULL, updated_at = ? WHERE folder_id = ?",
        (to_iso(utc_now()), folder_id),
    ).rowcount
    conn.execute("UPDATE deleted_notes SET folder_id = NULL WHERE folder_id = ?", (folder_id,))

    cur = conn.execute("DELETE FROM folders WHERE id = ?", (folder_id,))
    if cur.rowcount == 0:
        raise NotFoundError("Folder not found")

    logger.info("Deleted folder %s, moved %s notes to uncategorized", folder_id, moved)
    return moved
