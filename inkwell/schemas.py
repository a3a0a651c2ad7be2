from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from .db import as_utc

DEFAULT_FOLDER_COLOR = "#3B82F6"


class Note(BaseModel):
    state: Literal["active"] = "active"
    id: int
    title: str
    content: str
    pinned: bool = False
    tags: str = ""
    folder_id: int | None = None
    created_at: str
    updated_at: str


class DeletedNote(BaseModel):
    """Tombstone of a deleted note, restorable until ``expires_at``."""

    state: Literal["deleted"] = "deleted"
    id: int
    original_id: int
    title: str
    content: str
    pinned: bool = False
    tags: str = ""
    folder_id: int | None = None
    folder_name: str | None = None
    folder_color: str | None = None
    deleted_at: str
    expires_at: str

    def is_expired(self, now: datetime) -> bool:
        return datetime.fromisoformat(self.expires_at) < as_utc(now)


class Folder(BaseModel):
    id: int
    name: str
    color: str = DEFAULT_FOLDER_COLOR
    created_at: str
    updated_at: str


class FolderWithNotes(Folder):
    notes: list[Note] = Field(default_factory=list)


# ---- request bodies ----
# title/content/name stay optional here so that a missing field reaches the
# domain validation and is reported the same way as an empty one.


class NoteIn(BaseModel):
    title: str | None = None
    content: str | None = None
    pinned: bool = False
    tags: str = ""
    folder_id: int | None = None


class NoteUpdateIn(BaseModel):
    title: str | None = None
    content: str | None = None
    pinned: bool | None = None
    tags: str | None = None
    folder_id: int | None = None


class FolderIn(BaseModel):
    name: str | None = None
    color: str | None = None
