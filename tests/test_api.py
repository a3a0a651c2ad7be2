from __future__ import annotations

from datetime import timedelta

from inkwell.db import connect, utc_now
from inkwell.lifecycle import RETENTION, delete_note
from inkwell.repo import create_note


def test_create_note_missing_fields_is_400(client):
    r = client.post("/api/notes", json={"title": "only title"})
    assert r.status_code == 400
    assert r.json()["code"] == "VAL_VALIDATION_ERROR"

    r = client.post("/api/notes", json={"title": "t", "content": "c", "pinned": [1]})
    assert r.status_code == 400


def test_update_note_flow(client):
    note = client.post("/api/notes", json={"title": "T", "content": "C", "pinned": True, "tags": "x"}).json()

    r = client.put(f"/api/notes/{note['id']}", json={"title": "T2", "content": "C2"})
    assert r.status_code == 200
    assert r.json()["pinned"] is True
    assert r.json()["tags"] == "x"

    r = client.put(f"/api/notes/{note['id']}", json={"title": "", "content": "C3"})
    assert r.status_code == 400
    assert client.get(f"/api/notes/{note['id']}").json()["content"] == "C2"

    r = client.put("/api/notes/999", json={"title": "a", "content": "b"})
    assert r.status_code == 404


def test_delete_and_restore_scenario(client):
    b = client.post("/api/notes", json={"title": "B", "content": "body of B"}).json()

    r = client.delete(f"/api/notes/{b['id']}")
    assert r.status_code == 200
    tombstone = r.json()
    assert tombstone["state"] == "deleted"
    assert client.get(f"/api/notes/{b['id']}").status_code == 404
    assert client.delete(f"/api/notes/{b['id']}").status_code == 404

    r = client.post(f"/api/history/{tombstone['id']}/restore")
    assert r.status_code == 200
    b2 = r.json()
    assert b2["id"] != b["id"]
    assert (b2["title"], b2["content"]) == ("B", "body of B")
    assert client.get("/api/history").json() == []


def test_restore_unknown_is_404(client):
    r = client.post("/api/history/31337/restore")
    assert r.status_code == 404
    assert r.json()["code"] == "RES_NOT_FOUND"


def test_restore_expired_is_410(client, db_path):
    with connect(db_path) as conn:
        note = create_note(conn, "T", "yesterday's deadline")
        tombstone = delete_note(conn, note.id, now=utc_now() - RETENTION - timedelta(days=1))

    r = client.post(f"/api/history/{tombstone.id}/restore")
    assert r.status_code == 410
    assert r.json()["code"] == "RES_EXPIRED"
    assert client.get(f"/api/history/{tombstone.id}").status_code == 410
    assert client.get("/api/history").json() == []
    assert client.get("/api/notes").json() == []


def test_folder_delete_scenario(client):
    r = client.post("/api/folders", json={"name": "Work", "color": "#3B82F6"})
    assert r.status_code == 201
    folder = r.json()

    a = client.post("/api/notes", json={"title": "A", "content": "a", "folder_id": folder["id"]}).json()
    listed = client.get("/api/notes", params={"folder": folder["id"]}).json()
    assert [n["id"] for n in listed] == [a["id"]]
    assert client.get(f"/api/folders/{folder['id']}").json()["notes"][0]["id"] == a["id"]

    r = client.delete(f"/api/folders/{folder['id']}")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

    notes = client.get("/api/notes").json()
    assert [(n["id"], n["folder_id"]) for n in notes] == [(a["id"], None)]
    assert [n["id"] for n in client.get("/api/notes", params={"folder": "uncategorized"}).json()] == [a["id"]]

    assert client.delete(f"/api/folders/{folder['id']}").status_code == 404
    assert client.get(f"/api/folders/{folder['id']}").status_code == 404


def test_folder_validation(client):
    assert client.post("/api/folders", json={}).status_code == 400
    folder = client.post("/api/folders", json={"name": "Misc"}).json()
    assert folder["color"] == "#3B82F6"

    r = client.put(f"/api/folders/{folder['id']}", json={"name": "Other", "color": "#10B981"})
    assert r.status_code == 200
    assert r.json()["color"] == "#10B981"
    assert client.put(f"/api/folders/{folder['id']}", json={"color": "#000000"}).status_code == 400
    assert client.put("/api/folders/500", json={"name": "x"}).status_code == 404

    folders = client.get("/api/folders").json()
    assert [(f["name"], f["notes"]) for f in folders] == [("Other", [])]


def test_bad_folder_filter_is_400(client):
    r = client.get("/api/notes", params={"folder": "work"})
    assert r.status_code == 400


def test_create_note_with_unknown_folder_is_400(client):
    r = client.post("/api/notes", json={"title": "t", "content": "c", "folder_id": 8})
    assert r.status_code == 400


def test_ids_beyond_integer_range_are_not_found(client):
    huge = 2**64 + 7

    assert client.get(f"/api/notes/{huge}").status_code == 404
    assert client.put(f"/api/notes/{huge}", json={"title": "t", "content": "c"}).status_code == 404
    assert client.delete(f"/api/notes/{huge}").status_code == 404
    assert client.get(f"/api/history/{huge}").status_code == 404
    assert client.post(f"/api/history/{huge}/restore").status_code == 404
    assert client.get(f"/api/folders/{huge}").status_code == 404
    assert client.put(f"/api/folders/{huge}", json={"name": "x"}).status_code == 404
    assert client.delete(f"/api/folders/{huge}").status_code == 404

    r = client.get("/api/notes", params={"folder": str(huge)})
    assert r.status_code == 200
    assert r.json() == []

    r = client.post("/api/notes", json={"title": "t", "content": "c", "folder_id": huge})
    assert r.status_code == 400


def test_history_shows_folder_of_deleted_note(client):
    folder = client.post("/api/folders", json={"name": "Recipes", "color": "#F59E0B"}).json()
    note = client.post("/api/notes", json={"title": "Soup", "content": "leeks", "folder_id": folder["id"]}).json()
    client.delete(f"/api/notes/{note['id']}")

    [entry] = client.get("/api/history").json()
    assert (entry["folder_id"], entry["folder_name"], entry["folder_color"]) == (folder["id"], "Recipes", "#F59E0B")
