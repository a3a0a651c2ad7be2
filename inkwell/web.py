from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, load_settings
from .db import connect, init_db
from .errors import ExpiredError, InkwellError, NotFoundError, StorageError, ValidationError
from .folders import create_folder, delete_folder, get_folder, list_folders, update_folder
from .lifecycle import delete_note, get_deleted, list_deleted, restore_note
from .logging import get_logger, setup_logging
from .repo import FolderFilter, create_note, export_all, get_note, list_notes, update_note
from .schemas import DeletedNote, Folder, FolderIn, FolderWithNotes, Note, NoteIn, NoteUpdateIn

logger = get_logger("web")

EXCEPTION_STATUS_MAP: dict[type[InkwellError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    ExpiredError: 410,
    StorageError: 500,
}


def parse_folder_filter(raw: str | None) -> FolderFilter:
    if raw is None or raw == "":
        return None
    if raw == "uncategorized":
        return "uncategorized"
    try:
        return int(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid folder filter: {raw}") from e


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    with connect(settings.db_path) as conn:
        init_db(conn)
    logger.info("Database ready at %s", settings.db_path)

    app = FastAPI(title="Inkwell", version=__version__)

    @app.exception_handler(InkwellError)
    async def _inkwell_error(request: Request, exc: InkwellError) -> JSONResponse:
        status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
        if status_code >= 500:
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
        else:
            logger.warning("%s %s rejected: %s (%s)", request.method, request.url.path, exc.message, exc.code)
        return JSONResponse({"detail": exc.message, "code": exc.code}, status_code=status_code)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("%s %s rejected: invalid request body", request.method, request.url.path)
        return JSONResponse(
            {"detail": "Invalid request", "code": "VAL_VALIDATION_ERROR", "errors": jsonable_errors(exc)},
            status_code=400,
        )

    # ---- notes ----

    @app.get("/api/notes", response_model=list[Note])
    def api_list_notes(folder: str | None = None, q: str | None = None) -> list[Note]:
        folder_filter = parse_folder_filter(folder)
        with connect(settings.db_path) as conn:
            return list_notes(conn, folder=folder_filter, query=q)

    @app.post("/api/notes", response_model=Note, status_code=201)
    def api_create_note(body: NoteIn) -> Note:
        with connect(settings.db_path) as conn:
            return create_note(
                conn,
                title=body.title,
                content=body.content,
                pinned=body.pinned,
                tags=body.tags,
                folder_id=body.folder_id,
            )

    @app.get("/api/notes/{note_id}", response_model=Note)
    def api_get_note(note_id: int) -> Note:
        with connect(settings.db_path) as conn:
            return get_note(conn, note_id)

    @app.put("/api/notes/{note_id}", response_model=Note)
    def api_update_note(note_id: int, body: NoteUpdateIn) -> Note:
        with connect(settings.db_path) as conn:
            return update_note(conn, note_id, body.model_dump(exclude_unset=True))

    @app.delete("/api/notes/{note_id}", response_model=DeletedNote)
    def api_delete_note(note_id: int) -> DeletedNote:
        with connect(settings.db_path) as conn:
            return delete_note(conn, note_id)

    # ---- deleted history ----

    @app.get("/api/history", response_model=list[DeletedNote])
    def api_list_deleted() -> list[DeletedNote]:
        with connect(settings.db_path) as conn:
            return list_deleted(conn)

    @app.get("/api/history/{deleted_id}", response_model=DeletedNote)
    def api_get_deleted(deleted_id: int) -> DeletedNote:
        with connect(settings.db_path) as conn:
            return get_deleted(conn, deleted_id)

    @app.post("/api/history/{deleted_id}/restore", response_model=Note)
    def api_restore_note(deleted_id: int) -> Note:
        with connect(settings.db_path) as conn:
            return restore_note(conn, deleted_id)

    # ---- folders ----

    @app.get("/api/folders", response_model=list[FolderWithNotes])
    def api_list_folders() -> list[FolderWithNotes]:
        with connect(settings.db_path) as conn:
            return list_folders(conn)

    @app.post("/api/folders", response_model=Folder, status_code=201)
    def api_create_folder(body: FolderIn) -> Folder:
        with connect(settings.db_path) as conn:
            return create_folder(conn, name=body.name, color=body.color)

    @app.get("/api/folders/{folder_id}", response_model=FolderWithNotes)
    def api_get_folder(folder_id: int) -> FolderWithNotes:
        with connect(settings.db_path) as conn:
            return get_folder(conn, folder_id)

    @app.put("/api/folders/{folder_id}", response_model=Folder)
    def api_update_folder(folder_id: int, body: FolderIn) -> Folder:
        with connect(settings.db_path) as conn:
            return update_folder(conn, folder_id, name=body.name, color=body.color)

    @app.delete("/api/folders/{folder_id}")
    def api_delete_folder(folder_id: int) -> dict:
        with connect(settings.db_path) as conn:
            delete_folder(conn, folder_id)
        return {"ok": True}

    @app.get("/export.json")
    def export_json() -> JSONResponse:
        with connect(settings.db_path) as conn:
            data = export_all(conn)
        return JSONResponse(data)

    @app.get("/healthz")
    def healthz() -> dict:
        return {"ok": True, "db": str(settings.db_path)}

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [{"loc": list(e.get("loc", ())), "msg": str(e.get("msg", ""))} for e in exc.errors()]
