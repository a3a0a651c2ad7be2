from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from inkwell.config import Settings
from inkwell.db import connect, init_db
from inkwell.web import create_app


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "test.db"
    with connect(path) as conn:
        init_db(conn)
    return path


@pytest.fixture
def client(db_path):
    app = create_app(Settings(db_path=db_path))
    with TestClient(app) as c:
        yield c
