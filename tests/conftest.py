import json

import pytest

from usuarios_api import create_app


@pytest.fixture()
def data_file(tmp_path):
    """Archivo de datos vacío en un directorio temporal"""
    path = tmp_path / "db.json"
    path.write_text(json.dumps({"usuarios": []}), encoding="utf-8")
    return path


@pytest.fixture()
def app(data_file):
    return create_app({"DATA_FILE": str(data_file), "LOCK_BACKEND": "local", "TESTING": True})


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app):
    return app.extensions["usuarios_store"]
