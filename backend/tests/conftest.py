from __future__ import annotations

import pathlib
import sys

import pytest
from sqlalchemy.pool import StaticPool

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _load_dependencies():
    from app import Config, create_app
    from backend.app.extensions import db

    return Config, create_app, db


ConfigBase, create_app, db = _load_dependencies()


class TestConfig(ConfigBase):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite+pysqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {
        "poolclass": StaticPool,
        "connect_args": {"check_same_thread": False},
    }
    CREATE_TABLES = True
    RATELIMIT_ENABLED = False
    CORS_ALLOWED_ORIGINS = "http://localhost"


@pytest.fixture(scope="module")
def app():
    app = create_app(TestConfig)
    ctx = app.app_context()
    ctx.push()
    yield app
    db.session.remove()
    ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def clean_database(app):
    from backend.app.models import Credential, Execution, Tag, Workflow, workflows_tags

    def _clear() -> None:
        db.session.query(Execution).delete()
        db.session.execute(workflows_tags.delete())
        db.session.query(Workflow).delete()
        db.session.query(Tag).delete()
        db.session.query(Credential).delete()
        db.session.commit()

    _clear()
    yield
    _clear()
