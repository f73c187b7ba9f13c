import os
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'app', 'config', and 'src' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from tests.support import factories as test_factories


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path_factory):
    """Ensure a clean env for tests with per-test sqlite files."""
    db_dir = tmp_path_factory.mktemp("db")
    db_path = Path(db_dir) / "test.sqlite"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_path.as_posix()}")
    monkeypatch.delenv("SPOTIPY_CLIENT_ID", raising=False)
    monkeypatch.delenv("SPOTIPY_CLIENT_SECRET", raising=False)
    yield db_path


@pytest.fixture
def app(monkeypatch, _isolate_env):
    import app as app_module

    # No catalog credentials: CatalogService stays offline in tests.
    # app.Config is the class create_app and CatalogService were imported with.
    monkeypatch.setattr(app_module.Config, "SPOTIPY_CLIENT_ID", None, raising=True)
    monkeypatch.setattr(app_module.Config, "SPOTIPY_CLIENT_SECRET", None, raising=True)

    application = app_module.create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{_isolate_env.as_posix()}",
        "STRUCTURED_LOGS": False,
        "JWT_SECRET": "test-secret",
        "JWT_EXPIRES_SECONDS": 3600,
        "SPOTIPY_CLIENT_ID": None,
        "SPOTIPY_CLIENT_SECRET": None,
    })
    yield application


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


@pytest.fixture
def db_session(app_context):
    from src.database.db_manager import db

    test_factories.set_session(db.session)
    try:
        yield db.session
    finally:
        try:
            db.session.rollback()
        except Exception:
            pass
        db.session.remove()
        test_factories.reset_session()


@pytest.fixture
def factories(db_session):
    yield test_factories


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def account_service(app):
    return app.extensions["account_service"]


@pytest.fixture
def store(tmp_path):
    from src.client.storage import LocalStore

    return LocalStore(str(tmp_path / "store" / "local_store.json"))
