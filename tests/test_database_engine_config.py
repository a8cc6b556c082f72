import os


def test_get_engine_kwargs_sqlite_has_check_same_thread(monkeypatch):
    # Import lazily so monkeypatch can affect env usage deterministically.
    from studyhub.database import database as db

    kwargs = db.get_engine_kwargs("sqlite:///./studyhub.db")
    assert "connect_args" in kwargs
    assert kwargs["connect_args"]["check_same_thread"] is False
    # SQLite should not require pool sizing knobs.
    assert "pool_size" not in kwargs
    assert "max_overflow" not in kwargs
    assert kwargs["pool_pre_ping"] is True


def test_get_engine_kwargs_postgres_has_conservative_pooling(monkeypatch):
    from studyhub.database import database as db

    monkeypatch.setenv("DB_POOL_SIZE", "5")
    monkeypatch.setenv("DB_MAX_OVERFLOW", "5")
    monkeypatch.setenv("DB_POOL_TIMEOUT_SEC", "30")

    kwargs = db.get_engine_kwargs("postgresql+psycopg://u:p@localhost:5432/db")
    assert "connect_args" not in kwargs
    assert kwargs["pool_pre_ping"] is True
    assert kwargs["pool_size"] == 5
    assert kwargs["max_overflow"] == 5
    assert kwargs["pool_timeout"] == 30


def test_debug_env_turns_on_echo(monkeypatch):
    from studyhub.database import database as db

    monkeypatch.setenv("DEBUG", "true")
    assert db.get_engine_kwargs("sqlite:///./studyhub.db")["echo"] is True

    monkeypatch.setenv("DEBUG", "False")
    assert db.get_engine_kwargs("sqlite:///./studyhub.db")["echo"] is False


def test_sqlite_pragmas_listener_is_guarded():
    # Verify the helper used by the connect event guard behaves as expected.
    from studyhub.database import database as db

    assert db._is_sqlite_url("sqlite:///./studyhub.db") is True
    assert db._is_sqlite_url("postgresql+psycopg://u:p@localhost/db") is False


def test_init_db_creates_tables(tmp_path):
    """init_db registers the ORM models and creates their tables."""
    from sqlalchemy import inspect
    from studyhub.database import database as db

    engine = db.build_engine(f"sqlite:///{tmp_path / 'studyhub.db'}")
    original = db.engine
    db.engine = engine
    try:
        db.init_db()
    finally:
        db.engine = original

    tables = set(inspect(engine).get_table_names())
    assert {"users", "user_data"} <= tables
