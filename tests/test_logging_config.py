import logging
import sqlite3

import pytest

from logging_config import LOG_FORMAT, SQLiteHandler, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _rows(db_path):
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute("SELECT level, message, module FROM logs ORDER BY id").fetchall()
    finally:
        conn.close()


def _logger_with(handler):
    logger = logging.getLogger(f"autopull-test-{id(handler)}")
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    return logger


def test_sqlite_handler_writes_records(tmp_path):
    db_path = str(tmp_path / "logs.db")
    handler = SQLiteHandler(db_path=db_path)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger = _logger_with(handler)

    logger.warning("Webhook rejected: SignatureMismatch")

    assert _rows(db_path) == [("WARNING", "Webhook rejected: SignatureMismatch", "test_logging_config")]


def test_sqlite_handler_keeps_only_newest_entries(tmp_path):
    db_path = str(tmp_path / "logs.db")
    handler = SQLiteHandler(db_path=db_path, max_entries=3)
    logger = _logger_with(handler)

    for i in range(5):
        logger.info(f"message {i}")

    assert [row[1] for row in _rows(db_path)] == ["message 2", "message 3", "message 4"]


def test_sqlite_handler_records_exceptions(tmp_path):
    db_path = str(tmp_path / "logs.db")
    handler = SQLiteHandler(db_path=db_path)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger = _logger_with(handler)

    try:
        raise RuntimeError("git exploded")
    except RuntimeError:
        logger.exception("Sync failed")

    conn = sqlite3.connect(db_path)
    try:
        (exception,) = conn.execute("SELECT exception FROM logs").fetchone()
    finally:
        conn.close()
    assert "RuntimeError: git exploded" in exception


def test_setup_logging_without_database(restore_root_logger):
    before = len(restore_root_logger.handlers)
    setup_logging(debug=True)
    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == before + 1


def test_setup_logging_with_database(restore_root_logger, tmp_path):
    setup_logging(debug=False, log_db_path=str(tmp_path / "logs.db"))
    assert restore_root_logger.level == logging.INFO
    assert any(isinstance(h, SQLiteHandler) for h in restore_root_logger.handlers)
