import json
import logging
from logging.handlers import TimedRotatingFileHandler

from config import TestConfig
from logging_setup import JsonFormatter, setup_logger
from carease.app_factory import create_app

from conftest import DictRedis


def test_json_line_carries_context():
    record = logging.LogRecord("clinic_service", logging.WARNING, __file__, 1, "[add_patient] duplicate", None, None)
    record.actor = "doctor-1"

    line = json.loads(JsonFormatter().format(record))

    assert line["level"] == "WARNING"
    assert line["logger"] == "clinic_service"
    assert line["message"] == "[add_patient] duplicate"
    assert line["actor"] == "doctor-1"
    assert "role" not in line


def test_setup_logger_writes_file_once(tmp_path):
    root = logging.getLogger()
    before = list(root.handlers)
    try:
        setup_logger(str(tmp_path), console=False)
        setup_logger(str(tmp_path), console=False)

        added = [h for h in root.handlers if h not in before]
        assert len(added) == 1
        assert isinstance(added[0], TimedRotatingFileHandler)

        logging.getLogger("seed").info("[seed] Sample data loaded")
        added[0].flush()

        lines = (tmp_path / "carease.log").read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["message"] == "[seed] Sample data loaded"
    finally:
        for handler in root.handlers[:]:
            if handler not in before:
                root.removeHandler(handler)
                handler.close()


def test_create_app_installs_logging(tmp_path):
    class LoggingConfig(TestConfig):
        SETUP_LOGGING = True
        LOG_DIR = str(tmp_path)

    root = logging.getLogger()
    before = list(root.handlers)
    try:
        create_app(LoggingConfig, session_client=DictRedis())

        files = [
            h for h in root.handlers
            if h not in before and isinstance(h, TimedRotatingFileHandler)
        ]
        assert len(files) == 1
        assert files[0].baseFilename == str(tmp_path / "carease.log")
    finally:
        for handler in root.handlers[:]:
            if handler not in before:
                root.removeHandler(handler)
                handler.close()
