import asyncio
import json
import logging

from batchgen import logging_manager as log_mgr
from batchgen.batch import BatchOrchestrator, Segment


def _record(**extra):
    base = {"name": "batchgen.batch", "msg": "hello %s", "args": ("world",), "levelname": "INFO"}
    base.update(extra)
    return logging.makeLogRecord(base)


def _format(record):
    return json.loads(log_mgr.JSONLogFormatter().format(record))


def test_batch_fields_are_promoted():
    payload = _format(_record(event="batch.item.retry", index=2, attempt=1, total=3, status=None))

    assert payload["message"] == "hello world"
    assert payload["logger"] == "batchgen.batch"
    assert payload["level"] == "INFO"
    assert payload["event"] == "batch.item.retry"
    assert (payload["index"], payload["attempt"]) == (2, 1)
    assert "status" not in payload
    assert payload["extra"] == {"total": 3}


def test_unknown_types_are_stringified():
    payload = _format(_record(path=object()))
    assert payload["extra"]["path"].startswith("<object object")


def test_context_reaches_records_through_the_filter():
    with log_mgr.log_context(run_id="r1", stage="run", ignored=None) as context:
        assert context == {"run_id": "r1", "stage": "run"}
        with log_mgr.log_context(stage="retry_failed"):
            inner = _record()
            log_mgr.RunContextFilter().filter(inner)
        outer = _record(stage="explicit")
        log_mgr.RunContextFilter().filter(outer)
    after = _record()
    log_mgr.RunContextFilter().filter(after)

    assert (inner.run_id, inner.stage) == ("r1", "retry_failed")
    assert outer.stage == "explicit"
    assert not hasattr(after, "run_id")


def test_orchestrator_records_carry_run_context():
    handler_records = []

    class Collect(logging.Handler):
        def emit(self, record):
            handler_records.append(_format(record))

    collector = Collect()
    collector.addFilter(log_mgr.RunContextFilter())
    logger = log_mgr.get_logger()
    logger.addHandler(collector)
    try:
        asyncio.run(BatchOrchestrator(lambda segment: "ok", inter_item_delay=0).run([Segment(0, "x")]))
    finally:
        logger.removeHandler(collector)

    finish = [record for record in handler_records if record.get("event") == "batch.run.finish"]
    assert len(finish) == 1
    assert finish[0]["stage"] == "run"
    assert len(finish[0]["run_id"]) == 12
    assert finish[0]["status"] == "completed"


def test_configure_logging_level():
    logger = log_mgr.get_logger()
    try:
        assert log_mgr.configure_logging_level(debug_enabled=True) == logging.DEBUG
        assert logger.level == logging.DEBUG
        assert all(handler.level == logging.DEBUG for handler in logger.handlers)
    finally:
        log_mgr.configure_logging_level(log_level=logging.INFO)


def test_log_dir_override(monkeypatch, tmp_path):
    monkeypatch.setenv(log_mgr.LOG_DIR_ENV_VAR, str(tmp_path))
    assert log_mgr.resolve_log_dir() == tmp_path
