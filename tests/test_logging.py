import json
import logging

from assessment_hub.core.config import settings
from assessment_hub.core.logging import (
    ACCESS_LOGGER,
    CustomJsonFormatter,
    request_id_var,
    setup_logging,
)


def _format(message="stored response %s", args=(7,), level=logging.WARNING):
    record = logging.LogRecord("assessment_hub.routers.responses", level, __file__, 1, message, args, None)
    formatter = CustomJsonFormatter("%(timestamp) %(level) %(name) %(message)")
    return json.loads(formatter.format(record))


def test_log_line_carries_request_and_service_fields():
    token = request_id_var.set("req-42")
    try:
        line = _format()
    finally:
        request_id_var.reset(token)

    assert line["message"] == "stored response 7"
    assert line["request_id"] == "req-42"
    assert line["level"] == "WARNING"
    assert line["name"] == "assessment_hub.routers.responses"
    assert line["service"] == settings.app_name
    assert line["environment"] == settings.environment
    assert line["timestamp"]


def test_request_id_is_omitted_outside_a_request():
    assert "request_id" not in _format(level=logging.INFO)


def test_access_log_can_be_silenced():
    access = logging.getLogger(ACCESS_LOGGER)
    try:
        setup_logging(access_log=False)
        assert not access.isEnabledFor(logging.INFO)
        assert access.isEnabledFor(logging.WARNING)

        setup_logging(access_log=True)
        assert access.isEnabledFor(logging.INFO)
    finally:
        setup_logging()


def test_setup_logging_does_not_stack_handlers():
    root = logging.getLogger()
    setup_logging()
    setup_logging("debug")
    try:
        json_handlers = [h for h in root.handlers if isinstance(h.formatter, CustomJsonFormatter)]
        assert len(json_handlers) == 1
        assert root.level == logging.DEBUG
    finally:
        setup_logging()
