import json
import logging

from jetfund.log import JSONFormatter


def test_json_formatter_includes_context():
    record = logging.LogRecord("jetfund.services", logging.INFO, __file__, 1, "Session %s", ("started",), None)
    record.user_id = "u1"
    record.session_id = "s1"

    entry = json.loads(JSONFormatter().format(record))

    assert entry["msg"] == "Session started"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "jetfund.services"
    assert entry["user_id"] == "u1"
    assert entry["session_id"] == "s1"
    assert "project_id" not in entry
