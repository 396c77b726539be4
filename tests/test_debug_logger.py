from __future__ import annotations

import logging

from rebrick.services.debug_logger import PIIFilter, get_logger, init_logging, log_exception, log_request


def _filtered(message: str) -> str:
    record = logging.LogRecord("rebrick", logging.INFO, __file__, 1, message, (), None)
    PIIFilter().filter(record)
    return record.getMessage()


def test_pii_filter_redacts_api_key_header() -> None:
    assert "abcdef123456" not in _filtered("Authorization: Key abcdef123456")
    assert "abcdef123456" not in _filtered("sent Key abcdef123456 upstream")


def test_pii_filter_redacts_passwords_and_tokens() -> None:
    message = _filtered("{'username': 'builder', 'password': 'hunter22', 'user_token': 'deadbeef'}")

    assert "hunter22" not in message
    assert "deadbeef" not in message
    assert "builder" in message


def test_pii_filter_redacts_token_in_user_paths() -> None:
    token = "0123456789abcdef" * 4

    assert token not in _filtered(f"GET https://rebrickable.com/api/v3/users/{token}/sets/")


def test_get_logger_namespaces_under_package() -> None:
    assert get_logger("api.request").name == "rebrick.api.request"
    assert get_logger("rebrick.api.auth").name == "rebrick.api.auth"


def test_init_logging_does_not_duplicate_handlers(tmp_path, reset_logging) -> None:
    log_file = tmp_path / "logs" / "rebrick.log"

    init_logging("DEBUG", log_file)
    logger = init_logging("INFO", log_file)

    assert len(logger.handlers) == 2
    assert logger.level == logging.INFO
    assert log_file.exists()


def test_log_request_redacts_token_endpoint_params(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="rebrick")
    logger = get_logger("test")

    log_request(logger, "GET", "https://rebrickable.com/api/v3/users/_token/?password=x")
    log_request(logger, "GET", "https://rebrickable.com/api/v3/lego/sets/", status=404)

    assert "password=x" not in caplog.text
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_log_exception_logs_error_with_traceback(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="rebrick")
    logger = get_logger("test")

    try:
        raise ValueError("boom")
    except ValueError as e:
        log_exception(logger, e, "parsing sets")

    error, traceback = caplog.records
    assert error.levelno == logging.ERROR
    assert error.getMessage() == "EXCEPTION in parsing sets: ValueError('boom')"
    assert traceback.levelno == logging.DEBUG
    assert 'raise ValueError("boom")' in traceback.getMessage()
