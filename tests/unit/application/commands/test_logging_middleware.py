"""Tests for LoggingMiddleware."""

import logging
from unittest.mock import AsyncMock

import pytest
from ulid import ULID

from condoledger.application.commands import LoggingMiddleware
from condoledger.domain import Command


class SampleCommand(Command[None]):
    """Sample command for middleware tests."""

    owner_name: str = "Jane Doe"


@pytest.fixture
def command():
    return SampleCommand()


@pytest.mark.parametrize(
    "name, level",
    [
        ("INFO", logging.INFO),
        ("DEBUG", logging.DEBUG),
        ("warning", logging.WARNING),
        ("ErRoR", logging.ERROR),
    ],
)
def test_logging_middleware_accepts_level_names(name, level):
    """Test that level names are resolved case-insensitively."""
    assert LoggingMiddleware(name).level == level


@pytest.mark.asyncio
async def test_logging_middleware_logs_command(command, caplog):
    """Test that the command type and id are logged."""
    middleware = LoggingMiddleware("INFO")
    next_handler = AsyncMock()

    with caplog.at_level(logging.INFO):
        await middleware.log_command(command, next_handler)

    log_record = caplog.records[0]
    assert log_record.getMessage() == "Received Command"
    assert log_record.command_type == "SampleCommand"
    assert log_record.command_id == str(command.command_id)
    assert not hasattr(log_record, "correlation_id")
    next_handler.assert_awaited_once_with(command)


@pytest.mark.asyncio
async def test_logging_middleware_includes_correlation_id(caplog):
    """Test that a correlation id on the command is logged."""
    correlation_id = ULID()
    command = SampleCommand(correlation_id=correlation_id)

    with caplog.at_level(logging.INFO):
        await LoggingMiddleware("INFO").log_command(command, AsyncMock())

    assert caplog.records[0].correlation_id == str(correlation_id)


@pytest.mark.asyncio
async def test_logging_middleware_does_not_log_command_data(command, caplog):
    """Test that command fields stay out of the log."""
    with caplog.at_level(logging.INFO):
        await LoggingMiddleware("INFO").log_command(command, AsyncMock())

    assert "Jane Doe" not in caplog.text
    assert "Jane Doe" not in str(caplog.records[0].__dict__)


@pytest.mark.asyncio
async def test_logging_middleware_respects_log_level(command, caplog):
    """Test that middleware respects the configured log level."""
    next_handler = AsyncMock()

    with caplog.at_level(logging.INFO):
        await LoggingMiddleware("INFO").log_command(command, next_handler)
        assert len(caplog.records) == 1
        caplog.clear()

        await LoggingMiddleware("DEBUG").log_command(command, next_handler)
        assert len(caplog.records) == 0


@pytest.mark.asyncio
async def test_logging_middleware_returns_handler_result(command):
    next_handler = AsyncMock(return_value="unit-1")

    assert await LoggingMiddleware("INFO").log_command(command, next_handler) == "unit-1"


@pytest.mark.asyncio
async def test_logging_middleware_propagates_exceptions(command):
    """Test that middleware propagates exceptions from the next handler."""
    next_handler = AsyncMock(side_effect=ValueError("Handler failed"))

    with pytest.raises(ValueError, match="Handler failed"):
        await LoggingMiddleware("INFO").log_command(command, next_handler)


@pytest.mark.asyncio
async def test_logging_middleware_intercept_integration(command, caplog):
    """Test that intercept routes to the log handler."""
    next_handler = AsyncMock()

    with caplog.at_level(logging.INFO):
        await LoggingMiddleware("INFO").intercept(command, next_handler)

    assert "Received Command" in caplog.text
    next_handler.assert_awaited_once_with(command)
