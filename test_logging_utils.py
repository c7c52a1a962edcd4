#!/usr/bin/env python3
"""
Test script for logging utilities.

This validates that the centralized logging and error classification works
correctly.
"""

import asyncio
import logging

import httpx
import pytest
from pydantic import BaseModel, ValidationError

from writing_gpt.llm.exceptions import MalformedPayloadError, StreamConnectionError
from writing_gpt.logging_utils import (
    ErrorClassifier,
    configure_logging,
    log_operation,
    operation_context,
)


class TestErrorClassifier:
    """Test the ErrorClassifier class."""

    def test_classify_http_status_error(self):
        error = StreamConnectionError("Streaming API error 401", status_code=401)
        assert ErrorClassifier.classify_error(error) == "http_status_error"

    def test_classify_stream_connection_error(self):
        error = StreamConnectionError("HTTP error: refused")
        assert ErrorClassifier.classify_error(error) == "connection_error"

    def test_classify_stream_timeout(self):
        try:
            try:
                raise httpx.ConnectTimeout("timed out")
            except httpx.ConnectTimeout as cause:
                raise StreamConnectionError("HTTP error: timed out") from cause
        except StreamConnectionError as error:
            assert ErrorClassifier.classify_error(error) == "timeout_error"

    def test_classify_stream_decoding_error(self):
        try:
            try:
                raise httpx.DecodingError("incorrect header check")
            except httpx.DecodingError as cause:
                raise StreamConnectionError("HTTP error: incorrect header check") from cause
        except StreamConnectionError as error:
            assert ErrorClassifier.classify_error(error) == "decoding_error"

    def test_classify_malformed_payload(self):
        error = MalformedPayloadError("bad", raw_data="{")
        assert ErrorClassifier.classify_error(error) == "malformed_payload"

    def test_classify_validation_error(self):
        class Model(BaseModel):
            value: int

        with pytest.raises(ValidationError) as exc_info:
            Model(value="abc")
        assert ErrorClassifier.classify_error(exc_info.value) == "validation_error"

    def test_classify_builtin_errors(self):
        assert ErrorClassifier.classify_error(TimeoutError()) == "timeout_error"
        assert ErrorClassifier.classify_error(ConnectionError()) == "connection_error"
        assert ErrorClassifier.classify_error(OSError()) == "connection_error"
        assert ErrorClassifier.classify_error(asyncio.CancelledError()) == "cancelled"
        assert ErrorClassifier.classify_error(RuntimeError()) == "unknown_error"


class TestDecorators:
    """Test logging decorators and context managers."""

    @pytest.mark.asyncio
    async def test_log_operation_success(self):

        @log_operation("test_operation", context={"action": "rewrite"})
        async def successful_function():
            return "success"

        assert await successful_function() == "success"

    @pytest.mark.asyncio
    async def test_log_operation_with_error(self):

        @log_operation("test_operation")
        async def failing_function(value):
            raise ValueError(f"Test error {value}")

        with pytest.raises(ValueError, match="Test error 3"):
            await failing_function(3)

    @pytest.mark.asyncio
    async def test_log_operation_preserves_name(self):

        @log_operation("named")
        async def original_name():
            return None

        assert original_name.__name__ == "original_name"

    @pytest.mark.asyncio
    async def test_operation_context_yields_logger(self):
        async with operation_context("ctx", context={"action": "rewrite"}) as op_logger:
            op_logger.info("inside")

    @pytest.mark.asyncio
    async def test_operation_context_reraises(self):
        with pytest.raises(RuntimeError, match="boom"):
            async with operation_context("ctx"):
                raise RuntimeError("boom")


class TestConfigureLogging:

    def test_level_name(self):
        configure_logging("warning")
        assert logging.getLogger().level == logging.WARNING
        configure_logging(logging.INFO)
        assert logging.getLogger().level == logging.INFO

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown logging level"):
            configure_logging("chatty")
