"""
tests/core/tools/test_registry.py - 도구 레지스트리 테스트
"""

from unittest.mock import MagicMock

import pytest
from pydantic import Field

from core.exceptions import (
    APICallError,
    BucketNotAllowedError,
    ToolExecutionError,
    ToolNotFoundError,
    ValidationError,
)
from core.tools.registry import ToolRegistry, ToolSpec
from core.tools.schema import ToolModel
from core.tools.types import ToolArea, ToolPermission


class EchoInput(ToolModel):
    message_text: str = Field(min_length=1)
    repeat_count: int = Field(1, ge=1, le=3)


class EchoOutput(ToolModel):
    message_text: str
    note: str | None = None


def echo(ctx, args):
    return EchoOutput(message_text=args.message_text * args.repeat_count)


def make_registry(handler=echo, context=None):
    registry = ToolRegistry(context or MagicMock(allowed_buckets=["test-bucket"]))
    registry.register(ToolSpec("echo", "Echoes the message.", EchoInput, EchoOutput, handler))
    return registry


class TestToolModel:
    def test_camel_case_alias(self):
        assert EchoInput.model_validate({"messageText": "hi"}).message_text == "hi"

    def test_snake_case_accepted(self):
        assert EchoInput.model_validate({"message_text": "hi"}).message_text == "hi"

    def test_to_json_excludes_none(self):
        assert EchoOutput(message_text="x").to_json() == {"messageText": "x"}


class TestRegistration:
    def test_register_and_lookup(self):
        registry = make_registry()

        assert "echo" in registry
        assert len(registry) == 1
        assert registry.names() == ["echo"]
        assert registry.get("echo").area is ToolArea.INVENTORY
        assert registry.get("echo").permission is ToolPermission.READ

    def test_duplicate_name_rejected(self):
        registry = make_registry()

        with pytest.raises(ValueError, match="already registered"):
            registry.register(ToolSpec("echo", "dup", EchoInput, EchoOutput, echo))

    def test_describe_has_schemas(self):
        described = make_registry().describe()[0]

        assert described["name"] == "echo"
        assert "messageText" in described["inputSchema"]["properties"]
        assert "messageText" in described["outputSchema"]["properties"]


class TestInvoke:
    def test_success(self):
        assert make_registry().invoke("echo", {"messageText": "ab", "repeatCount": 2}) == {"messageText": "abab"}

    def test_unknown_tool(self):
        with pytest.raises(ToolNotFoundError, match="Unknown tool: nope"):
            make_registry().invoke("nope", {})

    def test_validation_error_lists_fields(self):
        handler = MagicMock()

        with pytest.raises(ValidationError) as exc_info:
            make_registry(handler).invoke("echo", {"repeatCount": 9})

        errors = exc_info.value.errors
        assert any(e.startswith("messageText:") for e in errors)
        assert any(e.startswith("repeatCount:") for e in errors)
        handler.assert_not_called()

    def test_none_args_treated_as_empty(self):
        with pytest.raises(ValidationError):
            make_registry().invoke("echo", None)

    def test_handler_dict_result_validated(self):
        registry = make_registry(lambda ctx, args: {"messageText": "ok", "note": "n"})
        assert registry.invoke("echo", {"messageText": "x"}) == {"messageText": "ok", "note": "n"}

    def test_invalid_result(self):
        registry = make_registry(lambda ctx, args: {"unexpected": 1})

        with pytest.raises(ToolExecutionError, match="Tool echo returned an invalid result."):
            registry.invoke("echo", {"messageText": "x"})

    def test_bucket_error_passes_through(self):
        def handler(ctx, args):
            raise BucketNotAllowedError("evil", ["test-bucket"])

        with pytest.raises(BucketNotAllowedError):
            make_registry(handler).invoke("echo", {"messageText": "x"})

    def test_api_error_rewritten_for_user(self):
        def handler(ctx, args):
            raise APICallError("rds", "describe_db_instances", error_code="DBInstanceNotFound")

        with pytest.raises(ToolExecutionError) as exc_info:
            make_registry(handler).invoke("echo", {"messageText": "x"})

        assert exc_info.value.tool_name == "echo"
        assert "does not exist" in exc_info.value.message
        assert isinstance(exc_info.value.cause, APICallError)

    def test_unexpected_exception_wrapped(self):
        def handler(ctx, args):
            raise RuntimeError("boom")

        with pytest.raises(ToolExecutionError) as exc_info:
            make_registry(handler).invoke("echo", {"messageText": "x"})

        assert exc_info.value.message == "AWS error: RuntimeError"
        assert isinstance(exc_info.value.cause, RuntimeError)

    def test_handler_receives_context(self):
        context = MagicMock(allowed_buckets=[])
        seen = []

        def handler(ctx, args):
            seen.append(ctx)
            return EchoOutput(message_text=args.message_text)

        make_registry(handler, context).invoke("echo", {"messageText": "x"})

        assert seen == [context]
