# tests/cli/test_app.py
"""
cli/app.py 테스트

Tests cover:
- 버전/도움말 표시
- tools / prompt 명령
- call 명령 (JSON 인자 파싱, 도구 오류 처리)
- ec2 list / ec2 idle 명령
"""

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from cli.app import VERSION, cli
from core.exceptions import ToolExecutionError


@pytest.fixture
def runner():
    return CliRunner()


def run(runner, registry, *args):
    return runner.invoke(cli, list(args), obj={"registry": registry})


# =============================================================================
# 기본 옵션
# =============================================================================


class TestCLI:
    def test_version_option(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert VERSION in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("tools", "prompt", "call", "ec2"):
            assert command in result.output

    def test_profile_and_region_stored(self, runner):
        obj = {"registry": MagicMock()}
        obj["registry"].invoke.return_value = {"scanned": 0, "candidates": []}

        result = runner.invoke(cli, ["-p", "dev", "-r", "eu-west-1", "ec2", "idle", "-f", "json"], obj=obj)

        assert result.exit_code == 0
        assert obj["profile"] == "dev"
        assert obj["region"] == "eu-west-1"

    def test_registry_created_from_options(self, runner):
        with (
            patch("core.tools.ToolContext.create") as mock_create,
            patch("core.tools.build_registry") as mock_build,
        ):
            mock_build.return_value.invoke.return_value = {"count": 0, "states": ["running"], "instances": []}

            result = runner.invoke(cli, ["-p", "dev", "-r", "eu-west-1", "ec2", "list", "-f", "json"])

        assert result.exit_code == 0
        mock_create.assert_called_once_with(profile="dev", region="eu-west-1")
        mock_build.assert_called_once_with(mock_create.return_value)


# =============================================================================
# tools / prompt
# =============================================================================


class TestToolsCommand:
    def test_json(self, runner, registry):
        result = run(runner, registry, "tools", "--json")

        assert result.exit_code == 0
        tools = json.loads(result.output)
        assert {t["tool"] for t in tools} == set(registry.names())
        write = next(t for t in tools if t["tool"] == "write_text_file")
        assert write["permission"] == "write"
        assert write["category"] == "s3"

    def test_schema(self, runner, registry):
        result = run(runner, registry, "tools", "--schema")

        assert result.exit_code == 0
        described = json.loads(result.output)
        assert [d["name"] for d in described] == registry.names()
        assert "inputSchema" in described[0]

    def test_table(self, runner, registry):
        result = run(runner, registry, "tools")

        assert result.exit_code == 0
        assert "ops call" in result.output


class TestPromptCommand:
    def test_prints_system_prompt(self, runner):
        result = runner.invoke(cli, ["prompt"])

        assert result.exit_code == 0
        assert "AWS Operations Assistant" in result.output


# =============================================================================
# call
# =============================================================================


class TestCallCommand:
    def test_call_tool(self, runner, registry, mock_s3_client):
        mock_s3_client.list_objects_v2.return_value = {"Contents": [{"Key": "logs/a.txt"}], "IsTruncated": False}

        result = run(runner, registry, "call", "list_files", "--args", '{"prefix": "logs/"}')

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "bucket": "test-bucket",
            "prefix": "logs/",
            "count": 1,
            "keys": ["logs/a.txt"],
        }

    def test_default_args(self, runner, registry):
        result = run(runner, registry, "call", "list_rds_instances")

        assert result.exit_code == 0
        assert json.loads(result.output) == {"count": 0, "instances": []}

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]"])
    def test_bad_args(self, runner, registry, raw):
        result = run(runner, registry, "call", "list_files", "--args", raw)

        assert result.exit_code == 2
        assert "--args" in result.output

    def test_unknown_tool(self, runner, registry):
        result = run(runner, registry, "call", "delete_everything")

        assert result.exit_code == 1
        assert "Unknown tool: delete_everything" in result.output

    def test_validation_error(self, runner, registry):
        result = run(runner, registry, "call", "detect_idle_ec2", "--args", '{"lookbackDays": 99}')

        assert result.exit_code == 1
        assert "Invalid arguments for detect_idle_ec2" in result.output

    def test_disallowed_bucket(self, runner, registry):
        result = run(runner, registry, "call", "list_files", "--args", '{"bucket": "elsewhere"}')

        assert result.exit_code == 1
        assert "not allowed" in result.output


# =============================================================================
# ec2
# =============================================================================


class TestEc2Commands:
    def test_list_json(self, runner, registry, mock_ec2_client):
        result = run(runner, registry, "ec2", "list", "-n", "10", "-s", "running", "-s", "stopped", "-f", "json")

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["count"] == 1
        assert data["states"] == ["running", "stopped"]
        assert mock_ec2_client.describe_instances.call_args.kwargs["MaxResults"] == 10

    def test_list_console(self, runner, registry):
        result = run(runner, registry, "ec2", "list")

        assert result.exit_code == 0
        assert "EC2" in result.output

    def test_idle_json(self, runner, registry, mock_cloudwatch_client):
        result = run(runner, registry, "ec2", "idle", "-d", "14", "-f", "json")

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["scanned"] == 1
        assert data["candidates"][0]["confidence"] == "LOW"

    def test_idle_console(self, runner, registry):
        result = run(runner, registry, "ec2", "idle")

        assert result.exit_code == 0
        assert "EC2" in result.output

    def test_tool_error_exit_code(self, runner):
        registry = MagicMock()
        registry.invoke.side_effect = ToolExecutionError("detect_idle_ec2", "AWS denied the request (AccessDenied).")

        result = runner.invoke(cli, ["ec2", "idle"], obj={"registry": registry})

        assert result.exit_code == 1
        assert "AccessDenied" in result.output

    def test_invalid_format(self, runner, registry):
        result = run(runner, registry, "ec2", "list", "-f", "xml")
        assert result.exit_code == 2

    def test_idle_no_instances_warning(self, runner, registry, mock_ec2_client):
        mock_ec2_client.describe_instances.return_value = {"Reservations": []}

        result = run(runner, registry, "ec2", "idle")

        assert result.exit_code == 0
        assert "실행 중인 인스턴스가 없습니다" in result.output

    def test_list_empty_warning(self, runner, registry, mock_ec2_client):
        mock_ec2_client.describe_instances.return_value = {"Reservations": []}

        result = run(runner, registry, "ec2", "list", "-s", "stopped")

        assert result.exit_code == 0
        assert "stopped" in result.output
