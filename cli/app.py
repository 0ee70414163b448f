"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.
에이전트 런타임 없이 도구를 직접 호출하고 결과를 확인할 수 있습니다.

명령어 구조:
    ops --version                       # 버전 표시
    ops tools [--json|--schema]         # 도구 목록
    ops prompt                          # 에이전트 시스템 프롬프트 출력
    ops call <tool> --args '<JSON>'     # 도구 직접 호출 (JSON 출력)
    ops ec2 list [-n 50] [-s running]   # EC2 인스턴스 목록
    ops ec2 idle [-d 7] [-n 50]         # 유휴 EC2 탐지

    공통 옵션:
    ops --debug -p my-profile -r ap-northeast-2 ec2 idle -f json

도구 오류는 사용자용 메시지를 stderr에 출력하고 종료 코드 1로 끝납니다.
"""

import json
import sys
from pathlib import Path
from typing import Any

# 프로젝트 루트를 sys.path에 추가 (plugins 모듈 임포트를 위함)
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import click  # noqa: E402
from click import Context  # noqa: E402

from cli.ui.console import configure_logging, console, print_error, print_info, print_warning  # noqa: E402
from core.config import get_version  # noqa: E402
from core.exceptions import OpsError  # noqa: E402

VERSION = get_version()

OUTPUT_FORMATS = ("console", "json")


def _get_registry(ctx: Context):
    """컨텍스트에 저장된 레지스트리 (없으면 생성)"""
    obj = ctx.ensure_object(dict)
    if obj.get("registry") is None:
        from core.tools import ToolContext, build_registry

        tool_context = ToolContext.create(profile=obj.get("profile"), region=obj.get("region"))
        obj["registry"] = build_registry(tool_context)
    return obj["registry"]


def _invoke(ctx: Context, tool_name: str, args: dict[str, Any]) -> dict[str, Any]:
    """도구 호출 (실패 시 에러 출력 후 종료 코드 1)"""
    try:
        return _get_registry(ctx).invoke(tool_name, args)
    except OpsError as e:
        print_error(str(e))
        raise SystemExit(1) from e


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, ensure_ascii=False, indent=2))


@click.group()
@click.version_option(VERSION, prog_name="ops")
@click.option("--debug", is_flag=True, help="디버그 로그 출력 (stderr)")
@click.option("-p", "--profile", default=None, help="AWS 프로파일 (기본: AWS_PROFILE)")
@click.option("-r", "--region", default=None, help="AWS 리전 (기본: AWS_REGION)")
@click.pass_context
def cli(ctx: Context, debug: bool, profile: str | None, region: str | None) -> None:
    """OPS - AWS Operations Assistant 도구 CLI"""
    configure_logging(debug=debug)

    obj = ctx.ensure_object(dict)
    obj.setdefault("profile", profile)
    obj.setdefault("region", region)


@cli.command("tools")
@click.option("--json", "as_json", is_flag=True, help="JSON 형식으로 출력")
@click.option("--schema", "as_schema", is_flag=True, help="입출력 JSON Schema 포함 출력")
@click.pass_context
def tools_command(ctx: Context, as_json: bool, as_schema: bool) -> None:
    """사용 가능한 도구 목록

    \b
    Examples:
        ops tools             # 도구 목록 테이블
        ops tools --json      # JSON 출력
        ops tools --schema    # 에이전트 런타임용 도구 정의
    """
    if as_schema:
        _echo_json(_get_registry(ctx).describe())
        return

    from rich.table import Table

    from core.tools import discover_categories

    categories = discover_categories()

    if as_json:
        _echo_json(
            [
                {
                    "category": cat["name"],
                    "tool": tool["tool"],
                    "name": tool["name_en"],
                    "description": tool["description_en"],
                    "permission": tool.get("permission", "read"),
                    "area": tool.get("area", ""),
                }
                for cat in categories
                for tool in cat["tools"]
            ]
        )
        return

    table = Table(title="사용 가능한 도구", show_header=True)
    table.add_column("Tool", style="cyan")
    table.add_column("카테고리")
    table.add_column("이름", style="white")
    table.add_column("권한", style="yellow")

    for cat in categories:
        for tool in cat["tools"]:
            perm = tool.get("permission", "read")
            table.add_row(tool["tool"], cat["display_name"], tool["name"], {"read": "R", "write": "W"}.get(perm, perm))

    console.print(table)
    console.print()
    print_info("ops call <tool> --args '{...}' 로 실행")


@cli.command("prompt")
def prompt_command() -> None:
    """에이전트 시스템 프롬프트 출력"""
    from core.tools import SYSTEM_PROMPT

    click.echo(SYSTEM_PROMPT)


@cli.command("call")
@click.argument("tool_name")
@click.option("-a", "--args", "raw_args", default="{}", show_default=True, help="도구 입력 (JSON 객체)")
@click.pass_context
def call_command(ctx: Context, tool_name: str, raw_args: str) -> None:
    """도구 직접 호출 (결과는 JSON)

    \b
    Examples:
        ops call list_files --args '{"prefix": "logs/", "limit": 50}'
        ops call detect_idle_ec2 --args '{"lookbackDays": 14}'
    """
    try:
        args = json.loads(raw_args)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e.msg}", param_hint="--args") from e
    if not isinstance(args, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--args")

    _echo_json(_invoke(ctx, tool_name, args))


# =============================================================================
# EC2
# =============================================================================


@cli.group("ec2")
def ec2_group() -> None:
    """EC2 인스턴스 조회 및 유휴 탐지"""


@ec2_group.command("list")
@click.option("-n", "--max-instances", type=int, default=50, show_default=True, help="최대 인스턴스 수 (1-200)")
@click.option("-s", "--state", "states", multiple=True, default=["running"], show_default=True, help="상태 (다중 가능)")
@click.option("-f", "--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default="console")
@click.pass_context
def ec2_list(ctx: Context, max_instances: int, states: tuple[str, ...], output_format: str) -> None:
    """EC2 인스턴스 목록"""
    result = _invoke(ctx, "list_ec2_instances", {"maxInstances": max_instances, "states": list(states)})

    if output_format == "json":
        _echo_json(result)
        return

    if result["count"] == 0:
        print_warning(f"인스턴스가 없습니다 (상태: {', '.join(result['states'])})")
        return

    from cli.ui.tables import build_instances_table

    console.print(build_instances_table(result))


@ec2_group.command("idle")
@click.option("-d", "--days", "lookback_days", type=int, default=7, show_default=True, help="조회 기간 (1-30일)")
@click.option("-n", "--max-instances", type=int, default=50, show_default=True, help="최대 검사 인스턴스 수 (1-200)")
@click.option("-f", "--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default="console")
@click.pass_context
def ec2_idle(ctx: Context, lookback_days: int, max_instances: int, output_format: str) -> None:
    """유휴 EC2 인스턴스 탐지 (CloudWatch 기반)"""
    result = _invoke(ctx, "detect_idle_ec2", {"lookbackDays": lookback_days, "maxInstances": max_instances})

    if output_format == "json":
        _echo_json(result)
        return

    if result["scanned"] == 0:
        print_warning("실행 중인 인스턴스가 없습니다")
        return

    from cli.ui.tables import build_idle_table

    console.print(build_idle_table(result))


if __name__ == "__main__":
    cli()
