"""
cli/ui/tables.py - 도구 결과 테이블 렌더링

도구 출력(camelCase JSON dict)을 Rich Table로 표시합니다.
"""

from __future__ import annotations

from typing import Any

from rich.markup import escape
from rich.table import Table

CONFIDENCE_STYLE = {"HIGH": "green", "MEDIUM": "yellow", "LOW": "red"}


def _text(value: Any) -> str:
    return "-" if value is None else escape(str(value))


def _bytes(value: float | None) -> str:
    if value is None:
        return "-"
    size = float(value)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def build_instances_table(result: dict[str, Any]) -> Table:
    """list_ec2_instances 결과 테이블"""
    table = Table(title=f"EC2 인스턴스 ({result.get('count', 0)}개, 상태: {', '.join(result.get('states', []))})")
    table.add_column("Instance ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("State")
    table.add_column("AZ")
    table.add_column("Launch Time", style="dim")

    for inst in result.get("instances", []):
        table.add_row(
            inst["instanceId"],
            _text(inst.get("name")),
            _text(inst.get("instanceType")),
            _text(inst.get("state")),
            _text(inst.get("availabilityZone")),
            _text(inst.get("launchTime")),
        )
    return table


def build_idle_table(result: dict[str, Any]) -> Table:
    """detect_idle_ec2 결과 테이블"""
    candidates = result.get("candidates", [])
    idle_count = sum(1 for c in candidates if c.get("idle"))
    table = Table(title=f"유휴 EC2 탐지 (검사 {result.get('scanned', 0)}개, 유휴 {idle_count}개)")
    table.add_column("Instance ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Idle")
    table.add_column("Confidence")
    table.add_column("CPU avg", justify="right")
    table.add_column("Network", justify="right")
    table.add_column("Reason", style="dim")

    for c in candidates:
        cpu_avg = c.get("cpuAvg")
        net_total = None
        if c.get("netInBytesTotal") is not None or c.get("netOutBytesTotal") is not None:
            net_total = (c.get("netInBytesTotal") or 0) + (c.get("netOutBytesTotal") or 0)
        confidence = c.get("confidence", "")
        style = CONFIDENCE_STYLE.get(confidence, "white")
        table.add_row(
            c["instanceId"],
            _text(c.get("name")),
            "[green]yes[/green]" if c.get("idle") else "no",
            f"[{style}]{confidence}[/{style}]",
            "-" if cpu_avg is None else f"{cpu_avg:.2f}%",
            _bytes(net_total),
            escape("\n".join(c.get("reason", []))),
        )
    return table
