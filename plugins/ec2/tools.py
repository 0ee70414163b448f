"""
plugins/ec2/tools.py - EC2 에이전트 도구

Tools:
    - list_ec2_instances: 상태별 인스턴스 기본 정보
    - detect_idle_ec2: 유휴 인스턴스 후보와 판정 근거
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from core.config import settings
from core.tools.registry import ToolRegistry, ToolSpec
from core.tools.schema import ToolModel
from core.tools.types import ToolArea

from .idle import detect_idle
from .inventory import DEFAULT_STATES, list_instances

# =============================================================================
# 스키마
# =============================================================================


class ListEc2InstancesInput(ToolModel):
    max_instances: int = Field(
        settings.TOOL_DEFAULT_INSTANCES, ge=1, le=settings.TOOL_MAX_INSTANCES, description="Maximum instances to return"
    )
    states: list[Annotated[str, Field(min_length=1)]] = Field(
        default_factory=lambda: list(DEFAULT_STATES),
        description="Instance lifecycle states to include (e.g. running, stopped)",
    )


class Ec2InstanceOut(ToolModel):
    instance_id: str
    name: str | None = None
    instance_type: str | None = None
    state: str | None = None
    launch_time: str | None = None
    availability_zone: str | None = None


class ListEc2InstancesOutput(ToolModel):
    count: int = Field(ge=0)
    states: list[str]
    instances: list[Ec2InstanceOut]


class DetectIdleEc2Input(ToolModel):
    lookback_days: int = Field(
        settings.TOOL_DEFAULT_LOOKBACK_DAYS,
        ge=1,
        le=settings.TOOL_MAX_LOOKBACK_DAYS,
        description="Lookback window in days",
    )
    max_instances: int = Field(
        settings.TOOL_DEFAULT_INSTANCES, ge=1, le=settings.TOOL_MAX_INSTANCES, description="Maximum instances to scan"
    )


class IdleCandidateOut(Ec2InstanceOut):
    cpu_avg: float | None = None
    net_in_bytes_total: float | None = None
    net_out_bytes_total: float | None = None
    data_points_cpu: int | None = None
    data_points_net_in: int | None = None
    data_points_net_out: int | None = None
    idle: bool
    confidence: Literal["HIGH", "MEDIUM", "LOW"]
    reason: list[str]


class DetectIdleEc2Output(ToolModel):
    scanned: int = Field(ge=0)
    candidates: list[IdleCandidateOut]


# =============================================================================
# 핸들러
# =============================================================================


def list_ec2_instances(ctx, args: ListEc2InstancesInput) -> ListEc2InstancesOutput:
    instances = list_instances(ctx.ec2(), args.max_instances, states=args.states)
    return ListEc2InstancesOutput(
        count=len(instances),
        states=args.states,
        instances=[Ec2InstanceOut.model_validate(inst.to_dict()) for inst in instances],
    )


def detect_idle_ec2(ctx, args: DetectIdleEc2Input) -> DetectIdleEc2Output:
    result = detect_idle(
        ctx.ec2(),
        ctx.cloudwatch(),
        lookback_days=args.lookback_days,
        max_instances=args.max_instances,
        policy=ctx.policy,
        max_workers=ctx.metric_workers,
    )
    return DetectIdleEc2Output(
        scanned=result.scanned,
        candidates=[IdleCandidateOut.model_validate(c.to_dict()) for c in result.candidates],
    )


def register(registry: ToolRegistry) -> None:
    registry.register(
        ToolSpec(
            name="list_ec2_instances",
            description=(
                "Lists EC2 instances (basic info only). Use this when the user asks what EC2s exist "
                "or what is running. This does NOT perform idle detection."
            ),
            input_model=ListEc2InstancesInput,
            output_model=ListEc2InstancesOutput,
            handler=list_ec2_instances,
            area=ToolArea.INVENTORY,
        )
    )
    registry.register(
        ToolSpec(
            name="detect_idle_ec2",
            description=(
                "Detects likely-idle running EC2 instances over a lookback window. "
                "Returns stop candidates with evidence."
            ),
            input_model=DetectIdleEc2Input,
            output_model=DetectIdleEc2Output,
            handler=detect_idle_ec2,
            area=ToolArea.COST,
        )
    )
