"""
plugins/rds/tools.py - RDS 에이전트 도구 (읽기 전용)

Tools:
    - list_rds_instances, describe_rds_instance, list_rds_snapshots, get_rds_cpu_metrics
    - query_rds (SELECT / SHOW / DESCRIBE 전용)
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from core.config import settings
from core.tools.registry import ToolRegistry, ToolSpec
from core.tools.schema import ToolModel
from core.tools.types import ToolArea

from .inventory import get_db_instance_details, list_db_instances, list_db_snapshots
from .metrics import get_db_cpu_utilization
from .query import ensure_read_only, run_read_only_query

# =============================================================================
# 스키마
# =============================================================================


class ListRdsInstancesInput(ToolModel):
    max_instances: int = Field(20, ge=1, le=100)


class RdsInstanceOut(ToolModel):
    db_instance_identifier: str
    engine: str | None = None
    engine_version: str | None = None
    instance_class: str | None = None
    status: str | None = None
    endpoint_address: str | None = None
    endpoint_port: int | None = None
    availability_zone: str | None = None
    publicly_accessible: bool | None = None
    storage_encrypted: bool | None = None
    multi_az: bool | None = None
    allocated_storage_gb: int | None = None
    db_name: str | None = None


class ListRdsInstancesOutput(ToolModel):
    count: int = Field(ge=0)
    instances: list[RdsInstanceOut]


class DescribeRdsInstanceInput(ToolModel):
    db_instance_identifier: str = Field(min_length=1)


class RdsInstanceDetailsOut(RdsInstanceOut):
    arn: str | None = None
    master_username: str | None = None
    vpc_id: str | None = None
    subnet_group_name: str | None = None
    preferred_maintenance_window: str | None = None
    preferred_backup_window: str | None = None
    backup_retention_period_days: int | None = None


class ListRdsSnapshotsInput(ToolModel):
    db_instance_identifier: str | None = Field(None, min_length=1)
    max_snapshots: int = Field(20, ge=1, le=100)


class RdsSnapshotOut(ToolModel):
    snapshot_identifier: str | None = None
    db_instance_identifier: str | None = None
    status: str | None = None
    snapshot_type: str | None = None
    engine: str | None = None
    snapshot_create_time: str | None = None
    allocated_storage_gb: int | None = None


class ListRdsSnapshotsOutput(ToolModel):
    count: int = Field(ge=0)
    snapshots: list[RdsSnapshotOut]


class GetRdsCpuMetricsInput(ToolModel):
    db_instance_identifier: str = Field(min_length=1)
    lookback_hours: int = Field(24, ge=1, le=168)
    period_seconds: int = Field(300, ge=60, le=3600)


class RdsCpuMetricsOut(ToolModel):
    db_instance_identifier: str
    period_seconds: int
    datapoints: int = Field(ge=0)
    average: float | None = None
    minimum: float | None = None
    maximum: float | None = None
    latest_timestamp: str | None = None
    latest_average: float | None = None


class QueryRdsInput(ToolModel):
    sql: str = Field(min_length=1, max_length=10000)
    max_rows: int = Field(settings.RDS_QUERY_DEFAULT_ROWS, ge=1, le=settings.RDS_QUERY_MAX_ROWS)


class QueryRdsOutput(ToolModel):
    row_count: int = Field(ge=0)
    columns: list[str]
    rows: list[dict[str, Any]]


# =============================================================================
# 핸들러
# =============================================================================


def list_rds_instances(ctx, args: ListRdsInstancesInput) -> ListRdsInstancesOutput:
    instances = list_db_instances(ctx.rds(), args.max_instances)
    return ListRdsInstancesOutput(
        count=len(instances),
        instances=[RdsInstanceOut.model_validate(inst) for inst in instances],
    )


def describe_rds_instance(ctx, args: DescribeRdsInstanceInput) -> RdsInstanceDetailsOut:
    return RdsInstanceDetailsOut.model_validate(get_db_instance_details(ctx.rds(), args.db_instance_identifier))


def list_rds_snapshots(ctx, args: ListRdsSnapshotsInput) -> ListRdsSnapshotsOutput:
    snapshots = list_db_snapshots(ctx.rds(), args.db_instance_identifier, args.max_snapshots)
    return ListRdsSnapshotsOutput(
        count=len(snapshots),
        snapshots=[RdsSnapshotOut.model_validate(s) for s in snapshots],
    )


def get_rds_cpu_metrics(ctx, args: GetRdsCpuMetricsInput) -> RdsCpuMetricsOut:
    metrics = get_db_cpu_utilization(
        ctx.cloudwatch(),
        args.db_instance_identifier,
        lookback_hours=args.lookback_hours,
        period_seconds=args.period_seconds,
    )
    return RdsCpuMetricsOut.model_validate(metrics)


def query_rds(ctx, args: QueryRdsInput) -> QueryRdsOutput:
    ensure_read_only(args.sql)
    result = run_read_only_query(ctx.query_engine(), args.sql, args.max_rows)
    return QueryRdsOutput.model_validate(result)


def register(registry: ToolRegistry) -> None:
    registry.register(
        ToolSpec(
            name="list_rds_instances",
            description="Lists RDS DB instances with engine, class, status and endpoint.",
            input_model=ListRdsInstancesInput,
            output_model=ListRdsInstancesOutput,
            handler=list_rds_instances,
        )
    )
    registry.register(
        ToolSpec(
            name="describe_rds_instance",
            description="Describes a single RDS DB instance, including network, maintenance and backup settings.",
            input_model=DescribeRdsInstanceInput,
            output_model=RdsInstanceDetailsOut,
            handler=describe_rds_instance,
        )
    )
    registry.register(
        ToolSpec(
            name="list_rds_snapshots",
            description="Lists RDS DB snapshots, optionally for a single DB instance.",
            input_model=ListRdsSnapshotsInput,
            output_model=ListRdsSnapshotsOutput,
            handler=list_rds_snapshots,
        )
    )
    registry.register(
        ToolSpec(
            name="get_rds_cpu_metrics",
            description=(
                "Summarizes CloudWatch CPUUtilization for an RDS DB instance over the last few hours "
                "(average, minimum, maximum and the latest datapoint)."
            ),
            input_model=GetRdsCpuMetricsInput,
            output_model=RdsCpuMetricsOut,
            handler=get_rds_cpu_metrics,
            area=ToolArea.OPERATIONAL,
        )
    )
    registry.register(
        ToolSpec(
            name="query_rds",
            description=(
                "Runs a read-only SQL query (SELECT, SHOW, DESCRIBE or DESC) against the RDS MySQL database "
                "configured by RDS_HOST/RDS_USER/RDS_PASSWORD and returns at most maxRows rows."
            ),
            input_model=QueryRdsInput,
            output_model=QueryRdsOutput,
            handler=query_rds,
            area=ToolArea.OPERATIONAL,
        )
    )
