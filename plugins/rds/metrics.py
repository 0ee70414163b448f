"""
plugins/rds/metrics.py - RDS CPU 사용률 조회

단일 DB 인스턴스의 CPUUtilization을 GetMetricStatistics로 조회합니다.
(인스턴스 하나, 지표 하나이므로 배치 조회를 쓰지 않음)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from core.shared.aws.metrics import finite_values

# 필요한 AWS 권한 목록
REQUIRED_PERMISSIONS = {
    "read": [
        "cloudwatch:GetMetricStatistics",
    ],
}


@dataclass(frozen=True)
class DBCpuMetrics:
    """RDS CPU 사용률 요약"""

    db_instance_identifier: str
    period_seconds: int
    datapoints: int
    average: float | None = None
    minimum: float | None = None
    maximum: float | None = None
    latest_timestamp: str | None = None
    latest_average: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def get_db_cpu_utilization(
    cloudwatch_client: Any,
    db_instance_identifier: str,
    lookback_hours: int,
    period_seconds: int,
    now: datetime | None = None,
) -> DBCpuMetrics:
    """RDS CPU 사용률 요약

    Args:
        cloudwatch_client: boto3 CloudWatch client
        db_instance_identifier: DB 인스턴스 식별자
        lookback_hours: 조회 기간 (시간)
        period_seconds: 집계 주기 (초)
        now: 조회 종료 시각 (기본: 현재 UTC)

    Returns:
        DBCpuMetrics (평균의 평균, 최솟값의 최소, 최댓값의 최대, 최신 데이터 포인트)
    """
    end_time = now or datetime.now(timezone.utc)
    start_time = end_time - timedelta(hours=lookback_hours)

    response = cloudwatch_client.get_metric_statistics(
        Namespace="AWS/RDS",
        MetricName="CPUUtilization",
        Dimensions=[{"Name": "DBInstanceIdentifier", "Value": db_instance_identifier}],
        StartTime=start_time,
        EndTime=end_time,
        Period=period_seconds,
        Statistics=["Average", "Minimum", "Maximum"],
    )

    datapoints = response.get("Datapoints", [])
    averages = finite_values([dp.get("Average") for dp in datapoints])
    minimums = finite_values([dp.get("Minimum") for dp in datapoints])
    maximums = finite_values([dp.get("Maximum") for dp in datapoints])

    timestamped = [dp for dp in datapoints if isinstance(dp.get("Timestamp"), datetime)]
    latest = max(timestamped, key=lambda dp: dp["Timestamp"]) if timestamped else None

    return DBCpuMetrics(
        db_instance_identifier=db_instance_identifier,
        period_seconds=period_seconds,
        datapoints=len(datapoints),
        average=sum(averages) / len(averages) if averages else None,
        minimum=min(minimums) if minimums else None,
        maximum=max(maximums) if maximums else None,
        latest_timestamp=latest["Timestamp"].isoformat() if latest else None,
        latest_average=latest.get("Average") if latest else None,
    )
