"""
plugins/ec2/idle_metrics.py - EC2 유휴 판정용 CloudWatch 지표 집계

인스턴스당 3개 쿼리를 만들어 GetMetricData 배치로 조회하고,
인스턴스별 MetricAggregate 하나로 축약합니다.

쿼리:
    - AWS/EC2 CPUUtilization  Average → 평균 (%)
    - AWS/EC2 NetworkIn       Sum     → 합계 (bytes)
    - AWS/EC2 NetworkOut      Sum     → 합계 (bytes)

쿼리 key는 (MetricKind, 인스턴스 index) 튜플이며 API Id는 배치 계층이 생성합니다.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Union

from core.config import settings
from core.shared.aws.metrics import MetricQuery, batch_get_metric_values, chunk_count

logger = logging.getLogger(__name__)

# 필요한 AWS 권한 목록
REQUIRED_PERMISSIONS = {
    "read": [
        "cloudwatch:GetMetricData",
    ],
}

NAMESPACE = "AWS/EC2"


class MetricKind(Enum):
    """인스턴스당 조회하는 지표 종류 (값: 지표 이름, 통계)"""

    CPU = ("CPUUtilization", "Average")
    NET_IN = ("NetworkIn", "Sum")
    NET_OUT = ("NetworkOut", "Sum")

    @property
    def metric_name(self) -> str:
        return self.value[0]

    @property
    def stat(self) -> str:
        return self.value[1]


@dataclass(frozen=True)
class Present:
    """데이터 포인트가 1개 이상인 지표 (value: 평균 또는 합계)"""

    value: float
    count: int


@dataclass(frozen=True)
class Absent:
    """데이터 포인트가 없는 지표"""

    count: int = 0


MetricStat = Union[Present, Absent]

ABSENT = Absent()


@dataclass(frozen=True)
class MetricAggregate:
    """인스턴스별 지표 집계 결과"""

    cpu: MetricStat = ABSENT
    net_in: MetricStat = ABSENT
    net_out: MetricStat = ABSENT

    @property
    def cpu_avg(self) -> float | None:
        return _value(self.cpu)

    @property
    def net_in_bytes_total(self) -> float | None:
        return _value(self.net_in)

    @property
    def net_out_bytes_total(self) -> float | None:
        return _value(self.net_out)

    @property
    def data_points_cpu(self) -> int:
        return self.cpu.count

    @property
    def data_points_net_in(self) -> int:
        return self.net_in.count

    @property
    def data_points_net_out(self) -> int:
        return self.net_out.count

    @property
    def net_total_bytes(self) -> float:
        """NetworkIn + NetworkOut (없는 쪽은 0)"""
        return (self.net_in_bytes_total or 0) + (self.net_out_bytes_total or 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cpu_avg": self.cpu_avg,
            "net_in_bytes_total": self.net_in_bytes_total,
            "net_out_bytes_total": self.net_out_bytes_total,
            "data_points_cpu": self.data_points_cpu,
            "data_points_net_in": self.data_points_net_in,
            "data_points_net_out": self.data_points_net_out,
        }


def _value(stat: MetricStat) -> float | None:
    return stat.value if isinstance(stat, Present) else None


def mean_stat(values: Sequence[float]) -> MetricStat:
    """평균 집계 (값이 없으면 Absent)"""
    if not values:
        return ABSENT
    return Present(value=sum(values) / len(values), count=len(values))


def sum_stat(values: Sequence[float]) -> MetricStat:
    """합계 집계 (값이 없으면 Absent)"""
    if not values:
        return ABSENT
    return Present(value=float(sum(values)), count=len(values))


_REDUCERS = {
    MetricKind.CPU: mean_stat,
    MetricKind.NET_IN: sum_stat,
    MetricKind.NET_OUT: sum_stat,
}


def build_queries(instance_ids: Sequence[str]) -> list[MetricQuery[tuple[MetricKind, int]]]:
    """인스턴스별 3개 쿼리 생성 (key: (MetricKind, index))"""
    queries: list[MetricQuery[tuple[MetricKind, int]]] = []
    for index, instance_id in enumerate(instance_ids):
        for kind in MetricKind:
            queries.append(
                MetricQuery(
                    key=(kind, index),
                    namespace=NAMESPACE,
                    metric_name=kind.metric_name,
                    dimensions={"InstanceId": instance_id},
                    stat=kind.stat,
                )
            )
    return queries


def get_aggregates(
    cloudwatch_client: Any,
    instance_ids: Sequence[str],
    lookback_days: int,
    period_seconds: int,
    *,
    max_queries_per_call: int = settings.MAX_METRIC_QUERIES_PER_CALL,
    max_workers: int = 1,
    now: datetime | None = None,
) -> dict[str, MetricAggregate]:
    """인스턴스별 CPU/네트워크 지표 집계

    Args:
        cloudwatch_client: boto3 CloudWatch client
        instance_ids: 대상 인스턴스 ID 목록
        lookback_days: 조회 기간 (일)
        period_seconds: 집계 주기 (초)
        max_queries_per_call: GetMetricData 호출당 최대 쿼리 수
        max_workers: 청크 동시 요청 수
        now: 조회 종료 시각 (기본: 현재 UTC)

    Returns:
        {instance_id: MetricAggregate}. 요청한 모든 인스턴스가 포함되며
        데이터가 없는 지표는 Absent.

    Raises:
        botocore.exceptions.ClientError: 어느 청크든 실패하면 전체 실패
    """
    ids = list(dict.fromkeys(instance_ids))
    if not ids:
        return {}

    end_time = now or datetime.now(timezone.utc)
    start_time = end_time - timedelta(days=lookback_days)

    queries = build_queries(ids)
    logger.debug(
        f"지표 조회: 인스턴스 {len(ids)}개, 쿼리 {len(queries)}개, "
        f"호출 {chunk_count(len(queries), max_queries_per_call)}회 예정"
    )

    values = batch_get_metric_values(
        cloudwatch_client,
        queries,
        start_time=start_time,
        end_time=end_time,
        period=period_seconds,
        max_queries_per_call=max_queries_per_call,
        max_workers=max_workers,
    )

    aggregates: dict[str, MetricAggregate] = {}
    for index, instance_id in enumerate(ids):
        stats = {kind: _REDUCERS[kind](values.get((kind, index), [])) for kind in MetricKind}
        aggregates[instance_id] = MetricAggregate(
            cpu=stats[MetricKind.CPU],
            net_in=stats[MetricKind.NET_IN],
            net_out=stats[MetricKind.NET_OUT],
        )

    return aggregates
