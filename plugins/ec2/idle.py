"""
plugins/ec2/idle.py - 유휴 EC2 인스턴스 탐지

실행 중인 인스턴스를 수집하고 CloudWatch 지표로 유휴 여부를 판정해
우선순위 순으로 반환합니다.

흐름:
    list_instances (running) → get_aggregates → classify (인스턴스별) → rank

최적화:
    - GetMetricData 배치 조회 (인스턴스 1200개 = 쿼리 3600개 = 호출 8회)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from core.config import IdlePolicy

from .idle_classifier import Candidate, classify
from .idle_metrics import MetricAggregate, get_aggregates
from .inventory import list_instances
from .ranking import rank

logger = logging.getLogger(__name__)

# 필요한 AWS 권한 목록
REQUIRED_PERMISSIONS = {
    "read": [
        "ec2:DescribeInstances",
        "cloudwatch:GetMetricData",
    ],
}


@dataclass(frozen=True)
class IdleDetectionResult:
    """유휴 탐지 결과"""

    scanned: int
    candidates: list[Candidate] = field(default_factory=list)

    @property
    def idle_count(self) -> int:
        return sum(1 for c in self.candidates if c.idle)


def detect_idle(
    ec2_client: Any,
    cloudwatch_client: Any,
    lookback_days: int,
    max_instances: int,
    policy: IdlePolicy | None = None,
    *,
    max_workers: int = 1,
    now: datetime | None = None,
) -> IdleDetectionResult:
    """유휴 EC2 인스턴스 탐지

    Args:
        ec2_client: boto3 EC2 client
        cloudwatch_client: boto3 CloudWatch client (EC2와 같은 리전)
        lookback_days: 지표 조회 기간 (일)
        max_instances: 최대 검사 인스턴스 수
        policy: 판정 정책 (기본: IdlePolicy())
        max_workers: GetMetricData 청크 동시 요청 수
        now: 조회 종료 시각 (기본: 현재 UTC)

    Returns:
        IdleDetectionResult (candidates는 정렬됨)

    Raises:
        botocore.exceptions.ClientError: EC2/CloudWatch API 오류
    """
    policy = policy or IdlePolicy()

    instances = list_instances(ec2_client, max_instances, states=("running",))
    if not instances:
        logger.info("유휴 탐지: 실행 중인 인스턴스 없음")
        return IdleDetectionResult(scanned=0)

    aggregates = get_aggregates(
        cloudwatch_client,
        [inst.instance_id for inst in instances],
        lookback_days=lookback_days,
        period_seconds=policy.period_seconds,
        max_workers=max_workers,
        now=now,
    )

    candidates = [
        classify(
            inst,
            aggregates.get(inst.instance_id, MetricAggregate()),
            cpu_threshold_pct=policy.cpu_threshold_pct,
            net_total_threshold_bytes=policy.net_total_threshold_bytes,
            min_data_points=policy.min_data_points,
            exclude_tag_keys=policy.exclude_tag_keys,
        )
        for inst in instances
    ]

    result = IdleDetectionResult(scanned=len(instances), candidates=rank(candidates))
    logger.info(f"유휴 탐지: 인스턴스 {result.scanned}개 검사, 유휴 {result.idle_count}개 ({lookback_days}일)")
    return result
