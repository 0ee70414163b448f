"""
plugins/ec2/idle_classifier.py - 유휴 EC2 판정

인스턴스 하나와 지표 집계 하나를 받아 유휴 여부, 신뢰도, 판정 근거를 만드는 순수 함수.

판정 순서:
    1. 제외 태그: exclude_tag_keys 중 하나라도 있으면 제외 (신뢰도 LOW 고정)
    2. 데이터 충분성: CPU/NetworkIn/NetworkOut 데이터 포인트가 모두 min_data_points 이상
    3. CPU: 평균이 있고 임계값 이하
    4. 네트워크: NetworkIn + NetworkOut 합계가 임계값 이하

근거(reason) 순서:
    제외 사유(있으면) → 데이터 부족 사유(있으면) → CPU 요약 → 네트워크 요약
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from .idle_metrics import MetricAggregate
from .inventory import InstanceSummary


class Confidence(Enum):
    """판정 신뢰도 (HIGH < MEDIUM < LOW 순으로 정렬)"""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def order(self) -> int:
        return _CONFIDENCE_ORDER[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.order < other.order


_CONFIDENCE_ORDER = {Confidence.HIGH: 0, Confidence.MEDIUM: 1, Confidence.LOW: 2}


@dataclass(frozen=True)
class Candidate:
    """유휴 판정 결과"""

    instance: InstanceSummary
    metrics: MetricAggregate
    idle: bool
    confidence: Confidence
    reason: tuple[str, ...]

    @property
    def instance_id(self) -> str:
        return self.instance.instance_id

    def to_dict(self) -> dict[str, Any]:
        """인스턴스 필드 + 지표 필드 + 판정 필드를 평탄화한 dict"""
        return {
            **self.instance.to_dict(),
            **self.metrics.to_dict(),
            "idle": self.idle,
            "confidence": self.confidence.value,
            "reason": list(self.reason),
        }


def classify(
    instance: InstanceSummary,
    metrics: MetricAggregate,
    cpu_threshold_pct: float,
    net_total_threshold_bytes: float,
    min_data_points: int,
    exclude_tag_keys: Sequence[str],
) -> Candidate:
    """인스턴스 유휴 판정

    Args:
        instance: 인스턴스 요약
        metrics: 지표 집계
        cpu_threshold_pct: CPU 평균 임계값 (%)
        net_total_threshold_bytes: 네트워크 합계 임계값 (bytes)
        min_data_points: 지표별 최소 데이터 포인트 수
        exclude_tag_keys: 제외 태그 키

    Returns:
        Candidate
    """
    reasons: list[str] = []
    tags = instance.tags or {}

    excluded = any(key in tags for key in exclude_tag_keys)
    if excluded:
        reasons.append(f"Excluded (has one of these tag keys): {', '.join(exclude_tag_keys)}")

    cpu_points = metrics.data_points_cpu
    net_in_points = metrics.data_points_net_in
    net_out_points = metrics.data_points_net_out
    has_coverage = min(cpu_points, net_in_points, net_out_points) >= min_data_points
    if not has_coverage:
        reasons.append(
            f"Low metric coverage (cpu={cpu_points}, netIn={net_in_points}, "
            f"netOut={net_out_points}; min={min_data_points})."
        )

    cpu_avg = metrics.cpu_avg
    cpu_ok = cpu_avg is not None and cpu_avg <= cpu_threshold_pct

    net_total = metrics.net_total_bytes
    net_ok = math.isfinite(net_total) and net_total <= net_total_threshold_bytes

    cpu_text = _two_decimals(cpu_avg) if cpu_avg is not None else "N/A"
    reasons.append(f"CPU avg: {cpu_text}% (threshold {_number(cpu_threshold_pct)}%)")
    reasons.append(
        f"Network total: {_round_half_up(net_total)} bytes (threshold {_number(net_total_threshold_bytes)} bytes)"
    )

    idle = not excluded and has_coverage and cpu_ok and net_ok

    if excluded:
        confidence = Confidence.LOW
    elif has_coverage and cpu_ok and net_ok:
        confidence = Confidence.HIGH
    elif has_coverage:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    return Candidate(
        instance=instance,
        metrics=metrics,
        idle=idle,
        confidence=confidence,
        reason=tuple(reasons),
    )


def _number(value: float) -> str:
    """정수 값은 소수점 없이 표시 (2.0 → "2", 2.5 → "2.5")"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _round_half_up(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    return str(math.floor(value + 0.5))


def _two_decimals(value: float) -> str:
    """소수점 둘째 자리 반올림 (half-up, 0.125 → "0.13")"""
    if not math.isfinite(value):
        return str(value)
    return str(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
