"""
plugins/ec2/ranking.py - 유휴 후보 정렬

정렬 기준 (안정 정렬, 동률은 입력 순서 유지):
    1. 유휴 판정 우선
    2. 신뢰도 HIGH → MEDIUM → LOW
    3. CPU 평균 오름차순 (없으면 맨 뒤)
    4. NetworkIn + NetworkOut 합계 오름차순
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from .idle_classifier import Candidate


def rank_key(candidate: Candidate) -> tuple[int, int, float, float]:
    cpu_avg = candidate.metrics.cpu_avg
    return (
        0 if candidate.idle else 1,
        candidate.confidence.order,
        cpu_avg if cpu_avg is not None else math.inf,
        candidate.metrics.net_total_bytes,
    )


def rank(candidates: Iterable[Candidate]) -> list[Candidate]:
    """후보 목록을 정렬한 새 리스트 반환 (입력은 변경하지 않음)"""
    return sorted(candidates, key=rank_key)
