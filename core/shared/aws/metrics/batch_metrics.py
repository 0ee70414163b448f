"""
core/shared/aws/metrics/batch_metrics.py - CloudWatch Batch Metrics Utility

GetMetricData API를 사용한 배치 메트릭 조회

get_metric_statistics()는 메트릭당 1 API 호출이 필요하지만,
get_metric_data()는 최대 500개 메트릭을 1회 호출로 조회 가능.

결과 매핑:
    각 쿼리는 호출자가 정한 타입 있는 key(예: (MetricKind.CPU, 3))를 가집니다.
    API 요청의 Id는 청크 내부에서 생성한 값("q0", "q1", ...)이며,
    응답 Id는 문자열 파싱 없이 요청 시 만든 조회 테이블로 key에 되돌립니다.

예시:
    EC2 1200개 × 3개 메트릭 = 3600 쿼리 → 450개씩 8회 호출
"""

from __future__ import annotations

import logging
import math
from collections.abc import Hashable, Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

from core.config import settings
from core.parallel import map_ordered

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


@dataclass
class MetricQuery(Generic[K]):
    """CloudWatch 메트릭 쿼리 정의

    Attributes:
        key: 결과 매핑용 key (해시 가능, 호출자 정의)
        namespace: AWS 네임스페이스 (예: "AWS/EC2")
        metric_name: 메트릭 이름 (예: "CPUUtilization")
        dimensions: 차원 딕셔너리 (예: {"InstanceId": "i-123"})
        stat: 통계 타입 (Sum, Average, Maximum, Minimum)
    """

    key: K
    namespace: str
    metric_name: str
    dimensions: dict[str, str]
    stat: str = "Sum"


def finite_values(values: Sequence[Any] | None) -> list[float]:
    """숫자이면서 유한한 값만 남김 (None, NaN, Infinity 제거)"""
    result: list[float] = []
    for value in values or []:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if math.isfinite(value):
            result.append(float(value))
    return result


def chunk_count(query_count: int, max_queries_per_call: int) -> int:
    """쿼리 수에 대한 GetMetricData 호출(청크) 수"""
    return math.ceil(query_count / max_queries_per_call) if query_count else 0


def batch_get_metric_values(
    cloudwatch_client: Any,
    queries: Sequence[MetricQuery[K]],
    start_time: datetime,
    end_time: datetime,
    period: int,
    max_queries_per_call: int = settings.MAX_METRIC_QUERIES_PER_CALL,
    max_workers: int = 1,
    scan_by: str = "TimestampAscending",
) -> dict[K, list[float]]:
    """CloudWatch 메트릭 배치 조회 (청크 분할 + 청크별 Pagination)

    Args:
        cloudwatch_client: boto3 CloudWatch client
        queries: 메트릭 쿼리 목록 (key는 서로 달라야 함)
        start_time: 조회 시작 시간
        end_time: 조회 종료 시간
        period: 집계 주기 (초)
        max_queries_per_call: 요청당 최대 쿼리 수 (1 ~ 500)
        max_workers: 청크 동시 요청 수 (1이면 순차)
        scan_by: 결과 정렬 (TimestampAscending / TimestampDescending)

    Returns:
        {key: 유한한 데이터 포인트 값 목록}. 모든 쿼리 key가 포함되며
        데이터가 없으면 빈 목록.

    Raises:
        ValueError: max_queries_per_call 범위 초과 또는 key 중복
        botocore.exceptions.ClientError: API 오류 (재시도/부분 성공 없음)
    """
    if not 1 <= max_queries_per_call <= settings.METRIC_QUERY_HARD_LIMIT:
        raise ValueError(
            f"max_queries_per_call must be between 1 and {settings.METRIC_QUERY_HARD_LIMIT}, "
            f"got {max_queries_per_call}"
        )

    results: dict[K, list[float]] = {}
    for q in queries:
        if q.key in results:
            raise ValueError(f"duplicate metric query key: {q.key!r}")
        results[q.key] = []

    if not queries:
        return results

    chunks = list(_chunks(list(queries), max_queries_per_call))
    logger.debug(f"GetMetricData: 쿼리 {len(queries)}개 → 청크 {len(chunks)}개 (청크당 최대 {max_queries_per_call})")

    def fetch(chunk: list[MetricQuery[K]]) -> dict[K, list[float]]:
        return _fetch_chunk(cloudwatch_client, chunk, start_time, end_time, period, scan_by)

    for chunk_result in map_ordered(fetch, chunks, max_workers=max_workers):
        for key, values in chunk_result.items():
            results[key].extend(values)

    return results


def _fetch_chunk(
    cloudwatch_client: Any,
    chunk: list[MetricQuery[K]],
    start_time: datetime,
    end_time: datetime,
    period: int,
    scan_by: str,
) -> dict[K, list[float]]:
    """단일 청크 조회 (NextToken 루프, 내부 함수)

    Returns:
        {key: 값 목록} (응답에 나타난 key만 포함)
    """
    metric_data_queries, key_by_id = _build_metric_data_queries(chunk, period)
    values_by_key: dict[K, list[float]] = {}

    next_token: str | None = None
    pages = 0
    while True:
        params: dict[str, Any] = {
            "MetricDataQueries": metric_data_queries,
            "StartTime": start_time,
            "EndTime": end_time,
            "ScanBy": scan_by,
        }
        if next_token:
            params["NextToken"] = next_token

        response = cloudwatch_client.get_metric_data(**params)
        pages += 1

        for result in response.get("MetricDataResults", []):
            query_id = result.get("Id")
            if query_id not in key_by_id:
                # 요청하지 않은 Id는 데이터 없음으로 취급
                logger.debug(f"GetMetricData: 알 수 없는 결과 Id 무시 ({query_id!r})")
                continue
            key = key_by_id[query_id]
            values_by_key.setdefault(key, []).extend(finite_values(result.get("Values")))

        next_token = response.get("NextToken")
        if not next_token:
            break

    if pages > 1:
        logger.debug(f"GetMetricData: 청크 {len(chunk)}개 쿼리, {pages} 페이지")

    return values_by_key


def _build_metric_data_queries(
    chunk: list[MetricQuery[K]], period: int
) -> tuple[list[dict[str, Any]], dict[str, K]]:
    """MetricDataQueries 파라미터와 Id → key 조회 테이블 생성"""
    metric_data_queries: list[dict[str, Any]] = []
    key_by_id: dict[str, K] = {}

    for position, q in enumerate(chunk):
        query_id = f"q{position}"
        key_by_id[query_id] = q.key
        metric_data_queries.append(
            {
                "Id": query_id,
                "ReturnData": True,
                "MetricStat": {
                    "Metric": {
                        "Namespace": q.namespace,
                        "MetricName": q.metric_name,
                        "Dimensions": [{"Name": k, "Value": v} for k, v in q.dimensions.items()],
                    },
                    "Period": period,
                    "Stat": q.stat,
                },
            }
        )

    return metric_data_queries, key_by_id


def _chunks(lst: list, n: int) -> Iterator[list]:
    """리스트를 n개씩 분할"""
    for i in range(0, len(lst), n):
        yield lst[i : i + n]
