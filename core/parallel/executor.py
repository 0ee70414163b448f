"""
core/parallel/executor.py - 순서 보존 병렬 실행기

독립적인 작업(예: GetMetricData 청크 요청)을 ThreadPoolExecutor로 실행하고
입력 순서대로 결과를 반환합니다. 하나라도 실패하면 전체가 실패합니다 (부분 성공 없음).

Example:
    from core.parallel import map_ordered

    results = map_ordered(fetch_chunk, chunks, max_workers=4)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

MAX_WORKERS_LIMIT = 32


def map_ordered(func: Callable[[T], R], items: Sequence[T], max_workers: int = 1) -> list[R]:
    """items 각각에 func를 적용하고 입력 순서대로 결과 반환

    Args:
        func: 각 항목에 적용할 함수
        items: 입력 목록
        max_workers: 최대 동시 스레드 수 (1이면 순차 실행)

    Returns:
        입력 순서와 같은 결과 목록

    Raises:
        func가 던진 첫 번째 예외 (나머지 대기 작업은 취소)
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    if max_workers == 1 or len(items) <= 1:
        return [func(item) for item in items]

    workers = min(max_workers, MAX_WORKERS_LIMIT, len(items))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(func, item) for item in items]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)

        for future in futures:
            if future in done and future.exception() is not None:
                for other in pending:
                    other.cancel()
                logger.debug(f"병렬 작업 실패, 대기 작업 {len(pending)}개 취소")
                raise future.exception()  # type: ignore[misc]

        return [future.result() for future in futures]
