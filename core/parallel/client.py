"""
core/parallel/client.py - boto3 client 생성 헬퍼 및 client 캐시

타임아웃과 연결 풀이 설정된 boto3 client를 생성합니다.
도구 호출 실패는 호출자에게 그대로 전달해야 하므로 기본값은 재시도 없음(max_attempts=1)입니다.

주요 구성 요소:
- get_client: botocore Config가 적용된 boto3 client 생성
- ClientCache: (서비스, 리전) → client, 버킷 → 리전 메모이제이션 (스레드 안전)

Example:
    from core.parallel.client import ClientCache, get_client

    ec2 = get_client(session, "ec2", region_name="us-east-1")

    cache = ClientCache(session)
    s3 = cache.get("s3", "eu-west-1")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Literal, cast

from core.config import settings

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

# Retry mode 타입 (botocore TypedDict와 호환)
RetryMode = Literal["legacy", "standard", "adaptive"]

DEFAULT_MAX_ATTEMPTS = settings.API_MAX_ATTEMPTS
DEFAULT_RETRY_MODE: RetryMode = "standard"
DEFAULT_CONNECT_TIMEOUT = settings.API_CONNECT_TIMEOUT
DEFAULT_READ_TIMEOUT = settings.API_READ_TIMEOUT
DEFAULT_MAX_POOL_CONNECTIONS = settings.API_MAX_POOL_CONNECTIONS


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    retry_mode: RetryMode = DEFAULT_RETRY_MODE,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: int = DEFAULT_READ_TIMEOUT,
    max_pool_connections: int = DEFAULT_MAX_POOL_CONNECTIONS,
    **kwargs: Any,
) -> Any:
    """Config가 적용된 boto3 client 생성

    Args:
        session: boto3 Session
        service_name: AWS 서비스 이름 (ec2, s3, cloudwatch 등)
        region_name: 리전 (None이면 세션 기본값)
        max_attempts: 최대 시도 횟수 (기본: 1, 재시도 없음)
        retry_mode: 재시도 모드
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 읽기 타임아웃 (초)
        max_pool_connections: HTTP 연결 풀 크기
        **kwargs: session.client()에 전달할 추가 인자

    Returns:
        boto3 client
    """
    from botocore.config import Config

    config = Config(
        retries={"max_attempts": max_attempts, "mode": retry_mode},  # pyright: ignore[reportArgumentType]
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        max_pool_connections=max_pool_connections,
    )

    # 기존 config가 있으면 병합
    if "config" in kwargs:
        existing = kwargs.pop("config")
        config = config.merge(existing)

    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=config,
        **kwargs,
    )


class ClientCache:
    """프로세스 수명 동안 유지되는 boto3 client 캐시

    도구 컨텍스트가 한 번 생성해 모든 호출 지점에 참조로 전달합니다.
    첫 접근 경합 시 먼저 저장된 값이 유지됩니다 (first writer wins).

    Args:
        session: boto3 Session
        client_factory: client 생성 함수 (기본: get_client)
    """

    def __init__(
        self,
        session: boto3.Session,
        client_factory: Callable[..., Any] | None = None,
    ) -> None:
        self._session = session
        self._factory = client_factory or get_client
        self._clients: dict[tuple[str, str | None], Any] = {}
        self._bucket_regions: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, service_name: str, region_name: str | None = None) -> Any:
        """(서비스, 리전) client 반환 (없으면 생성 후 저장)"""
        key = (service_name, region_name)
        with self._lock:
            cached = self._clients.get(key)
        if cached is not None:
            return cached

        client = self._factory(self._session, service_name, region_name=region_name)
        with self._lock:
            # 경합 시 먼저 저장된 client 유지
            stored = self._clients.setdefault(key, client)
        if stored is client:
            logger.debug(f"client 생성: {service_name} ({region_name or 'default'})")
        return stored

    def get_bucket_region(self, bucket: str) -> str | None:
        """캐시된 버킷 리전 (없으면 None)"""
        with self._lock:
            return self._bucket_regions.get(bucket)

    def set_bucket_region(self, bucket: str, region: str) -> str:
        """버킷 리전 저장 후 최종 저장된 값 반환"""
        with self._lock:
            return self._bucket_regions.setdefault(bucket, region)

    def size(self) -> int:
        """캐시된 client 수"""
        with self._lock:
            return len(self._clients)

    def clear(self) -> None:
        """캐시 비우기"""
        with self._lock:
            self._clients.clear()
            self._bucket_regions.clear()
