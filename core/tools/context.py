"""
core/tools/context.py - 도구 실행 컨텍스트

boto3 Session, 공유 ClientCache, 유휴 판정 정책, 허용 버킷 목록, RDS 쿼리 엔진을 묶어
모든 도구 핸들러에 전달합니다. 프로세스당 한 번 생성합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import boto3

from core.config import (
    IdlePolicy,
    Settings,
    get_allowed_buckets,
    get_default_profile,
    get_default_region,
    get_env_int,
    settings,
)
from core.parallel import ClientCache

logger = logging.getLogger(__name__)


@dataclass
class ToolContext:
    """도구 실행 컨텍스트

    Attributes:
        session: boto3 Session
        region: 기본 리전 (EC2/CloudWatch/RDS 및 S3 기본 client)
        client_cache: 공유 client 캐시
        policy: 유휴 판정 정책
        allowed_buckets: S3 도구가 접근 가능한 버킷 목록
        settings: 전역 설정
        metric_workers: GetMetricData 청크 동시 요청 수
        sql_engine: RDS 쿼리용 SQLAlchemy Engine (없으면 query_engine()에서 생성)
    """

    session: Any
    region: str
    client_cache: ClientCache
    policy: IdlePolicy = field(default_factory=IdlePolicy)
    allowed_buckets: list[str] = field(default_factory=list)
    settings: Settings = settings
    metric_workers: int = 1
    sql_engine: Any = None

    @classmethod
    def create(
        cls,
        profile: str | None = None,
        region: str | None = None,
        allowed_buckets: list[str] | None = None,
    ) -> ToolContext:
        """환경변수 기반 컨텍스트 생성

        Args:
            profile: AWS 프로파일 (기본: AWS_PROFILE)
            region: 리전 (기본: AWS_REGION > AWS_DEFAULT_REGION > us-east-1)
            allowed_buckets: 허용 버킷 (기본: ALLOWED_BUCKETS)
        """
        profile = profile or get_default_profile()
        region = region or get_default_region()
        session = boto3.Session(profile_name=profile, region_name=region)

        context = cls(
            session=session,
            region=region,
            client_cache=ClientCache(session),
            policy=IdlePolicy.from_env(),
            allowed_buckets=allowed_buckets if allowed_buckets is not None else get_allowed_buckets(),
            metric_workers=max(1, get_env_int("OPS_METRIC_WORKERS", 1)),
        )
        logger.debug(
            f"ToolContext: profile={profile or 'default'}, region={region}, "
            f"buckets={len(context.allowed_buckets)}"
        )
        return context

    def ec2(self) -> Any:
        return self.client_cache.get("ec2", self.region)

    def cloudwatch(self) -> Any:
        return self.client_cache.get("cloudwatch", self.region)

    def rds(self) -> Any:
        return self.client_cache.get("rds", self.region)

    def query_engine(self) -> Any:
        """RDS 읽기 전용 쿼리용 SQLAlchemy Engine (첫 호출 시 RDS_* 환경변수로 생성)"""
        if self.sql_engine is None:
            from plugins.rds.query import RdsConnectionConfig, create_query_engine

            self.sql_engine = create_query_engine(RdsConnectionConfig.from_env())
        return self.sql_engine

    def s3_for_bucket(self, bucket: str) -> Any:
        """버킷 리전에 맞는 S3 client"""
        from plugins.s3.storage import get_s3_client_for_bucket

        return get_s3_client_for_bucket(self.client_cache, bucket, self.region)
