"""
core/config.py - 중앙 설정 관리

애플리케이션 전역 설정값과 환경변수 헬퍼를 제공합니다.

구성:
    - Settings: 불변 전역 설정 (API 타임아웃, 페이지 크기, 도구 입력 한도 등)
    - IdlePolicy: 유휴 EC2 판정 정책 (임계값, 최소 데이터 포인트, 제외 태그)
    - LogConfig: 로깅 설정
    - 환경변수 헬퍼: get_env_bool, get_env_int, get_env_float, get_env_list

Usage:
    from core.config import settings, get_default_region, IdlePolicy

    region = get_default_region()          # AWS_REGION > AWS_DEFAULT_REGION > 기본값
    policy = IdlePolicy.from_env()         # OPS_IDLE_* 환경변수 반영
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path

# =============================================================================
# 전역 설정
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """전역 설정 (불변)

    Attributes:
        DEFAULT_REGION: 리전 환경변수가 없을 때 사용할 리전
        API_CONNECT_TIMEOUT: boto3 연결 타임아웃 (초)
        API_READ_TIMEOUT: boto3 읽기 타임아웃 (초)
        API_MAX_ATTEMPTS: boto3 최대 시도 횟수 (1 = 재시도 없음)
        MAX_METRIC_QUERIES_PER_CALL: GetMetricData 1회 호출당 쿼리 수 (상한 500 미만)
        METRIC_QUERY_HARD_LIMIT: GetMetricData API 자체 제한
    """

    DEFAULT_REGION: str = "us-east-1"

    # boto3 client
    API_CONNECT_TIMEOUT: int = 10
    API_READ_TIMEOUT: int = 30
    API_MAX_ATTEMPTS: int = 1
    API_MAX_POOL_CONNECTIONS: int = 10

    # CloudWatch GetMetricData
    MAX_METRIC_QUERIES_PER_CALL: int = 450
    METRIC_QUERY_HARD_LIMIT: int = 500

    # EC2 DescribeInstances MaxResults 허용 범위
    EC2_PAGE_SIZE_MIN: int = 5
    EC2_PAGE_SIZE_MAX: int = 1000

    # RDS Describe* MaxRecords 허용 범위
    RDS_PAGE_SIZE_MIN: int = 20
    RDS_PAGE_SIZE_MAX: int = 100

    # RDS 읽기 전용 SQL 조회 (MySQL)
    RDS_DEFAULT_PORT: int = 3306
    RDS_QUERY_DEFAULT_ROWS: int = 100
    RDS_QUERY_MAX_ROWS: int = 1000

    # 도구 입력 한도
    TOOL_MAX_INSTANCES: int = 200
    TOOL_DEFAULT_INSTANCES: int = 50
    TOOL_MAX_LOOKBACK_DAYS: int = 30
    TOOL_DEFAULT_LOOKBACK_DAYS: int = 7

    # S3
    S3_TEXT_MAX_BYTES: int = 1024 * 1024
    S3_SCAN_PAGE_SIZE: int = 250
    S3_SCAN_MAX_OBJECTS: int = 5000
    S3_FALLBACK_REGION: str = "us-east-1"


settings = Settings()


# =============================================================================
# 유휴 판정 정책
# =============================================================================


@dataclass(frozen=True)
class IdlePolicy:
    """유휴 EC2 판정 정책

    기본값은 운영 정책으로 고정된 값입니다. 환경변수로 덮어쓸 수 있습니다.

    Attributes:
        period_seconds: CloudWatch 집계 주기 (초)
        cpu_threshold_pct: CPU 평균 임계값 (%, 이하이면 유휴)
        net_total_threshold_bytes: NetworkIn + NetworkOut 합계 임계값 (bytes)
        min_data_points: 메트릭 종류별 최소 데이터 포인트 수
        exclude_tag_keys: 존재하면 판정에서 제외되는 태그 키
    """

    period_seconds: int = 3600
    cpu_threshold_pct: float = 2
    net_total_threshold_bytes: int = 50 * 1024 * 1024
    min_data_points: int = 24
    exclude_tag_keys: tuple[str, ...] = field(default=("DoNotStop", "Critical"))

    @classmethod
    def from_env(cls) -> IdlePolicy:
        """OPS_IDLE_* 환경변수에서 정책 로드

        없거나 숫자가 아니거나 허용 범위를 벗어난 값은 기본값을 유지합니다.
        (period_seconds >= 1, 임계값/min_data_points >= 0)
        """
        default = cls()
        return cls(
            period_seconds=get_env_int("OPS_IDLE_PERIOD_SECONDS", default.period_seconds, minimum=1),
            cpu_threshold_pct=get_env_float("OPS_IDLE_CPU_THRESHOLD_PCT", default.cpu_threshold_pct, minimum=0),
            net_total_threshold_bytes=get_env_int(
                "OPS_IDLE_NET_THRESHOLD_BYTES", default.net_total_threshold_bytes, minimum=0
            ),
            min_data_points=get_env_int("OPS_IDLE_MIN_DATA_POINTS", default.min_data_points, minimum=0),
            exclude_tag_keys=tuple(get_env_list("OPS_IDLE_EXCLUDE_TAG_KEYS", list(default.exclude_tag_keys))),
        )


# =============================================================================
# 로깅 설정
# =============================================================================


@dataclass
class LogConfig:
    """로깅 설정"""

    level: str = "WARNING"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> LogConfig:
        """LOG_LEVEL, LOG_FORMAT 환경변수에서 로드"""
        default = cls()
        return cls(
            level=os.environ.get("LOG_LEVEL", default.level).upper(),
            format=os.environ.get("LOG_FORMAT", default.format),
        )


# =============================================================================
# 프로젝트 경로 / 버전
# =============================================================================


def get_project_root() -> Path:
    """프로젝트 루트 경로"""
    return Path(__file__).resolve().parent.parent


def get_version() -> str:
    """version.txt에서 버전 문자열 반환 (없으면 "0.0.0")"""
    version_file = get_project_root() / "version.txt"
    try:
        return version_file.read_text(encoding="utf-8").strip() or "0.0.0"
    except OSError:
        return "0.0.0"


# =============================================================================
# 환경변수 헬퍼
# =============================================================================

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def get_env_bool(name: str, default: bool = False) -> bool:
    """환경변수를 bool로 변환 (알 수 없는 값이면 default)"""
    value = os.environ.get(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


def get_env_int(name: str, default: int, minimum: int | None = None) -> int:
    """환경변수를 int로 변환 (변환 실패 또는 minimum 미만이면 default)"""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        number = int(value.strip())
    except ValueError:
        return default
    if minimum is not None and number < minimum:
        return default
    return number


def get_env_float(name: str, default: float, minimum: float | None = None) -> float:
    """환경변수를 float로 변환 (변환 실패, 유한하지 않은 값, minimum 미만이면 default)"""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        number = float(value.strip())
    except ValueError:
        return default
    if not math.isfinite(number) or (minimum is not None and number < minimum):
        return default
    return number


def get_env_list(name: str, default: list[str] | None = None) -> list[str]:
    """콤마 구분 환경변수를 리스트로 변환 (빈 항목 제거)"""
    value = os.environ.get(name)
    if value is None:
        return list(default or [])
    return [item.strip() for item in value.split(",") if item.strip()]


def get_default_region() -> str:
    """기본 리전: AWS_REGION > AWS_DEFAULT_REGION > settings.DEFAULT_REGION"""
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or settings.DEFAULT_REGION


def get_default_profile() -> str | None:
    """기본 프로파일: AWS_PROFILE > AWS_DEFAULT_PROFILE"""
    return os.environ.get("AWS_PROFILE") or os.environ.get("AWS_DEFAULT_PROFILE")


def get_allowed_buckets() -> list[str]:
    """ALLOWED_BUCKETS 환경변수 (콤마 구분)"""
    return get_env_list("ALLOWED_BUCKETS")
