"""
plugins/rds/query.py - RDS(MySQL) 읽기 전용 SQL 조회

RDS MySQL 엔드포인트에 SQLAlchemy + PyMySQL로 접속해 조회 쿼리만 실행합니다.
SELECT / SHOW / DESCRIBE / DESC로 시작하지 않는 SQL은 접속 전에 거부합니다.

접속 정보 (환경변수):
    RDS_HOST, RDS_USER, RDS_PASSWORD  필수
    RDS_DB                            기본 데이터베이스 (선택)
    RDS_PORT                          기본 3306
    RDS_SSL                           "true"면 인증서/호스트명 검증 TLS 사용

Usage:
    from plugins.rds.query import RdsConnectionConfig, create_query_engine, run_read_only_query

    engine = create_query_engine(RdsConnectionConfig.from_env())
    result = run_read_only_query(engine, "SELECT id, name FROM users", max_rows=50)
    print(result.row_count, result.columns)
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from core.config import get_env_bool, get_env_int, settings
from core.exceptions import ConfigError, ReadOnlyQueryError, ToolExecutionError

logger = logging.getLogger(__name__)

_READ_ONLY_PREFIX = re.compile(r"^(select|show|describe|desc)\s", re.IGNORECASE)


@dataclass(frozen=True)
class RdsConnectionConfig:
    """RDS MySQL 접속 정보"""

    host: str
    user: str
    password: str = field(repr=False)
    database: str | None = None
    port: int = settings.RDS_DEFAULT_PORT
    ssl: bool = False

    @classmethod
    def from_env(cls) -> RdsConnectionConfig:
        """RDS_* 환경변수에서 로드

        Raises:
            ConfigError: RDS_HOST / RDS_USER / RDS_PASSWORD 누락
        """
        return cls(
            host=_required_env("RDS_HOST"),
            user=_required_env("RDS_USER"),
            password=_required_env("RDS_PASSWORD"),
            database=os.environ.get("RDS_DB") or None,
            port=get_env_int("RDS_PORT", settings.RDS_DEFAULT_PORT, minimum=1),
            ssl=get_env_bool("RDS_SSL"),
        )

    def url(self) -> URL:
        return URL.create(
            "mysql+pymysql",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )


@dataclass(frozen=True)
class QueryResult:
    """조회 결과 (max_rows로 잘린 행)"""

    row_count: int
    columns: list[str]
    rows: list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        return {"row_count": self.row_count, "columns": self.columns, "rows": self.rows}


def _required_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise ConfigError(name, f"Missing {name}")
    return value


def is_read_only_sql(sql: str) -> bool:
    """SELECT / SHOW / DESCRIBE / DESC로 시작하는 단일 문장인지 확인

    앞뒤 공백과 끝의 세미콜론은 무시합니다. 중간에 세미콜론이 있으면
    여러 문장으로 보고 거부합니다.
    """
    normalized = sql.strip().rstrip(";").strip()
    if ";" in normalized:
        return False
    return _READ_ONLY_PREFIX.match(normalized) is not None


def ensure_read_only(sql: str) -> None:
    """읽기 전용 SQL이 아니면 ReadOnlyQueryError"""
    if not is_read_only_sql(sql):
        raise ReadOnlyQueryError(sql)


def create_query_engine(config: RdsConnectionConfig) -> Engine:
    """RDS MySQL용 SQLAlchemy Engine 생성

    커넥션 풀 없이 쿼리마다 접속하고 종료합니다 (NullPool).
    """
    connect_args: dict[str, Any] = {"connect_timeout": settings.API_CONNECT_TIMEOUT}
    if config.ssl:
        connect_args.update({"ssl_verify_cert": True, "ssl_verify_identity": True})

    logger.debug(f"RDS 쿼리 엔진: {config.host}:{config.port}/{config.database or '-'} (ssl={config.ssl})")
    return create_engine(config.url(), poolclass=NullPool, connect_args=connect_args)


def run_read_only_query(engine: Engine, sql: str, max_rows: int) -> QueryResult:
    """읽기 전용 쿼리 실행

    Args:
        engine: SQLAlchemy Engine
        sql: SELECT / SHOW / DESCRIBE / DESC 문
        max_rows: 반환할 최대 행 수 (초과분은 버림)

    Returns:
        QueryResult (row_count는 잘린 뒤의 행 수)

    Raises:
        ReadOnlyQueryError: 읽기 전용이 아닌 SQL
        ToolExecutionError: 접속 또는 쿼리 실패
    """
    ensure_read_only(sql)

    try:
        with engine.connect() as conn:
            result = conn.execution_options(no_parameters=True).exec_driver_sql(sql.strip())
            columns = list(result.keys()) if result.returns_rows else []
            mappings = result.mappings().fetchmany(max_rows) if result.returns_rows else []
            rows = [{key: _json_value(value) for key, value in row.items()} for row in mappings]
            result.close()
    except SQLAlchemyError as e:
        detail = getattr(e, "orig", None) or e
        logger.warning(f"RDS 쿼리 실패: {type(detail).__name__}")
        raise ToolExecutionError("rds", f"Database query failed: {detail}", cause=e) from e

    logger.debug(f"RDS 쿼리: {len(rows)}행 반환 (max_rows={max_rows})")
    return QueryResult(row_count=len(rows), columns=columns, rows=rows)


def _json_value(value: Any) -> Any:
    """bytes 컬럼은 문자열로 변환 (나머지는 출력 스키마가 직렬화)"""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return value
