"""
tests/conftest.py - pytest 공통 픽스처

AWS API 모킹과 테스트 헬퍼를 제공합니다.

Usage:
    def test_something(mock_ec2_client, tool_context):
        # mock_ec2_client: describe_instances 기본 응답이 설정된 MagicMock
        # tool_context: MagicMock client를 돌려주는 ToolContext
        pass
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock, patch

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정 (자격 증명/리전 고정, OPS_* / RDS_* 제거)"""
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-northeast-2")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("AWS_DEFAULT_PROFILE", raising=False)
    monkeypatch.delenv("ALLOWED_BUCKETS", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    for name in ("RDS_HOST", "RDS_USER", "RDS_PASSWORD", "RDS_DB", "RDS_PORT", "RDS_SSL"):
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("OPS_"):
            monkeypatch.delenv(name, raising=False)

    yield


# =============================================================================
# AWS 모킹 픽스처
# =============================================================================


@pytest.fixture
def mock_boto3_session():
    """boto3.Session 모킹"""
    with patch("boto3.Session") as mock_session_class:
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        # 기본 클라이언트 설정
        mock_session.client.return_value = MagicMock()
        mock_session.region_name = "ap-northeast-2"

        yield mock_session


@pytest.fixture
def mock_ec2_client():
    """EC2 클라이언트 모킹"""
    mock_client = MagicMock()

    # describe_instances 기본 응답
    mock_client.describe_instances.return_value = {
        "Reservations": [
            {
                "Instances": [
                    make_instance(
                        "i-1234567890abcdef0",
                        name="test-instance",
                        launch_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
                    )
                ]
            }
        ]
    }

    yield mock_client


@pytest.fixture
def mock_cloudwatch_client():
    """CloudWatch 클라이언트 모킹 (기본: 데이터 없음)"""
    mock_client = MagicMock()
    mock_client.get_metric_data.return_value = {"MetricDataResults": []}
    mock_client.get_metric_statistics.return_value = {"Datapoints": []}
    yield mock_client


@pytest.fixture
def mock_s3_client():
    """S3 클라이언트 모킹"""
    mock_client = MagicMock()
    mock_client.get_bucket_location.return_value = {"LocationConstraint": "ap-northeast-2"}
    mock_client.list_objects_v2.return_value = {"Contents": [], "IsTruncated": False}
    yield mock_client


@pytest.fixture
def mock_rds_client():
    """RDS 클라이언트 모킹"""
    mock_client = MagicMock()
    mock_client.describe_db_instances.return_value = {"DBInstances": []}
    mock_client.describe_db_snapshots.return_value = {"DBSnapshots": []}
    yield mock_client


# =============================================================================
# ToolContext 픽스처
# =============================================================================


@pytest.fixture
def mock_clients(mock_ec2_client, mock_cloudwatch_client, mock_s3_client, mock_rds_client):
    """서비스 이름 → MagicMock client"""
    return {
        "ec2": mock_ec2_client,
        "cloudwatch": mock_cloudwatch_client,
        "s3": mock_s3_client,
        "rds": mock_rds_client,
    }


@pytest.fixture
def tool_context(mock_clients):
    """MagicMock client를 사용하는 ToolContext (허용 버킷: test-bucket)"""
    from core.config import IdlePolicy
    from core.parallel import ClientCache
    from core.tools.context import ToolContext

    def factory(session, service_name, region_name=None, **kwargs):
        return mock_clients[service_name]

    cache = ClientCache(MagicMock(), client_factory=factory)
    return ToolContext(
        session=MagicMock(),
        region="ap-northeast-2",
        client_cache=cache,
        policy=IdlePolicy(),
        allowed_buckets=["test-bucket", "other-bucket"],
    )


@pytest.fixture
def registry(tool_context):
    """모든 도구가 등록된 레지스트리"""
    from core.tools import build_registry

    return build_registry(tool_context)


@pytest.fixture
def sqlite_engine():
    """servers 테이블(5행)이 있는 인메모리 SQLite Engine"""
    from sqlalchemy import create_engine
    from sqlalchemy.pool import StaticPool

    engine = create_engine("sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    with engine.begin() as conn:
        conn.exec_driver_sql("CREATE TABLE servers (id INTEGER PRIMARY KEY, name TEXT, cpu REAL, note BLOB)")
        for n in range(1, 6):
            conn.exec_driver_sql(
                "INSERT INTO servers (id, name, cpu, note) VALUES (?, ?, ?, ?)",
                (n, f"web-{n}", n * 1.5, b"ok"),
            )
    yield engine
    engine.dispose()


# =============================================================================
# 유틸리티 함수
# =============================================================================


def make_instance(
    instance_id: str,
    name: Optional[str] = None,
    state: str = "running",
    tags: Optional[Dict[str, str]] = None,
    launch_time: Optional[datetime] = None,
) -> Dict[str, Any]:
    """DescribeInstances 인스턴스 항목 생성 헬퍼"""
    all_tags = dict(tags or {})
    if name is not None:
        all_tags["Name"] = name

    instance: Dict[str, Any] = {
        "InstanceId": instance_id,
        "InstanceType": "t3.micro",
        "State": {"Name": state},
        "Placement": {"AvailabilityZone": "ap-northeast-2a"},
        "Tags": [{"Key": k, "Value": v} for k, v in all_tags.items()],
    }
    if launch_time is not None:
        instance["LaunchTime"] = launch_time
    return instance


def make_reservations_page(instances: List[Dict[str, Any]], next_token: Optional[str] = None) -> Dict[str, Any]:
    """DescribeInstances 응답 페이지 생성 헬퍼"""
    return create_mock_response({"Reservations": [{"Instances": instances}]}, next_token)


def create_mock_response(
    data: Dict[str, Any],
    next_token: Optional[str] = None,
) -> Dict[str, Any]:
    """페이지네이션 응답 생성 헬퍼"""
    response = data.copy()
    if next_token:
        response["NextToken"] = next_token
    return response


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    http_status: Optional[int] = None,
    headers: Optional[Dict[str, str]] = None,
    operation_name: str = "TestOperation",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    response: Dict[str, Any] = {
        "Error": {
            "Code": error_code,
            "Message": error_message,
        }
    }
    if http_status is not None or headers:
        response["ResponseMetadata"] = {
            "HTTPStatusCode": http_status or 400,
            "HTTPHeaders": dict(headers or {}),
        }

    return ClientError(response, operation_name)


# =============================================================================
# moto 통합 (선택적)
# =============================================================================

try:
    import moto

    @pytest.fixture
    def aws_credentials(monkeypatch):
        """moto 사용 시 AWS 자격 증명 설정"""
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
        monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
        monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
        monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-northeast-2")

    @pytest.fixture
    def moto_ec2(aws_credentials):
        """moto를 사용한 EC2 모킹"""
        with moto.mock_aws():
            import boto3

            yield boto3.client("ec2", region_name="ap-northeast-2")

    @pytest.fixture
    def moto_s3(aws_credentials):
        """moto를 사용한 S3 모킹"""
        with moto.mock_aws():
            import boto3

            yield boto3.client("s3", region_name="ap-northeast-2")

    @pytest.fixture
    def moto_rds(aws_credentials):
        """moto를 사용한 RDS 모킹"""
        with moto.mock_aws():
            import boto3

            yield boto3.client("rds", region_name="ap-northeast-2")

except ImportError:
    # moto가 설치되지 않은 경우 더미 픽스처
    @pytest.fixture
    def moto_ec2():
        pytest.skip("moto not installed")

    @pytest.fixture
    def moto_s3():
        pytest.skip("moto not installed")

    @pytest.fixture
    def moto_rds():
        pytest.skip("moto not installed")
