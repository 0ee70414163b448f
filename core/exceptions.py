"""
core/exceptions.py - 통합 예외 계층 구조

애플리케이션 전체에서 사용되는 예외 클래스들을 정의합니다.
일관된 예외 처리와 에이전트에게 전달할 에러 메시지를 제공합니다.

예외 계층 구조:
    OpsError (베이스)
    ├── ConfigError (설정 관련)
    ├── ValidationError (도구 입력/출력 검증)
    └── ToolExecutionError (도구 실행)
        ├── ToolNotFoundError
        ├── BucketNotAllowedError
        ├── ReadOnlyQueryError
        └── APICallError

Usage:
    from core.exceptions import APICallError, format_error_for_user

    try:
        result = ec2.describe_instances()
    except ClientError as e:
        raise APICallError.from_client_error("ec2", "describe_instances", e)
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# 베이스 예외
# =============================================================================


class OpsError(Exception):
    """운영 어시스턴트 기본 예외 클래스

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 설정 / 검증
# =============================================================================


class ConfigError(OpsError):
    """설정 관련 예외"""

    def __init__(self, key: str, message: str, cause: Exception | None = None):
        super().__init__(f"Configuration error [{key}]: {message}", cause)
        self.config_key = key
        self.details["config_key"] = key


class ValidationError(OpsError):
    """도구 입력/출력 검증 오류

    Attributes:
        tool_name: 검증에 실패한 도구 이름
        errors: 필드별 오류 메시지 목록
    """

    def __init__(self, tool_name: str, errors: list[str], cause: Exception | None = None):
        message = f"Invalid arguments for {tool_name}: {'; '.join(errors)}"
        super().__init__(message, cause)
        self.tool_name = tool_name
        self.errors = errors
        self.details.update({"tool_name": tool_name, "errors": errors})

    def __str__(self) -> str:
        return self.message


# =============================================================================
# 도구 실행 관련 예외
# =============================================================================


class ToolExecutionError(OpsError):
    """도구 실행 관련 예외

    message는 에이전트에게 그대로 전달되는 문장입니다.
    """

    def __init__(self, tool_name: str, message: str, cause: Exception | None = None):
        super().__init__(message, cause)
        self.tool_name = tool_name
        self.details["tool_name"] = tool_name

    def __str__(self) -> str:
        return self.message


class ToolNotFoundError(ToolExecutionError):
    """등록되지 않은 도구 호출"""

    def __init__(self, tool_name: str):
        super().__init__(tool_name, f"Unknown tool: {tool_name}")


class BucketNotAllowedError(ToolExecutionError):
    """허용 목록에 없는 버킷 접근 시도"""

    def __init__(self, bucket: str, allowed: list[str]):
        if allowed:
            message = f"Bucket '{bucket}' is not allowed. Allowed buckets: {', '.join(allowed)}"
        else:
            message = "No buckets are allowed. Set ALLOWED_BUCKETS to enable object-storage tools."
        super().__init__("s3", message)
        self.bucket = bucket
        self.allowed = allowed
        self.details.update({"bucket": bucket, "allowed": allowed})


class ReadOnlyQueryError(ToolExecutionError):
    """읽기 전용이 아닌 SQL 실행 시도"""

    def __init__(self, sql: str):
        super().__init__("rds", "Only read-only queries are allowed (SELECT, SHOW, DESCRIBE or DESC).")
        self.details["sql"] = sql[:200]


class APICallError(ToolExecutionError):
    """AWS API 호출 관련 예외

    boto3/botocore의 ClientError를 래핑하거나, 응답은 성공했지만 결과가 비어 있는
    경우(예: DBInstanceNotFound)를 표현합니다.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: str | None = None,
        error_message: str | None = None,
        cause: Exception | None = None,
    ):
        message = f"{service}.{operation}"
        if error_code:
            message = f"{message} failed ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(tool_name=service, message=message, cause=cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "error_code": error_code,
            }
        )

    @property
    def response(self) -> dict[str, Any]:
        """ClientError와 같은 모양의 응답 (에러 판별 함수 호환용)"""
        return {"Error": {"Code": self.error_code or "", "Message": self.error_message or ""}}

    @classmethod
    def from_client_error(
        cls,
        service: str,
        operation: str,
        client_error: Exception,
    ) -> APICallError:
        """botocore.exceptions.ClientError로부터 생성

        Args:
            service: AWS 서비스 이름
            operation: API 작업 이름
            client_error: ClientError 예외

        Returns:
            APICallError 인스턴스
        """
        error_code = None
        error_message = None

        if hasattr(client_error, "response"):
            error_info = client_error.response.get("Error", {})
            error_code = error_info.get("Code")
            error_message = error_info.get("Message")

        return cls(
            service=service,
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            cause=client_error,
        )


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================

_ACCESS_DENIED_CODES = {"AccessDenied", "AccessDeniedException", "UnauthorizedAccess", "UnauthorizedOperation"}

_THROTTLING_CODES = {
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "RateExceeded",
}

_NOT_FOUND_CODES = {
    "ResourceNotFoundException",
    "NotFoundException",
    "NoSuchKey",
    "NoSuchBucket",
    "InvalidInstanceID.NotFound",
    "DBInstanceNotFound",
    "DBInstanceNotFoundFault",
    "DBSnapshotNotFound",
}


def get_error_code(error: Exception) -> str:
    """예외에서 AWS 에러 코드 추출 (없으면 빈 문자열)"""
    if isinstance(error, APICallError):
        return error.error_code or ""
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        return response.get("Error", {}).get("Code", "") or ""
    return ""


def get_http_status(error: Exception) -> int | None:
    """예외에서 HTTP 상태 코드 추출"""
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        return response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return None


def is_access_denied(error: Exception) -> bool:
    """액세스 거부 오류인지 확인"""
    return get_error_code(error) in _ACCESS_DENIED_CODES or get_http_status(error) == 403


def is_throttling(error: Exception) -> bool:
    """스로틀링 오류인지 확인"""
    return get_error_code(error) in _THROTTLING_CODES


def is_not_found(error: Exception) -> bool:
    """리소스를 찾을 수 없는 오류인지 확인"""
    return get_error_code(error) in _NOT_FOUND_CODES


def format_error_for_user(error: Exception, allowed_buckets: list[str] | None = None) -> str:
    """에이전트에게 전달할 에러 메시지 포맷팅

    AWS 에러 코드를 운영자가 바로 이해할 수 있는 문장으로 변환합니다.
    알 수 없는 코드는 "AWS error: <code>" 형식으로 반환합니다.

    Args:
        error: 예외
        allowed_buckets: 허용 버킷 목록 (NoSuchBucket 안내 문구용)

    Returns:
        사용자 친화적인 에러 메시지
    """
    if isinstance(error, OpsError) and not isinstance(error, APICallError):
        return str(error)

    code = get_error_code(error)
    status = get_http_status(error)

    if is_access_denied(error):
        return (
            "AWS denied the request (AccessDenied). "
            "This usually means the IAM user is missing a required permission."
        )

    if code == "NoSuchKey":
        return "That file key does not exist. Tell me the folder/prefix and I can list files to help you find it."

    if code == "NoSuchBucket":
        if allowed_buckets:
            return (
                "That bucket does not exist or is not accessible. "
                f"This agent can only use these buckets: {', '.join(allowed_buckets)}."
            )
        return "That bucket does not exist or is not accessible."

    if code == "PermanentRedirect" or status == 301:
        return (
            "AWS says this bucket must be accessed using a different regional endpoint. "
            "Double-check the bucket region matches AWS_REGION."
        )

    if code in ("DBInstanceNotFound", "DBInstanceNotFoundFault"):
        return "That database instance does not exist. List the RDS instances to find the right identifier."

    if is_throttling(error):
        return "AWS is throttling requests right now. Wait a moment and try again."

    return f"AWS error: {code or type(error).__name__}"
