"""
plugins/s3/storage.py - S3 객체 조회/쓰기

허용된 버킷에 대해서만 동작하는 S3 헬퍼 모음.

버킷 리전:
    GetBucketLocation 결과를 정규화해 사용 (None/"" → us-east-1, EU → eu-west-1).
    호출이 실패하면 에러 응답의 x-amz-bucket-region 헤더를 사용하고,
    그것도 없으면 기본 리전 client를 사용합니다. 결정된 리전은 ClientCache에 저장됩니다.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from botocore.exceptions import ClientError

from core.config import settings
from core.exceptions import BucketNotAllowedError, ToolExecutionError
from core.parallel import ClientCache

logger = logging.getLogger(__name__)

# 필요한 AWS 권한 목록
REQUIRED_PERMISSIONS = {
    "read": [
        "s3:GetBucketLocation",
        "s3:ListBucket",
        "s3:GetObject",
    ],
    "write": [
        "s3:PutObject",
    ],
}

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class S3ObjectMeta:
    """ListObjectsV2 항목 메타데이터"""

    key: str
    size: int
    last_modified: datetime | None = None
    storage_class: str | None = None


@dataclass(frozen=True)
class OldObject:
    """오래된 객체 정보"""

    key: str
    size: int
    last_modified: str | None = None
    age_days: int | None = None
    storage_class: str | None = None


@dataclass(frozen=True)
class TextObject:
    """텍스트 객체 내용"""

    bucket: str
    key: str
    content: str
    content_type: str | None = None


@dataclass
class OldObjectScan:
    """오래된 객체 탐색 결과"""

    objects: list[OldObject] = field(default_factory=list)
    scanned: int = 0
    truncated: bool = False


# =============================================================================
# 버킷 허용 목록 / 리전
# =============================================================================


def resolve_bucket(bucket: str | None, allowed_buckets: Sequence[str]) -> str:
    """사용할 버킷 결정 (미지정 시 첫 번째 허용 버킷)

    Raises:
        BucketNotAllowedError: 허용 목록이 비었거나 목록에 없는 버킷
    """
    allowed = list(allowed_buckets)
    if not bucket:
        if not allowed:
            raise BucketNotAllowedError("", allowed)
        return allowed[0]
    if bucket not in allowed:
        raise BucketNotAllowedError(bucket, allowed)
    return bucket


def normalize_bucket_region(region: str | None) -> str:
    """GetBucketLocation LocationConstraint 정규화"""
    if not region:
        return "us-east-1"
    if region == "EU":
        return "eu-west-1"
    return region


def get_s3_client_for_bucket(client_cache: ClientCache, bucket: str, default_region: str) -> Any:
    """버킷 리전에 맞는 S3 client 반환

    Args:
        client_cache: 공유 client 캐시
        bucket: 버킷 이름
        default_region: 리전을 알 수 없을 때 사용할 리전

    Returns:
        boto3 S3 client
    """
    cached_region = client_cache.get_bucket_region(bucket)
    if cached_region:
        return client_cache.get("s3", cached_region)

    default_client = client_cache.get("s3", default_region)
    try:
        response = default_client.get_bucket_location(Bucket=bucket)
    except ClientError as e:
        header_region = _bucket_region_header(e)
        if not header_region:
            logger.debug(f"버킷 리전 확인 실패, 기본 리전 사용: {bucket} ({default_region})")
            return default_client
        region = client_cache.set_bucket_region(bucket, normalize_bucket_region(header_region))
        return client_cache.get("s3", region)

    region = client_cache.set_bucket_region(bucket, normalize_bucket_region(response.get("LocationConstraint")))
    logger.debug(f"버킷 리전: {bucket} → {region}")
    return client_cache.get("s3", region)


def _bucket_region_header(error: ClientError) -> str | None:
    headers = error.response.get("ResponseMetadata", {}).get("HTTPHeaders", {}) or {}
    return headers.get("x-amz-bucket-region")


# =============================================================================
# 객체 조회 / 쓰기
# =============================================================================


def list_object_keys(s3_client: Any, bucket: str, prefix: str, max_keys: int) -> list[str]:
    """객체 키 목록 (최대 max_keys개)"""
    keys: list[str] = []
    continuation_token: str | None = None

    while len(keys) < max_keys:
        params: dict[str, Any] = {"Bucket": bucket, "MaxKeys": max_keys - len(keys)}
        if prefix:
            params["Prefix"] = prefix
        if continuation_token:
            params["ContinuationToken"] = continuation_token

        response = s3_client.list_objects_v2(**params)
        keys.extend(item["Key"] for item in response.get("Contents", []) if isinstance(item.get("Key"), str))

        if not response.get("IsTruncated"):
            break
        continuation_token = response.get("NextContinuationToken")
        if not continuation_token:
            break

    return keys[:max_keys]


def get_text_object(
    s3_client: Any,
    bucket: str,
    key: str,
    max_bytes: int = settings.S3_TEXT_MAX_BYTES,
) -> TextObject:
    """텍스트 객체 읽기 (UTF-8)

    Raises:
        ToolExecutionError: 본문이 비었거나 max_bytes 초과
    """
    response = s3_client.get_object(Bucket=bucket, Key=key)
    body = response.get("Body")
    if body is None:
        raise ToolExecutionError("s3", f'S3 object had an empty body for key="{key}".')

    try:
        data = body.read(max_bytes + 1)
    finally:
        body.close()

    if len(data) > max_bytes:
        raise ToolExecutionError(
            "s3", f'S3 object key="{key}" is larger than {max_bytes} bytes and cannot be read as text.'
        )

    return TextObject(
        bucket=bucket,
        key=key,
        content=data.decode("utf-8", errors="replace"),
        content_type=response.get("ContentType"),
    )


def put_text_object(
    s3_client: Any,
    bucket: str,
    key: str,
    content: str,
    content_type: str | None = None,
) -> str | None:
    """텍스트 객체 쓰기

    Returns:
        ETag
    """
    params: dict[str, Any] = {"Bucket": bucket, "Key": key, "Body": content.encode("utf-8")}
    if content_type and content_type.strip():
        params["ContentType"] = content_type

    response = s3_client.put_object(**params)
    return response.get("ETag")


def create_presigned_get_url(s3_client: Any, bucket: str, key: str, expires_in: int) -> str:
    """다운로드용 presigned URL 생성"""
    return s3_client.generate_presigned_url(
        "get_object",
        Params={"Bucket": bucket, "Key": key},
        ExpiresIn=expires_in,
    )


# =============================================================================
# 오래된 객체 탐색
# =============================================================================


def list_objects_with_meta(
    s3_client: Any,
    bucket: str,
    prefix: str,
    page_size: int = settings.S3_SCAN_PAGE_SIZE,
    max_total_objects: int = settings.S3_SCAN_MAX_OBJECTS,
) -> tuple[list[S3ObjectMeta], bool]:
    """메타데이터 포함 객체 목록 (최대 max_total_objects개)

    Returns:
        (항목 목록, truncated). 버킷 끝까지 읽었으면 truncated=False.
    """
    items: list[S3ObjectMeta] = []
    continuation_token: str | None = None

    while len(items) < max_total_objects:
        params: dict[str, Any] = {
            "Bucket": bucket,
            "MaxKeys": min(page_size, max_total_objects - len(items)),
        }
        if prefix:
            params["Prefix"] = prefix
        if continuation_token:
            params["ContinuationToken"] = continuation_token

        response = s3_client.list_objects_v2(**params)
        for item in response.get("Contents", []):
            key = item.get("Key") or ""
            if not key:
                continue
            size = item.get("Size")
            items.append(
                S3ObjectMeta(
                    key=key,
                    size=size if isinstance(size, int) else 0,
                    last_modified=item.get("LastModified"),
                    storage_class=item.get("StorageClass"),
                )
            )

        if not response.get("IsTruncated"):
            return items, False

        continuation_token = response.get("NextContinuationToken")
        if not continuation_token:
            break

    return items, True


def find_old_objects(
    s3_client: Any,
    bucket: str,
    prefix: str,
    older_than_days: int,
    min_size_bytes: int,
    page_size: int = settings.S3_SCAN_PAGE_SIZE,
    max_total_objects: int = settings.S3_SCAN_MAX_OBJECTS,
    now: datetime | None = None,
) -> OldObjectScan:
    """older_than_days 이상 지났고 min_size_bytes 이상인 객체 탐색

    Returns:
        OldObjectScan (objects는 크기 내림차순)
    """
    items, truncated = list_objects_with_meta(s3_client, bucket, prefix, page_size, max_total_objects)

    current = now or datetime.now(timezone.utc)
    cutoff_seconds = older_than_days * SECONDS_PER_DAY
    objects: list[OldObject] = []

    for item in items:
        if item.size < min_size_bytes or item.last_modified is None:
            continue

        age_seconds = (current - item.last_modified).total_seconds()
        if not math.isfinite(age_seconds) or age_seconds < cutoff_seconds:
            continue

        objects.append(
            OldObject(
                key=item.key,
                size=item.size,
                last_modified=item.last_modified.isoformat(),
                age_days=math.floor(age_seconds / SECONDS_PER_DAY),
                storage_class=item.storage_class,
            )
        )

    objects.sort(key=lambda o: o.size, reverse=True)
    logger.debug(f"오래된 객체 탐색: {bucket}/{prefix} {len(items)}개 검사, {len(objects)}개 해당")
    return OldObjectScan(objects=objects, scanned=len(items), truncated=truncated)
