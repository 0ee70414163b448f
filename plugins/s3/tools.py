"""
plugins/s3/tools.py - S3 에이전트 도구

모든 도구는 ALLOWED_BUCKETS에 포함된 버킷만 사용합니다.
bucket을 생략하면 첫 번째 허용 버킷을 사용합니다.

Tools:
    - list_files, read_text_file, write_text_file, presign_download, find_old_files
"""

from __future__ import annotations

from pydantic import Field

from core.config import settings
from core.tools.registry import ToolRegistry, ToolSpec
from core.tools.schema import ToolModel
from core.tools.types import ToolArea, ToolPermission

from .storage import (
    create_presigned_get_url,
    find_old_objects,
    get_text_object,
    list_object_keys,
    put_text_object,
    resolve_bucket,
)


def _bucket_field():
    return Field(None, description="Bucket name (must be in ALLOWED_BUCKETS; defaults to the first one)")


# =============================================================================
# 스키마
# =============================================================================


class ListFilesInput(ToolModel):
    bucket: str | None = _bucket_field()
    prefix: str = Field("", description="Key prefix such as 'logs/'")
    limit: int = Field(20, ge=1, le=1000)


class ListFilesOutput(ToolModel):
    bucket: str
    prefix: str
    count: int = Field(ge=0)
    keys: list[str]


class ReadTextFileInput(ToolModel):
    bucket: str | None = _bucket_field()
    key: str = Field(min_length=1)


class ReadTextFileOutput(ToolModel):
    bucket: str
    key: str
    content: str
    content_type: str | None = None


class WriteTextFileInput(ToolModel):
    bucket: str | None = _bucket_field()
    key: str = Field(min_length=1)
    content: str = Field(min_length=1, max_length=settings.S3_TEXT_MAX_BYTES)
    content_type: str = "text/plain"


class WriteTextFileOutput(ToolModel):
    bucket: str
    key: str
    etag: str | None = None


class PresignDownloadInput(ToolModel):
    bucket: str | None = _bucket_field()
    key: str = Field(min_length=1)
    expires_in_seconds: int = Field(900, ge=60, le=3600)


class PresignDownloadOutput(ToolModel):
    url: str
    expires_in_seconds: int


class FindOldFilesInput(ToolModel):
    bucket: str | None = _bucket_field()
    prefix: str = ""
    older_than_days: int = Field(180, ge=1, le=3650)
    min_size_bytes: int = Field(1024, ge=0)
    max_results: int = Field(50, ge=1, le=200)


class OldObjectOut(ToolModel):
    key: str
    size: int = Field(ge=0)
    last_modified: str | None = None
    age_days: int | None = None
    storage_class: str | None = None


class FindOldFilesOutput(ToolModel):
    bucket: str
    prefix: str
    older_than_days: int
    scanned: int = Field(ge=0)
    truncated: bool
    result_count: int = Field(ge=0)
    total_bytes: int = Field(ge=0)
    objects: list[OldObjectOut]


# =============================================================================
# 핸들러
# =============================================================================


def list_files(ctx, args: ListFilesInput) -> ListFilesOutput:
    bucket = resolve_bucket(args.bucket, ctx.allowed_buckets)
    keys = list_object_keys(ctx.s3_for_bucket(bucket), bucket, args.prefix, args.limit)
    return ListFilesOutput(bucket=bucket, prefix=args.prefix, count=len(keys), keys=keys)


def read_text_file(ctx, args: ReadTextFileInput) -> ReadTextFileOutput:
    bucket = resolve_bucket(args.bucket, ctx.allowed_buckets)
    obj = get_text_object(ctx.s3_for_bucket(bucket), bucket, args.key)
    return ReadTextFileOutput(bucket=obj.bucket, key=obj.key, content=obj.content, content_type=obj.content_type)


def write_text_file(ctx, args: WriteTextFileInput) -> WriteTextFileOutput:
    bucket = resolve_bucket(args.bucket, ctx.allowed_buckets)
    etag = put_text_object(ctx.s3_for_bucket(bucket), bucket, args.key, args.content, args.content_type)
    return WriteTextFileOutput(bucket=bucket, key=args.key, etag=etag)


def presign_download(ctx, args: PresignDownloadInput) -> PresignDownloadOutput:
    bucket = resolve_bucket(args.bucket, ctx.allowed_buckets)
    url = create_presigned_get_url(ctx.s3_for_bucket(bucket), bucket, args.key, args.expires_in_seconds)
    return PresignDownloadOutput(url=url, expires_in_seconds=args.expires_in_seconds)


def find_old_files(ctx, args: FindOldFilesInput) -> FindOldFilesOutput:
    bucket = resolve_bucket(args.bucket, ctx.allowed_buckets)
    scan = find_old_objects(
        ctx.s3_for_bucket(bucket),
        bucket,
        args.prefix,
        older_than_days=args.older_than_days,
        min_size_bytes=args.min_size_bytes,
        page_size=ctx.settings.S3_SCAN_PAGE_SIZE,
        max_total_objects=ctx.settings.S3_SCAN_MAX_OBJECTS,
    )

    objects = scan.objects[: args.max_results]
    return FindOldFilesOutput(
        bucket=bucket,
        prefix=args.prefix,
        older_than_days=args.older_than_days,
        scanned=scan.scanned,
        truncated=scan.truncated,
        result_count=len(objects),
        total_bytes=sum(o.size for o in objects),
        objects=[OldObjectOut.model_validate(o) for o in objects],
    )


def register(registry: ToolRegistry) -> None:
    registry.register(
        ToolSpec(
            name="list_files",
            description=(
                "Lists file keys in an allowed S3 bucket. Optionally provide a prefix like 'logs/' and a limit."
            ),
            input_model=ListFilesInput,
            output_model=ListFilesOutput,
            handler=list_files,
            area=ToolArea.INVENTORY,
        )
    )
    registry.register(
        ToolSpec(
            name="read_text_file",
            description="Reads a small text file (<=1MB) from an allowed S3 bucket by key.",
            input_model=ReadTextFileInput,
            output_model=ReadTextFileOutput,
            handler=read_text_file,
            area=ToolArea.OPERATIONAL,
        )
    )
    registry.register(
        ToolSpec(
            name="write_text_file",
            description="Writes a small text file (<=1MB) to an allowed S3 bucket at the given key.",
            input_model=WriteTextFileInput,
            output_model=WriteTextFileOutput,
            handler=write_text_file,
            area=ToolArea.OPERATIONAL,
            permission=ToolPermission.WRITE,
        )
    )
    registry.register(
        ToolSpec(
            name="presign_download",
            description="Creates a temporary download link (presigned URL) for a file in an allowed S3 bucket.",
            input_model=PresignDownloadInput,
            output_model=PresignDownloadOutput,
            handler=presign_download,
            area=ToolArea.OPERATIONAL,
        )
    )
    registry.register(
        ToolSpec(
            name="find_old_files",
            description=(
                "Finds older files in an allowed S3 bucket using LastModified, "
                "with optional prefix, age, and size filters."
            ),
            input_model=FindOldFilesInput,
            output_model=FindOldFilesOutput,
            handler=find_old_files,
            area=ToolArea.COST,
        )
    )
