"""
plugins/rds/inventory.py - RDS 인스턴스/스냅샷 조회

DescribeDBInstances / DescribeDBSnapshots를 Marker로 페이지 순회합니다.
MaxRecords는 API 허용 범위(20 ~ 100)로 보정하고 초과 수집분은 버립니다.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from core.config import settings
from core.exceptions import APICallError

logger = logging.getLogger(__name__)

# 필요한 AWS 권한 목록
REQUIRED_PERMISSIONS = {
    "read": [
        "rds:DescribeDBInstances",
        "rds:DescribeDBSnapshots",
    ],
}


@dataclass(frozen=True)
class DBInstanceSummary:
    """RDS 인스턴스 요약"""

    db_instance_identifier: str
    engine: str | None = None
    engine_version: str | None = None
    instance_class: str | None = None
    status: str | None = None
    endpoint_address: str | None = None
    endpoint_port: int | None = None
    availability_zone: str | None = None
    publicly_accessible: bool | None = None
    storage_encrypted: bool | None = None
    multi_az: bool | None = None
    allocated_storage_gb: int | None = None
    db_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DBInstanceDetails(DBInstanceSummary):
    """RDS 인스턴스 상세 (요약 + 네트워크/백업 설정)"""

    arn: str | None = None
    master_username: str | None = None
    vpc_id: str | None = None
    subnet_group_name: str | None = None
    preferred_maintenance_window: str | None = None
    preferred_backup_window: str | None = None
    backup_retention_period_days: int | None = None


@dataclass(frozen=True)
class DBSnapshotSummary:
    """RDS 스냅샷 요약"""

    snapshot_identifier: str | None = None
    db_instance_identifier: str | None = None
    status: str | None = None
    snapshot_type: str | None = None
    engine: str | None = None
    snapshot_create_time: str | None = None
    allocated_storage_gb: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _max_records(remaining: int) -> int:
    return min(settings.RDS_PAGE_SIZE_MAX, max(settings.RDS_PAGE_SIZE_MIN, remaining))


def _summary_fields(instance: dict[str, Any]) -> dict[str, Any]:
    endpoint = instance.get("Endpoint") or {}
    return {
        "db_instance_identifier": instance.get("DBInstanceIdentifier") or "unknown",
        "engine": instance.get("Engine"),
        "engine_version": instance.get("EngineVersion"),
        "instance_class": instance.get("DBInstanceClass"),
        "status": instance.get("DBInstanceStatus"),
        "endpoint_address": endpoint.get("Address"),
        "endpoint_port": endpoint.get("Port"),
        "availability_zone": instance.get("AvailabilityZone"),
        "publicly_accessible": instance.get("PubliclyAccessible"),
        "storage_encrypted": instance.get("StorageEncrypted"),
        "multi_az": instance.get("MultiAZ"),
        "allocated_storage_gb": instance.get("AllocatedStorage"),
        "db_name": instance.get("DBName"),
    }


def list_db_instances(rds_client: Any, max_instances: int) -> list[DBInstanceSummary]:
    """RDS 인스턴스 목록 (최대 max_instances개)"""
    results: list[DBInstanceSummary] = []
    marker: str | None = None

    while len(results) < max_instances:
        params: dict[str, Any] = {"MaxRecords": _max_records(max_instances - len(results))}
        if marker:
            params["Marker"] = marker

        response = rds_client.describe_db_instances(**params)
        for instance in response.get("DBInstances", []):
            if len(results) >= max_instances:
                break
            results.append(DBInstanceSummary(**_summary_fields(instance)))

        marker = response.get("Marker")
        if not marker:
            break

    return results


def get_db_instance_details(rds_client: Any, db_instance_identifier: str) -> DBInstanceDetails:
    """RDS 인스턴스 상세 조회

    Raises:
        APICallError: 응답에 인스턴스가 없음 (DBInstanceNotFound)
        botocore.exceptions.ClientError: API 오류
    """
    response = rds_client.describe_db_instances(DBInstanceIdentifier=db_instance_identifier)
    instances = response.get("DBInstances") or []
    if not instances:
        raise APICallError("rds", "describe_db_instances", error_code="DBInstanceNotFound")

    instance = instances[0]
    subnet_group = instance.get("DBSubnetGroup") or {}
    return DBInstanceDetails(
        **_summary_fields(instance),
        arn=instance.get("DBInstanceArn"),
        master_username=instance.get("MasterUsername"),
        vpc_id=subnet_group.get("VpcId"),
        subnet_group_name=subnet_group.get("DBSubnetGroupName"),
        preferred_maintenance_window=instance.get("PreferredMaintenanceWindow"),
        preferred_backup_window=instance.get("PreferredBackupWindow"),
        backup_retention_period_days=instance.get("BackupRetentionPeriod"),
    )


def list_db_snapshots(
    rds_client: Any,
    db_instance_identifier: str | None,
    max_snapshots: int,
) -> list[DBSnapshotSummary]:
    """RDS 스냅샷 목록 (인스턴스 지정 시 해당 인스턴스만)"""
    results: list[DBSnapshotSummary] = []
    marker: str | None = None

    while len(results) < max_snapshots:
        params: dict[str, Any] = {"MaxRecords": _max_records(max_snapshots - len(results))}
        if db_instance_identifier:
            params["DBInstanceIdentifier"] = db_instance_identifier
        if marker:
            params["Marker"] = marker

        response = rds_client.describe_db_snapshots(**params)
        for snapshot in response.get("DBSnapshots", []):
            if len(results) >= max_snapshots:
                break
            created = snapshot.get("SnapshotCreateTime")
            results.append(
                DBSnapshotSummary(
                    snapshot_identifier=snapshot.get("DBSnapshotIdentifier"),
                    db_instance_identifier=snapshot.get("DBInstanceIdentifier"),
                    status=snapshot.get("Status"),
                    snapshot_type=snapshot.get("SnapshotType"),
                    engine=snapshot.get("Engine"),
                    snapshot_create_time=created.isoformat() if isinstance(created, datetime) else None,
                    allocated_storage_gb=snapshot.get("AllocatedStorage"),
                )
            )

        marker = response.get("Marker")
        if not marker:
            break

    logger.debug(f"DescribeDBSnapshots: 스냅샷 {len(results)}개")
    return results
