"""
plugins/ec2/inventory.py - EC2 인스턴스 목록 수집

DescribeInstances를 NextToken으로 페이지 순회하며 상태 필터에 맞는 인스턴스를
최대 max_instances개까지 수집합니다.

페이지 크기:
    MaxResults = min(1000, max(5, 남은 개수))
    (API 허용 범위 5 ~ 1000, 초과 수집분은 버림)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from core.config import settings
from core.shared.aws.tags import get_name_tag, parse_tags

logger = logging.getLogger(__name__)

# 필요한 AWS 권한 목록
REQUIRED_PERMISSIONS = {
    "read": [
        "ec2:DescribeInstances",
    ],
}

DEFAULT_STATES: tuple[str, ...] = ("running",)


@dataclass(frozen=True)
class InstanceSummary:
    """EC2 인스턴스 요약 정보"""

    instance_id: str
    name: str | None = None
    instance_type: str | None = None
    state: str | None = None
    launch_time: str | None = None  # ISO-8601
    availability_zone: str | None = None
    tags: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "name": self.name,
            "instance_type": self.instance_type,
            "state": self.state,
            "launch_time": self.launch_time,
            "availability_zone": self.availability_zone,
            "tags": dict(self.tags),
        }


def page_size(remaining: int) -> int:
    """DescribeInstances MaxResults 값 (API 허용 범위로 보정)"""
    return min(settings.EC2_PAGE_SIZE_MAX, max(settings.EC2_PAGE_SIZE_MIN, remaining))


def list_instances(
    ec2_client: Any,
    max_instances: int,
    states: Sequence[str] = DEFAULT_STATES,
) -> list[InstanceSummary]:
    """상태 필터에 맞는 EC2 인스턴스 목록 조회

    Args:
        ec2_client: boto3 EC2 client
        max_instances: 최대 수집 개수
        states: instance-state-name 필터 값 (기본 running)

    Returns:
        InstanceSummary 목록 (API 응답 순서, 최대 max_instances개)

    Raises:
        botocore.exceptions.ClientError: API 오류 (재시도 없음)
    """
    instances: list[InstanceSummary] = []
    if max_instances <= 0:
        return instances

    filters = [{"Name": "instance-state-name", "Values": list(states)}]
    next_token: str | None = None
    pages = 0

    while len(instances) < max_instances:
        params: dict[str, Any] = {
            "Filters": filters,
            "MaxResults": page_size(max_instances - len(instances)),
        }
        if next_token:
            params["NextToken"] = next_token

        response = ec2_client.describe_instances(**params)
        pages += 1

        for reservation in response.get("Reservations", []):
            for inst in reservation.get("Instances", []):
                if len(instances) >= max_instances:
                    break
                summary = _to_summary(inst)
                if summary is not None:
                    instances.append(summary)

        next_token = response.get("NextToken")
        if not next_token:
            break

    logger.debug(f"DescribeInstances: {pages} 페이지, 인스턴스 {len(instances)}개 (상태: {', '.join(states)})")
    return instances


def _to_summary(inst: dict[str, Any]) -> InstanceSummary | None:
    """DescribeInstances 항목을 InstanceSummary로 변환 (InstanceId 없으면 None)"""
    instance_id = inst.get("InstanceId")
    if not instance_id:
        return None

    tags = parse_tags(inst.get("Tags"))
    return InstanceSummary(
        instance_id=instance_id,
        name=get_name_tag(tags),
        instance_type=inst.get("InstanceType"),
        state=(inst.get("State") or {}).get("Name"),
        launch_time=_iso(inst.get("LaunchTime")),
        availability_zone=(inst.get("Placement") or {}).get("AvailabilityZone"),
        tags=tags,
    )


def _iso(value: Any) -> str | None:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str) and value:
        return value
    return None
