"""
core/shared/aws/tags.py - AWS 태그 변환 헬퍼

Usage:
    from core.shared.aws.tags import get_name_tag, parse_tags

    tags = parse_tags(instance.get("Tags"))
    name = get_name_tag(tags)
"""

from __future__ import annotations

from typing import Any


def parse_tags(tags: list[dict[str, Any]] | None, exclude_aws: bool = False) -> dict[str, str]:
    """태그 리스트를 dict로 변환

    Key가 비어 있거나 Value가 문자열이 아닌 항목은 버립니다.
    같은 Key가 반복되면 마지막 값이 남습니다.

    Args:
        tags: AWS 태그 리스트 [{"Key": "Name", "Value": "my-resource"}, ...]
        exclude_aws: True면 aws: 접두어 태그 제외

    Returns:
        {"Name": "my-resource", ...}
    """
    result: dict[str, str] = {}
    for tag in tags or []:
        key = tag.get("Key")
        value = tag.get("Value")
        if not key or not isinstance(value, str):
            continue
        if exclude_aws and key.startswith("aws:"):
            continue
        result[key] = value
    return result


def get_name_tag(tags: dict[str, str] | None) -> str | None:
    """Name 태그 값 (없거나 공백뿐이면 None)"""
    name = (tags or {}).get("Name")
    if isinstance(name, str) and name.strip():
        return name
    return None
