"""
core/tools/schema.py - 도구 입출력 스키마 베이스

에이전트와 주고받는 JSON은 camelCase 키를 사용합니다.
모델 필드는 snake_case로 선언하고 alias로 camelCase를 노출합니다.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ToolModel(BaseModel):
    """도구 입출력 모델 베이스

    - 입력: camelCase/snake_case 모두 허용, 정의되지 않은 키는 무시
    - 출력: to_json()으로 camelCase + None 제외
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
