"""
core/tools/registry.py - 에이전트 도구 레지스트리

도구 이름 → ToolSpec 매핑과 호출 파이프라인을 제공합니다.

호출 흐름:
    1. 이름으로 ToolSpec 조회 (없으면 ToolNotFoundError)
    2. 입력 검증 (pydantic, 실패 시 ValidationError)
    3. 핸들러 실행 (실패 시 ToolExecutionError로 변환, 사용자용 메시지 포함)
    4. 출력 검증 후 camelCase JSON dict 반환

Usage:
    from core.tools import ToolContext, build_registry

    registry = build_registry(ToolContext.create())
    result = registry.invoke("detect_idle_ec2", {"lookbackDays": 14})
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import pydantic

from core.exceptions import (
    APICallError,
    ToolExecutionError,
    ToolNotFoundError,
    ValidationError,
    format_error_for_user,
)

from .schema import ToolModel
from .types import ToolArea, ToolPermission

if TYPE_CHECKING:
    from .context import ToolContext

logger = logging.getLogger(__name__)

ToolHandler = Callable[["ToolContext", Any], Any]


@dataclass(frozen=True)
class ToolSpec:
    """도구 정의

    Attributes:
        name: 도구 이름 (snake_case, 에이전트에 노출)
        description: 에이전트용 설명
        input_model: 입력 스키마
        output_model: 출력 스키마
        handler: (context, 검증된 입력) → 출력 모델 또는 dict
        area: 도구 영역
        permission: 요구 권한
    """

    name: str
    description: str
    input_model: type[ToolModel]
    output_model: type[ToolModel]
    handler: ToolHandler
    area: ToolArea = ToolArea.INVENTORY
    permission: ToolPermission = ToolPermission.READ

    def describe(self) -> dict[str, Any]:
        """에이전트 런타임에 전달할 도구 설명 (JSON Schema 포함)"""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_model.model_json_schema(by_alias=True),
            "outputSchema": self.output_model.model_json_schema(by_alias=True, mode="serialization"),
        }


def _format_errors(error: pydantic.ValidationError) -> list[str]:
    messages = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "(root)"
        messages.append(f"{location}: {err.get('msg', 'invalid value')}")
    return messages


class ToolRegistry:
    """도구 레지스트리

    Args:
        context: 모든 핸들러에 전달되는 실행 컨텍스트
    """

    def __init__(self, context: ToolContext) -> None:
        self.context = context
        self._tools: dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> ToolSpec:
        """도구 등록 (이름 중복 시 ValueError)"""
        if spec.name in self._tools:
            raise ValueError(f"tool already registered: {spec.name}")
        self._tools[spec.name] = spec
        return spec

    def get(self, name: str) -> ToolSpec:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def names(self) -> list[str]:
        """등록 순서대로 도구 이름 목록"""
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def describe(self) -> list[dict[str, Any]]:
        return [spec.describe() for spec in self._tools.values()]

    def invoke(self, name: str, args: dict[str, Any] | None = None) -> dict[str, Any]:
        """도구 호출

        Args:
            name: 도구 이름
            args: 입력 인자 (camelCase 키)

        Returns:
            camelCase 키의 JSON 호환 dict

        Raises:
            ToolNotFoundError: 등록되지 않은 도구
            ValidationError: 입력 검증 실패
            ToolExecutionError: 핸들러 실행 실패 (message는 사용자용 문장)
        """
        spec = self.get(name)

        try:
            params = spec.input_model.model_validate(args or {})
        except pydantic.ValidationError as e:
            raise ValidationError(name, _format_errors(e), cause=e) from e

        logger.debug(f"도구 호출: {name} {params.model_dump(exclude_none=True)}")

        try:
            result = spec.handler(self.context, params)
        except ValidationError:
            raise
        except ToolExecutionError as e:
            if not isinstance(e, APICallError):
                raise
            raise ToolExecutionError(name, format_error_for_user(e), cause=e) from e
        except Exception as e:
            logger.warning(f"도구 실행 실패: {name} ({type(e).__name__}: {e})")
            message = format_error_for_user(e, allowed_buckets=self.context.allowed_buckets)
            raise ToolExecutionError(name, message, cause=e) from e

        try:
            output = spec.output_model.model_validate(result)
        except pydantic.ValidationError as e:
            logger.error(f"도구 출력 검증 실패: {name} {_format_errors(e)}")
            raise ToolExecutionError(name, f"Tool {name} returned an invalid result.", cause=e) from e

        return output.to_json()
