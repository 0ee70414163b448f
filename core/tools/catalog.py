"""
core/tools/catalog.py - 플러그인 도구 수집 및 레지스트리 구성

각 플러그인 패키지(plugins/<category>)는 다음을 제공합니다:
    - __init__.py: CATEGORY, TOOLS 메타데이터
    - tools.py: register(registry) 함수

TOOLS 메타데이터의 "tool" 이름과 실제 등록된 도구가 일치해야 합니다.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

from .context import ToolContext
from .registry import ToolRegistry

logger = logging.getLogger(__name__)

PLUGIN_PACKAGES: tuple[str, ...] = (
    "plugins.s3",
    "plugins.ec2",
    "plugins.rds",
)


def discover_categories() -> list[dict[str, Any]]:
    """플러그인 카테고리 메타데이터 목록 (CATEGORY + TOOLS)"""
    categories = []
    for package in PLUGIN_PACKAGES:
        module = importlib.import_module(package)
        categories.append({**module.CATEGORY, "tools": list(module.TOOLS)})
    return categories


def build_registry(context: ToolContext) -> ToolRegistry:
    """모든 플러그인 도구를 등록한 레지스트리 생성

    Raises:
        RuntimeError: TOOLS 메타데이터와 등록된 도구가 다름
    """
    registry = ToolRegistry(context)

    for package in PLUGIN_PACKAGES:
        module = importlib.import_module(package)
        tools_module = importlib.import_module(f"{package}.tools")

        before = set(registry.names())
        tools_module.register(registry)
        registered = set(registry.names()) - before

        declared = {tool["tool"] for tool in module.TOOLS}
        if declared != registered:
            raise RuntimeError(
                f"{package}: TOOLS metadata {sorted(declared)} does not match registered tools {sorted(registered)}"
            )

    logger.debug(f"도구 {len(registry)}개 등록: {', '.join(registry.names())}")
    return registry
