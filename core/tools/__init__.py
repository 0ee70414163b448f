# core/tools - 에이전트 도구 레지스트리
"""
에이전트에 노출되는 도구 시스템

Note:
    Lazy Import 패턴 사용 - CLI 시작 시간 최적화
"""

__all__ = [
    # Types
    "ToolArea",
    "ToolPermission",
    "get_area_display",
    # Schema
    "ToolModel",
    # Registry
    "ToolSpec",
    "ToolRegistry",
    "ToolContext",
    # Catalog
    "build_registry",
    "discover_categories",
    # Prompt
    "SYSTEM_PROMPT",
]

# Lazy import 매핑 테이블
_IMPORT_MAPPING = {
    # types.py
    "ToolArea": (".types", "ToolArea"),
    "ToolPermission": (".types", "ToolPermission"),
    "get_area_display": (".types", "get_area_display"),
    # schema.py
    "ToolModel": (".schema", "ToolModel"),
    # registry.py
    "ToolSpec": (".registry", "ToolSpec"),
    "ToolRegistry": (".registry", "ToolRegistry"),
    # context.py
    "ToolContext": (".context", "ToolContext"),
    # catalog.py
    "build_registry": (".catalog", "build_registry"),
    "discover_categories": (".catalog", "discover_categories"),
    # prompt.py
    "SYSTEM_PROMPT": (".prompt", "SYSTEM_PROMPT"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        import importlib

        module_name, attr_name = _IMPORT_MAPPING[name]
        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
