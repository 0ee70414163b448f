"""
core/tools/types.py - 도구 메타데이터 타입 정의

Trusted Advisor 스타일의 영역(Area) 분류 및 권한 구분.
"""

from enum import Enum


class ToolArea(str, Enum):
    """도구 영역 분류

    각 도구가 어떤 관점의 작업을 수행하는지 나타냅니다.
    """

    # 비용 최적화 (Cost Optimization) - 유휴/오래된 리소스 탐지
    COST = "cost"

    # 인벤토리/정보 수집 (Inventory) - 리소스 목록, 현황 파악
    INVENTORY = "inventory"

    # 운영 (Operational) - 파일 읽기/쓰기, 다운로드 링크 등 작업
    OPERATIONAL = "operational"


class ToolPermission(str, Enum):
    """도구가 요구하는 권한 수준"""

    READ = "read"
    WRITE = "write"


# 영역별 표시 정보
AREA_DISPLAY = {
    ToolArea.COST: {"name": "비용 최적화", "color": "green"},
    ToolArea.INVENTORY: {"name": "인벤토리", "color": "white"},
    ToolArea.OPERATIONAL: {"name": "운영", "color": "cyan"},
}


def get_area_display(area: str | ToolArea) -> dict:
    """영역 표시 정보 반환 (알 수 없는 영역은 기본값)

    Args:
        area: 영역 문자열 또는 ToolArea enum

    Returns:
        {"name": "비용 최적화", "color": "green"}
    """
    try:
        area = ToolArea(area)
    except ValueError:
        return {"name": str(area), "color": "white"}
    return AREA_DISPLAY[area]
