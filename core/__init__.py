# core/__init__.py
"""
core - AWS Operations Assistant 인프라

도구 실행에 필요한 공통 인프라를 포함하는 최상위 패키지입니다.
설정, 예외, client 생성/병렬 처리, 도구 레지스트리, 공유 AWS 유틸리티를 통합합니다.

아키텍처:
    core/
    ├── parallel/       # boto3 client 캐시, 순서 보존 병렬 실행
    ├── tools/          # 도구 스키마, 레지스트리, 실행 컨텍스트
    ├── shared/         # 공유 유틸리티 (태그, CloudWatch 배치 조회)
    ├── config.py       # 중앙 설정 관리 (유휴 판정 정책 포함)
    └── exceptions.py   # 통합 예외 계층

Usage:
    # 설정 사용
    from core.config import settings, get_default_region
    region = get_default_region()  # "us-east-1"

    # 예외 처리
    from core.exceptions import format_error_for_user
    try:
        result = ec2.describe_instances()
    except Exception as e:
        print(format_error_for_user(e))

    # 도구 호출
    from core.tools import ToolContext, build_registry
    registry = build_registry(ToolContext.create())
    registry.invoke("detect_idle_ec2", {"lookbackDays": 7})
"""

from core import config, exceptions, parallel, shared, tools

__all__: list[str] = [
    # 서브패키지
    "shared",
    "tools",
    "parallel",
    # 모듈
    "config",
    "exceptions",
]
