"""
core/parallel - client 생성 및 병렬 실행

주요 구성 요소:
- get_client: 재시도 없는 boto3 client 생성 (타임아웃/연결 풀 설정)
- ClientCache: (서비스, 리전) client 및 버킷 리전 메모이제이션
- map_ordered: 순서 보존 병렬 실행 (하나라도 실패하면 전체 실패)

Example:
    from core.parallel import ClientCache, get_client, map_ordered

    cloudwatch = get_client(session, "cloudwatch", region_name="us-east-1")
    results = map_ordered(fetch_chunk, chunks, max_workers=4)
"""

from .client import ClientCache, get_client
from .executor import map_ordered

__all__: list[str] = [
    "ClientCache",
    "get_client",
    "map_ordered",
]
