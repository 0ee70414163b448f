"""
core/shared/aws - AWS 공유 헬퍼 (메트릭 배치 조회, 태그 변환)
"""
