"""
core/shared - 공유 유틸리티 (AWS 헬퍼)
"""
