# cli/ui - 콘솔 출력 컴포넌트 (rich)
"""
CLI 전용 UI 컴포넌트 (콘솔 출력, 결과 테이블, 로깅 설정)
"""

from .console import (
    SYMBOL_ERROR,
    SYMBOL_INFO,
    SYMBOL_WARNING,
    configure_logging,
    console,
    err_console,
    get_console,
    print_error,
    print_info,
    print_warning,
)

__all__ = [
    "SYMBOL_ERROR",
    "SYMBOL_INFO",
    "SYMBOL_WARNING",
    "configure_logging",
    "console",
    "err_console",
    "get_console",
    "print_error",
    "print_info",
    "print_warning",
]
