"""
cli/ui/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력과 로깅 설정을 위한 함수들
"""

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from core.config import LogConfig

# botocore 노이즈 로그 제한
NOISY_LOGGERS = (
    "botocore",
    "botocore.httpchecksum",
    "botocore.credentials",
    "botocore.loaders",
    "botocore.session",
    "urllib3",
)


def get_console() -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        color_system="auto",
        highlight=True,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# 전역 콘솔 인스턴스 (에러는 stderr)
console = get_console()
err_console = Console(stderr=True, highlight=False)


def configure_logging(debug: bool = False) -> None:
    """루트 로깅 설정

    기본은 LogConfig(LOG_LEVEL, 기본 WARNING)를 따르므로 INFO 로그가 도구 출력에 섞이지 않습니다.
    debug=True면 RichHandler로 DEBUG 로그를 stderr에 출력합니다.

    Args:
        debug: 디버그 로그 출력 여부
    """
    root = logging.getLogger()

    if debug:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        root.addHandler(handler)
        root.setLevel(logging.DEBUG)
    else:
        log_config = LogConfig.from_env()
        logging.basicConfig(
            level=getattr(logging, log_config.level, logging.WARNING),
            format=log_config.format,
            datefmt=log_config.date_format,
        )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# =============================================================================
# 표준 출력 스타일 (이모지 없이 Rich 스타일만 사용)
# =============================================================================

# 상태 심볼
SYMBOL_ERROR = "✗"  # 에러
SYMBOL_WARNING = "!"  # 경고
SYMBOL_INFO = "•"  # 정보


def print_error(message: str) -> None:
    """에러 메시지 출력 (빨간색 X)

    Args:
        message: 출력할 메시지
    """
    err_console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """경고 메시지 출력 (노란색 경고)"""
    console.print(f"[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    """정보 메시지 출력"""
    console.print(f"[dim]{SYMBOL_INFO} {escape(message)}[/dim]")
