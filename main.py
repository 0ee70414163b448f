"""
main.py - ops 콘솔 스크립트 진입점 (cli.app:cli 위임)
"""

from cli.app import cli


def main() -> None:
    cli(prog_name="ops")


if __name__ == "__main__":
    main()
