"""
plugins/ec2 - EC2 Analysis Tools

Running instance inventory and idle instance detection (CloudWatch-based)
"""

CATEGORY = {
    "name": "ec2",
    "display_name": "EC2",
    "description": "EC2 인스턴스 조회 및 유휴 탐지",
    "description_en": "EC2 Instance Inventory and Idle Detection",
    "aliases": ["compute", "instance"],
}

TOOLS = [
    {
        "name": "EC2 인스턴스 목록",
        "name_en": "EC2 Instance Inventory",
        "description": "상태별 EC2 인스턴스 기본 정보 조회",
        "description_en": "List EC2 instances by lifecycle state",
        "permission": "read",
        "tool": "list_ec2_instances",
        "area": "inventory",
    },
    {
        "name": "유휴 EC2 인스턴스 탐지",
        "name_en": "Idle EC2 Instance Detection",
        "description": "CPU/네트워크 지표 기반 유휴 인스턴스 탐지 (CloudWatch 기반)",
        "description_en": "Detect idle running EC2 instances (CloudWatch-based)",
        "permission": "read",
        "tool": "detect_idle_ec2",
        "area": "cost",
    },
]
