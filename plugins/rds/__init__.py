"""
plugins/rds - RDS Inspection Tools

DB instance inventory, details, snapshots, CPU utilization and read-only SQL queries
"""

CATEGORY = {
    "name": "rds",
    "display_name": "RDS",
    "description": "RDS 데이터베이스 조회 및 읽기 전용 SQL",
    "description_en": "RDS Database Inspection",
    "aliases": ["database", "db"],
}

TOOLS = [
    {
        "name": "RDS 인스턴스 목록",
        "name_en": "RDS Instance Inventory",
        "description": "RDS 인스턴스 기본 정보 조회",
        "description_en": "List RDS DB instances",
        "permission": "read",
        "tool": "list_rds_instances",
        "area": "inventory",
    },
    {
        "name": "RDS 인스턴스 상세",
        "name_en": "RDS Instance Details",
        "description": "RDS 인스턴스 네트워크/백업 설정 조회",
        "description_en": "Describe a single RDS DB instance",
        "permission": "read",
        "tool": "describe_rds_instance",
        "area": "inventory",
    },
    {
        "name": "RDS 스냅샷 목록",
        "name_en": "RDS Snapshot Inventory",
        "description": "RDS 스냅샷 조회",
        "description_en": "List RDS DB snapshots",
        "permission": "read",
        "tool": "list_rds_snapshots",
        "area": "inventory",
    },
    {
        "name": "RDS CPU 사용률",
        "name_en": "RDS CPU Utilization",
        "description": "CloudWatch 기반 RDS CPU 사용률 요약",
        "description_en": "Summarize RDS CPU utilization from CloudWatch",
        "permission": "read",
        "tool": "get_rds_cpu_metrics",
        "area": "operational",
    },
    {
        "name": "RDS 읽기 전용 쿼리",
        "name_en": "RDS Read-only Query",
        "description": "RDS MySQL에 SELECT/SHOW/DESCRIBE 쿼리 실행 (RDS_HOST 등 환경변수 필요)",
        "description_en": "Run a read-only SQL query against RDS MySQL",
        "permission": "read",
        "tool": "query_rds",
        "area": "operational",
    },
]
