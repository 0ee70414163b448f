"""
plugins/s3 - S3 Storage Tools

File listing, text read/write, download links and old object search
(allowed buckets only)
"""

CATEGORY = {
    "name": "s3",
    "display_name": "S3",
    "description": "S3 파일 관리",
    "description_en": "S3 File Management",
    "aliases": ["storage", "bucket"],
}

TOOLS = [
    {
        "name": "파일 목록",
        "name_en": "List Files",
        "description": "접두어 기준 객체 키 목록 조회",
        "description_en": "List object keys under a prefix",
        "permission": "read",
        "tool": "list_files",
        "area": "inventory",
    },
    {
        "name": "텍스트 파일 읽기",
        "name_en": "Read Text File",
        "description": "1MB 이하 텍스트 객체 읽기",
        "description_en": "Read a small text object (<= 1 MiB)",
        "permission": "read",
        "tool": "read_text_file",
        "area": "operational",
    },
    {
        "name": "텍스트 파일 쓰기",
        "name_en": "Write Text File",
        "description": "텍스트 객체 쓰기",
        "description_en": "Write a small text object",
        "permission": "write",
        "tool": "write_text_file",
        "area": "operational",
    },
    {
        "name": "다운로드 링크 생성",
        "name_en": "Presigned Download",
        "description": "임시 다운로드 URL(presigned URL) 생성",
        "description_en": "Create a temporary presigned download URL",
        "permission": "read",
        "tool": "presign_download",
        "area": "operational",
    },
    {
        "name": "오래된 파일 탐지",
        "name_en": "Old File Detection",
        "description": "LastModified 기준 오래되고 큰 객체 탐지",
        "description_en": "Find old, large objects by LastModified",
        "permission": "read",
        "tool": "find_old_files",
        "area": "cost",
    },
]
