"""
tests/core/tools/test_catalog.py - 플러그인 도구 수집 테스트
"""

from unittest.mock import MagicMock, patch

import pytest

from core.tools import SYSTEM_PROMPT, ToolArea, ToolPermission, build_registry, discover_categories, get_area_display
from core.tools.registry import ToolSpec

EXPECTED_TOOLS = [
    "list_files",
    "read_text_file",
    "write_text_file",
    "presign_download",
    "find_old_files",
    "list_ec2_instances",
    "detect_idle_ec2",
    "list_rds_instances",
    "describe_rds_instance",
    "list_rds_snapshots",
    "get_rds_cpu_metrics",
    "query_rds",
]


class TestBuildRegistry:
    def test_all_tools_registered(self, registry):
        assert registry.names() == EXPECTED_TOOLS

    def test_metadata_matches_specs(self, registry):
        for category in discover_categories():
            for tool in category["tools"]:
                spec = registry.get(tool["tool"])
                assert spec.area.value == tool["area"]
                assert spec.permission.value == tool["permission"]

    def test_only_write_tool(self, registry):
        writers = [name for name in registry.names() if registry.get(name).permission is ToolPermission.WRITE]
        assert writers == ["write_text_file"]

    def test_describe_all(self, registry):
        described = registry.describe()

        assert [d["name"] for d in described] == EXPECTED_TOOLS
        assert all(d["description"] for d in described)

    def test_metadata_mismatch_rejected(self, tool_context):
        def register_extra(registry):
            registry.register(ToolSpec("surprise", "x", MagicMock(), MagicMock(), MagicMock()))

        with patch("plugins.rds.tools.register", register_extra):
            with pytest.raises(RuntimeError, match="plugins.rds"):
                build_registry(tool_context)


class TestDiscoverCategories:
    def test_categories(self):
        names = [c["name"] for c in discover_categories()]
        assert names == ["s3", "ec2", "rds"]

    def test_tool_entries_have_required_keys(self):
        for category in discover_categories():
            for tool in category["tools"]:
                assert {"name", "name_en", "description", "permission", "tool", "area"} <= set(tool)


class TestAreaDisplay:
    def test_known(self):
        assert get_area_display(ToolArea.COST)["name"] == "비용 최적화"
        assert get_area_display("inventory")["color"] == "white"

    def test_unknown(self):
        assert get_area_display("mystery") == {"name": "mystery", "color": "white"}


def test_system_prompt_mentions_tools():
    assert "ALLOWED_BUCKETS" in SYSTEM_PROMPT
    assert "detect_idle_ec2" in SYSTEM_PROMPT
