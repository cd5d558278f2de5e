"""Tests for the tool catalog and dispatcher."""

import json
from unittest.mock import patch

import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from mcp_servers.merge_review_tools import MergeReviewTools
from utils.git import Divergence, MergeInfo, VcsError


@pytest.fixture
def tools(quiet_settings):
    return MergeReviewTools(settings=quiet_settings)


@pytest.fixture
def mock_git_service():
    with patch("mcp_servers.merge_review_tools.GitService") as mock_service:
        mock_service.get_default_branch.return_value = "main"
        mock_service.get_current_branch.return_value = "feature"
        yield mock_service


def _payload(content):
    assert len(content) == 1
    assert content[0].type == "text"
    return json.loads(content[0].text)


@pytest.mark.unit
def test_catalog_is_order_stable(tools):
    names = [tool.name for tool in tools.list_tools()]
    assert names == ["show_merge_diff", "quick_merge_summary", "show_file_diff"]
    assert names == [tool.name for tool in tools.list_tools()]


@pytest.mark.unit
def test_catalog_schemas_declare_required_arguments(tools):
    schemas = {tool.name: tool.inputSchema for tool in tools.list_tools()}

    assert schemas["show_merge_diff"]["required"] == ["repoPath"]
    assert schemas["quick_merge_summary"]["required"] == ["repoPath"]
    assert sorted(schemas["show_file_diff"]["required"]) == ["filename", "repoPath"]
    assert "fromBranch" in schemas["show_merge_diff"]["properties"]
    assert "toBranch" in schemas["show_file_diff"]["properties"]
    assert schemas["show_file_diff"]["properties"]["includeRawDiff"]["default"] is True


@pytest.mark.unit
def test_unknown_tool_is_method_not_found(tools):
    with pytest.raises(McpError) as exc_info:
        tools.call_tool("does_not_exist", {})

    assert exc_info.value.error.code == types.METHOD_NOT_FOUND
    assert "does_not_exist" in exc_info.value.error.message


@pytest.mark.unit
def test_missing_repository_is_internal_error(tools, tmp_path, mock_git_service):
    missing = tmp_path / "nowhere"

    with pytest.raises(McpError) as exc_info:
        tools.call_tool("show_merge_diff", {"repoPath": str(missing)})

    assert exc_info.value.error.code == types.INTERNAL_ERROR
    assert "Repository not found" in exc_info.value.error.message
    assert str(missing) in exc_info.value.error.message
    mock_git_service.get_merge_info.assert_not_called()


@pytest.mark.unit
def test_repository_must_be_directory(tools, tmp_path):
    file_path = tmp_path / "file.txt"
    file_path.write_text("x")

    with pytest.raises(McpError, match="Repository not found"):
        tools.call_tool("quick_merge_summary", {"repoPath": str(file_path)})


@pytest.mark.unit
def test_missing_required_argument_is_internal_error(tools):
    with pytest.raises(McpError) as exc_info:
        tools.call_tool("show_file_diff", {"repoPath": "."})

    assert exc_info.value.error.code == types.INTERNAL_ERROR
    assert "filename" in exc_info.value.error.message


@pytest.mark.unit
def test_git_failure_is_internal_error(tools, tmp_path, mock_git_service):
    mock_git_service.get_merge_info.side_effect = VcsError("Git error: fatal: bad revision")

    with pytest.raises(McpError) as exc_info:
        tools.call_tool("show_merge_diff", {"repoPath": str(tmp_path)})

    assert exc_info.value.error.code == types.INTERNAL_ERROR
    assert exc_info.value.error.message == "Error: Git error: fatal: bad revision"


@pytest.mark.unit
def test_merge_diff_defaults_branches(tools, tmp_path, mock_git_service):
    mock_git_service.get_merge_info.return_value = MergeInfo(
        source_branch="main",
        target_branch="feature",
        files_changed=["a.txt"],
        insertions=2,
        deletions=1,
        commits=1,
        summary="1 commits, 1 files, +2/-1 lines",
    )

    content = tools.call_tool("show_merge_diff", {"repoPath": str(tmp_path)})

    mock_git_service.get_merge_info.assert_called_once_with(str(tmp_path), "main", "feature")
    assert _payload(content) == {
        "sourceBranch": "main",
        "targetBranch": "feature",
        "filesChanged": ["a.txt"],
        "insertions": 2,
        "deletions": 1,
        "commits": 1,
        "summary": "1 commits, 1 files, +2/-1 lines",
    }
    assert content[0].text.startswith('{\n  "sourceBranch"')


@pytest.mark.unit
def test_merge_diff_uses_explicit_branches(tools, tmp_path, mock_git_service):
    mock_git_service.get_merge_info.return_value = MergeInfo(
        source_branch="develop", target_branch="topic", summary="No new commits to merge"
    )

    tools.call_tool(
        "show_merge_diff",
        {"repoPath": str(tmp_path), "fromBranch": "develop", "toBranch": "topic"},
    )

    mock_git_service.get_merge_info.assert_called_once_with(str(tmp_path), "develop", "topic")
    mock_git_service.get_default_branch.assert_not_called()
    mock_git_service.get_current_branch.assert_not_called()


@pytest.mark.unit
def test_quick_summary_merges_divergence(tools, tmp_path, mock_git_service):
    mock_git_service.get_divergence.return_value = Divergence(
        message="Ahead by 3 commits", ahead_by=3, behind_by=0, needs_merge=True
    )

    payload = _payload(tools.call_tool("quick_merge_summary", {"repoPath": str(tmp_path)}))

    mock_git_service.get_divergence.assert_called_once_with(str(tmp_path), "main", "feature")
    assert payload == {
        "currentBranch": "feature",
        "baseBranch": "main",
        "message": "Ahead by 3 commits",
        "aheadBy": 3,
        "behindBy": 0,
        "needsMerge": True,
    }


@pytest.mark.unit
def test_quick_summary_reports_degraded_status(tools, tmp_path, mock_git_service):
    mock_git_service.get_divergence.return_value = Divergence(
        message="Failed to determine status", error="Git error: fatal: bad revision"
    )

    payload = _payload(
        tools.call_tool("quick_merge_summary", {"repoPath": str(tmp_path), "branch": "ghost"})
    )

    assert payload["currentBranch"] == "ghost"
    assert payload["message"] == "Failed to determine status"
    assert payload["error"] == "Git error: fatal: bad revision"


@pytest.mark.unit
def test_file_diff_payload(tools, tmp_path, mock_git_service):
    mock_git_service.get_file_diff.return_value = "--- a/a.txt\n+++ b/a.txt\n@@ -1 +1 @@\n-old\n+new"

    payload = _payload(
        tools.call_tool("show_file_diff", {"repoPath": str(tmp_path), "filename": "a.txt"})
    )

    mock_git_service.get_file_diff.assert_called_once_with(str(tmp_path), "a.txt", "main", "feature")
    assert payload == {
        "filename": "a.txt",
        "fromBranch": "main",
        "toBranch": "feature",
        "hasChanges": True,
        "additions": ["new"],
        "deletions": ["old"],
        "summary": "+1 lines, -1 lines",
        "rawDiff": ["--- a/a.txt", "+++ b/a.txt", "@@ -1 +1 @@", "-old", "+new"],
    }


@pytest.mark.unit
def test_file_diff_caps(tools, tmp_path, mock_git_service):
    mock_git_service.get_file_diff.return_value = "\n".join(f"+line {i}" for i in range(120))

    payload = _payload(
        tools.call_tool("show_file_diff", {"repoPath": str(tmp_path), "filename": "a.txt"})
    )

    assert len(payload["additions"]) == 50
    assert len(payload["rawDiff"]) == 100
    assert payload["summary"] == "+120 lines, -0 lines"


@pytest.mark.unit
def test_compact_file_diff_uses_smaller_cap(tools, tmp_path, mock_git_service):
    mock_git_service.get_file_diff.return_value = "\n".join(f"-line {i}" for i in range(40))

    payload = _payload(
        tools.call_tool(
            "show_file_diff",
            {"repoPath": str(tmp_path), "filename": "a.txt", "includeRawDiff": False},
        )
    )

    assert len(payload["deletions"]) == 20
    assert "rawDiff" not in payload
    assert payload["summary"] == "+0 lines, -40 lines"


@pytest.mark.unit
def test_caps_follow_settings(quiet_settings, tmp_path, mock_git_service):
    quiet_settings.file_diff_max_lines = 2
    quiet_settings.raw_diff_max_lines = 3
    mock_git_service.get_file_diff.return_value = "+a\n+b\n+c\n+d"

    payload = _payload(
        MergeReviewTools(settings=quiet_settings).call_tool(
            "show_file_diff", {"repoPath": str(tmp_path), "filename": "a.txt"}
        )
    )

    assert payload["additions"] == ["a", "b"]
    assert payload["rawDiff"] == ["+a", "+b", "+c"]
