"""
Tool catalog and dispatch for the Merge Review server.

Each tool declares a pydantic parameter model. Defaults for omitted branches
are resolved against the repository when the call is handled, and every
failure leaves this module as an McpError with a protocol error code.
"""

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from mcp import types
from mcp.shared.exceptions import McpError
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from utils.git import GitService, RepositoryNotFoundError, UnknownToolError, parse_file_diff
from utils.io.logger import logger


class ToolParams(BaseModel):
    """Arguments of a tool call, accepted in camelCase as advertised in the schema."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    repo_path: str = Field(..., description="Path to the git repository")


class MergeDiffParams(ToolParams):
    from_branch: Optional[str] = Field(
        None, description="Branch to compare from (default: main, or master if main is absent)"
    )
    to_branch: Optional[str] = Field(
        None, description="Branch to compare to (default: current branch)"
    )


class MergeSummaryParams(ToolParams):
    branch: Optional[str] = Field(
        None, description="Branch to analyze (default: current branch)"
    )


class FileDiffParams(MergeDiffParams):
    filename: str = Field(..., description="Path to the file relative to the repository root")
    include_raw_diff: bool = Field(
        True, description="Also return the raw diff lines (default: true)"
    )


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    params: Type[ToolParams]

    @property
    def input_schema(self) -> Dict[str, Any]:
        return self.params.model_json_schema(by_alias=True)

    def to_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name, description=self.description, inputSchema=self.input_schema
        )


TOOL_CATALOG = (
    ToolDescriptor(
        name="show_merge_diff",
        description="Show the changes between two branches before a merge",
        params=MergeDiffParams,
    ),
    ToolDescriptor(
        name="quick_merge_summary",
        description="Quick summary of how a branch diverges from the base branch",
        params=MergeSummaryParams,
    ),
    ToolDescriptor(
        name="show_file_diff",
        description="Show the concrete changes to one file between two branches",
        params=FileDiffParams,
    ),
)


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "arguments"
        problems.append(f"{location}: {item['msg']}")
    return "Invalid arguments: " + "; ".join(problems)


class MergeReviewTools:
    """Stateless dispatcher from tool calls to git queries."""

    def __init__(self, settings=None):
        if settings is None:
            from config import settings
        self.settings = settings
        self._descriptors = {descriptor.name: descriptor for descriptor in TOOL_CATALOG}
        self._handlers = {
            "show_merge_diff": self.show_merge_diff,
            "quick_merge_summary": self.quick_merge_summary,
            "show_file_diff": self.show_file_diff,
        }

    def list_tools(self) -> List[types.Tool]:
        return [descriptor.to_tool() for descriptor in TOOL_CATALOG]

    def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]]
    ) -> List[types.TextContent]:
        """Run a tool and wrap its result as a single JSON text item."""
        try:
            descriptor = self._descriptors.get(name)
            if descriptor is None:
                raise UnknownToolError(name)

            logger.info(f"Tool call: {name}")
            try:
                params = descriptor.params.model_validate(arguments or {})
            except ValidationError as e:
                raise ValueError(_describe_validation_error(e)) from e

            self._require_repository(params.repo_path)
            payload = self._handlers[name](params)
        except UnknownToolError as e:
            logger.error("Tool call rejected", str(e))
            raise McpError(types.ErrorData(code=types.METHOD_NOT_FOUND, message=str(e))) from e
        except Exception as e:
            logger.error(f"Tool '{name}' failed", str(e))
            raise McpError(
                types.ErrorData(code=types.INTERNAL_ERROR, message=f"Error: {e}")
            ) from e

        return [
            types.TextContent(
                type="text", text=json.dumps(payload, indent=2, ensure_ascii=False)
            )
        ]

    @staticmethod
    def _require_repository(repo_path: str) -> None:
        if not os.path.isdir(repo_path):
            raise RepositoryNotFoundError(repo_path)

    # === Handlers ===

    def show_merge_diff(self, params: MergeDiffParams) -> Dict[str, Any]:
        repo_path = params.repo_path
        from_branch = params.from_branch or GitService.get_default_branch(repo_path)
        to_branch = params.to_branch or GitService.get_current_branch(repo_path)

        return GitService.get_merge_info(repo_path, from_branch, to_branch).to_payload()

    def quick_merge_summary(self, params: MergeSummaryParams) -> Dict[str, Any]:
        repo_path = params.repo_path
        current_branch = params.branch or GitService.get_current_branch(repo_path)
        base_branch = GitService.get_default_branch(repo_path)

        return {
            "currentBranch": current_branch,
            "baseBranch": base_branch,
            **GitService.get_divergence(repo_path, base_branch, current_branch).to_payload(),
        }

    def show_file_diff(self, params: FileDiffParams) -> Dict[str, Any]:
        repo_path = params.repo_path
        from_branch = params.from_branch or GitService.get_default_branch(repo_path)
        to_branch = params.to_branch or GitService.get_current_branch(repo_path)

        diff_output = GitService.get_file_diff(repo_path, params.filename, from_branch, to_branch)

        # The parsed lines are the whole payload when the raw diff is left out
        if params.include_raw_diff:
            max_lines = self.settings.file_diff_max_lines
        else:
            max_lines = self.settings.compact_diff_max_lines
        parsed = parse_file_diff(diff_output, max_lines=max_lines)

        payload = {
            "filename": params.filename,
            "fromBranch": from_branch,
            "toBranch": to_branch,
            **parsed.to_payload(),
        }
        if params.include_raw_diff:
            payload["rawDiff"] = diff_output.splitlines()[: self.settings.raw_diff_max_lines]
        return payload
