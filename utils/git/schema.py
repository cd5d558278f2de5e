from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, as the tool payloads expect."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class MergeInfo(CamelModel):
    """Consolidated change statistics for a commit range."""

    source_branch: str = Field(..., description="Branch the range starts from")
    target_branch: str = Field(..., description="Branch the range ends at")
    files_changed: List[str] = Field(default_factory=list)
    insertions: int = Field(0, ge=0)
    deletions: int = Field(0, ge=0)
    commits: int = Field(0, ge=0)
    summary: str


class Divergence(CamelModel):
    """Ahead/behind relationship between a branch and its base."""

    message: str
    ahead_by: Optional[int] = Field(None, ge=0)
    behind_by: Optional[int] = Field(None, ge=0)
    needs_merge: Optional[bool] = None
    error: Optional[str] = None


class FileDiffResult(CamelModel):
    """Parsed unified diff with size-bounded line lists."""

    has_changes: bool
    additions: List[str] = Field(default_factory=list)
    deletions: List[str] = Field(default_factory=list)
    summary: str
    added_lines: int = Field(0, ge=0, exclude=True)
    deleted_lines: int = Field(0, ge=0, exclude=True)
