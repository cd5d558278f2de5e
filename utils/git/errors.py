class MergeReviewError(Exception):
    """Base class for failures raised while reviewing a merge."""


class RepositoryNotFoundError(MergeReviewError):
    """The supplied repository path does not exist or is not a directory."""

    def __init__(self, repo_path: str):
        super().__init__(f"Repository not found: {repo_path}")
        self.repo_path = repo_path


class VcsError(MergeReviewError):
    """A git invocation failed, could not be spawned, or timed out."""


class UnknownToolError(MergeReviewError):
    """A tool call named a tool that is not in the catalog."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name
