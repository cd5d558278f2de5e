from .diff_parser import parse_file_diff
from .errors import MergeReviewError, RepositoryNotFoundError, UnknownToolError, VcsError
from .schema import Divergence, FileDiffResult, MergeInfo
from .service import GitService

__all__ = [
    "Divergence",
    "FileDiffResult",
    "GitService",
    "MergeInfo",
    "MergeReviewError",
    "RepositoryNotFoundError",
    "UnknownToolError",
    "VcsError",
    "parse_file_diff",
]
