import subprocess
from typing import List

from ..io.logger import logger
from ..io.safe import run_safe_command
from .errors import VcsError
from .schema import Divergence, MergeInfo

NO_COMMITS_SUMMARY = "No new commits to merge"


def _to_count(token: str) -> int:
    """Parse a git count token, treating anything unparsable as 0."""
    try:
        return max(int(token.strip()), 0)
    except (AttributeError, ValueError):
        return 0


class GitService:
    """Read-only git queries used to review a merge between two branches."""

    DEFAULT_BRANCH_CANDIDATE = "main"
    DEFAULT_BRANCH_FALLBACK = "master"

    @staticmethod
    def run_command(args: List[str], repo_path: str) -> str:
        """Run `git <args>` inside repo_path and return stdout without trailing whitespace."""
        from config import settings

        cmd = ["git"] + args
        logger.debug(f"Running {' '.join(cmd)} in {repo_path}")
        try:
            result = run_safe_command(
                cmd,
                cwd=repo_path,
                capture_output=True,
                text=True,
                check=True,
                timeout=settings.git_timeout,
            )
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or str(e)
            raise VcsError(f"Git error: {detail}") from e
        except subprocess.TimeoutExpired as e:
            raise VcsError(f"Git error: command timed out after {e.timeout}s") from e
        except OSError as e:
            raise VcsError(f"Git error: {e}") from e

        return (result.stdout or "").rstrip()

    @staticmethod
    def get_current_branch(repo_path: str) -> str:
        """Get current branch name. Empty when HEAD is detached."""
        return GitService.run_command(["branch", "--show-current"], repo_path)

    @staticmethod
    def get_default_branch(repo_path: str) -> str:
        """Return 'main' when that branch exists, otherwise 'master'."""
        candidate = GitService.DEFAULT_BRANCH_CANDIDATE
        try:
            GitService.run_command(
                ["show-ref", "--verify", "--quiet", f"refs/heads/{candidate}"], repo_path
            )
            return candidate
        except VcsError:
            return GitService.DEFAULT_BRANCH_FALLBACK

    @staticmethod
    def get_merge_info(repo_path: str, from_branch: str, to_branch: str) -> MergeInfo:
        """Summarize files, line stats and commits in the range from_branch..to_branch."""
        commit_range = f"{from_branch}..{to_branch}"

        files_output = GitService.run_command(["diff", "--name-only", commit_range], repo_path)
        files_changed = [f for f in files_output.split("\n") if f.strip()]

        stats_output = GitService.run_command(["diff", "--numstat", commit_range], repo_path)
        insertions = 0
        deletions = 0
        for line in stats_output.split("\n"):
            parts = line.split("\t")
            # Binary files report '-' in both columns
            if len(parts) >= 2:
                insertions += _to_count(parts[0])
                deletions += _to_count(parts[1])

        commits = _to_count(
            GitService.run_command(["rev-list", "--count", commit_range], repo_path)
        )

        if commits == 0:
            summary = NO_COMMITS_SUMMARY
        else:
            summary = (
                f"{commits} commits, {len(files_changed)} files, "
                f"+{insertions}/-{deletions} lines"
            )

        return MergeInfo(
            source_branch=from_branch,
            target_branch=to_branch,
            files_changed=files_changed,
            insertions=insertions,
            deletions=deletions,
            commits=commits,
            summary=summary,
        )

    @staticmethod
    def describe_divergence(ahead: int, behind: int) -> str:
        if ahead == 0 and behind == 0:
            return "Branches are synchronized"
        if behind == 0:
            return f"Ahead by {ahead} commits"
        if ahead == 0:
            return f"Behind by {behind} commits"
        return f"Ahead by {ahead}, behind by {behind} commits"

    @staticmethod
    def get_divergence(repo_path: str, base_branch: str, current_branch: str) -> Divergence:
        """
        Count commits current_branch is ahead of and behind base_branch.

        Best effort: a git failure yields a result carrying the error message
        instead of raising.
        """
        if base_branch == current_branch:
            return Divergence(message="Already on the base branch", needs_merge=False)

        try:
            ahead = _to_count(
                GitService.run_command(
                    ["rev-list", "--count", f"{base_branch}..{current_branch}"], repo_path
                )
            )
            behind = _to_count(
                GitService.run_command(
                    ["rev-list", "--count", f"{current_branch}..{base_branch}"], repo_path
                )
            )
        except VcsError as e:
            logger.warning(f"Could not compare '{current_branch}' with '{base_branch}': {e}")
            return Divergence(message="Failed to determine status", error=str(e))

        return Divergence(
            message=GitService.describe_divergence(ahead, behind),
            ahead_by=ahead,
            behind_by=behind,
            needs_merge=ahead > 0 or behind > 0,
        )

    @staticmethod
    def get_file_diff(repo_path: str, filename: str, from_branch: str, to_branch: str) -> str:
        """Get the unified diff of a single path between two branches."""
        try:
            return GitService.run_command(
                ["diff", f"{from_branch}..{to_branch}", "--", filename], repo_path
            )
        except VcsError as e:
            raise VcsError(f"Failed to get diff for file {filename}: {e}") from e
