from .schema import FileDiffResult

NO_CHANGES_SUMMARY = "No changes in file"


def parse_file_diff(diff_text: str, max_lines: int = 50) -> FileDiffResult:
    """
    Split unified diff text into added and removed lines.

    '+++' and '---' file headers, hunk headers and context lines are ignored.
    The returned lists hold at most `max_lines` entries each, while the
    summary always reports the full counts.
    """
    if max_lines < 0:
        raise ValueError(f"max_lines must be non-negative, got {max_lines}")

    additions = []
    deletions = []
    added_lines = 0
    deleted_lines = 0

    for line in diff_text.splitlines():
        if line.startswith("+") and not line.startswith("+++"):
            added_lines += 1
            if len(additions) < max_lines:
                additions.append(line[1:])
        elif line.startswith("-") and not line.startswith("---"):
            deleted_lines += 1
            if len(deletions) < max_lines:
                deletions.append(line[1:])

    has_changes = added_lines > 0 or deleted_lines > 0
    summary = (
        f"+{added_lines} lines, -{deleted_lines} lines" if has_changes else NO_CHANGES_SUMMARY
    )

    return FileDiffResult(
        has_changes=has_changes,
        additions=additions,
        deletions=deletions,
        summary=summary,
        added_lines=added_lines,
        deleted_lines=deleted_lines,
    )
