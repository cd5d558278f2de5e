import os
import subprocess
from typing import List, Optional


def run_safe_command(
    cmd: List[str],
    cwd: Optional[str] = None,
    capture_output: bool = True,
    text: bool = True,
    check: bool = True,
    **kwargs,
) -> subprocess.CompletedProcess:
    """
    Safely execute a command from an allowlist.
    Disallows shell=True and validates the executable.
    """
    if kwargs.get("shell"):
        raise ValueError("Running commands with shell=True is disallowed for security.")

    if not cmd:
        raise ValueError("Empty command list.")

    # Get the base executable name (handle paths if necessary)
    executable = os.path.basename(cmd[0])

    from config import settings

    if executable not in settings.command_allowlist:
        raise ValueError(f"Command '{executable}' is not in the security allowlist.")

    return subprocess.run(
        cmd, cwd=cwd, capture_output=capture_output, text=text, check=check, **kwargs
    )
