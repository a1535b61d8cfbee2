"""
Update hook invocation.

Runs a user-supplied executable whenever a document's word count changes.
"""

import logging
import subprocess

logger = logging.getLogger(__name__)


def run_update_hook(hook: str, path: str, new_count: int, old_count: int) -> None:
    """Run the update hook with (path, new count, old count).
    
    The hook's exit status is not checked. A hook that cannot be started is
    logged and otherwise ignored.
    
    Args:
        hook: Executable to run; nothing happens when empty
        path: Ledger path of the changed document
        new_count: Word count just recorded
        old_count: Previous word count
    """
    if not hook:
        return
    
    command = [hook, path, str(new_count), str(old_count)]
    logger.debug("Running update hook: %s", command)
    try:
        subprocess.run(command, check=False)
    except OSError as e:
        logger.warning("Update hook %s could not be run: %s", hook, e)
