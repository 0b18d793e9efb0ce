"""Get docrepo home directory path or path under it."""

import os
from pathlib import Path

from ..constants import DOCREPO_HOME_ENV, DOCREPO_HOME_EXT


def get_home_dir(*parts: str) -> Path:
    """Get docrepo home directory path or path under it.

    Checks the DOCREPO_HOME environment variable first, defaults to ~/.docrepo if not set.

    Args:
        *parts: Optional path components to join (e.g., "config.json")

    Returns:
        Absolute path to the docrepo home directory or subpath under it

    Examples:
        >>> get_home_dir()
        Path("/Users/user/.docrepo")
        >>> get_home_dir("config.json")
        Path("/Users/user/.docrepo/config.json")
    """
    home_env = os.environ.get(DOCREPO_HOME_ENV)
    if home_env:
        home = Path(home_env).expanduser().resolve()
    else:
        home = Path.home() / DOCREPO_HOME_EXT

    return home / Path(*parts) if parts else home
