"""Configure file logging from the config file, when one exists."""

from pathlib import Path

from docrepo.api.config.DocRepoConfig import DocRepoConfig
from docrepo.utils.logger import configure_logging


def _configure_logging() -> None:
    """Set up the rotating docrepo log from the ``log`` config section.

    A missing config leaves logging untouched; commands report that error themselves.
    """
    if not DocRepoConfig.get_config_path().exists():
        return
    try:
        config = DocRepoConfig.load()
    except ValueError:
        return
    log_file = Path(config.log.file).expanduser() if config.log.file else None
    configure_logging(home=DocRepoConfig.get_home_dir(), level=config.log.level, log_file=log_file)
