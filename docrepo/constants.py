"""Shared constants for docrepo home directory and repository messages."""

DOCREPO_HOME_EXT = ".docrepo"  # user-level state/config directory suffix

DOCREPO_HOME_ENV = "DOCREPO_HOME"

CONFIG_FILE_NAME = "config.json"

LOG_FILE_NAME = "docrepo.log"

# Messages recorded into a repository's error state
NO_MATCH_FOUND = "No match found."
NO_ENTITY_TO_SAVE = "No entity to save passed."
ENTITY_REQUIRED = "Entity has to be passed in."
INVALID_LOAD_KEY = "Couldn't load entity - invalid key provided."
INVALID_DELETE_KEY = "Couldn't delete entity - invalid key provided."
