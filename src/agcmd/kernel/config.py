from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from ..contracts.v1 import Config
from ..util.fs import dump_json
from .errors import ConfigParseError
from .store import Store

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.json"


def default_config() -> Config:
    return Config()


def load_config(store: Store) -> Config:
    """Read config.json, writing the defaults first if it does not exist."""
    try:
        text = store.read_text(CONFIG_FILE)
    except UnicodeDecodeError as e:
        raise ConfigParseError(f"Failed to parse {CONFIG_FILE}: {e}", hint=store.location(CONFIG_FILE)) from e
    if text is None:
        cfg = default_config()
        store.write_text(CONFIG_FILE, dump_json(cfg.to_doc()))
        logger.info("wrote default config to %s", store.location(CONFIG_FILE))
        return cfg

    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Failed to parse {CONFIG_FILE}: {e}", hint=store.location(CONFIG_FILE)) from e
    if not isinstance(doc, dict):
        raise ConfigParseError(f"Failed to parse {CONFIG_FILE}: expected a JSON object", hint=store.location(CONFIG_FILE))

    try:
        return Config.model_validate(doc)
    except ValidationError as e:
        raise ConfigParseError(f"Invalid {CONFIG_FILE}: {e}", hint=store.location(CONFIG_FILE)) from e
