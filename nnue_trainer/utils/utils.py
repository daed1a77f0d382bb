"""
utils.py: Configuration loading and hyperparameter message routing.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel

from nnue_trainer.config_schema import AppConfig
from nnue_trainer.utils.messages import Message, receive_message, split

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "default_config.yaml"

# Config sections that hyperparameter messages may address
MESSAGE_SECTIONS = ("features", "training")


def _load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _set_dotted(data: Dict[str, Any], dotted_key: str, value: Any) -> None:
    *parents, leaf = dotted_key.split(".")
    node = data
    for part in parents:
        node = node.setdefault(part, {})
        if not isinstance(node, dict):
            raise ValueError(f"Cannot override {dotted_key!r}: {part!r} is not a section")
    node[leaf] = value


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> AppConfig:
    """Load the default config, merge *config_path* and *cli_overrides* over it.

    Args:
        config_path: Optional user YAML file; missing sections keep defaults.
        cli_overrides: Dotted keys (``"features.p_factor"``) to values; applied last.

    Returns:
        Validated AppConfig.
    """
    data = _load_yaml(DEFAULT_CONFIG_PATH)
    if config_path is not None:
        _deep_merge(data, _load_yaml(config_path))
        logger.debug("Merged config file %s", config_path)

    for key, value in (cli_overrides or {}).items():
        _set_dotted(data, key, value)

    return AppConfig.model_validate(data)


def parse_override(text: str) -> Dict[str, Any]:
    """Parse a ``key=value`` CLI override; the value is read as YAML."""
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise ValueError(f"Override {text!r} must look like section.key=value")
    return {key.strip(): yaml.safe_load(value)}


def _parse_message_value(current: Any, value: str) -> Any:
    if isinstance(current, list):
        return [field.strip() for field in split(value, ",")]
    return yaml.safe_load(value)


def apply_message(config: AppConfig, message: Message) -> bool:
    """Apply a hyperparameter *message* addressed to a config field.

    Returns True if some field accepted the message.  The section is
    re-validated, so a bad value raises pydantic's ValidationError and
    leaves *config* unchanged.
    """
    for section_name in MESSAGE_SECTIONS:
        section: BaseModel = getattr(config, section_name)
        for field_name in type(section).model_fields:
            if not receive_message(f"{section_name}.{field_name}", message):
                continue

            values = section.model_dump()
            values[field_name] = _parse_message_value(values[field_name], message.value)
            setattr(config, section_name, type(section).model_validate(values))
            logger.info("Set %s.%s = %r", section_name, field_name, values[field_name])
            return True

    logger.warning("No config field accepted message %r", message.name)
    return False
