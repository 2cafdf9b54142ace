import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError
from .gate import FUZZY_THRESHOLD
from .llm import SYSTEM_PROMPT

DEFAULT_CONFIG: Dict[str, Any] = {
    "knowledge": {
        "source": "data/knowledge_base.jsonl",
    },
    "matching": {
        "fuzzy_threshold": FUZZY_THRESHOLD,
    },
    "ai": {
        "provider": "openai",
        "model": "gpt-3.5-turbo",
        "timeout_sec": 15.0,
        "max_tokens": 150,
        "temperature": 0.7,
        "max_history_turns": 20,
        "system_prompt": SYSTEM_PROMPT,
    },
    "server": {
        "host": "0.0.0.0",
        "port": 9000,
    },
}


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Read a JSON or YAML config file and layer it over ``DEFAULT_CONFIG``.

    With no path the defaults are returned as-is.
    """
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path.suffix.lower() in {".json"}:
        with config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    elif config_path.suffix.lower() in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:
            raise ImportError("YAML config requires PyYAML") from exc
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    else:
        raise ConfigError(f"Unsupported config format: {config_path.suffix}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {config_path}")
    return merge_config(DEFAULT_CONFIG, data)


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged
