import json
from pathlib import Path
from typing import Any, Dict, List

from .errors import ConfigError
from .knowledge import KnowledgeBase


def load_knowledge_records(path: str) -> List[Dict[str, Any]]:
    data_path = Path(path)
    if not data_path.exists():
        raise FileNotFoundError(f"Knowledge base not found: {data_path}")

    records: List[Dict[str, Any]] = []
    with data_path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{data_path}:{lineno}: invalid JSON ({exc.msg})") from exc
            records.append(record)
    return records


def load_knowledge_file(path: str) -> KnowledgeBase:
    return KnowledgeBase.load(load_knowledge_records(path))
