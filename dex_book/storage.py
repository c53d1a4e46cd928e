import json
from pathlib import Path
from typing import Dict, Optional, Protocol

from mcp.server.fastmcp.utilities.logging import get_logger

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """String key-value storage, shaped like a browser's localStorage."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """Persists string values to a JSON file, rewritten on every set()."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.data: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        try:
            if self.path.exists():
                with open(self.path, 'r') as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise TypeError(f"expected an object, got {type(data).__name__}")
                logger.debug(f"Loaded local storage from {self.path}")
                return {str(k): str(v) for k, v in data.items()}
            logger.debug(f"Local storage file {self.path} not found, starting fresh.")
        except (json.JSONDecodeError, IOError, TypeError) as e:
            logger.error(f"Error loading local storage from {self.path}: {e}. Starting fresh.")
        return {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(self.data, f, indent=4)
