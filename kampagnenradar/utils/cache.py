"""
Local dataset cache with a freshness window.

Stores the last successfully fetched dataset as a JSON envelope
``{"data": <payload>, "timestamp": <epoch millis>}`` under a fixed key.
Reads never raise: a missing or corrupt entry is treated as absent.
Writes are best effort: storage failures are logged and swallowed.
"""
import json
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from kampagnenradar.utils.logger import log

P = TypeVar("P", bound=BaseModel)


def now_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class CacheEnvelope(Generic[P]):
    """A cached payload and the epoch-millis time it was written."""
    data: P
    timestamp: int

    def age_seconds(self, now_ms: Optional[int] = None) -> float:
        now_ms = now_millis() if now_ms is None else now_ms
        return (now_ms - self.timestamp) / 1000.0


def is_fresh(envelope: Optional[CacheEnvelope], ttl_seconds: float, now_ms: Optional[int] = None) -> bool:
    """True if the envelope exists and is younger than the freshness window."""
    if envelope is None:
        return False
    return envelope.age_seconds(now_ms) < ttl_seconds


class CachePort(ABC, Generic[P]):
    """Read/write interface the fetch services depend on."""

    def __init__(self, key: str, payload_model: Type[P]):
        self.key = key
        self.payload_model = payload_model

    @abstractmethod
    def read(self) -> Optional[CacheEnvelope[P]]:
        """Return the cached envelope, or None if absent or unreadable."""
        pass

    @abstractmethod
    def write(self, payload: P) -> bool:
        """Persist payload with the current timestamp. Returns False on failure."""
        pass

    def _encode(self, payload: P, timestamp: int) -> str:
        return json.dumps({
            "data": payload.model_dump(mode="json"),
            "timestamp": timestamp,
        })

    def _decode(self, raw: str) -> Optional[CacheEnvelope[P]]:
        try:
            parsed = json.loads(raw)
            payload = self.payload_model.model_validate(parsed["data"])
            return CacheEnvelope(data=payload, timestamp=int(parsed["timestamp"]))
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            log.warning(f"Ignoring unreadable cache entry '{self.key}': {e}")
            return None


class FileCache(CachePort[P]):
    """One JSON file per cache key inside the cache directory."""

    def __init__(self, key: str, payload_model: Type[P], cache_dir: str):
        super().__init__(key, payload_model)
        self.path = Path(cache_dir) / f"{key}.json"

    def read(self) -> Optional[CacheEnvelope[P]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            log.warning(f"Could not read cache file {self.path}: {e}")
            return None
        return self._decode(raw)

    def write(self, payload: P) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".json.tmp")
            tmp_path.write_text(self._encode(payload, now_millis()), encoding="utf-8")
            os.replace(tmp_path, self.path)
            return True
        except (OSError, TypeError, ValueError) as e:
            log.warning(f"Could not write cache file {self.path}: {e}")
            return False


class MemoryCache(CachePort[P]):
    """Process-local cache; stores the serialised form so reads re-hydrate like FileCache."""

    _store: Dict[str, str]

    def __init__(self, key: str, payload_model: Type[P], clock=now_millis):
        super().__init__(key, payload_model)
        self._store = {}
        self._clock = clock

    def read(self) -> Optional[CacheEnvelope[P]]:
        raw = self._store.get(self.key)
        if raw is None:
            return None
        return self._decode(raw)

    def write(self, payload: P) -> bool:
        try:
            self._store[self.key] = self._encode(payload, self._clock())
            return True
        except (TypeError, ValueError) as e:
            log.warning(f"Could not write cache entry '{self.key}': {e}")
            return False

    def clear(self) -> None:
        self._store.clear()
