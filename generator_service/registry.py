"""
registry.py — API Key Registry

Keeps every generated API (registry id → issued key, prompt, runtime
descriptor, specification document) for the lifetime of the process.

The registry is snapshotted as a whole after every issued API and once more
on shutdown. Where the snapshot goes is decided by a `SnapshotStore`:
    • JsonFileSnapshotStore — flat JSON file (the default, `KEYS_FILE`)
    • MemorySnapshotStore   — no persistence

The in-memory registry stays authoritative for the running process: a failed
snapshot write is logged and never rolls back an issued key.
"""

import json
import os
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import ValidationError

from .errors import ApiKeyNotFoundError, GeneratedApiNotFoundError
from .generator import GenerationResult
from .logging_config import get_logger
from .models import GeneratedApi

log = get_logger(__name__)


# --- Snapshot persistence ---
class SnapshotStore(ABC):
    """Load-all / save-all persistence for the registry."""

    @abstractmethod
    def load(self) -> Dict[str, GeneratedApi]:
        ...

    @abstractmethod
    def save(self, records: Dict[str, GeneratedApi]) -> None:
        ...


class MemorySnapshotStore(SnapshotStore):
    """Keeps the last snapshot in memory only."""

    def __init__(self, records: Optional[Dict[str, GeneratedApi]] = None):
        self.records: Dict[str, GeneratedApi] = dict(records or {})

    def load(self) -> Dict[str, GeneratedApi]:
        return dict(self.records)

    def save(self, records: Dict[str, GeneratedApi]) -> None:
        self.records = dict(records)


class JsonFileSnapshotStore(SnapshotStore):
    """
    Stores the registry as one pretty-printed JSON object keyed by registry id.

    Every save writes a temporary file next to the target and swaps it in
    with `os.replace`, so a reader never sees a half-written snapshot.
    """

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Dict[str, GeneratedApi]:
        """
        Reads the snapshot file.

        Returns:
            Dict[str, GeneratedApi]: The stored records. An absent, unreadable
            or malformed file yields an empty mapping and a logged warning.
        """
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                raw = json.load(fh) or {}
            return {api_id: GeneratedApi.model_validate(record) for api_id, record in raw.items()}
        except (OSError, ValueError, AttributeError, ValidationError) as e:
            log.warning(f"Konnte {self.path} nicht laden, starte mit leerer Registry: {e}")
            return {}

    def save(self, records: Dict[str, GeneratedApi]) -> None:
        data = {api_id: record.model_dump() for api_id, record in records.items()}
        tmp_path = f"{self.path}.{os.getpid()}.{threading.get_ident()}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


# --- Registry ---
class KeyRegistry:
    """
    Process-wide mapping of registry id → GeneratedApi.

    Built once at startup and shared through `app.state`. Keys never rotate or
    expire; lookups by key scan all records.
    """

    def __init__(self, store: SnapshotStore):
        self.store = store
        self._apis: Dict[str, GeneratedApi] = {}
        self._lock = threading.Lock()
        # serializes snapshot writes
        self._save_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._apis)

    def load(self) -> int:
        """Replaces the in-memory registry with the stored snapshot and returns its size."""
        records = self.store.load()
        with self._lock:
            self._apis = dict(records)
        return len(records)

    def issue(self, prompt: str, result: GenerationResult) -> GeneratedApi:
        """
        Registers a generated API under a fresh registry id and access key.

        Args:
            prompt (str): The originating prompt.
            result (GenerationResult): A successful matcher result.

        Returns:
            GeneratedApi: The stored record, including the issued key.
        """
        api = GeneratedApi(
            id=str(uuid.uuid4()),
            key=str(uuid.uuid4()),
            prompt=prompt,
            runtime=result.runtime,
            spec=result.spec,
            createdAt=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            self._apis[api.id] = api
        log.info(f"[API: {api.id}] Neue API generiert.")

        self.persist()
        return api

    def get(self, api_id: str) -> GeneratedApi:
        api = self._apis.get(api_id)
        if api is None:
            raise GeneratedApiNotFoundError(api_id)
        return api

    def authorize(self, key: str) -> GeneratedApi:
        """
        Finds the generated API issued with `key`.

        Raises:
            ApiKeyNotFoundError: If no record carries this key.
        """
        for api in self.list():
            if api.key == key:
                return api
        raise ApiKeyNotFoundError("invalid api key")

    def list(self) -> List[GeneratedApi]:
        with self._lock:
            return list(self._apis.values())

    def persist(self) -> bool:
        """
        Writes the whole registry to the snapshot store.

        Returns:
            bool: False if the write failed. The failure is logged, not raised.
        """
        with self._save_lock:
            with self._lock:
                snapshot = dict(self._apis)
            try:
                self.store.save(snapshot)
                return True
            except (OSError, TypeError, ValueError) as e:
                log.error(f"Fehler beim Speichern der generierten APIs: {e}")
                return False
