"""
Persisted error log.

Ring-capped list of error log entries kept in a single durable slot.
"""

import logging
import threading
from typing import Any, Dict, List

from stream_health.config.settings import ERROR_LOG_KEY, MAX_PERSISTED_ERROR_LOGS
from stream_health.services.key_value_store import KeyValueStore


logger = logging.getLogger(__name__)


class ErrorLogStore:
    """
    Error log kept under one key of a KeyValueStore.
    
    Appends are read-modify-write; the lock serializes them within the
    process. Only the newest `capacity` entries are kept, oldest first.
    """
    
    def __init__(
        self,
        store: KeyValueStore,
        key: str = ERROR_LOG_KEY,
        capacity: int = MAX_PERSISTED_ERROR_LOGS
    ):
        if capacity < 1:
            raise ValueError('Capacity must be at least 1')
        
        self.store = store
        self.key = key
        self.capacity = capacity
        self._lock = threading.Lock()
    
    def append(self, entry: Dict[str, Any]) -> None:
        """
        Append an entry, dropping the oldest beyond capacity.
        
        Raises:
            KeyValueStoreError: If the slot cannot be read or written
        """
        with self._lock:
            entries = self._load()
            entries.append(entry)
            if len(entries) > self.capacity:
                entries = entries[-self.capacity:]
            self.store.put(self.key, entries)
    
    def entries(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self._load()
    
    def clear(self) -> None:
        with self._lock:
            self.store.delete(self.key)
    
    def _load(self) -> List[Dict[str, Any]]:
        entries = self.store.get(self.key)
        if entries is None:
            return []
        if not isinstance(entries, list):
            logger.warning(f'Discarding malformed error log under {self.key}')
            return []
        return list(entries)
