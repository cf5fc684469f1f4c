"""
Durable key-value slots.

Provides the storage behind the persisted error log: an in-memory store
for tests and local use, and a DynamoDB-backed store holding one item
per key with a JSON value.
"""

import json
import logging
import threading
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

from stream_health.config.settings import get_setting
from stream_health.exceptions import KeyValueStoreError


logger = logging.getLogger(__name__)


class KeyValueStore:
    """Interface for durable JSON slots."""
    
    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError
    
    def put(self, key: str, value: Any) -> None:
        raise NotImplementedError
    
    def delete(self, key: str) -> None:
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store. Values are copied through JSON on write."""
    
    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()
    
    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None
    
    def put(self, key: str, value: Any) -> None:
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise KeyValueStoreError(f'Value for {key} is not JSON-encodable', original_error=e) from e
        
        with self._lock:
            self._data[key] = raw
    
    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class DynamoDBKeyValueStore(KeyValueStore):
    """
    DynamoDB-backed store.
    
    Table layout: partition key 'key' (string), attribute 'value' holding
    the JSON-encoded payload.
    """
    
    def __init__(self, table_name: Optional[str] = None, dynamodb_resource=None):
        """
        Initialize the store.
        
        Args:
            table_name: DynamoDB table name (STREAM_HEALTH_KV_TABLE_NAME if None)
            dynamodb_resource: Boto3 DynamoDB resource (created if omitted)
        """
        self.table_name = table_name or get_setting('STREAM_HEALTH_KV_TABLE_NAME')
        self.dynamodb = dynamodb_resource or boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(self.table_name)
    
    def get(self, key: str) -> Optional[Any]:
        """
        Read a slot.
        
        Raises:
            KeyValueStoreError: On DynamoDB errors or a corrupt value
        """
        try:
            response = self.table.get_item(Key={'key': key}, ConsistentRead=True)
        except ClientError as e:
            logger.error(f'Error getting {key} from {self.table_name}: {e}')
            raise KeyValueStoreError(f'Failed to get {key}', original_error=e) from e
        
        item = response.get('Item')
        if item is None:
            return None
        
        try:
            return json.loads(item['value'])
        except (KeyError, TypeError, ValueError) as e:
            raise KeyValueStoreError(f'Corrupt value stored under {key}', original_error=e) from e
    
    def put(self, key: str, value: Any) -> None:
        """
        Write a slot.
        
        Raises:
            KeyValueStoreError: On DynamoDB errors or a non-encodable value
        """
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise KeyValueStoreError(f'Value for {key} is not JSON-encodable', original_error=e) from e
        
        try:
            self.table.put_item(Item={'key': key, 'value': raw})
        except ClientError as e:
            logger.error(f'Error putting {key} to {self.table_name}: {e}')
            raise KeyValueStoreError(f'Failed to put {key}', original_error=e) from e
    
    def delete(self, key: str) -> None:
        try:
            self.table.delete_item(Key={'key': key})
        except ClientError as e:
            logger.error(f'Error deleting {key} from {self.table_name}: {e}')
            raise KeyValueStoreError(f'Failed to delete {key}', original_error=e) from e
