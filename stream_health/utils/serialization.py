"""
JSON serialization helpers for exports.
"""

import json
from enum import Enum
from typing import Any

import numpy as np

from stream_health.exceptions import SerializationError


def to_json_serializable(obj: Any) -> Any:
    """
    Converts numpy and enum values to Python native types.
    
    Args:
        obj: Object to convert
        
    Returns:
        JSON-serializable version of the object. Unknown object types are
        returned unchanged so the encoder can reject them.
    """
    if isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, (np.bool_, bool)):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return [to_json_serializable(item) for item in obj.tolist()]
    elif isinstance(obj, dict):
        return {k: to_json_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [to_json_serializable(item) for item in obj]
    else:
        return obj


def dumps_pretty(payload: Any) -> str:
    """
    Encodes a payload as pretty-printed JSON.
    
    Args:
        payload: JSON-compatible structure (numpy values allowed)
    
    Returns:
        Indented JSON text
    
    Raises:
        SerializationError: If the payload contains values JSON cannot encode
    """
    try:
        return json.dumps(to_json_serializable(payload), indent=2, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError('Failed to encode export payload', original_error=e) from e


def loads(text: str) -> Any:
    """
    Decodes JSON text.
    
    Raises:
        SerializationError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except (TypeError, ValueError) as e:
        raise SerializationError('Failed to decode export payload', original_error=e) from e
