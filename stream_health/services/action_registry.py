"""
Error action handlers.

Built-in action kinds map to handlers registered by the collaborator
layer (navigation, retry, support contact). Custom actions reference a
callback id resolved here at execution time.
"""

import logging
import threading
from typing import Callable, Dict, Optional

from stream_health.models.error_record import ErrorRecord
from stream_health.models.error_types import ErrorAction, ErrorActionKind


logger = logging.getLogger(__name__)

# Handler receives the executed action and the error it applies to (if any)
ActionHandler = Callable[[ErrorAction, Optional[ErrorRecord]], None]


def _log_only(action: ErrorAction, record: Optional[ErrorRecord]) -> None:
    code = record.code if record else None
    logger.info(f'No handler registered for action {action.kind.value} (error {code})')


class ActionRegistry:
    """
    Resolves error actions to their effects.
    
    Built-in kinds without a registered handler fall back to logging.
    A custom action whose callback id is unknown is logged as a warning.
    """
    
    def __init__(self):
        self._handlers: Dict[ErrorActionKind, ActionHandler] = {}
        self._callbacks: Dict[str, ActionHandler] = {}
        self._lock = threading.Lock()
    
    def register(self, kind: ErrorActionKind, handler: ActionHandler) -> None:
        """
        Register the handler for a built-in action kind.
        
        Args:
            kind: Action kind (custom actions use register_callback)
            handler: Effect to run
        """
        if kind == ErrorActionKind.CUSTOM:
            raise ValueError('Custom actions are registered with register_callback')
        
        with self._lock:
            self._handlers[kind] = handler
    
    def register_callback(self, callback_id: str, handler: ActionHandler) -> None:
        if not callback_id:
            raise ValueError('Callback ID must not be empty')
        
        with self._lock:
            self._callbacks[callback_id] = handler
    
    def resolve(self, action: ErrorAction) -> Optional[ActionHandler]:
        """
        Find the effect of an action.
        
        Returns:
            The handler, the logging fallback for unhandled built-in kinds,
            or None for a custom action with an unknown callback id
        """
        with self._lock:
            if action.kind == ErrorActionKind.CUSTOM:
                return self._callbacks.get(action.callback_id)
            return self._handlers.get(action.kind, _log_only)
    
    def execute(self, action: ErrorAction, record: Optional[ErrorRecord]) -> None:
        """
        Run the effect of an action.
        
        Exceptions raised by the handler propagate to the caller.
        """
        handler = self.resolve(action)
        if handler is None:
            logger.warning(f'No callback registered for custom action {action.callback_id}')
            return
        handler(action, record)
