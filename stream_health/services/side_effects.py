"""
Fire-and-forget side effect execution.

Collaborator calls (analytics, crash reports, persisted log appends,
action effects) are queued here so the dispatch and ingestion paths
never block on them or see their failures.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, List, Optional

from stream_health.utils.structured_logger import log_side_effect_failure


logger = logging.getLogger(__name__)


class SideEffectRunner:
    """
    Runs collaborator calls outside the caller's path.
    
    Effects run on a single worker thread, so they execute in submission
    order. Every failure is logged and swallowed.
    
    Attributes:
        synchronous: Run effects inline on the calling thread
    """
    
    def __init__(self, synchronous: bool = False, thread_name_prefix: str = 'stream-health'):
        """
        Initialize the runner.
        
        Args:
            synchronous: Run effects inline instead of on the worker thread
            thread_name_prefix: Worker thread name prefix
        """
        self.synchronous = synchronous
        self._executor: Optional[ThreadPoolExecutor] = None
        self._thread_name_prefix = thread_name_prefix
        self._lock = threading.Lock()
        self._pending: List[Future] = []
    
    @classmethod
    def inline(cls) -> 'SideEffectRunner':
        """Runner that executes effects synchronously."""
        return cls(synchronous=True)
    
    def submit(self, name: str, fn: Callable[..., Any], *args, **kwargs) -> None:
        """
        Queue an effect.
        
        Args:
            name: Effect name used in failure logs
            fn: Callable to run
            *args: Positional arguments for fn
            **kwargs: Keyword arguments for fn
        """
        if self.synchronous:
            self._run(name, fn, args, kwargs)
            return
        
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1,
                    thread_name_prefix=self._thread_name_prefix
                )
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(self._executor.submit(self._run, name, fn, args, kwargs))
    
    def flush(self, timeout: Optional[float] = None) -> None:
        """
        Wait for queued effects to finish.
        
        Args:
            timeout: Seconds to wait for each pending effect
        """
        with self._lock:
            pending = list(self._pending)
        
        for future in pending:
            future.result(timeout=timeout)
    
    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            executor = self._executor
            self._executor = None
        
        if executor is not None:
            executor.shutdown(wait=wait)
    
    @staticmethod
    def _run(name: str, fn: Callable[..., Any], args, kwargs) -> None:
        try:
            fn(*args, **kwargs)
        except Exception as e:
            log_side_effect_failure(name, e)
