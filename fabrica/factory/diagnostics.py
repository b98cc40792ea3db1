"""
Factory Diagnostics - Observability and event tracking for constructions.
"""

import time
from typing import Any, Dict, List, Optional, Protocol
from enum import Enum
import dataclasses
import logging

logger = logging.getLogger("fabrica.factory.diagnostics")

class FactoryEventType(Enum):
    """Types of factory events."""
    CONSTRUCTION_START = "construction_start"
    CONSTRUCTION_SUCCESS = "construction_success"
    CONSTRUCTION_ABORTED = "construction_aborted"
    CONSTRUCTION_FAILURE = "construction_failure"
    COMPOSITION_MERGE = "composition_merge"

@dataclasses.dataclass
class FactoryEvent:
    """A diagnostic event emitted by a factory."""
    type: FactoryEventType
    timestamp: float = dataclasses.field(default_factory=time.time)
    blueprint: Optional[str] = None
    depth: int = 0
    duration: Optional[float] = None
    error: Optional[Exception] = None
    metadata: Dict[str, Any] = dataclasses.field(default_factory=dict)

class DiagnosticListener(Protocol):
    """Interface for factory diagnostic listeners."""
    def on_event(self, event: FactoryEvent) -> None:
        """Called when a factory event occurs."""
        ...

class ConsoleDiagnosticListener:
    """Simple diagnostic listener that logs to console/logging."""
    def __init__(self, log_level: int = logging.DEBUG):
        self.log_level = log_level

    def on_event(self, event: FactoryEvent) -> None:
        indent = "  " * event.depth
        if event.type == FactoryEventType.CONSTRUCTION_START:
            logger.log(self.log_level, f"{indent}Constructing '{event.blueprint}'...")
        elif event.type == FactoryEventType.CONSTRUCTION_SUCCESS:
            logger.log(self.log_level, f"{indent}✓ Constructed '{event.blueprint}' in {event.duration:.4f}s")
        elif event.type == FactoryEventType.CONSTRUCTION_ABORTED:
            logger.log(self.log_level, f"{indent}Construction of '{event.blueprint}' aborted by its ctor")
        elif event.type == FactoryEventType.CONSTRUCTION_FAILURE:
            logger.log(logging.ERROR, f"{indent}✗ Failed to construct '{event.blueprint}': {event.error}")
        elif event.type == FactoryEventType.COMPOSITION_MERGE:
            added = event.metadata.get("added", [])
            logger.log(
                self.log_level,
                f"{indent}Merged {len(added)} member(s) from '{event.metadata.get('source')}' into '{event.blueprint}'",
            )

class FactoryDiagnostics:
    """Coordinator for factory diagnostic listeners."""
    def __init__(self):
        self._listeners: List[DiagnosticListener] = []

    def add_listener(self, listener: DiagnosticListener) -> None:
        """Add a diagnostic listener."""
        self._listeners.append(listener)

    def remove_listener(self, listener: DiagnosticListener) -> None:
        """Remove a previously added listener."""
        self._listeners.remove(listener)

    @property
    def enabled(self) -> bool:
        return bool(self._listeners)

    def emit(self, event_type: FactoryEventType, **kwargs) -> None:
        """Emit a diagnostic event to all listeners."""
        if not self._listeners:
            return
        event = FactoryEvent(type=event_type, **kwargs)
        for listener in self._listeners:
            try:
                listener.on_event(event)
            except Exception as e:
                # Diagnostics should never break construction
                logger.error(f"Diagnostic listener error: {e}")
