"""
Host event types and listener registry.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

ESCAPE_KEYCODE = 27


@dataclass
class _Event:
    default_prevented: bool = field(default=False, init=False)
    propagation_stopped: bool = field(default=False, init=False)

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_immediate_propagation(self) -> None:
        """Stop remaining listeners and the host's own handling"""
        self.propagation_stopped = True


@dataclass
class PointerEvent(_Event):
    """Pointer click or move in screen coordinates"""

    x: Optional[float] = None
    y: Optional[float] = None
    ctrl: bool = False
    meta: bool = False
    shift: bool = False

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None


@dataclass
class KeyEvent(_Event):
    """Key press, identified by key name and/or numeric keycode"""

    key: Optional[str] = None
    keycode: Optional[int] = None

    @property
    def is_escape(self) -> bool:
        return self.key == "Escape" or self.keycode == ESCAPE_KEYCODE


class EventEmitter:
    """Ordered per-type listener lists with propagation control"""

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {}

    def add_listener(self, event_type: str, callback: Callable) -> None:
        self._listeners.setdefault(event_type, []).append(callback)

    def emit(self, event_type: str, event) -> bool:
        """
        Deliver an event to listeners in registration order.

        Returns:
            bool: False if a listener stopped propagation
        """
        for callback in list(self._listeners.get(event_type, [])):
            callback(event)
            if getattr(event, "propagation_stopped", False):
                logging.debug(f"{event_type} consumed by {callback!r}")
                return False
        return True
