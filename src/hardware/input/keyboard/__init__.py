from .adapters.base import IKeyboardAdapter
from .adapters.stdin import StdinKeyboardAdapter
from .factory import start_keyboard

__all__ = [
    "IKeyboardAdapter",
    "StdinKeyboardAdapter",
    "start_keyboard"
]
