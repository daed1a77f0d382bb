# nnue_trainer/utils/__init__.py

from .messages import Message, receive_message, split
from .utils import apply_message, load_config, parse_override

__all__ = [
    "Message",
    "receive_message",
    "split",
    "apply_message",
    "load_config",
    "parse_override",
]
