"""
messages.py: Hyperparameter messages passed to the trainer's components.

A Message carries a name and a string value.  Components call
receive_message() with the name they answer to.  A name may be addressed
either exactly (``"features.p_factor"``) or with a zero-based subscript
(``"features.p_factor[1]"``) to reach the k-th component that answers to the
same name; each component that looks at a subscripted message with its name
bumps ``num_peekers``, so the k-th peeker is the one that accepts ``[k]``.
"""

from dataclasses import dataclass
from typing import List


@dataclass
class Message:
    name: str
    value: str = ""
    num_peekers: int = 0
    num_receivers: int = 0


def receive_message(name: str, message: Message) -> bool:
    """Return True if the component called *name* should handle *message*."""
    subscript = f"[{message.num_peekers}]"

    if message.name.startswith(name + "["):
        message.num_peekers += 1

    if message.name == name or message.name == name + subscript:
        message.num_receivers += 1
        return True

    return False


def split(text: str, delimiter: str) -> List[str]:
    """Split *text* on *delimiter* the way a line reader would.

    An empty string has no fields and a trailing delimiter does not start
    an empty last field: ``split("a,,b,", ",") == ["a", "", "b"]``.
    """
    fields = text.split(delimiter)
    if fields and fields[-1] == "":
        fields.pop()
    return fields

