"""Prefixed, opaque identifiers.

Every public id carries its kind so logs and support tickets are easy to
read: ``conv_a8Kx3nQ9mP2rT5vW`` is a conversation, ``msg_kJ3pW7mD4bNxQ2sL``
a message.
"""

import secrets
import string

CONVERSATION_ID_PREFIX = "conv"
MESSAGE_ID_PREFIX = "msg"

_ALPHABET = string.ascii_letters + string.digits
_DEFAULT_LENGTH = 16  # ~95 bits


def generate_id(prefix: str, length: int = _DEFAULT_LENGTH) -> str:
    """Return ``"{prefix}_{random}"`` using a CSPRNG."""
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(length))
    return f"{prefix}_{suffix}"


def new_conversation_id() -> str:
    return generate_id(CONVERSATION_ID_PREFIX)


def new_message_id() -> str:
    return generate_id(MESSAGE_ID_PREFIX)
