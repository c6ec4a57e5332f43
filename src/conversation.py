"""Opaque conversation identifiers for client-side correlation."""

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def new_conversation_id() -> str:
    """Return ``conv_<epoch-ms>_<9 base36 chars>``."""
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(9))
    return f"conv_{int(time.time() * 1000)}_{suffix}"


def resolve_conversation_id(conversation_id: str | None) -> str:
    """Reuse a client-supplied id, or mint one for a first turn."""
    if conversation_id and conversation_id.strip():
        return conversation_id
    return new_conversation_id()
