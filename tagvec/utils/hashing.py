"""Hashing utilities for deterministic content hashing."""

import hashlib


def compute_sha256(content: bytes) -> str:
    """Compute SHA-256 hash of content.

    Args:
        content: Bytes to hash

    Returns:
        Hexadecimal hash string
    """
    return hashlib.sha256(content).hexdigest()


def compute_sha256_text(text: str) -> str:
    """Compute SHA-256 hash of UTF-8 encoded ``text``."""
    return compute_sha256(text.encode("utf-8"))
