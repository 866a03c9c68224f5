"""Bluetooth device address parsing."""

from __future__ import annotations

import re

from droidbt.core.model import Address

_OCTET_RE = re.compile(r"[0-9A-Fa-f]{2}")
_SEPARATOR_RE = re.compile(r"[:-]")


def parse_address(text: str | None) -> Address | None:
    """Parse ``AA:BB:CC:DD:EE:FF`` (or dash separated, any case) into an Address.

    Returns None for anything that is not exactly six hex octet groups.
    """
    if not text:
        return None
    groups = _SEPARATOR_RE.split(text.strip())
    if len(groups) != 6:
        return None
    if not all(_OCTET_RE.fullmatch(group) for group in groups):
        return None
    return Address(bytes(int(group, 16) for group in groups))

