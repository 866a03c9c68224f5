"""Address registry and duplicate-address detection."""

from __future__ import annotations

import logging

from droidbt.core.model import Address

LOGGER = logging.getLogger(__name__)


class AddressRegistry:
    """Append-only set of addresses seen during one scan.

    Registering an address that is already present marks a conflict. Each
    conflicting address is reported once, in the order its first duplicate
    was detected.
    """

    def __init__(self) -> None:
        self._counts: dict[Address, int] = {}
        self._conflicts: list[Address] = []
        self._local: Address | None = None

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, address: object) -> bool:
        return address in self._counts

    @property
    def local_address(self) -> Address | None:
        return self._local

    def register(self, address: Address) -> bool:
        """Record ``address``; returns False when it was already known."""
        count = self._counts.get(address, 0)
        self._counts[address] = count + 1
        if count == 0:
            return True
        if count == 1:
            LOGGER.info("Address conflict detected for %s", address)
            self._conflicts.append(address)
        return False

    def register_local(self, address: Address) -> bool:
        if self._local is None:
            self._local = address
        return self.register(address)

    def count(self, address: Address) -> int:
        return self._counts.get(address, 0)

    def local_conflict(self) -> bool:
        return self._local is not None and self.count(self._local) > 1

    def report_conflicts(self) -> tuple[Address, ...]:
        return tuple(self._conflicts)

    def dump_all(self) -> tuple[Address, ...]:
        return tuple(self._counts)
