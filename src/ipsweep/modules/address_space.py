"""Index <-> IPv4 address mapping over the full address space."""

from collections.abc import Iterator
from ipaddress import IPv4Address
from itertools import islice

from ipsweep.config import ADDRESS_SPACE_SIZE


def index_to_address(index: int) -> IPv4Address:
    """Map an index in [0, 2^32) to its address, most significant byte first."""
    if not 0 <= index < ADDRESS_SPACE_SIZE:
        raise ValueError(f"Index out of range: {index}")
    return IPv4Address(index.to_bytes(4, "big"))


def address_to_index(address: IPv4Address | str) -> int:
    """Inverse of ``index_to_address``."""
    return int.from_bytes(IPv4Address(address).packed, "big")


class AddressSpace:
    """Lazy, restartable sequence of addresses from ``start`` up to ``size``.

    Nothing is materialized: iterating walks a ``range`` of indices, and
    ``skip`` only moves the start offset, so seeding a shard deep into the
    space costs the same as seeding one at zero.
    """

    def __init__(self, start: int = 0, size: int = ADDRESS_SPACE_SIZE):
        if not 0 <= size <= ADDRESS_SPACE_SIZE:
            raise ValueError(f"Address space size out of range: {size}")
        if start < 0:
            raise ValueError(f"Start index out of range: {start}")
        self.size = size
        self.start = min(start, size)

    def __len__(self) -> int:
        return self.size - self.start

    def __iter__(self) -> Iterator[IPv4Address]:
        for index in range(self.start, self.size):
            yield index_to_address(index)

    def __repr__(self) -> str:
        return f"AddressSpace(start={self.start}, size={self.size})"

    def skip(self, count: int) -> "AddressSpace":
        """Return an independent sequence beginning ``count`` addresses later."""
        if count < 0:
            raise ValueError(f"Cannot skip backwards: {count}")
        return AddressSpace(self.start + count, self.size)

    def take(self, count: int) -> Iterator[IPv4Address]:
        """Yield at most the first ``count`` addresses."""
        return islice(self, max(count, 0))
