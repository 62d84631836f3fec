"""Compact bitmap of nefarious leaders over a 192-slot window."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

_U64_MAX = (1 << 64) - 1
_HEADER = struct.Struct("<Q")


@dataclass(frozen=True)
class NefariousWindow:
    """Which 4-slot leader chunks of a 192-slot window are nefarious.

    ``window_start`` is the first slot covered. ``nefarious`` is a 48-bit
    little-endian bitmap (6 bytes); bit ``i`` marks the leader covering slots
    ``window_start + 4*i`` to ``window_start + 4*i + 3``.
    """

    window_start: int
    nefarious: bytes

    LEN: ClassVar[int] = 14
    MAX_LEADERS: ClassVar[int] = 48
    SLOTS_PER_LEADER: ClassVar[int] = 4
    WINDOW_SLOTS: ClassVar[int] = 192
    BITMAP_LEN: ClassVar[int] = 6

    def __post_init__(self) -> None:
        if not 0 <= self.window_start <= _U64_MAX:
            raise ValueError(f"window_start {self.window_start} does not fit in a u64")
        bitmap = bytes(self.nefarious)
        if len(bitmap) != self.BITMAP_LEN:
            raise ValueError(
                f"nefarious bitmap must be {self.BITMAP_LEN} bytes, got {len(bitmap)}"
            )
        object.__setattr__(self, "nefarious", bitmap)

    @classmethod
    def unpack(cls, data: bytes) -> NefariousWindow:
        """Decode a window from exactly 14 bytes; raise ValueError otherwise."""
        data = bytes(data)
        if len(data) != cls.LEN:
            raise ValueError(f"expected {cls.LEN} bytes, got {len(data)}")
        (window_start,) = _HEADER.unpack_from(data)
        return cls(window_start, data[_HEADER.size : cls.LEN])

    def pack(self) -> bytes:
        """Encode the window as 14 bytes: u64 LE start followed by the bitmap."""
        return _HEADER.pack(self.window_start) + self.nefarious

    def is_nefarious(self, slot: int) -> bool:
        """True if the 4-slot chunk containing ``slot`` is marked nefarious."""
        if slot < self.window_start:
            return False
        leader = (slot - self.window_start) // self.SLOTS_PER_LEADER
        if leader >= self.MAX_LEADERS:
            return False
        return bool((self.nefarious[leader // 8] >> (leader % 8)) & 1)

    def valid_land_range(self) -> range:
        """The 192 slots for which ``is_nefarious`` gives meaningful answers."""
        return range(self.window_start, self.window_start + self.WINDOW_SLOTS)

    @classmethod
    def empty(cls) -> NefariousWindow:
        """A window starting at slot 0 with no leader marked."""
        return cls(0, bytes(cls.BITMAP_LEN))