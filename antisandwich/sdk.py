"""Client-side builders for the anti-sandwich instructions."""

from __future__ import annotations

import struct
from collections.abc import Iterable

from antisandwich.instruction import Instruction
from antisandwich.pubkey import Pubkey
from antisandwich.window import NefariousWindow

PROGRAM_ID = Pubkey.from_string("BfXm7pxBsqF5BpZqKSeNLzBUHXbnvase19ge2XHofhb3")
ABORT_DISC = 1
ADJUST_SLIPPAGE_DISC = 2

_U16 = struct.Struct("<H")


class WindowBuildError(ValueError):
    """A nefarious leader slot does not fit in one 192-slot window."""


def build_window(nefarious_leader_slots: Iterable[int]) -> NefariousWindow:
    """Build the window marking the 4-slot leaders that hold the given slots.

    The window starts at the smallest slot given. Raises WindowBuildError if
    any slot lies beyond the 192 slots that follow it.
    """
    slots = list(nefarious_leader_slots)
    if not slots:
        return NefariousWindow.empty()

    baseline_slot = min(slots)
    last_slot = baseline_slot + NefariousWindow.WINDOW_SLOTS - 1
    bits = bytearray(NefariousWindow.BITMAP_LEN)

    for slot in slots:
        if not baseline_slot <= slot <= last_slot:
            raise WindowBuildError(
                f"slot {slot} is outside the 192-slot window starting at {baseline_slot}"
            )
        leader = (slot - baseline_slot) // NefariousWindow.SLOTS_PER_LEADER
        bits[leader // 8] |= 1 << (leader % 8)

    return NefariousWindow(baseline_slot, bytes(bits))


def abort_if_nefarious(nefarious_leader_slots: Iterable[int]) -> Instruction:
    """Instruction that fails the transaction if it lands on a flagged leader."""
    window = build_window(nefarious_leader_slots)
    data = bytes([ABORT_DISC]) + window.pack()
    return Instruction(program_id=PROGRAM_ID, accounts=(), data=data)


def adjust_slippage_at_runtime(
    nefarious_leader_slots: Iterable[int],
    slippage_if_nefarious: int,
    jupiter_ix: Instruction,
) -> Instruction:
    """Wrap a swap instruction so its slippage tightens on a flagged leader."""
    if not 0 <= slippage_if_nefarious <= 0xFFFF:
        raise ValueError(f"slippage {slippage_if_nefarious} does not fit in a u16")
    window = build_window(nefarious_leader_slots)
    data = (
        bytes([ADJUST_SLIPPAGE_DISC])
        + window.pack()
        + _U16.pack(slippage_if_nefarious)
        + jupiter_ix.data
    )
    return Instruction(program_id=PROGRAM_ID, accounts=jupiter_ix.accounts, data=data)