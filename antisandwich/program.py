"""On-chain logic: abort, report or tighten slippage on nefarious leaders."""

from __future__ import annotations

import struct
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum

from antisandwich.instruction import AccountMeta, Instruction
from antisandwich.pubkey import JUPITER_V6, Pubkey
from antisandwich.sdk import PROGRAM_ID
from antisandwich.window import NefariousWindow

ABORT_IF_NEFARIOUS_DISC = 1
ADJUST_SLIPPAGE_VIA_JUPITER_DISC = 2
REPORT_IF_NEFARIOUS_DISC = 3

NEFARIOUS_ABORT_CODE = 100

ROUTE_DISC = bytes([229, 23, 203, 151, 122, 227, 173, 42])
ROUTE_WITH_TL_DISC = bytes([150, 86, 71, 116, 167, 93, 14, 104])
SHARED_ACCOUNTS_ROUTE_DISC = bytes([193, 32, 155, 51, 65, 214, 156, 129])
SHARED_ACCOUNTS_ROUTE_WITH_TL_DISC = bytes([230, 121, 143, 80, 119, 159, 106, 170])
_JUPITER_DISCS = frozenset(
    {ROUTE_DISC, ROUTE_WITH_TL_DISC, SHARED_ACCOUNTS_ROUTE_DISC, SHARED_ACCOUNTS_ROUTE_WITH_TL_DISC}
)

# Sanity check only; the swap program does the full validation.
MIN_JUPITER_DATA_LEN = 27

_U16 = struct.Struct("<H")


class ProgramError(Exception):
    """Base of all errors the program reports."""


class IncorrectProgramIdError(ProgramError):
    """The instruction was addressed to a different program."""


class InvalidInstructionDataError(ProgramError):
    """The instruction data is malformed."""


class CustomProgramError(ProgramError):
    """A program-specific failure carrying a numeric code."""

    def __init__(self, code: int) -> None:
        super().__init__(f"custom program error: {code}")
        self.code = code


class ClockUnavailableError(ProgramError):
    """The current slot could not be read."""


class Report(IntEnum):
    """Value returned by the report instruction."""

    NOT_NEFARIOUS = 0
    NEFARIOUS = 1
    ERROR = 2


@dataclass(frozen=True)
class AccountInfo:
    """An account passed to the program."""

    key: Pubkey
    is_signer: bool = False
    is_writable: bool = False


@dataclass
class ProgramContext:
    """Runtime environment: clock, log, return data and cross-program calls."""

    slot: int | None = None
    logs: list[str] = field(default_factory=list)
    return_data: bytes | None = None
    invocations: list[Instruction] = field(default_factory=list)

    def current_slot(self) -> int:
        """The slot the transaction is executing in."""
        if self.slot is None:
            raise ClockUnavailableError("clock sysvar is not available")
        return self.slot

    def log(self, message: str) -> None:
        self.logs.append(message)

    def set_return_data(self, data: bytes) -> None:
        self.return_data = bytes(data)

    def invoke(self, instruction: Instruction) -> None:
        """Record a call into another program."""
        self.invocations.append(instruction)


def is_nefarious(window: NefariousWindow, context: ProgramContext) -> bool:
    """True if the current slot falls in a leader chunk the window flags."""
    return window.is_nefarious(context.current_slot())


def _unpack_window(data: bytes) -> NefariousWindow:
    try:
        return NefariousWindow.unpack(data)
    except ValueError as exc:
        raise InvalidInstructionDataError(str(exc)) from None


def process_abort_if_nefarious(data: bytes, context: ProgramContext) -> None:
    """Fail with custom code 100 when executing on a flagged leader."""
    window = _unpack_window(data)
    if is_nefarious(window, context):
        raise CustomProgramError(NEFARIOUS_ABORT_CODE)


def process_adjust_slippage_and_forward(
    accounts: Sequence[AccountInfo], data: bytes, context: ProgramContext
) -> None:
    """Rewrite the swap's slippage if on a flagged leader, then forward it."""
    data = bytes(data)
    header = NefariousWindow.LEN + _U16.size
    if len(data) < header:
        raise InvalidInstructionDataError("instruction data too short")
    window = _unpack_window(data[: NefariousWindow.LEN])
    (new_slippage_bps,) = _U16.unpack_from(data, NefariousWindow.LEN)

    should_adjust = is_nefarious(window, context)

    jupiter_data = bytearray(data[header:])
    if len(jupiter_data) < MIN_JUPITER_DATA_LEN:
        raise InvalidInstructionDataError("swap instruction data too short")
    if bytes(jupiter_data[:8]) not in _JUPITER_DISCS:
        raise InvalidInstructionDataError("unsupported swap instruction")

    context.log(f"adjusting slippage? = {'yes' if should_adjust else 'no'}")

    if should_adjust:
        context.log(f"adjusting slippage to {new_slippage_bps} bps")
        # Tail layout: [slippage: u16, fee: u8]
        tail = len(jupiter_data) - 3
        jupiter_data[tail : tail + 2] = _U16.pack(new_slippage_bps)

    metas = tuple(
        AccountMeta(info.key, is_signer=info.is_signer, is_writable=info.is_writable)
        for info in accounts
    )
    context.invoke(Instruction(JUPITER_V6, metas, bytes(jupiter_data)))


def process_report_if_nefarious(data: bytes, context: ProgramContext) -> None:
    """Set one byte of return data: a Report value."""
    window = _unpack_window(data)
    try:
        report = Report.NEFARIOUS if is_nefarious(window, context) else Report.NOT_NEFARIOUS
    except ClockUnavailableError:
        report = Report.ERROR
    context.set_return_data(bytes([report]))


def process_instruction(
    program_id: Pubkey,
    accounts: Sequence[AccountInfo],
    instruction_data: bytes,
    context: ProgramContext,
) -> None:
    """Entry point: check the program id and dispatch on the first byte."""
    if program_id != PROGRAM_ID:
        raise IncorrectProgramIdError(f"unexpected program id {program_id}")
    instruction_data = bytes(instruction_data)
    if not instruction_data:
        raise InvalidInstructionDataError("empty instruction data")

    discriminator, data = instruction_data[0], instruction_data[1:]
    if discriminator == ABORT_IF_NEFARIOUS_DISC:
        process_abort_if_nefarious(data, context)
    elif discriminator == ADJUST_SLIPPAGE_VIA_JUPITER_DISC:
        process_adjust_slippage_and_forward(accounts, data, context)
    elif discriminator == REPORT_IF_NEFARIOUS_DISC:
        process_report_if_nefarious(data, context)
    else:
        raise InvalidInstructionDataError(f"unknown instruction {discriminator}")