import pytest

from antisandwich.instruction import AccountMeta, Instruction
from antisandwich.program import (
    REPORT_IF_NEFARIOUS_DISC,
    SHARED_ACCOUNTS_ROUTE_DISC,
    AccountInfo,
    ClockUnavailableError,
    CustomProgramError,
    IncorrectProgramIdError,
    InvalidInstructionDataError,
    ProgramContext,
    ProgramError,
    Report,
    is_nefarious,
    process_abort_if_nefarious,
    process_adjust_slippage_and_forward,
    process_instruction,
    process_report_if_nefarious,
)
from antisandwich.pubkey import JUPITER_V6, Pubkey
from antisandwich.sdk import PROGRAM_ID, abort_if_nefarious, adjust_slippage_at_runtime, build_window
from antisandwich.window import NefariousWindow

START = 350_000_000
BASE_SLIPPAGE = 600
SLIPPAGE_IF_NEFARIOUS = 200


def _swap_data():
    return SHARED_ACCOUNTS_ROUTE_DISC + bytes(16) + BASE_SLIPPAGE.to_bytes(2, "little") + bytes([0])


def _accounts():
    return [
        AccountInfo(Pubkey(bytes([7]) * 32), is_signer=True, is_writable=False),
        AccountInfo(Pubkey(bytes([8]) * 32), is_signer=False, is_writable=True),
    ]


def _swap_ix(data=None):
    metas = tuple(AccountMeta(a.key, a.is_signer, a.is_writable) for a in _accounts())
    return Instruction(JUPITER_V6, metas, _swap_data() if data is None else data)


def test_is_nefarious_uses_clock():
    window = build_window([START])
    assert is_nefarious(window, ProgramContext(slot=START + 3))
    assert not is_nefarious(window, ProgramContext(slot=START + 4))


def test_clock_unavailable():
    with pytest.raises(ClockUnavailableError):
        ProgramContext().current_slot()


def test_abort_raises_custom_100_on_nefarious_slot():
    ix = abort_if_nefarious([START])
    with pytest.raises(CustomProgramError) as info:
        process_instruction(PROGRAM_ID, [], ix.data, ProgramContext(slot=START))
    assert info.value.code == 100


def test_abort_passes_on_clean_slot():
    ix = abort_if_nefarious([START])
    context = ProgramContext(slot=START + 8)
    process_instruction(PROGRAM_ID, [], ix.data, context)
    assert context.return_data is None and context.invocations == []


def test_abort_rejects_bad_window_length():
    with pytest.raises(InvalidInstructionDataError):
        process_abort_if_nefarious(bytes(NefariousWindow.LEN - 1), ProgramContext(slot=START))


def test_abort_propagates_clock_error():
    with pytest.raises(ClockUnavailableError):
        process_abort_if_nefarious(build_window([START]).pack(), ProgramContext())


def test_wrong_program_id():
    with pytest.raises(IncorrectProgramIdError):
        process_instruction(JUPITER_V6, [], bytes([1]), ProgramContext(slot=START))


def test_empty_instruction_data():
    with pytest.raises(InvalidInstructionDataError):
        process_instruction(PROGRAM_ID, [], b"", ProgramContext(slot=START))


def test_unknown_discriminator():
    data = bytes([9]) + build_window([START]).pack()
    with pytest.raises(InvalidInstructionDataError):
        process_instruction(PROGRAM_ID, [], data, ProgramContext(slot=START))


def test_errors_share_base_class():
    with pytest.raises(ProgramError):
        process_instruction(PROGRAM_ID, [], b"", ProgramContext(slot=START))


@pytest.mark.parametrize(
    ("slot", "expected"),
    [(START, Report.NEFARIOUS), (START + 4, Report.NOT_NEFARIOUS)],
)
def test_report(slot, expected):
    data = bytes([REPORT_IF_NEFARIOUS_DISC]) + build_window([START]).pack()
    context = ProgramContext(slot=slot)
    process_instruction(PROGRAM_ID, [], data, context)
    assert context.return_data == bytes([expected])


def test_report_clock_error_returns_error_value():
    context = ProgramContext()
    process_report_if_nefarious(build_window([START]).pack(), context)
    assert context.return_data == bytes([Report.ERROR])


def test_report_rejects_bad_data():
    with pytest.raises(InvalidInstructionDataError):
        process_report_if_nefarious(b"\x00", ProgramContext(slot=START))


def test_adjust_on_nefarious_slot_rewrites_slippage():
    ix = adjust_slippage_at_runtime([START], SLIPPAGE_IF_NEFARIOUS, _swap_ix())
    context = ProgramContext(slot=START)
    process_instruction(PROGRAM_ID, _accounts(), ix.data, context)
    (forwarded,) = context.invocations
    original = _swap_data()
    assert forwarded.program_id == JUPITER_V6
    assert forwarded.data[-3:-1] == SLIPPAGE_IF_NEFARIOUS.to_bytes(2, "little")
    assert forwarded.data[:-3] == original[:-3]
    assert forwarded.data[-1] == original[-1]
    assert context.logs == ["adjusting slippage? = yes", "adjusting slippage to 200 bps"]


def test_adjust_on_clean_slot_forwards_unchanged():
    ix = adjust_slippage_at_runtime([START], SLIPPAGE_IF_NEFARIOUS, _swap_ix())
    context = ProgramContext(slot=START + 100)
    process_instruction(PROGRAM_ID, _accounts(), ix.data, context)
    (forwarded,) = context.invocations
    assert forwarded.data == _swap_data()
    assert context.logs == ["adjusting slippage? = no"]


def test_adjust_forwards_account_flags():
    ix = adjust_slippage_at_runtime([], SLIPPAGE_IF_NEFARIOUS, _swap_ix())
    context = ProgramContext(slot=START)
    process_adjust_slippage_and_forward(_accounts(), ix.data[1:], context)
    assert context.invocations[0].accounts == _swap_ix().accounts


def test_adjust_rejects_short_header():
    with pytest.raises(InvalidInstructionDataError):
        process_adjust_slippage_and_forward([], bytes(NefariousWindow.LEN + 1), ProgramContext(slot=START))


def test_adjust_rejects_short_swap_data():
    ix = adjust_slippage_at_runtime([START], SLIPPAGE_IF_NEFARIOUS, _swap_ix(_swap_data()[:-1]))
    context = ProgramContext(slot=START)
    with pytest.raises(InvalidInstructionDataError):
        process_instruction(PROGRAM_ID, _accounts(), ix.data, context)
    assert context.invocations == []


def test_adjust_rejects_unknown_swap_discriminator():
    data = bytes(8) + _swap_data()[8:]
    ix = adjust_slippage_at_runtime([START], SLIPPAGE_IF_NEFARIOUS, _swap_ix(data))
    with pytest.raises(InvalidInstructionDataError):
        process_instruction(PROGRAM_ID, _accounts(), ix.data, ProgramContext(slot=START))


def test_adjust_propagates_clock_error():
    ix = adjust_slippage_at_runtime([START], SLIPPAGE_IF_NEFARIOUS, _swap_ix())
    with pytest.raises(ClockUnavailableError):
        process_instruction(PROGRAM_ID, _accounts(), ix.data, ProgramContext())