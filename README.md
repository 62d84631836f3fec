# antisandwich

Tools for guarding swaps against sandwich attacks by validators that are known
to misbehave. A client lists the upcoming slots in which a flagged validator is
leader; these are packed into a compact 14-byte `NefariousWindow` that covers
192 slots (48 leaders of 4 slots each). At execution time the window is checked
against the current slot, and the transaction either aborts, reports, or has its
swap slippage tightened.

The package has no runtime dependencies.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## The window

`antisandwich.window.NefariousWindow` is a frozen dataclass with a
`window_start` slot and a 6-byte `nefarious` bitmap; bit `i` marks the leader
holding slots `window_start + 4*i` to `window_start + 4*i + 3`.

```python
from antisandwich.window import NefariousWindow

window = NefariousWindow.unpack(bytes(14))
window.is_nefarious(350_000_000)      # False
window.valid_land_range()             # range of the 192 slots the window answers for
data = window.pack()                  # 14 bytes: u64 LE start + 48-bit bitmap
```

`unpack` raises `ValueError` unless given exactly 14 bytes; the constructor
raises `ValueError` for a start outside the u64 range or a bitmap that is not 6
bytes. Slots before the window or past its 192 slots are never nefarious.
`NefariousWindow.empty()` gives a window starting at slot 0 with nothing flagged.

## Keys and instructions

`antisandwich.pubkey` holds `Pubkey`, a 32-byte address with
`Pubkey.from_string(text)` and a base58 `str()`, the helpers `b58encode` and
`b58decode`, and the constant `JUPITER_V6`.

`antisandwich.instruction` holds the frozen dataclasses `AccountMeta`
(`pubkey`, `is_signer`, `is_writable`) and `Instruction` (`program_id`,
`accounts`, `data`).

## Building instructions

`antisandwich.sdk` turns a list of flagged leader slots into instructions
addressed to `PROGRAM_ID`:

```python
from antisandwich.sdk import abort_if_nefarious, adjust_slippage_at_runtime, build_window

window = build_window([353_612_620])
ix = abort_if_nefarious([353_612_620])
```

`build_window` starts the window at the smallest slot given (or returns an empty
window for no slots) and raises `WindowBuildError` if any slot lies beyond the
192 slots from there. `abort_if_nefarious` produces data `[1] + window`.

`adjust_slippage_at_runtime(slots, slippage_if_nefarious, jupiter_ix)` wraps a
Jupiter swap `Instruction`, keeping its accounts and producing data
`[2] + window + slippage (u16 LE) + swap data`. It raises `ValueError` if the
slippage does not fit in a u16.

## Evaluating instructions

`antisandwich.program` carries out the executing side against a
`ProgramContext`. The context holds the current `slot` (or `None`, in which
case reading it raises `ClockUnavailableError`), collects `logs` and
`return_data`, and records forwarded instructions in `invocations`.

`process_instruction(program_id, accounts, instruction_data, context)` checks
the program id and routes on the first byte:

- `1` raises `CustomProgramError` with code 100 if the current slot is flagged;
- `2` checks that the swap data is at least 27 bytes and starts with one of the
  four Jupiter route discriminators, logs whether it is adjusting, rewrites the
  two slippage bytes before the final fee byte when the slot is flagged, and
  forwards the swap to `JUPITER_V6` through `context.invoke`, with the given
  `AccountInfo` values turned into `AccountMeta`s;
- `3` sets return data to one `Report` byte: `NOT_NEFARIOUS`, `NEFARIOUS`, or
  `ERROR` when the slot cannot be read.

Malformed data or an unknown first byte raises `InvalidInstructionDataError`; a
wrong program id raises `IncorrectProgramIdError`. All of these derive from
`ProgramError`. The handlers `process_abort_if_nefarious`,
`process_adjust_slippage_and_forward` and `process_report_if_nefarious`, and
the check `is_nefarious(window, context)`, can also be called directly.

## What it does not do

The package only builds and evaluates instruction data in memory. It does not
sign or send transactions, talk to a network or node, fetch swap quotes or
leader schedules, or decide which validators are flagged; it has no command-line
program.