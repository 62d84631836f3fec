"""Instructions and the account references they carry."""

from __future__ import annotations

from dataclasses import dataclass, field

from antisandwich.pubkey import Pubkey


@dataclass(frozen=True)
class AccountMeta:
    """An account an instruction touches, with its signer and writable flags."""

    pubkey: Pubkey
    is_signer: bool = False
    is_writable: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.pubkey, Pubkey):
            raise TypeError("pubkey must be a Pubkey")


@dataclass(frozen=True)
class Instruction:
    """A call to ``program_id`` with the given accounts and raw data."""

    program_id: Pubkey
    accounts: tuple[AccountMeta, ...] = field(default_factory=tuple)
    data: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.program_id, Pubkey):
            raise TypeError("program_id must be a Pubkey")
        accounts = tuple(self.accounts)
        if not all(isinstance(meta, AccountMeta) for meta in accounts):
            raise TypeError("accounts must be AccountMeta values")
        object.__setattr__(self, "accounts", accounts)
        object.__setattr__(self, "data", bytes(self.data))