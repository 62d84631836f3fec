"""32-byte public keys with base58 text form."""

from __future__ import annotations

from dataclasses import dataclass

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_INDEX = {char: value for value, char in enumerate(_ALPHABET)}

PUBKEY_LEN = 32


def b58encode(data: bytes) -> str:
    """Encode bytes as base58, keeping leading zero bytes as '1'."""
    data = bytes(data)
    stripped = data.lstrip(b"\x00")
    leading = len(data) - len(stripped)
    number = int.from_bytes(stripped, "big")
    digits = []
    while number:
        number, remainder = divmod(number, 58)
        digits.append(_ALPHABET[remainder])
    return "1" * leading + "".join(reversed(digits))


def b58decode(text: str) -> bytes:
    """Decode base58 text; raise ValueError on characters outside the alphabet."""
    number = 0
    for char in text:
        try:
            number = number * 58 + _INDEX[char]
        except KeyError:
            raise ValueError(f"invalid base58 character {char!r}") from None
    leading = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    return b"\x00" * leading + body


@dataclass(frozen=True)
class Pubkey:
    """A 32-byte account address."""

    key: bytes

    def __post_init__(self) -> None:
        key = bytes(self.key)
        if len(key) != PUBKEY_LEN:
            raise ValueError(f"public key must be {PUBKEY_LEN} bytes, got {len(key)}")
        object.__setattr__(self, "key", key)

    @classmethod
    def from_string(cls, text: str) -> Pubkey:
        """Parse a base58 address."""
        return cls(b58decode(text))

    def __str__(self) -> str:
        return b58encode(self.key)

    def __bytes__(self) -> bytes:
        return self.key


JUPITER_V6 = Pubkey.from_string("JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4")