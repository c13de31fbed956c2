"""Device addressing for the ladder IR.

A device address names one element of the PLC's native memory:

- bit devices (P, M, K, F, T, C) hold a single boolean per address
- word devices (D, R, Z, N) hold a 16-bit value and need a bit index
  (``D0100.5``) to be read as a boolean

An optional index register suffix (``D0100[Z3]``) makes the effective
address depend on a runtime value, so it cannot be resolved statically.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ladderir.errors import AddressError


class DeviceType(str, Enum):
    P = "P"  # I/O relay
    M = "M"  # Auxiliary relay
    K = "K"  # Keep relay
    F = "F"  # Special relay
    T = "T"  # Timer contact
    C = "C"  # Counter contact
    D = "D"  # Data register
    R = "R"  # Retentive data register
    Z = "Z"  # Index register
    N = "N"  # Link data register

    @property
    def is_bit(self) -> bool:
        return self in BIT_DEVICES

    @property
    def is_word(self) -> bool:
        return self in WORD_DEVICES


BIT_DEVICES: frozenset[DeviceType] = frozenset({
    DeviceType.P, DeviceType.M, DeviceType.K,
    DeviceType.F, DeviceType.T, DeviceType.C,
})

WORD_DEVICES: frozenset[DeviceType] = frozenset({
    DeviceType.D, DeviceType.R, DeviceType.Z, DeviceType.N,
})

MAX_BIT_INDEX = 15

_DEVICE_ADDRESS_RE = re.compile(
    r"^([PMKFTCDRZN])(\d+)(?:\.(\d+))?(?:\[Z(\d+)\])?$"
)


class DeviceAddress(BaseModel):
    """A native device address, e.g. ``M0001``, ``D0100.5``, ``D0100[Z0]``.

    Range limits are not enforced here; out-of-range addresses are
    representable so that the validator can report them.
    """

    model_config = ConfigDict(frozen=True)

    device: DeviceType
    number: int = Field(ge=0)
    bit_index: int | None = Field(default=None, ge=0)
    index_register: int | None = Field(default=None, ge=0)

    @property
    def is_indexed(self) -> bool:
        return self.index_register is not None

    @property
    def is_word_bit(self) -> bool:
        """True for bit access into a word device (``D0100.5``)."""
        return self.bit_index is not None and self.device.is_word

    def format(self) -> str:
        text = f"{self.device.value}{self.number:04d}"
        if self.bit_index is not None:
            text += f".{self.bit_index}"
        if self.index_register is not None:
            text += f"[Z{self.index_register}]"
        return text

    def __str__(self) -> str:
        return self.format()

    @classmethod
    def parse(cls, text: str) -> DeviceAddress:
        """Strict parse; raises :class:`AddressError` on malformed input."""
        addr = parse_device_address(text)
        if addr is None:
            raise AddressError(f"Invalid device address: {text!r}")
        return addr


def parse_device_address(text: str) -> DeviceAddress | None:
    """Parse a device address string, returning None if it is not one.

    Matching is case-insensitive. A bit index above 15 is rejected.
    """
    m = _DEVICE_ADDRESS_RE.match(text.strip().upper())
    if m is None:
        return None

    bit_index = int(m.group(3)) if m.group(3) is not None else None
    if bit_index is not None and bit_index > MAX_BIT_INDEX:
        return None

    return DeviceAddress(
        device=DeviceType(m.group(1)),
        number=int(m.group(2)),
        bit_index=bit_index,
        index_register=int(m.group(4)) if m.group(4) is not None else None,
    )


def format_device_address(addr: DeviceAddress) -> str:
    return addr.format()
