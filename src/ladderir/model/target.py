"""Target protocol memory model.

The field protocol exposes four flat address spaces.  Native devices are
mapped into them through one :class:`MappingRule` per device type.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ladderir.errors import AddressError

from .devices import DeviceType

# Highest address of a 16-bit protocol space; see MapperConfig.max_target_address.
MAX_TARGET_ADDRESS = 65535


class MemoryType(str, Enum):
    COIL = "coil"
    DISCRETE_INPUT = "discrete-input"
    HOLDING_REGISTER = "holding-register"
    INPUT_REGISTER = "input-register"

    @property
    def prefix(self) -> str:
        return _PREFIX_BY_TYPE[self]

    @property
    def is_bit(self) -> bool:
        return self in (MemoryType.COIL, MemoryType.DISCRETE_INPUT)


_PREFIX_BY_TYPE: dict[MemoryType, str] = {
    MemoryType.COIL: "C",
    MemoryType.DISCRETE_INPUT: "DI",
    MemoryType.HOLDING_REGISTER: "HR",
    MemoryType.INPUT_REGISTER: "IR",
}

_TYPE_BY_PREFIX: dict[str, MemoryType] = {p: t for t, p in _PREFIX_BY_TYPE.items()}

_TARGET_ADDRESS_RE = re.compile(r"^(C|DI|HR|IR):(\d+)$", re.IGNORECASE)


class TargetAddress(BaseModel):
    """An address in the protocol's memory model, e.g. ``HR:1000``."""

    model_config = ConfigDict(frozen=True)

    memory_type: MemoryType
    number: int = Field(ge=0)

    def format(self) -> str:
        return f"{self.memory_type.prefix}:{self.number}"

    def __str__(self) -> str:
        return self.format()

    @classmethod
    def parse(cls, text: str) -> TargetAddress:
        """Strict parse; raises :class:`AddressError` on malformed input."""
        addr = parse_target_address(text)
        if addr is None:
            raise AddressError(f"Invalid target address: {text!r}")
        return addr


def parse_target_address(text: str) -> TargetAddress | None:
    """Parse ``PREFIX:NUMBER`` (prefix case-insensitive), or return None."""
    m = _TARGET_ADDRESS_RE.match(text.strip())
    if m is None:
        return None
    return TargetAddress(memory_type=_TYPE_BY_PREFIX[m.group(1).upper()], number=int(m.group(2)))


def format_target_address(addr: TargetAddress) -> str:
    return addr.format()


class MappingRule(BaseModel):
    """Maps device *device* onto *memory_type* starting at *offset*."""

    model_config = ConfigDict(frozen=True)

    device: DeviceType
    memory_type: MemoryType
    offset: int = Field(ge=0)


DEFAULT_MAPPING_RULES: tuple[MappingRule, ...] = (
    # Bit devices
    MappingRule(device=DeviceType.P, memory_type=MemoryType.DISCRETE_INPUT, offset=0),
    MappingRule(device=DeviceType.M, memory_type=MemoryType.COIL, offset=0),
    MappingRule(device=DeviceType.K, memory_type=MemoryType.COIL, offset=8192),
    MappingRule(device=DeviceType.T, memory_type=MemoryType.COIL, offset=10240),
    MappingRule(device=DeviceType.C, memory_type=MemoryType.COIL, offset=12288),
    MappingRule(device=DeviceType.F, memory_type=MemoryType.DISCRETE_INPUT, offset=2048),
    # Word devices
    MappingRule(device=DeviceType.D, memory_type=MemoryType.HOLDING_REGISTER, offset=0),
    MappingRule(device=DeviceType.R, memory_type=MemoryType.HOLDING_REGISTER, offset=10000),
    MappingRule(device=DeviceType.Z, memory_type=MemoryType.HOLDING_REGISTER, offset=20000),
    MappingRule(device=DeviceType.N, memory_type=MemoryType.HOLDING_REGISTER, offset=20016),
)

# Timer / counter current values live outside the rule table.
TIMER_VALUE_OFFSET = 28208
COUNTER_VALUE_OFFSET = 30256
