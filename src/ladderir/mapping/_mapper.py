"""Translation between native device addresses and the protocol memory model.

Forward mapping (device to target) is a single rule lookup.  Reverse
mapping is a scan: device windows may overlap in the target space, so a
target address can correspond to zero, one or several device addresses.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ladderir.config import MapperConfig
from ladderir.model.devices import DeviceAddress, DeviceType
from ladderir.model.target import MappingRule, MemoryType, TargetAddress

logger = logging.getLogger(__name__)

BITS_PER_WORD = 16


@dataclass(frozen=True)
class MappingResult:
    """Outcome of a forward mapping; *diagnostic* explains a missing target."""

    address: DeviceAddress
    target: TargetAddress | None
    diagnostic: str | None = None

    @property
    def mapped(self) -> bool:
        return self.target is not None


class AddressMapper:
    """Maps device addresses using one :class:`MappingRule` per device type."""

    def __init__(self, config: MapperConfig | None = None) -> None:
        self.config = config or MapperConfig()
        self._rules: dict[DeviceType, MappingRule] = {r.device: r for r in self.config.rules}

    @classmethod
    def with_rules(cls, rules: Iterable[MappingRule], *, replace: bool = False) -> AddressMapper:
        """Mapper whose rules are *rules* merged over the defaults.

        With ``replace=True`` the defaults are dropped entirely.
        """
        merged: dict[DeviceType, MappingRule] = {}
        if not replace:
            merged.update((r.device, r) for r in MapperConfig().rules)
        merged.update((r.device, r) for r in rules)
        return cls(MapperConfig(rules=list(merged.values())))

    @property
    def rules(self) -> list[MappingRule]:
        return list(self._rules.values())

    def rule_for(self, device: DeviceType) -> MappingRule | None:
        return self._rules.get(device)

    # -- Forward mapping ----------------------------------------------------

    def resolve(self, addr: DeviceAddress) -> MappingResult:
        if addr.index_register is not None:
            return self._unmappable(
                addr, f"Indexed address {addr} is resolved at runtime and cannot be mapped statically",
            )

        rule = self.rule_for(addr.device)
        if rule is None:
            return self._unmappable(addr, f"No mapping rule for device {addr.device.value}")

        if addr.bit_index is not None and addr.device.is_word:
            memory_type = MemoryType.COIL
            number = (rule.offset + addr.number) * BITS_PER_WORD + addr.bit_index
        else:
            memory_type = rule.memory_type
            number = rule.offset + addr.number

        limit = self.config.max_target_address
        if limit is not None and number > limit:
            return self._unmappable(
                addr, f"Address {addr} maps to {number}, beyond the target limit {limit}",
            )
        return MappingResult(addr, TargetAddress(memory_type=memory_type, number=number))

    def to_target(self, addr: DeviceAddress) -> TargetAddress | None:
        return self.resolve(addr).target

    def _unmappable(self, addr: DeviceAddress, diagnostic: str) -> MappingResult:
        logger.warning(diagnostic)
        return MappingResult(addr, None, diagnostic)

    # -- Reverse mapping ----------------------------------------------------

    def from_target(self, target: TargetAddress) -> list[DeviceAddress]:
        """Every device address that maps onto *target*, in rule order.

        The caller decides between multiple candidates.
        """
        candidates: list[DeviceAddress] = []
        for rule in self._rules.values():
            if rule.memory_type != target.memory_type:
                continue
            number = target.number - rule.offset
            if number >= 0:
                candidates.append(DeviceAddress(device=rule.device, number=number))
        return candidates

    # -- Timer / counter current values -------------------------------------

    def timer_value_target(self, timer: int) -> TargetAddress | None:
        return self._value_target(self.config.timer_value_offset + timer)

    def counter_value_target(self, counter: int) -> TargetAddress | None:
        return self._value_target(self.config.counter_value_offset + counter)

    def _value_target(self, number: int) -> TargetAddress | None:
        limit = self.config.max_target_address
        if number < 0 or (limit is not None and number > limit):
            logger.warning("Current-value address %d is outside the target space", number)
            return None
        return TargetAddress(memory_type=MemoryType.HOLDING_REGISTER, number=number)

    # -- Device classification ----------------------------------------------

    def is_read_only(self, addr: DeviceAddress) -> bool:
        """True if the device's state is derived rather than externally settable."""
        return addr.device in self.config.read_only

    @staticmethod
    def is_bit_device(device: DeviceType) -> bool:
        return device.is_bit

    @staticmethod
    def is_word_device(device: DeviceType) -> bool:
        return device.is_word
