"""Configuration tables for validation and address mapping.

All tables carry defaults for the reference controller and can be
replaced by callers, either by constructing the models directly or by
loading a mapping / JSON document through :class:`LadderConfig`.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ladderir.errors import ConfigError
from ladderir.model.devices import MAX_BIT_INDEX, DeviceAddress, DeviceType
from ladderir.model.target import (
    COUNTER_VALUE_OFFSET,
    DEFAULT_MAPPING_RULES,
    TIMER_VALUE_OFFSET,
    MappingRule,
)

# Number of addressable elements per device type.
DEFAULT_DEVICE_SIZES: dict[DeviceType, int] = {
    DeviceType.P: 2048,
    DeviceType.M: 8192,
    DeviceType.K: 2048,
    DeviceType.F: 2048,
    DeviceType.T: 2048,
    DeviceType.C: 2048,
    DeviceType.D: 10000,
    DeviceType.R: 10000,
    DeviceType.Z: 16,
    DeviceType.N: 8192,
}


class DeviceLimits(BaseModel):
    model_config = ConfigDict(frozen=True)

    sizes: dict[DeviceType, int] = Field(
        default_factory=lambda: dict(DEFAULT_DEVICE_SIZES),
    )

    @model_validator(mode="after")
    def _sizes_positive(self) -> Self:
        for device, size in self.sizes.items():
            if size <= 0:
                raise ValueError(f"Device {device.value} must have a positive size, got {size}")
        return self

    def max_address(self, device: DeviceType) -> int | None:
        """Highest valid number for *device*, or None if it has no size entry."""
        size = self.sizes.get(device)
        if size is None:
            return None
        return size - 1

    def contains(self, address: DeviceAddress) -> bool:
        max_addr = self.max_address(address.device)
        return max_addr is not None and address.number <= max_addr


class MapperConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    rules: list[MappingRule] = Field(default_factory=lambda: list(DEFAULT_MAPPING_RULES))
    timer_value_offset: int = Field(default=TIMER_VALUE_OFFSET, ge=0)
    counter_value_offset: int = Field(default=COUNTER_VALUE_OFFSET, ge=0)
    # Targets above this number are reported unmappable; None disables the check.
    max_target_address: int | None = Field(default=None, ge=0)
    read_only: frozenset[DeviceType] = frozenset({
        DeviceType.F, DeviceType.T, DeviceType.C,
    })

    @model_validator(mode="after")
    def _one_rule_per_device(self) -> Self:
        seen: set[DeviceType] = set()
        for rule in self.rules:
            if rule.device in seen:
                raise ValueError(f"Duplicate mapping rule for device {rule.device.value}")
            seen.add(rule.device)
        return self


class ValidatorConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    limits: DeviceLimits = Field(default_factory=DeviceLimits)
    # Devices whose state is owned by inputs or by the controller itself
    write_protected: frozenset[DeviceType] = frozenset({
        DeviceType.P, DeviceType.F, DeviceType.T, DeviceType.C,
    })
    max_bit_index: int = Field(default=MAX_BIT_INDEX, ge=0)
    max_index_register: int = Field(default=15, ge=0)


class LadderConfig(BaseModel):
    """Bundle of every configuration table used by the facade."""

    model_config = ConfigDict(frozen=True)

    limits: DeviceLimits = Field(default_factory=DeviceLimits)
    mapper: MapperConfig = Field(default_factory=MapperConfig)
    validator: ValidatorConfig | None = None

    @property
    def validator_config(self) -> ValidatorConfig:
        """Validator settings, sharing *limits* unless given explicitly."""
        if self.validator is not None:
            return self.validator
        return ValidatorConfig(limits=self.limits)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> LadderConfig:
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_json(cls, text: str | bytes) -> LadderConfig:
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
