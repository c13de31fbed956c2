"""Static semantic validation of a built Program.

The validator never raises: every problem becomes a :class:`Finding`
in the returned :class:`ValidationReport`.  A program is valid when the
report holds no errors; warnings never affect validity.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from ladderir.config import ValidatorConfig
from ladderir.model.devices import DeviceAddress, DeviceType
from ladderir.model.nodes import (
    BlockNode,
    CoilNode,
    ContactNode,
    CounterNode,
    LogicNode,
    MathNode,
    TimerNode,
    is_output,
    node_addresses,
)
from ladderir.model.program import Network, Program

# ---------------------------------------------------------------------------
# Finding codes
# ---------------------------------------------------------------------------

ADDRESS_OUT_OF_RANGE = "ADDRESS_OUT_OF_RANGE"
BIT_INDEX_OUT_OF_RANGE = "BIT_INDEX_OUT_OF_RANGE"
INDEX_REGISTER_OUT_OF_RANGE = "INDEX_REGISTER_OUT_OF_RANGE"
WORD_CONTACT_WITHOUT_BIT = "WORD_CONTACT_WITHOUT_BIT"
READ_ONLY_WRITE = "READ_ONLY_WRITE"
TIMER_DEVICE_MISMATCH = "TIMER_DEVICE_MISMATCH"
COUNTER_DEVICE_MISMATCH = "COUNTER_DEVICE_MISMATCH"
NON_POSITIVE_PRESET = "NON_POSITIVE_PRESET"
BLOCK_TOO_SMALL = "BLOCK_TOO_SMALL"
EMPTY_NETWORK = "EMPTY_NETWORK"
NO_OUTPUT = "NO_OUTPUT"
DUPLICATE_OUTPUT = "DUPLICATE_OUTPUT"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    ADDRESS = "address"
    READ_ONLY = "read-only"
    DEVICE_TYPE = "device-type"
    PRESET = "preset"
    STRUCTURE = "structure"
    DUPLICATE_OUTPUT = "duplicate-output"


class Finding(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    severity: Severity
    category: Category
    message: str
    network_id: str | None = None
    node_id: str | None = None
    network_ids: list[str] = []


class ValidationReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    errors: list[Finding] = []
    warnings: list[Finding] = []

    @property
    def valid(self) -> bool:
        return not self.errors

    def codes(self) -> list[str]:
        return [f.code for f in self.errors + self.warnings]

    def summary(self) -> str:
        parts: list[str] = []
        if self.errors:
            parts.append(f"{len(self.errors)} error(s)")
        if self.warnings:
            parts.append(f"{len(self.warnings)} warning(s)")
        if not parts:
            return "No findings."
        return ", ".join(parts) + "."


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

class _Run:
    """Findings collected during one ``validate`` call."""

    def __init__(self) -> None:
        self.errors: list[Finding] = []
        self.warnings: list[Finding] = []
        # address -> network ids, in first-seen order
        self.outputs: dict[str, list[str]] = {}

    def error(self, code: str, category: Category, message: str,
              network_id: str | None = None, node_id: str | None = None) -> None:
        self.errors.append(Finding(
            code=code, severity=Severity.ERROR, category=category, message=message,
            network_id=network_id, node_id=node_id,
        ))

    def warning(self, code: str, category: Category, message: str,
                network_id: str | None = None, node_id: str | None = None,
                network_ids: list[str] | None = None) -> None:
        self.warnings.append(Finding(
            code=code, severity=Severity.WARNING, category=category, message=message,
            network_id=network_id, node_id=node_id, network_ids=network_ids or [],
        ))


class ProgramValidator:
    """Checks address ranges, write access, device usage and structure.

    Instances hold configuration only; all per-run state is local to
    :meth:`validate`, so repeated calls on the same program give the
    same report.
    """

    def __init__(self, config: ValidatorConfig | None = None) -> None:
        self.config = config or ValidatorConfig()

    def validate(self, program: Program) -> ValidationReport:
        run = _Run()
        for network in program.networks:
            self._check_network(run, network)
        self._check_duplicate_outputs(run)
        return ValidationReport(errors=run.errors, warnings=run.warnings)

    # -- Networks -----------------------------------------------------------

    def _check_network(self, run: _Run, network: Network) -> None:
        if not network.nodes:
            run.warning(EMPTY_NETWORK, Category.STRUCTURE, "Empty network", network.id)
            return

        for node in network.nodes:
            self._check_node(run, network.id, node)

        if not any(is_output(n) for n in network.nodes):
            run.warning(
                NO_OUTPUT, Category.STRUCTURE,
                "Network has no output instruction", network.id,
            )

    def _check_duplicate_outputs(self, run: _Run) -> None:
        for key, network_ids in run.outputs.items():
            distinct = list(dict.fromkeys(network_ids))
            if len(distinct) > 1:
                run.warning(
                    DUPLICATE_OUTPUT, Category.DUPLICATE_OUTPUT,
                    f"Output {key} is driven by multiple networks: {', '.join(distinct)}",
                    network_id=distinct[0], network_ids=distinct,
                )

    # -- Nodes --------------------------------------------------------------

    def _check_node(self, run: _Run, network_id: str, node: LogicNode) -> None:
        for addr in node_addresses(node):
            self._check_address(run, network_id, node.id, addr)
        if is_output(node):
            run.outputs.setdefault(str(node.address), []).append(network_id)

        if isinstance(node, ContactNode):
            if node.address.device.is_word and node.address.bit_index is None:
                run.warning(
                    WORD_CONTACT_WITHOUT_BIT, Category.ADDRESS,
                    f"Contact on word device {node.address} without bit index",
                    network_id, node.id,
                )
        elif isinstance(node, CoilNode):
            self._check_write(run, network_id, node.id, node.address)
        elif isinstance(node, TimerNode):
            self._check_dedicated(
                run, network_id, node, DeviceType.T, TIMER_DEVICE_MISMATCH, "Timer",
            )
        elif isinstance(node, CounterNode):
            self._check_dedicated(
                run, network_id, node, DeviceType.C, COUNTER_DEVICE_MISMATCH, "Counter",
            )
        elif isinstance(node, MathNode):
            self._check_write(run, network_id, node.id, node.destination)
        elif isinstance(node, BlockNode):
            if len(node.children) < 2:
                run.error(
                    BLOCK_TOO_SMALL, Category.STRUCTURE,
                    f"{node.block_type.value.capitalize()} block has "
                    f"{len(node.children)} children, needs at least 2",
                    network_id, node.id,
                )

    def _check_address(self, run: _Run, network_id: str, node_id: str,
                       addr: DeviceAddress) -> None:
        max_addr = self.config.limits.max_address(addr.device)
        if max_addr is not None and addr.number > max_addr:
            run.error(
                ADDRESS_OUT_OF_RANGE, Category.ADDRESS,
                f"Address {addr} out of range (max {addr.device.value}{max_addr:04d})",
                network_id, node_id,
            )
        if addr.bit_index is not None and addr.bit_index > self.config.max_bit_index:
            run.error(
                BIT_INDEX_OUT_OF_RANGE, Category.ADDRESS,
                f"Bit index {addr.bit_index} of {addr} out of range "
                f"(0-{self.config.max_bit_index})",
                network_id, node_id,
            )
        if (addr.index_register is not None
                and addr.index_register > self.config.max_index_register):
            run.error(
                INDEX_REGISTER_OUT_OF_RANGE, Category.ADDRESS,
                f"Index register Z{addr.index_register} of {addr} out of range "
                f"(0-{self.config.max_index_register})",
                network_id, node_id,
            )

    def _check_write(self, run: _Run, network_id: str, node_id: str,
                     addr: DeviceAddress) -> None:
        if addr.device in self.config.write_protected:
            run.error(
                READ_ONLY_WRITE, Category.READ_ONLY,
                f"Cannot write to read-only device {addr}",
                network_id, node_id,
            )

    def _check_dedicated(self, run: _Run, network_id: str,
                         node: TimerNode | CounterNode, device: DeviceType,
                         code: str, label: str) -> None:
        addr = node.address
        if addr.device != device:
            run.error(
                code, Category.DEVICE_TYPE,
                f"{label} must use {device.value} device, got {addr}",
                network_id, node.id,
            )
            self._check_write(run, network_id, node.id, addr)
        if node.preset <= 0:
            run.warning(
                NON_POSITIVE_PRESET, Category.PRESET,
                f"{label} {addr} has non-positive preset {node.preset}",
                network_id, node.id,
            )


def validate_program(program: Program, config: ValidatorConfig | None = None) -> ValidationReport:
    return ProgramValidator(config).validate(program)
