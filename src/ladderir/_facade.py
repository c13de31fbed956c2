"""One-call entry points tying parser, validator and mapper together."""

from __future__ import annotations

from dataclasses import dataclass, field

from ladderir.analysis import GridSize, ProgramValidator, ValidationReport, grid_size
from ladderir.config import LadderConfig
from ladderir.mapping import AddressMapper
from ladderir.model.program import Network, Program, ProgramMetadata
from ladderir.parser import ProgramBuilder, Row, RowReader, group_by_step


@dataclass
class ParseResult:
    program: Program
    validation: ValidationReport | None
    rows: list[Row] = field(default_factory=list)
    grouped_rows: dict[int, list[Row]] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        """False only when validation ran and reported errors."""
        return self.validation is None or self.validation.valid


class LadderParser:
    """Builder, validator and mapper configured from one :class:`LadderConfig`."""

    def __init__(self, config: LadderConfig | None = None) -> None:
        self.config = config or LadderConfig()
        self.builder = ProgramBuilder()
        self.validator = ProgramValidator(self.config.validator_config)
        self.mapper = AddressMapper(self.config.mapper)

    def parse(self, text: str, *, metadata: ProgramMetadata | None = None,
              validate: bool = True) -> ParseResult:
        rows = RowReader(text).read_all()
        program = self.builder.build_from_rows(rows, metadata)
        return ParseResult(
            program=program,
            validation=self.validator.validate(program) if validate else None,
            rows=rows,
            grouped_rows=group_by_step(rows),
        )

    def validate(self, program: Program) -> ValidationReport:
        return self.validator.validate(program)

    def grid_size(self, network: Network) -> GridSize:
        return grid_size(network)

    def all_grid_sizes(self, program: Program) -> dict[str, GridSize]:
        return {net.id: grid_size(net) for net in program.networks}


def parse_program(text: str, *, metadata: ProgramMetadata | None = None,
                  validate: bool = True, config: LadderConfig | None = None) -> ParseResult:
    """Parse a listing into a Program and (optionally) validate it."""
    return LadderParser(config).parse(text, metadata=metadata, validate=validate)
