"""ladderir mapping: device addresses to the protocol memory model.

Public API::

    from ladderir.mapping import AddressMapper, MappingResult
"""

from ._mapper import BITS_PER_WORD, AddressMapper, MappingResult

__all__ = [
    "AddressMapper",
    "BITS_PER_WORD",
    "MappingResult",
]
