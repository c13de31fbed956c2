"""ladderir export: regenerate listings from a built Program."""

from .listing import ListingWriter, to_listing

__all__ = [
    "ListingWriter",
    "to_listing",
]
