"""Listing-tool switches, invocation and line parsing."""

from .options import ListingInvocation, ListingMode, parse_listing_args, with_color_switch
from .parser import ParsedEntry, ParsedLine, SectionHeader, Unrecognized, parse_line
from .runner import ListingResult, ListingToolError, default_listing_command, run_listing

__all__ = [
    "ListingInvocation",
    "ListingMode",
    "ListingResult",
    "ListingToolError",
    "ParsedEntry",
    "ParsedLine",
    "SectionHeader",
    "Unrecognized",
    "default_listing_command",
    "parse_line",
    "parse_listing_args",
    "run_listing",
    "with_color_switch",
]
