"""Listing switch classification tests.

Covers forced single-column output, stripped multi-column switches, and
option values that must not be mistaken for targets.
"""

from __future__ import annotations

import unittest

from lsgit.listing.options import ListingMode, parse_listing_args, with_color_switch


class ParseListingArgsTests(unittest.TestCase):
    def test_single_column_is_always_forced(self) -> None:
        invocation = parse_listing_args([])
        self.assertEqual(invocation.switches, ("-1",))
        self.assertEqual(invocation.targets, ())
        self.assertEqual(invocation.mode, ListingMode())

    def test_multi_column_switches_are_stripped_from_clusters(self) -> None:
        invocation = parse_listing_args(["-Cla", "-x", "-m", "-D", "src"])
        self.assertEqual(invocation.switches, ("-1", "-la"))
        self.assertEqual(invocation.targets, ("src",))
        self.assertTrue(invocation.mode.long_format)

    def test_format_values_are_filtered(self) -> None:
        invocation = parse_listing_args(["--format=across", "--dired", "--format", "commas", "--format=long"])
        self.assertEqual(invocation.switches, ("-1", "--format=long"))
        self.assertTrue(invocation.mode.long_format)

    def test_modes_are_detected(self) -> None:
        invocation = parse_listing_args(["-FQ", "--recursive"])
        self.assertTrue(invocation.mode.classify)
        self.assertTrue(invocation.mode.quoted)
        self.assertTrue(invocation.mode.recursive)
        self.assertFalse(invocation.mode.directory_as_file)

        invocation = parse_listing_args(["--indicator-style=slash", "--quoting-style=c", "-d"])
        self.assertTrue(invocation.mode.classify)
        self.assertTrue(invocation.mode.quoted)
        self.assertTrue(invocation.mode.directory_as_file)

    def test_option_values_are_not_targets(self) -> None:
        invocation = parse_listing_args(["-I", "*.pyc", "-w80", "--ignore", "build", "--sort=size", "docs"])
        self.assertEqual(invocation.targets, ("docs",))
        self.assertEqual(invocation.switches, ("-1", "-I", "*.pyc", "-w80", "--ignore", "build", "--sort=size"))

    def test_double_dash_ends_switches(self) -> None:
        invocation = parse_listing_args(["-l", "--", "-weird", "plain"])
        self.assertEqual(invocation.targets, ("-weird", "plain"))
        self.assertEqual(invocation.switches, ("-1", "-l"))

    def test_headers_expected_for_several_targets_or_recursion(self) -> None:
        self.assertFalse(parse_listing_args(["a"]).expects_headers)
        self.assertTrue(parse_listing_args(["a", "b"]).expects_headers)
        self.assertTrue(parse_listing_args(["-R"]).expects_headers)

    def test_color_switch_added_only_when_caller_did_not_choose(self) -> None:
        plain = parse_listing_args(["-l"])
        self.assertEqual(with_color_switch(plain, True).switches, ("-1", "-l", "--color=always"))
        self.assertEqual(with_color_switch(plain, False).switches, ("-1", "-l"))

        chosen = parse_listing_args(["--color=never"])
        self.assertEqual(chosen.mode.color, "never")
        self.assertEqual(with_color_switch(chosen, True).switches, ("-1", "--color=never"))

        bare = parse_listing_args(["--color"])
        self.assertEqual(bare.mode.color, "always")


if __name__ == "__main__":
    unittest.main()
