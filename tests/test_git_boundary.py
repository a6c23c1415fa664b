"""Tests for the git command boundary."""

from __future__ import annotations

import subprocess
import unittest
from pathlib import Path
from unittest import mock

from lsgit import git as git_mod


class RunGitTests(unittest.TestCase):
    def test_pathspecs_are_literal(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr=None)
        with mock.patch("lsgit.git.subprocess.run", return_value=completed) as run:
            git_mod.run_git(Path("/repo"), ["status", "--", ":weird[1].txt"])
        argv = run.call_args.args[0]
        self.assertEqual(argv[:4], ["git", "--literal-pathspecs", "-C", "/repo"])
        self.assertEqual(argv[-2:], ["--", ":weird[1].txt"])

    def test_unstartable_git_is_absent_data(self) -> None:
        with mock.patch("lsgit.git.subprocess.run", side_effect=FileNotFoundError("git")):
            self.assertIsNone(git_mod.run_git(Path("/repo"), ["status"]))
            self.assertIsNone(git_mod.git_output(Path("/repo"), ["status"]))

    def test_non_numeric_count_is_absent_data(self) -> None:
        with mock.patch("lsgit.git.git_line", return_value="many"), self.assertLogs("lsgit.git", level="WARNING"):
            self.assertIsNone(git_mod.git_count(Path("/repo"), "a..b"))


if __name__ == "__main__":
    unittest.main()
