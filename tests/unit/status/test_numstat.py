"""Line-delta and mode-change parsing tests."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lsgit.status.numstat import (
    NO_DELTA,
    LineDelta,
    ModeChange,
    Scope,
    parse_diff_summary,
    parse_mode_change,
    parse_numstat_line,
    summarize,
)


class NumstatParsingTests(unittest.TestCase):
    def test_numstat_line(self) -> None:
        self.assertEqual(parse_numstat_line("5\t2\tsrc.go"), (5, 2))
        self.assertEqual(parse_numstat_line("-\t-\timage.png"), (0, 0))
        self.assertIsNone(parse_numstat_line(" mode change 100644 => 100755 run.sh"))

    def test_mode_change_reports_executable_flips_only(self) -> None:
        self.assertIs(parse_mode_change(" mode change 100644 => 100755 run.sh"), ModeChange.EXECUTABLE_ADDED)
        self.assertIs(parse_mode_change(" mode change 100755 => 100644 run.sh"), ModeChange.EXECUTABLE_REMOVED)
        self.assertIsNone(parse_mode_change(" mode change 100644 => 100664 shared.txt"))
        self.assertIsNone(parse_mode_change("5\t2\tsrc.go"))

    def test_diff_summary_combines_counts_and_mode(self) -> None:
        delta = parse_diff_summary("3\t1\trun.sh\n mode change 100644 => 100755 run.sh\n")
        self.assertEqual(delta, LineDelta(added=3, deleted=1, mode_changes=frozenset({ModeChange.EXECUTABLE_ADDED})))
        self.assertEqual(delta.total, 4)

    def test_empty_delta_is_falsy(self) -> None:
        self.assertFalse(NO_DELTA)
        self.assertTrue(LineDelta(added=1))
        self.assertTrue(LineDelta(mode_changes=frozenset({ModeChange.EXECUTABLE_REMOVED})))

    def test_no_diff_returns_empty_delta(self) -> None:
        with mock.patch("lsgit.status.numstat.git_output", return_value=""):
            self.assertEqual(summarize(Path("."), "renamed.txt", Scope.INDEX), NO_DELTA)
        with mock.patch("lsgit.status.numstat.git_output", return_value=None):
            self.assertEqual(summarize(Path("."), "renamed.txt", Scope.WORKTREE), NO_DELTA)

    def test_scope_selects_cached_comparison(self) -> None:
        with mock.patch("lsgit.status.numstat.git_output", return_value="5\t2\tsrc.go\n") as git_output:
            delta = summarize(Path("/repo"), "src.go", Scope.INDEX)
        self.assertEqual(delta.total, 7)
        args = git_output.call_args.args[1]
        self.assertIn("--cached", args)
        self.assertIn("--no-color", args)
        self.assertEqual(args[-2:], ["--", "src.go"])


@unittest.skipIf(shutil.which("git") is None, "git is required for numstat tests")
class SummarizeRepositoryTests(unittest.TestCase):
    def _init_repo(self, root: Path) -> None:
        for args in (
            ["init", "-q"],
            ["config", "user.email", "tests@example.com"],
            ["config", "user.name", "Tests"],
            ["config", "core.fileMode", "true"],
        ):
            subprocess.run(["git", *args], cwd=root, check=True)

    def test_glob_characters_in_name_match_only_that_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self._init_repo(root)
            (root / "x[1].txt").write_text("a\n", encoding="utf-8")
            (root / "x1.txt").write_text("a\n", encoding="utf-8")
            subprocess.run(["git", "add", "-A"], cwd=root, check=True)
            subprocess.run(["git", "commit", "-q", "-m", "initial"], cwd=root, check=True)

            (root / "x[1].txt").write_text("b\n", encoding="utf-8")
            (root / "x1.txt").write_text("b\nc\nd\ne\n", encoding="utf-8")

            self.assertEqual(summarize(root, "x[1].txt", Scope.WORKTREE), LineDelta(added=1, deleted=1))
            self.assertEqual(summarize(root, "x1.txt", Scope.WORKTREE), LineDelta(added=4, deleted=1))

    def test_colored_diff_config_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self._init_repo(root)
            subprocess.run(["git", "config", "color.ui", "always"], cwd=root, check=True)
            (root / "run.sh").write_text("echo\n", encoding="utf-8")
            subprocess.run(["git", "add", "-A"], cwd=root, check=True)
            subprocess.run(["git", "commit", "-q", "-m", "initial"], cwd=root, check=True)

            (root / "run.sh").write_text("echo hi\n", encoding="utf-8")
            self.assertEqual(summarize(root, "run.sh", Scope.WORKTREE), LineDelta(added=1, deleted=1))

    def test_index_and_worktree_scopes_are_separate(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self._init_repo(root)
            target = root / "notes.txt"
            target.write_text("one\ntwo\n", encoding="utf-8")
            subprocess.run(["git", "add", "-A"], cwd=root, check=True)
            subprocess.run(["git", "commit", "-q", "-m", "initial"], cwd=root, check=True)

            target.write_text("one\ntwo\nthree\n", encoding="utf-8")
            subprocess.run(["git", "add", "notes.txt"], cwd=root, check=True)
            target.write_text("ONE\ntwo\nthree\nfour\n", encoding="utf-8")

            self.assertEqual(summarize(root, "notes.txt", Scope.INDEX), LineDelta(added=1, deleted=0))
            self.assertEqual(summarize(root, "notes.txt", Scope.WORKTREE), LineDelta(added=2, deleted=1))


if __name__ == "__main__":
    unittest.main()
