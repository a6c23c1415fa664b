"""Label composition tests for files, directories and repository roots."""

from __future__ import annotations

import unittest

from lsgit.labels import (
    EMPTY_LABEL,
    Segment,
    compose_directory_label,
    compose_file_label,
    compose_repository_label,
    label_text,
    needs_delta,
    render_label,
)
from lsgit.palette import Palette
from lsgit.status.numstat import LineDelta, ModeChange
from lsgit.status.repository import (
    Added,
    Ahead,
    AheadBehind,
    Back,
    Behind,
    Clean,
    Detached,
    DirStatusSummary,
    Forward,
    NewRef,
    NoUpstream,
    RepositoryDescriptor,
)


def file_text(code: str | None, index_delta: LineDelta = LineDelta(), worktree_delta: LineDelta = LineDelta()) -> str:
    return label_text(compose_file_label(code, index_delta, worktree_delta))


class FileLabelTests(unittest.TestCase):
    def test_untracked_and_ignored(self) -> None:
        self.assertEqual(file_text("??"), "{untracked}")
        self.assertEqual(file_text("!!"), "{ignored}")

    def test_staged_modification_with_line_count(self) -> None:
        self.assertEqual(file_text("M ", index_delta=LineDelta(added=5, deleted=2)), "{staged, 7 lines}")

    def test_added_then_modified_locally(self) -> None:
        text = file_text("AM", worktree_delta=LineDelta(added=1))
        self.assertEqual(text, "{added+modified locally, 1 line}")

    def test_worktree_only_phrases(self) -> None:
        self.assertEqual(file_text(" D"), "{deleted locally}")
        self.assertEqual(file_text(" M", worktree_delta=LineDelta(added=1, deleted=1)), "{modified locally, 2 lines}")

    def test_index_phrases(self) -> None:
        self.assertEqual(file_text("R "), "{renamed}")
        self.assertEqual(file_text("C "), "{copied}")
        self.assertEqual(file_text("D "), "{deleted}")

    def test_staged_and_modified_carry_separate_counts(self) -> None:
        text = file_text("MM", LineDelta(added=3), LineDelta(deleted=1))
        self.assertEqual(text, "{staged, 3 lines+modified locally, 1 line}")

    def test_mode_change_is_shown(self) -> None:
        delta = LineDelta(mode_changes=frozenset({ModeChange.EXECUTABLE_ADDED}))
        self.assertEqual(file_text(" M", worktree_delta=delta), "{modified locally, +x}")

    def test_unmerged_codes(self) -> None:
        for code in ("DD", "AU", "UD", "UA", "DU", "AA", "UU"):
            text = file_text(code)
            self.assertTrue(text.startswith("{unmerged, "), code)
        self.assertEqual(file_text("UU"), "{unmerged, both modified}")

    def test_clean_or_missing_code_has_no_label(self) -> None:
        self.assertEqual(compose_file_label("  "), EMPTY_LABEL)
        self.assertEqual(compose_file_label(None), EMPTY_LABEL)
        self.assertEqual(compose_file_label("?"), EMPTY_LABEL)

    def test_unknown_status_character_is_marked(self) -> None:
        self.assertEqual(file_text("T "), "{<T>}")
        self.assertEqual(file_text("MT", LineDelta(added=1)), "{staged, 1 line+<T>}")

    def test_composition_is_deterministic(self) -> None:
        delta = LineDelta(added=2)
        self.assertEqual(compose_file_label("M ", delta), compose_file_label("M ", delta))

    def test_needs_delta(self) -> None:
        self.assertEqual(needs_delta("MM"), (True, True))
        self.assertEqual(needs_delta("AM"), (False, True))
        self.assertEqual(needs_delta("??"), (False, False))
        self.assertEqual(needs_delta("UU"), (False, False))


class DirectoryLabelTests(unittest.TestCase):
    def test_only_membership_is_shown(self) -> None:
        self.assertEqual(label_text(compose_directory_label("??")), "{untracked}")
        self.assertEqual(label_text(compose_directory_label("!!")), "{ignored}")
        self.assertEqual(compose_directory_label(" M"), EMPTY_LABEL)
        self.assertEqual(compose_directory_label(None), EMPTY_LABEL)


class RepositoryLabelTests(unittest.TestCase):
    def _text(self, descriptor: RepositoryDescriptor | None) -> str:
        return label_text(compose_repository_label(descriptor))

    def test_relations(self) -> None:
        cases = [
            (Clean(), "(main)"),
            (Ahead(2), "(main, 2 ahead)"),
            (Behind(5), "(main, 5 behind)"),
            (AheadBehind(2, 5), "(main, 2 ahead, 5 behind)"),
            (NoUpstream(), "(main, no upstream)"),
        ]
        for relation, expected in cases:
            self.assertEqual(self._text(RepositoryDescriptor("main", relation)), expected)

    def test_detached_head(self) -> None:
        self.assertEqual(self._text(RepositoryDescriptor("1a2b3c4", Detached())), "(detached 1a2b3c4)")

    def test_submodule_drift(self) -> None:
        descriptor = RepositoryDescriptor("main", Clean(), is_submodule=True, worktree_drift=Forward(3))
        self.assertEqual(self._text(descriptor), "(main, 3 forward)")
        descriptor = RepositoryDescriptor(
            "main", Behind(1), is_submodule=True, worktree_drift=NewRef(), index_drift=Back(2)
        )
        self.assertEqual(self._text(descriptor), "(main, 1 behind, new ref, staged 2 back)")

    def test_added_submodule(self) -> None:
        descriptor = RepositoryDescriptor("main", NoUpstream(), is_submodule=True, index_drift=Added())
        self.assertEqual(self._text(descriptor), "(main, no upstream) {added}")

    def test_directory_summary(self) -> None:
        descriptor = RepositoryDescriptor("main", Clean(), summary=DirStatusSummary(staged=2, modified=1))
        self.assertEqual(self._text(descriptor), "(main) {2 staged, 1 modified}")
        descriptor = RepositoryDescriptor("main", Clean(), summary=DirStatusSummary())
        self.assertEqual(self._text(descriptor), "(main)")

    def test_missing_descriptor_has_no_label(self) -> None:
        self.assertEqual(compose_repository_label(None), EMPTY_LABEL)


class RenderLabelTests(unittest.TestCase):
    def test_plain_rendering_without_palette(self) -> None:
        label = compose_file_label("??")
        self.assertEqual(render_label(label), "{untracked}")

    def test_palette_colors_slotted_segments_only(self) -> None:
        palette = Palette(reset="<R>", untracked="<U>")
        label = (Segment("{"), Segment("untracked", "untracked"), Segment("}"))
        self.assertEqual(render_label(label, palette), "{<U>untracked<R>}")


if __name__ == "__main__":
    unittest.main()
