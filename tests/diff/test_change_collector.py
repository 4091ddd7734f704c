import unittest

from git_ai.diff.change_set import ChangeSet, FileDiff
from git_ai.diff.diff_extractor import MAX_DIFF_LINES, collect_changes, extract_changed_lines
from git_ai.vcs.git_client import ChangedFile, FileStatus, GitError


SAMPLE_DIFF = """diff --git a/app.js b/app.js
index 1111111..2222222 100644
--- a/app.js
+++ b/app.js
@@ -1,3 +1,3 @@
 const a = 1;
-const b = 2;
+const b = 3;
 const c = 4;
"""


class DummyClient:
    def __init__(self, changes, diffs=None, failing=()):
        self.changes = changes
        self.diffs = diffs or {}
        self.failing = set(failing)
        self.diff_calls = []

    def get_changes(self):
        return self.changes

    def get_diff(self, path, untracked=False):
        self.diff_calls.append((path, untracked))
        if path in self.failing:
            raise GitError("diff failed")
        return self.diffs.get(path, "")


class TestExtractChangedLines(unittest.TestCase):
    def test_drops_headers_and_context(self) -> None:
        self.assertEqual(extract_changed_lines(SAMPLE_DIFF), ["-const b = 2;", "+const b = 3;"])

    def test_caps_line_count(self) -> None:
        diff = "\n".join(f"+line {i}" for i in range(250))
        lines = extract_changed_lines(diff)
        self.assertEqual(len(lines), MAX_DIFF_LINES)
        self.assertEqual(lines[0], "+line 0")
        self.assertEqual(lines[-1], "+line 99")


class TestCollectChanges(unittest.TestCase):
    def test_collects_diffs_for_diffable_files(self) -> None:
        client = DummyClient(
            [
                ChangedFile("app.js", FileStatus.MODIFIED, " M"),
                ChangedFile("old.js", FileStatus.DELETED, " D"),
                ChangedFile("new.txt", FileStatus.UNTRACKED, "??"),
            ],
            diffs={"app.js": SAMPLE_DIFF, "new.txt": "+++ b/new.txt\n+hello\n"},
        )
        change_set = collect_changes(client)

        self.assertEqual(change_set.valid_paths, ("app.js", "old.js", "new.txt"))
        self.assertEqual([d.path for d in change_set.diffs], ["app.js", "new.txt"])
        self.assertEqual(change_set.diffs[1].changed_lines, ("+hello",))
        # Deleted files are never diffed; untracked ones use an empty baseline
        self.assertEqual(client.diff_calls, [("app.js", False), ("new.txt", True)])

    def test_diff_failure_only_drops_that_file(self) -> None:
        client = DummyClient(
            [ChangedFile("a.js", FileStatus.MODIFIED), ChangedFile("b.js", FileStatus.MODIFIED)],
            diffs={"b.js": "+b\n"},
            failing=["a.js"],
        )
        change_set = collect_changes(client)
        self.assertEqual(change_set.valid_paths, ("a.js", "b.js"))
        self.assertEqual([d.path for d in change_set.diffs], ["b.js"])

    def test_empty_diff_produces_no_file_diff(self) -> None:
        client = DummyClient([ChangedFile("image.png", FileStatus.ADDED)], diffs={"image.png": "Binary files differ\n"})
        change_set = collect_changes(client)
        self.assertEqual(change_set.diffs, ())
        self.assertFalse(change_set.is_empty())

    def test_every_diff_respects_bounds(self) -> None:
        big = "--- a/x\n+++ b/x\n" + "\n".join(f"-old {i}\n+new {i}" for i in range(200))
        client = DummyClient([ChangedFile("x", FileStatus.MODIFIED)], diffs={"x": big})
        for file_diff in collect_changes(client).diffs:
            self.assertLessEqual(len(file_diff.changed_lines), MAX_DIFF_LINES)
            self.assertFalse(any(line.startswith(("+++", "---")) for line in file_diff.changed_lines))


class TestChangeSet(unittest.TestCase):
    def test_rejects_diff_for_unknown_path(self) -> None:
        with self.assertRaises(ValueError):
            ChangeSet(files=(ChangedFile("a.js", FileStatus.MODIFIED),), diffs=(FileDiff("b.js", ("+x",)),))

    def test_empty(self) -> None:
        self.assertTrue(ChangeSet().is_empty())


if __name__ == "__main__":
    unittest.main()
