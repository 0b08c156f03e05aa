"""Tests for DiffParser and patch decoding."""

from __future__ import annotations

import unittest

from hunkwise.domain.diff import DiffStats
from hunkwise.domain.diff_mode import DiffMode
from hunkwise.errors import EngineError
from hunkwise.infrastructure.git.diff_engine import EngineDiff
from hunkwise.infrastructure.git.diff_parser import DiffParser, decode_patch

PATCH = b"""\
diff --git a/a.txt b/a.txt
index 8baef1b..2c1ba5d 100644
--- a/a.txt
+++ b/a.txt
@@ -1,3 +1,3 @@
 a
-b
+X
 c
diff --git a/b.txt b/b.txt
new file mode 100644
index 0000000..d00491f
--- /dev/null
+++ b/b.txt
@@ -0,0 +1 @@
+1
"""

SHORTSTAT = " 2 files changed, 2 insertions(+), 1 deletion(-)\n"


def _engine_diff(patch: bytes, shortstat: str = "") -> EngineDiff:
    return EngineDiff(mode=DiffMode.INDEX_TO_WORKDIR, patch=patch, shortstat=shortstat)


class TestDiffParser(unittest.TestCase):
    """Tests for DiffParser.parse()."""

    def setUp(self):
        self.parser = DiffParser()

    def test_parses_every_file(self):
        output = self.parser.parse(_engine_diff(PATCH, SHORTSTAT))

        self.assertEqual([f.path for f in output.files], ["a.txt", "b.txt"])
        self.assertTrue(output.files[1].is_added)

    def test_stats_come_from_shortstat(self):
        output = self.parser.parse(_engine_diff(PATCH, SHORTSTAT))

        self.assertEqual(output.stats, DiffStats(files_changed=2, insertions=2, deletions=1))

    def test_omitted_hunk_length_defaults_to_one(self):
        hunk = self.parser.parse(_engine_diff(PATCH)).files[1].hunks[0]

        self.assertEqual((hunk.old_start, hunk.old_lines, hunk.new_start, hunk.new_lines), (0, 0, 1, 1))
        self.assertTrue(hunk.counts_match())

    def test_every_hunk_counts_match(self):
        output = self.parser.parse(_engine_diff(PATCH))

        for diff_file in output.files:
            for hunk in diff_file.hunks:
                self.assertTrue(hunk.counts_match(), hunk.header)

    def test_empty_patch_is_empty_output(self):
        output = self.parser.parse(_engine_diff(b""))

        self.assertTrue(output.is_empty)
        self.assertEqual(output.stats, DiffStats.empty())

    def test_invalid_utf8_is_replaced_and_logged(self):
        patch = PATCH.replace(b"+X\n", b"+caf\xe9\n")

        with self.assertLogs("hunkwise.infrastructure.git.diff_parser", level="WARNING") as logs:
            output = self.parser.parse(_engine_diff(patch))

        self.assertIn("EncodingLossy", logs.output[0])
        self.assertEqual(output.files[0].hunks[0].lines[2].content, "caf\ufffd\n")

    def test_malformed_hunk_raises_engine_error(self):
        patch = b"--- a/a.txt\n+++ b/a.txt\n@@ -1,3 +1,3 @@\n a\ngarbage\n"

        with self.assertRaises(EngineError):
            self.parser.parse(_engine_diff(patch))


class TestDecodePatch(unittest.TestCase):
    """Tests for decode_patch()."""

    def test_valid_utf8_is_decoded_silently(self):
        self.assertEqual(decode_patch("+héllo\n".encode("utf-8")), "+héllo\n")

    def test_invalid_bytes_are_replaced(self):
        with self.assertLogs("hunkwise.infrastructure.git.diff_parser", level="WARNING"):
            self.assertEqual(decode_patch(b"a\xffb"), "a\ufffdb")


if __name__ == "__main__":
    unittest.main()
