import json
import os
import tempfile
import unittest
from unittest.mock import patch

from core.diff_engine import diffText
from core.diff_hash import makeDiffHash
from core.diff_models import DiffOptions, DiffResult, Hunk, Line, LineOp
from core.exceptions import FileProcessingError
from core.recent_diffs import RecentDiffsStore


class TestDiffHash(unittest.TestCase):

	def test_hash_is_stable_and_hex(self: 'TestDiffHash') -> None:
		first = makeDiffHash(diffText("a\nb", "a\nc"))
		second = makeDiffHash(diffText("a\nb", "a\nc"))
		self.assertEqual(first, second)
		self.assertEqual(len(first), 64)
		int(first, 16)

	def test_hash_ignores_file_meta(self: 'TestDiffHash') -> None:
		hunk = Hunk(1, 1, 1, 1, (Line(LineOp.DELETE, "a"), Line(LineOp.INSERT, "b")))
		self.assertEqual(makeDiffHash(DiffResult(hunks=(hunk,))), makeDiffHash(diffText("a", "b", DiffOptions(context_lines=0))))

	def test_hash_depends_on_content_and_options(self: 'TestDiffHash') -> None:
		diff = diffText("a", "b")
		self.assertNotEqual(makeDiffHash(diff), makeDiffHash(diffText("a", "c")))
		self.assertNotEqual(makeDiffHash(diff), makeDiffHash(diff, {"context_lines": 2}))
		self.assertEqual(makeDiffHash(diff, {"x": 1, "y": 2}), makeDiffHash(diff, {"y": 2, "x": 1}))

	def test_empty_diff(self: 'TestDiffHash') -> None:
		self.assertEqual(makeDiffHash(None), makeDiffHash(DiffResult()))


class TestRecentDiffsStore(unittest.TestCase):

	def setUp(self: 'TestRecentDiffsStore') -> None:
		self._tmp = tempfile.TemporaryDirectory()
		self.historyPath = os.path.join(self._tmp.name, "sub", "recent.json")
		self.patcher = patch('core.recent_diffs.logger')
		self.patcher.start()

	def tearDown(self: 'TestRecentDiffsStore') -> None:
		self.patcher.stop()
		self._tmp.cleanup()

	def test_add_puts_newest_first(self: 'TestRecentDiffsStore') -> None:
		store = RecentDiffsStore()
		store.add(diffText("a", "b"), "a", "b")
		entry = store.add(diffText("c", "d"), "c", "d", aLabel="left.txt", bLabel="right.txt")
		self.assertEqual(store.items[0].meta.id, entry.meta.id)
		self.assertEqual(entry.meta.aLabel, "left.txt")
		self.assertEqual(entry.meta.hunksCount, 1)
		self.assertEqual(entry.meta.aPreview, "c")

	def test_duplicate_diff_is_not_added(self: 'TestRecentDiffsStore') -> None:
		store = RecentDiffsStore()
		self.assertIsNotNone(store.add(diffText("a", "b"), "a", "b"))
		self.assertIsNone(store.add(diffText("a", "b"), "a", "b"))
		self.assertEqual(len(store.items), 1)

	def test_history_is_capped(self: 'TestRecentDiffsStore') -> None:
		store = RecentDiffsStore(maxEntries=5)
		for i in range(8):
			store.add(diffText("x", f"y{i}"), "x", f"y{i}")
		self.assertEqual(len(store.items), 5)
		self.assertEqual(store.items[0].meta.bPreview, "y7")

	def test_preview_falls_back_to_diff_text(self: 'TestRecentDiffsStore') -> None:
		entry = RecentDiffsStore().add(diffText("keep\nold", "keep\nnew"))
		self.assertEqual(entry.meta.aPreview, "keep")
		self.assertEqual(entry.meta.hunksCount, 1)

	def test_find_and_clear(self: 'TestRecentDiffsStore') -> None:
		store = RecentDiffsStore()
		entry = store.add(diffText("a", "b"))
		self.assertIs(store.find(entry.meta.id), entry)
		self.assertIsNone(store.find("missing"))
		store.clear()
		self.assertEqual(store.items, [])

	def test_save_and_load(self: 'TestRecentDiffsStore') -> None:
		store = RecentDiffsStore(self.historyPath)
		original = store.add(diffText("a\nb\nc", "a\nx\nc"), "a\nb\nc", "a\nx\nc")
		store.save()

		with open(self.historyPath, 'r', encoding='utf-8') as f:
			payload = json.load(f)
		self.assertEqual(payload["version"], 2)
		self.assertEqual(len(payload["items"]), 1)

		reloaded = RecentDiffsStore(self.historyPath)
		self.assertEqual(reloaded.load(), 1)
		entry = reloaded.items[0]
		self.assertEqual(entry.meta, original.meta)
		self.assertEqual(entry.result.hunks, original.result.hunks)
		self.assertEqual(entry.bText, "a\nx\nc")

	def test_load_missing_file(self: 'TestRecentDiffsStore') -> None:
		self.assertEqual(RecentDiffsStore(self.historyPath).load(), 0)

	def test_load_corrupt_file_starts_empty(self: 'TestRecentDiffsStore') -> None:
		os.makedirs(os.path.dirname(self.historyPath))
		with open(self.historyPath, 'w', encoding='utf-8') as f:
			f.write("{not json")
		store = RecentDiffsStore(self.historyPath)
		self.assertEqual(store.load(), 0)
		self.assertEqual(store.items, [])

	def test_load_skips_malformed_entries(self: 'TestRecentDiffsStore') -> None:
		good = RecentDiffsStore()
		good.add(diffText("a", "b"))
		badHunk = {"a_start": 1, "a_lines": 5, "b_start": 1, "b_lines": 1, "lines": [{"op": "insert", "text": "x"}]}
		items = [good.items[0].toDict(), {"meta": {"id": "x"}}, {"meta": good.items[0].toDict()["meta"], "result": {"hunks": [badHunk]}}]
		os.makedirs(os.path.dirname(self.historyPath))
		with open(self.historyPath, 'w', encoding='utf-8') as f:
			json.dump({"version": 2, "items": items}, f)
		store = RecentDiffsStore(self.historyPath)
		self.assertEqual(store.load(), 1)

	def test_save_failure_raises(self: 'TestRecentDiffsStore') -> None:
		store = RecentDiffsStore(self.historyPath)
		store.add(diffText("a", "b"))
		with patch('builtins.open', side_effect=PermissionError("denied")):
			with self.assertRaises(FileProcessingError):
				store.save()

	def test_in_memory_store_does_not_persist(self: 'TestRecentDiffsStore') -> None:
		store = RecentDiffsStore()
		store.add(diffText("a", "b"))
		store.save()
		self.assertEqual(store.load(), 0)
		self.assertEqual(len(store.items), 1)


if __name__ == '__main__':
	unittest.main()
