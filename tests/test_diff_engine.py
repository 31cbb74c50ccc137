import os
import tempfile
import unittest

from core.diff_engine import buildHunks, diffPaths, diffText, groupOpcodes, loadFileText, normalizeLine, splitLines
from core.diff_models import Algorithm, DiffOptions, FileKind, LineOp
from core.exceptions import DiffEngineError


def _replayB(aText: str, hunks) -> list:
	""" Applies hunks to A's lines, returning B's lines. """
	aLines = splitLines(aText)
	out = []
	cursor = 0
	for hunk in hunks:
		start = hunk.a_start - 1
		out.extend(aLines[cursor:start])
		cursor = start
		for line in hunk.lines:
			if line.op != LineOp.INSERT:
				cursor += 1
			if line.op != LineOp.DELETE:
				out.append(line.text)
	out.extend(aLines[cursor:])
	return out


class TestTextHelpers(unittest.TestCase):

	def test_split_lines(self: 'TestTextHelpers') -> None:
		self.assertEqual(splitLines(""), [])
		self.assertEqual(splitLines("a\nb"), ["a", "b"])
		self.assertEqual(splitLines("a\nb\n"), ["a", "b"])
		self.assertEqual(splitLines("a\r\nb\r\n"), ["a", "b"])
		self.assertEqual(splitLines("\n"), [""])

	def test_normalize_line(self: 'TestTextHelpers') -> None:
		self.assertEqual(normalizeLine("  Foo   Bar ", DiffOptions()), "  Foo   Bar ")
		self.assertEqual(normalizeLine("  Foo   Bar ", DiffOptions(ignore_case=True)), "  foo   bar ")
		self.assertEqual(normalizeLine("  Foo \t Bar ", DiffOptions(ignore_whitespace=True)), "Foo Bar")


class TestBuildHunks(unittest.TestCase):

	def test_identical_texts_have_no_hunks(self: 'TestBuildHunks') -> None:
		self.assertEqual(buildHunks("a\nb", "a\nb"), [])
		self.assertEqual(diffText("", "").hunks, ())

	def test_single_replacement_with_context(self: 'TestBuildHunks') -> None:
		hunks = buildHunks("a\nb\nc", "a\nx\nc", DiffOptions(context_lines=1))
		self.assertEqual(len(hunks), 1)
		hunk = hunks[0]
		self.assertEqual((hunk.a_start, hunk.a_lines, hunk.b_start, hunk.b_lines), (1, 3, 1, 3))
		self.assertEqual(
			[(line.op, line.text) for line in hunk.lines],
			[(LineOp.EQUAL, "a"), (LineOp.DELETE, "b"), (LineOp.INSERT, "x"), (LineOp.EQUAL, "c")]
		)

	def test_zero_context(self: 'TestBuildHunks') -> None:
		hunks = buildHunks("a\nb\nc", "a\nx\nc", DiffOptions(context_lines=0))
		self.assertEqual(len(hunks), 1)
		self.assertEqual((hunks[0].a_start, hunks[0].a_lines, hunks[0].b_start, hunks[0].b_lines), (2, 1, 2, 1))

	def test_distant_changes_split_into_hunks(self: 'TestBuildHunks') -> None:
		a = "\n".join(str(i) for i in range(30))
		bLines = [str(i) for i in range(30)]
		bLines[2] = "two"
		bLines[25] = "twenty-five"
		hunks = buildHunks(a, "\n".join(bLines), DiffOptions(context_lines=2))
		self.assertEqual(len(hunks), 2)
		self.assertLess(hunks[0].a_start, hunks[1].a_start)
		self.assertTrue(all(h.isConsistent() for h in hunks))

	def test_every_hunk_is_consistent_and_replays(self: 'TestBuildHunks') -> None:
		a = "alpha\nbeta\ngamma\ndelta\nepsilon\nzeta"
		b = "alpha\nBETA\ngamma\nnew\ndelta\nzeta\ntail"
		for algorithm in Algorithm:
			with self.subTest(algorithm=algorithm):
				hunks = buildHunks(a, b, DiffOptions(algorithm=algorithm, context_lines=1))
				self.assertTrue(all(h.isConsistent() for h in hunks))
				self.assertEqual(_replayB(a, hunks), splitLines(b))

	def test_myers_finds_minimal_edit(self: 'TestBuildHunks') -> None:
		hunks = buildHunks("a\nb\nc\na\nb\nb\na", "c\nb\na\nb\na\nc", DiffOptions(algorithm=Algorithm.MYERS, context_lines=0))
		edits = sum(1 for h in hunks for line in h.lines if line.op != LineOp.EQUAL)
		self.assertEqual(edits, 5)

	def test_ignore_options(self: 'TestBuildHunks') -> None:
		self.assertEqual(buildHunks("Hello\nWorld", "hello\nworld", DiffOptions(ignore_case=True)), [])
		self.assertEqual(buildHunks("a  b\nc", "a b\nc  ", DiffOptions(ignore_whitespace=True)), [])
		self.assertEqual(len(buildHunks("Hello", "hello")), 1)

	def test_original_text_is_emitted(self: 'TestBuildHunks') -> None:
		hunks = buildHunks("Keep\nold", "KEEP\nnew", DiffOptions(ignore_case=True))
		texts = [(line.op, line.text) for line in hunks[0].lines]
		self.assertIn((LineOp.EQUAL, "Keep"), texts)
		self.assertIn((LineOp.DELETE, "old"), texts)
		self.assertIn((LineOp.INSERT, "new"), texts)

	def test_unknown_algorithm(self: 'TestBuildHunks') -> None:
		with self.assertRaises(DiffEngineError):
			buildHunks("a", "b", DiffOptions(algorithm="patience"))

	def test_group_opcodes_without_changes(self: 'TestBuildHunks') -> None:
		self.assertEqual(list(groupOpcodes([("equal", 0, 3, 0, 3)], 3)), [])
		self.assertEqual(list(groupOpcodes([], 3)), [])


class TestFileInputs(unittest.TestCase):

	def setUp(self: 'TestFileInputs') -> None:
		self._tmp = tempfile.TemporaryDirectory()
		self.dir = self._tmp.name

	def tearDown(self: 'TestFileInputs') -> None:
		self._tmp.cleanup()

	def _write(self: 'TestFileInputs', name: str, data: bytes) -> str:
		path = os.path.join(self.dir, name)
		with open(path, 'wb') as f:
			f.write(data)
		return path

	def test_diff_paths_text(self: 'TestFileInputs') -> None:
		a = self._write("a.txt", b"one\ntwo\n")
		b = self._write("b.txt", b"one\n2\n")
		result = diffPaths(a, b)
		self.assertEqual(len(result.hunks), 1)
		self.assertEqual(result.a.kind, FileKind.TEXT)
		self.assertEqual(result.b.size_bytes, 6)

	def test_binary_side_gives_no_hunks(self: 'TestFileInputs') -> None:
		a = self._write("a.txt", b"text\n")
		b = self._write("b.bin", b"\x89PNG\x00\x01\x02")
		result = diffPaths(a, b)
		self.assertEqual(result.hunks, ())
		self.assertEqual(result.b.kind, FileKind.BINARY)

	def test_missing_side_gives_no_hunks(self: 'TestFileInputs') -> None:
		a = self._write("a.txt", b"text\n")
		result = diffPaths(a, os.path.join(self.dir, "nope.txt"))
		self.assertEqual(result.hunks, ())
		self.assertEqual(result.b.kind, FileKind.MISSING)

	def test_encoding_detection(self: 'TestFileInputs') -> None:
		meta, text = loadFileText(self._write("bom.txt", b"\xef\xbb\xbfhello"))
		self.assertEqual((meta.encoding, text), ("utf-8-sig", "hello"))
		meta, text = loadFileText(self._write("u16.txt", "hi".encode("utf-16")))
		self.assertEqual((meta.encoding, text), ("utf-16", "hi"))
		meta, text = loadFileText(self._write("latin.txt", b"caf\xe9"))
		self.assertEqual((meta.encoding, text), ("latin-1", "café"))

	def test_utf16_files_diff_as_text(self: 'TestFileInputs') -> None:
		a = self._write("a16.txt", "hello\nworld\n".encode("utf-16"))
		b = self._write("b16.txt", "hello\nthere\n".encode("utf-16"))
		meta, text = loadFileText(a)
		self.assertEqual(meta.kind, FileKind.TEXT)
		self.assertEqual(text, "hello\nworld\n")
		result = diffPaths(a, b)
		self.assertEqual((result.a.kind, result.b.kind), (FileKind.TEXT, FileKind.TEXT))
		self.assertEqual(len(result.hunks), 1)

	def test_unreadable_file_raises(self: 'TestFileInputs') -> None:
		with self.assertRaises(DiffEngineError):
			loadFileText(self.dir) # A directory exists but cannot be opened as a file


if __name__ == '__main__':
	unittest.main()
