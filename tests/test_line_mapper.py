import unittest

from core.diff_engine import diffText
from core.diff_models import DiffOptions, DiffResult, Hunk, Line, LineOp
from core.line_mapper import LineMapCache, buildLineMapAtoB, invertMap, transposeDiff


def _hunk(a_start: int, a_lines: int, b_start: int, b_lines: int, *ops) -> Hunk:
	return Hunk(a_start, a_lines, b_start, b_lines, tuple(Line(LineOp(op), text) for op, text in ops))


class TestBuildLineMap(unittest.TestCase):

	def test_no_hunks_is_identity(self: 'TestBuildLineMap') -> None:
		for diff in (None, DiffResult()):
			lineMap = buildLineMapAtoB(diff, 5, 5)
			self.assertEqual([lineMap(i) for i in range(5)], [0, 1, 2, 3, 4])

	def test_identity_is_clamped_to_target(self: 'TestBuildLineMap') -> None:
		lineMap = buildLineMapAtoB(None, 5, 3)
		self.assertEqual(lineMap.asList(), [0, 1, 2, 2, 2])
		self.assertEqual((lineMap.sourceTotal, lineMap.targetTotal), (5, 3))

	def test_insertion_shifts_following_lines(self: 'TestBuildLineMap') -> None:
		diff = DiffResult(hunks=(_hunk(2, 0, 2, 1, ("insert", "new")),))
		before = buildLineMapAtoB(None, 2, 3)
		after = buildLineMapAtoB(diff, 2, 3)
		self.assertEqual(after(0), 0)
		self.assertEqual(after(1), before(1) + 1)

	def test_deleted_lines_snap_to_surviving_position(self: 'TestBuildLineMap') -> None:
		# A: a b c d   B: a d
		diff = DiffResult(hunks=(_hunk(2, 2, 2, 0, ("delete", "b"), ("delete", "c")),))
		lineMap = buildLineMapAtoB(diff, 4, 2)
		self.assertEqual(lineMap.asList(), [0, 1, 1, 1])

	def test_map_is_monotonic_for_engine_output(self: 'TestBuildLineMap') -> None:
		a = "\n".join(f"line {i}" for i in range(40))
		bLines = [f"line {i}" for i in range(40) if i % 7 != 3]
		bLines[10:10] = ["inserted one", "inserted two"]
		b = "\n".join(bLines)
		diff = diffText(a, b, DiffOptions(context_lines=1))
		lineMap = buildLineMapAtoB(diff, 40, len(bLines))
		values = lineMap.asList()
		self.assertEqual(values, sorted(values))
		self.assertTrue(all(0 <= v < len(bLines) for v in values))

	def test_round_trip_on_untouched_lines(self: 'TestBuildLineMap') -> None:
		a = "a\nb\nc\nd\ne\nf"
		b = "a\nB\nc\nd\nnew\ne\nf"
		diff = diffText(a, b, DiffOptions(context_lines=0))
		aTotal, bTotal = 6, 7
		forward = buildLineMapAtoB(diff, aTotal, bTotal)
		backward = invertMap(diff, aTotal, bTotal)
		for index in (0, 2, 3, 4, 5):
			with self.subTest(index=index):
				self.assertEqual(backward(forward(index)), index)

	def test_queries_are_clamped(self: 'TestBuildLineMap') -> None:
		lineMap = buildLineMapAtoB(None, 3, 3)
		self.assertEqual(lineMap(-4), 0)
		self.assertEqual(lineMap(99), 2)

	def test_empty_documents_map_to_zero(self: 'TestBuildLineMap') -> None:
		self.assertEqual(buildLineMapAtoB(None, 0, 5)(3), 0)
		self.assertEqual(buildLineMapAtoB(None, 5, 0)(3), 0)

	def test_stale_hunk_beyond_document_is_clamped(self: 'TestBuildLineMap') -> None:
		diff = DiffResult(hunks=(_hunk(50, 1, 60, 2, ("delete", "x"), ("insert", "y"), ("insert", "z")),))
		lineMap = buildLineMapAtoB(diff, 5, 4)
		values = lineMap.asList()
		self.assertEqual(len(values), 5)
		self.assertTrue(all(0 <= v <= 3 for v in values))
		self.assertEqual(values, sorted(values))


class TestTransposeAndCache(unittest.TestCase):

	def test_transpose_swaps_sides_and_ops(self: 'TestTransposeAndCache') -> None:
		diff = DiffResult(hunks=(_hunk(2, 1, 3, 2, ("delete", "b"), ("insert", "x"), ("insert", "y")),))
		flipped = transposeDiff(diff).hunks[0]
		self.assertEqual((flipped.a_start, flipped.a_lines, flipped.b_start, flipped.b_lines), (3, 2, 2, 1))
		self.assertEqual([line.op for line in flipped.lines], [LineOp.INSERT, LineOp.DELETE, LineOp.DELETE])
		self.assertTrue(flipped.isConsistent())

	def test_invert_of_none_is_identity(self: 'TestTransposeAndCache') -> None:
		self.assertEqual(invertMap(None, 3, 4).asList(), [0, 1, 2, 2])

	def test_cache_reuses_maps_until_inputs_change(self: 'TestTransposeAndCache') -> None:
		diff = DiffResult(hunks=(_hunk(2, 0, 2, 1, ("insert", "new")),))
		cache = LineMapCache()
		first = cache.getMaps(diff, 2, 3)
		self.assertIs(cache.getMaps(diff, 2, 3), first)
		self.assertIsNot(cache.getMaps(diff, 3, 3), first)
		rebuilt = cache.getMaps(DiffResult(hunks=diff.hunks), 3, 3)
		self.assertIsNot(rebuilt, first)
		cache.clear()
		self.assertIsNot(cache.getMaps(diff, 2, 3), first)


if __name__ == '__main__':
	unittest.main()
