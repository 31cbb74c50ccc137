import unittest

from core.diff_models import DiffResult, Hunk, Line, LineOp, Token
from core.row_aligner import alignAllHunks, alignHunk


def _hunk(a_start: int, a_lines: int, b_start: int, b_lines: int, *ops) -> Hunk:
	return Hunk(a_start, a_lines, b_start, b_lines, tuple(Line(LineOp(op), text) for op, text in ops))


class TestAlignHunk(unittest.TestCase):

	def test_replace_with_context_gives_three_rows(self: 'TestAlignHunk') -> None:
		hunk = _hunk(1, 3, 1, 3, ("equal", "a"), ("delete", "b"), ("insert", "x"), ("equal", "c"))
		aligned = alignHunk(hunk)

		self.assertEqual(len(aligned.rows), 3)
		first, middle, last = aligned.rows
		self.assertEqual((first.left.text, first.right.text), ("a", "a"))
		self.assertEqual((first.left.op, first.right.op), (LineOp.EQUAL, LineOp.EQUAL))
		self.assertTrue(middle.isReplace)
		self.assertEqual((middle.left.text, middle.right.text), ("b", "x"))
		self.assertEqual(middle.left.tokens, (Token("b", deleted=True),))
		self.assertEqual(middle.right.tokens, (Token("x", inserted=True),))
		self.assertEqual((last.left.ln, last.right.ln), (3, 3))
		self.assertIsNone(first.left.tokens)

	def test_replace_without_context_gives_one_row(self: 'TestAlignHunk') -> None:
		aligned = alignHunk(_hunk(2, 1, 2, 1, ("delete", "b"), ("insert", "x")))
		self.assertEqual(len(aligned.rows), 1)
		self.assertEqual((aligned.rows[0].left.ln, aligned.rows[0].right.ln), (2, 2))

	def test_pure_insertion_has_right_side_only(self: 'TestAlignHunk') -> None:
		aligned = alignHunk(_hunk(2, 0, 2, 1, ("insert", "new")))
		self.assertEqual(len(aligned.rows), 1)
		row = aligned.rows[0]
		self.assertIsNone(row.left)
		self.assertEqual(row.right.text, "new")
		self.assertEqual(row.right.ln, 2)
		self.assertIsNone(row.right.tokens)

	def test_pure_deletion_has_left_side_only(self: 'TestAlignHunk') -> None:
		aligned = alignHunk(_hunk(4, 2, 4, 0, ("delete", "x"), ("delete", "y")))
		self.assertEqual([row.left.ln for row in aligned.rows], [4, 5])
		self.assertTrue(all(row.right is None for row in aligned.rows))

	def test_insert_run_before_delete_run_is_paired(self: 'TestAlignHunk') -> None:
		aligned = alignHunk(_hunk(1, 1, 1, 1, ("insert", "new"), ("delete", "old")))
		self.assertEqual(len(aligned.rows), 1)
		row = aligned.rows[0]
		self.assertEqual(row.left.text, "old")
		self.assertEqual(row.left.op, LineOp.DELETE)
		self.assertEqual(row.right.text, "new")
		self.assertEqual(row.right.op, LineOp.INSERT)
		self.assertIsNotNone(row.left.tokens)

	def test_unequal_runs_pair_positionally(self: 'TestAlignHunk') -> None:
		hunk = _hunk(1, 1, 1, 3, ("delete", "d1"), ("insert", "i1"), ("insert", "i2"), ("insert", "i3"))
		aligned = alignHunk(hunk)
		self.assertEqual(len(aligned.rows), 3)
		self.assertEqual(aligned.rows[0].left.text, "d1")
		self.assertEqual(aligned.rows[0].right.text, "i1")
		self.assertIsNone(aligned.rows[1].left)
		self.assertIsNone(aligned.rows[2].left)
		self.assertEqual([row.right.ln for row in aligned.rows], [1, 2, 3])
		self.assertIsNone(aligned.rows[2].right.tokens)

	def test_side_counts_match_hunk_counts(self: 'TestAlignHunk') -> None:
		hunk = _hunk(
			10, 6, 12, 6,
			("equal", "e1"), ("delete", "d1"), ("delete", "d2"), ("insert", "i1"),
			("equal", "e2"), ("insert", "i2"), ("insert", "i3"), ("delete", "d3"), ("equal", "e3"),
		)
		aligned = alignHunk(hunk)
		leftCount = sum(1 for row in aligned.rows if row.left is not None)
		rightCount = sum(1 for row in aligned.rows if row.right is not None)
		self.assertEqual(leftCount, hunk.a_lines)
		self.assertEqual(rightCount, hunk.b_lines)
		self.assertTrue(all(row.left is not None or row.right is not None for row in aligned.rows))
		self.assertEqual(aligned.rows[-1].left.ln, 15)
		self.assertEqual(aligned.rows[-1].right.ln, 17)

	def test_align_all_hunks(self: 'TestAlignHunk') -> None:
		self.assertEqual(alignAllHunks(None), [])
		diff = DiffResult(hunks=(
			_hunk(2, 1, 2, 1, ("delete", "b"), ("insert", "x")),
			_hunk(8, 0, 8, 1, ("insert", "y")),
		))
		aligned = alignAllHunks(diff)
		self.assertEqual([h.a_start for h in aligned], [2, 8])


if __name__ == '__main__':
	unittest.main()
