import unittest

from core.diff_models import Token
from core.token_differ import tokenize, wordDiff


def _join(tokens) -> str:
	return "".join(token.text for token in tokens)


class TestTokenize(unittest.TestCase):

	def test_keeps_whitespace_runs_as_tokens(self: 'TestTokenize') -> None:
		self.assertEqual(tokenize("foo  bar\tbaz"), ["foo", "  ", "bar", "\t", "baz"])

	def test_leading_and_trailing_whitespace(self: 'TestTokenize') -> None:
		self.assertEqual(tokenize(" x "), [" ", "x", " "])

	def test_empty_string_has_no_tokens(self: 'TestTokenize') -> None:
		self.assertEqual(tokenize(""), [])


class TestWordDiff(unittest.TestCase):
	"""
	Token-level diff used for replace rows.
	"""

	def test_single_word_replacement(self: 'TestWordDiff') -> None:
		result = wordDiff("b", "x")
		self.assertEqual(result.aTokens, (Token("b", deleted=True),))
		self.assertEqual(result.bTokens, (Token("x", inserted=True),))

	def test_identical_strings_have_no_flags(self: 'TestWordDiff') -> None:
		result = wordDiff("the quick fox", "the quick fox")
		self.assertFalse(any(t.deleted or t.inserted for t in result.aTokens))
		self.assertFalse(any(t.deleted or t.inserted for t in result.bTokens))

	def test_changed_middle_word(self: 'TestWordDiff') -> None:
		result = wordDiff("the quick fox", "the slow fox")
		deleted = [t.text for t in result.aTokens if t.deleted]
		inserted = [t.text for t in result.bTokens if t.inserted]
		self.assertEqual(deleted, ["quick"])
		self.assertEqual(inserted, ["slow"])

	def test_concatenation_reconstructs_inputs(self: 'TestWordDiff') -> None:
		pairs = [
			("int x = 1;", "int  y = 2;"),
			("  leading", "trailing  "),
			("a b c d", "d c b a"),
			("", "only new"),
			("only old", ""),
			("tabs\tand  spaces", "tabs and\tspaces"),
		]
		for old, new in pairs:
			with self.subTest(old=old, new=new):
				result = wordDiff(old, new)
				self.assertEqual(_join(result.aTokens), old)
				self.assertEqual(_join(result.bTokens), new)

	def test_a_side_only_deleted_flags_b_side_only_inserted(self: 'TestWordDiff') -> None:
		result = wordDiff("one two three", "one 2 three four")
		self.assertFalse(any(t.inserted for t in result.aTokens))
		self.assertFalse(any(t.deleted for t in result.bTokens))

	def test_empty_inputs(self: 'TestWordDiff') -> None:
		result = wordDiff("", "")
		self.assertEqual(result.aTokens, ())
		self.assertEqual(result.bTokens, ())

	def test_all_new_tokens_flagged_when_old_empty(self: 'TestWordDiff') -> None:
		result = wordDiff("", "new words")
		self.assertEqual(result.aTokens, ())
		self.assertTrue(all(t.inserted for t in result.bTokens))

	def test_tie_prefers_delete_first(self: 'TestWordDiff') -> None:
		# No common tokens: every old token is emitted before any new token
		result = wordDiff("a", "b")
		self.assertEqual([t.text for t in result.aTokens], ["a"])
		self.assertEqual([t.text for t in result.bTokens], ["b"])


if __name__ == '__main__':
	unittest.main()
