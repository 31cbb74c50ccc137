# core/token_differ.py
"""
Word-level sub-diff used to highlight the edited parts of a paired replace row.

Both strings are split into alternating word and whitespace tokens, an LCS table is
filled over the two token sequences, and the table is walked from the front to flag
each token as unchanged, deleted or inserted. Concatenating each side's tokens always
reproduces the input string exactly.
"""
import logging
import re
from typing import List

from .diff_models import Token, TokenDiff

logger: logging.Logger = logging.getLogger(__name__)

# Capturing group keeps the whitespace runs as tokens of their own
TOKEN_SPLIT_REGEX: re.Pattern = re.compile(r'(\s+)')


def tokenize(text: str) -> List[str]:
	""" Splits text into word and whitespace tokens; empty fragments are dropped. """
	return [part for part in TOKEN_SPLIT_REGEX.split(text) if part]


def wordDiff(deletedText: str, insertedText: str) -> TokenDiff:
	"""
	Computes a minimal token edit between two strings.

	Args:
		deletedText (str): The old line (left side of the replace row).
		insertedText (str): The new line (right side of the replace row).

	Returns:
		TokenDiff: aTokens reconstructing deletedText (changed tokens flagged `deleted`)
				   and bTokens reconstructing insertedText (changed tokens flagged `inserted`).
	"""
	tokensA: List[str] = tokenize(deletedText)
	tokensB: List[str] = tokenize(insertedText)
	m, n = len(tokensA), len(tokensB)

	# dp[i][j] = LCS length of tokensA[i:] and tokensB[j:]
	dp: List[List[int]] = [[0] * (n + 1) for _ in range(m + 1)]
	for i in range(m - 1, -1, -1):
		for j in range(n - 1, -1, -1):
			if tokensA[i] == tokensB[j]:
				dp[i][j] = dp[i + 1][j + 1] + 1
			else:
				dp[i][j] = max(dp[i + 1][j], dp[i][j + 1])

	aTokens: List[Token] = []
	bTokens: List[Token] = []
	i, j = 0, 0
	while i < m and j < n:
		if tokensA[i] == tokensB[j]:
			aTokens.append(Token(tokensA[i]))
			bTokens.append(Token(tokensB[j]))
			i += 1
			j += 1
		elif dp[i + 1][j] >= dp[i][j + 1]: # ties favour the delete side
			aTokens.append(Token(tokensA[i], deleted=True))
			i += 1
		else:
			bTokens.append(Token(tokensB[j], inserted=True))
			j += 1

	aTokens.extend(Token(token, deleted=True) for token in tokensA[i:])
	bTokens.extend(Token(token, inserted=True) for token in tokensB[j:])

	return TokenDiff(aTokens=tuple(aTokens), bTokens=tuple(bTokens))
