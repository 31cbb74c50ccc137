# core/diff_hash.py
"""
Stable fingerprint of a rendered diff: a lowercase hex SHA-256 over a canonical
serialization of the hunks plus the options that affect the output.
Two runs that would render identically produce the same hash.
"""
import hashlib
import json
from typing import Any, Dict, Optional

from .diff_models import DiffResult


def _stableSerialize(diff: Optional[DiffResult], options: Optional[Dict[str, Any]] = None) -> str:
	payload: Dict[str, Any] = {
		"o": options or {},
		"h": [
			{
				"a": [hunk.a_start, hunk.a_lines],
				"b": [hunk.b_start, hunk.b_lines],
				"l": [[line.op.value, line.text] for line in hunk.lines],
			}
			for hunk in (diff.hunks if diff is not None else ())
		],
	}
	# sort_keys canonicalizes nested option dicts as well
	return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def makeDiffHash(diff: Optional[DiffResult], options: Optional[Dict[str, Any]] = None) -> str:
	""" Returns the SHA-256 fingerprint of the diff (and options) as lowercase hex. """
	return hashlib.sha256(_stableSerialize(diff, options).encode("utf-8")).hexdigest()
