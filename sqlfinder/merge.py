"""Merging and deduplication of one file's SQL paragraphs.

``merge_paragraphs`` is idempotent: its output has no two paragraphs that
overlap or sit within one line of each other, and no two paragraphs with
the same content hash.
"""

from __future__ import annotations

import hashlib
from typing import Dict, Iterable, List, Tuple

from .model import SourceFile, SqlCandidate, SqlParagraph, ordered_union


def group_candidates(candidates: Iterable[SqlCandidate], source: SourceFile) -> List[SqlParagraph]:
	"""Collapse candidates that share a line span into one paragraph each."""
	spans: Dict[Tuple[int, int], List[str]] = {}
	for candidate in candidates:
		spans.setdefault((candidate.start_line, candidate.end_line), []).append(candidate.value)
	return [
		SqlParagraph(
			line_start=start,
			line_end=end,
			content=source.slice(start, end),
			sql_statements=ordered_union(values),
		)
		for (start, end), values in spans.items()
	]


def group_paragraphs(paragraphs: Iterable[SqlParagraph]) -> List[SqlParagraph]:
	grouped: Dict[Tuple[int, int], SqlParagraph] = {}
	for paragraph in paragraphs:
		seen = grouped.get(paragraph.span)
		if seen is None:
			grouped[paragraph.span] = paragraph
		else:
			grouped[paragraph.span] = seen.model_copy(
				update={"sql_statements": ordered_union(seen.sql_statements, paragraph.sql_statements)}
			)
	return list(grouped.values())


def combine(first: SqlParagraph, second: SqlParagraph) -> SqlParagraph:
	line_start = min(first.line_start, second.line_start)
	line_end = max(first.line_end, second.line_end)
	content = first.content
	if second.line_end > first.line_end or second.line_start < first.line_start:
		needed = line_end - line_start + 1
		if len(first.content.split("\n")) >= needed:
			content = first.content
		elif len(second.content.split("\n")) >= needed:
			content = second.content
		elif len(second.content) > len(first.content):
			content = second.content
	return SqlParagraph(
		line_start=line_start,
		line_end=line_end,
		content=content,
		sql_statements=ordered_union(first.sql_statements, second.sql_statements),
	)


def merge_overlapping(paragraphs: Iterable[SqlParagraph]) -> List[SqlParagraph]:
	"""Sort by start (widest first on ties) and fold overlapping or adjacent spans."""
	ordered = sorted(paragraphs, key=lambda p: (p.line_start, -p.line_end))
	if not ordered:
		return []
	merged: List[SqlParagraph] = []
	current = ordered[0]
	for following in ordered[1:]:
		if following.line_start <= current.line_end + 1:
			current = combine(current, following)
		else:
			merged.append(current)
			current = following
	merged.append(current)
	return merged


def content_hash(content: str) -> str:
	return hashlib.sha256(content.encode("utf-8")).hexdigest()


def collapse_duplicates(paragraphs: Iterable[SqlParagraph]) -> List[SqlParagraph]:
	"""Keep one paragraph per content hash, preferring the one with more statements."""
	unique: Dict[str, SqlParagraph] = {}
	for paragraph in paragraphs:
		key = content_hash(paragraph.content)
		kept = unique.get(key)
		if kept is None or len(kept.sql_statements) < len(paragraph.sql_statements):
			unique[key] = paragraph
	return sorted(unique.values(), key=lambda p: p.line_start)


def merge_paragraphs(paragraphs: Iterable[SqlParagraph]) -> List[SqlParagraph]:
	return collapse_duplicates(merge_overlapping(group_paragraphs(paragraphs)))


def merge_candidates(candidates: Iterable[SqlCandidate], source: SourceFile) -> List[SqlParagraph]:
	return merge_paragraphs(group_candidates(candidates, source))
