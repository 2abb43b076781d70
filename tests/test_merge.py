from sqlfinder.merge import (
	collapse_duplicates,
	combine,
	content_hash,
	group_candidates,
	merge_candidates,
	merge_paragraphs,
)
from sqlfinder.model import SourceFile, SqlCandidate, SqlParagraph


def para(start, end, content=None, statements=("SELECT 1",)):
	if content is None:
		content = "\n".join(f"line {n}" for n in range(start, end + 1))
	return SqlParagraph(line_start=start, line_end=end, content=content, sql_statements=list(statements))


def test_overlapping_paragraphs_merge_into_one():
	merged = merge_paragraphs([para(12, 15, statements=["FROM b"]), para(10, 12, statements=["SELECT a"])])
	assert len(merged) == 1
	assert merged[0].span == (10, 15)
	assert merged[0].sql_statements == ["SELECT a", "FROM b"]


def test_adjacent_paragraphs_merge_but_gapped_ones_do_not():
	merged = merge_paragraphs([para(1, 2), para(3, 3, statements=["FROM t"]), para(5, 6)])
	assert [p.span for p in merged] == [(1, 3), (5, 6)]


def test_identical_spans_are_grouped_with_ordered_statements():
	merged = merge_paragraphs([
		para(4, 5, statements=["SELECT a", "FROM t"]),
		para(4, 5, statements=["FROM t", "WHERE x"]),
	])
	assert len(merged) == 1
	assert merged[0].sql_statements == ["SELECT a", "FROM t", "WHERE x"]


def test_wider_range_sorts_first_and_keeps_its_content():
	wide = para(3, 8, content="wide")
	narrow = para(3, 4, content="narrow")
	merged = merge_paragraphs([narrow, wide])
	assert merged[0].span == (3, 8)
	assert merged[0].content == "wide"


def test_combine_prefers_content_covering_the_merged_range():
	first = para(10, 11, content="a\nb")
	second = para(11, 14, content="b\nc\nd\ne")
	merged = combine(first, second)
	assert merged.span == (10, 14)
	# neither covers five lines, so the longer text wins
	assert merged.content == "b\nc\nd\ne"

	covering = para(10, 11, content="1\n2\n3\n4\n5")
	assert combine(covering, second).content == "1\n2\n3\n4\n5"


def test_duplicate_content_keeps_paragraph_with_more_statements():
	kept = collapse_duplicates([
		para(1, 1, content="same", statements=["SELECT a"]),
		para(5, 5, content="same", statements=["SELECT a", "FROM t"]),
	])
	assert len(kept) == 1
	assert kept[0].span == (5, 5)
	assert kept[0].sql_statements == ["SELECT a", "FROM t"]


def test_duplicate_content_tie_keeps_first_seen():
	kept = collapse_duplicates([
		para(1, 1, content="same", statements=["SELECT a"]),
		para(5, 5, content="same", statements=["FROM t"]),
	])
	assert [p.span for p in kept] == [(1, 1)]


def test_merge_is_idempotent():
	paragraphs = [
		para(30, 31, content="dup", statements=["SELECT a"]),
		para(1, 2, content="dup", statements=["SELECT a", "FROM b"]),
		para(10, 12),
		para(12, 15, statements=["UPDATE t"]),
		para(20, 20, content="x"),
		para(20, 20, content="y", statements=["DELETE FROM t"]),
		para(21, 25, content="z"),
	]
	once = merge_paragraphs(paragraphs)
	assert merge_paragraphs(once) == once
	for left, right in zip(once, once[1:]):
		assert right.line_start > left.line_end + 1
	assert len({content_hash(p.content) for p in once}) == len(once)


def test_merge_of_nothing_is_nothing():
	assert merge_paragraphs([]) == []


def test_group_candidates_slices_source_for_content():
	source = SourceFile(path="A.java", text="a\nb\nc\nd")
	grouped = group_candidates(
		[SqlCandidate("SELECT 1", 2, 3), SqlCandidate("FROM t", 2, 3), SqlCandidate("SELECT 1", 2, 3)],
		source,
	)
	assert len(grouped) == 1
	assert grouped[0].content == "b\nc"
	assert grouped[0].sql_statements == ["SELECT 1", "FROM t"]


def test_merge_candidates_coalesces_builder_chain():
	source = SourceFile(path="A.java", text="\n".join(f"l{n}" for n in range(1, 15)))
	merged = merge_candidates(
		[SqlCandidate("SELECT a", 10, 11), SqlCandidate("FROM t", 10, 12), SqlCandidate("WHERE x", 10, 13)],
		source,
	)
	assert [p.span for p in merged] == [(10, 13)]
	assert merged[0].content == "l10\nl11\nl12\nl13"
	assert merged[0].sql_statements == ["WHERE x", "FROM t", "SELECT a"]
