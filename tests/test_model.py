import pytest
from pydantic import ValidationError

from sqlfinder.model import AnalysisResult, SourceFile, SqlCandidate, SqlParagraph, ordered_union


def test_ordered_union_keeps_first_seen_order():
	assert ordered_union(["b", "a"], ["a", "c", "b"]) == ["b", "a", "c"]


def test_paragraph_statements_are_deduplicated():
	p = SqlParagraph(line_start=1, line_end=2, content="x", sql_statements=["FROM t", "SELECT a", "FROM t"])
	assert p.sql_statements == ["FROM t", "SELECT a"]


def test_paragraph_requires_a_statement():
	with pytest.raises(ValidationError):
		SqlParagraph(line_start=1, line_end=1, content="x", sql_statements=[])


def test_candidate_rejects_inverted_span():
	with pytest.raises(ValueError):
		SqlCandidate("SELECT 1", 5, 4)


def test_result_serializes_with_camel_case_keys():
	result = AnalysisResult(
		file_path="/src/A.java",
		sql_paragraphs=[SqlParagraph(line_start=3, line_end=4, content="c", sql_statements=["SELECT 1"])],
	)
	assert result.to_wire() == {
		"filePath": "/src/A.java",
		"sqlParagraphs": [
			{"lineStart": 3, "lineEnd": 4, "content": "c", "sqlStatements": ["SELECT 1"]},
		],
	}


def test_source_file_lines_and_slices():
	source = SourceFile(path="A.java", text="one\ntwo\nthree")
	assert source.line_count == 3
	assert source.line(2) == "two"
	assert source.line(0) == ""
	assert source.line(9) == ""
	assert source.slice(2, 3) == "two\nthree"
	assert source.slice(3, 10) == "three"
