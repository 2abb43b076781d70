"""Line-level heuristics shared by the tree extractor and the line scanner."""

from __future__ import annotations

import re
from typing import List, Optional

SQL_KEYWORDS: List[str] = [
	"SELECT", "FROM", "WHERE", "JOIN", "INSERT", "UPDATE", "DELETE",
	"CREATE TABLE", "ALTER TABLE", "DROP TABLE", "GROUP BY", "ORDER BY",
	"HAVING", "UNION", "INTERSECT", "EXCEPT",
]

_KEYWORD_GROUP = "|".join(SQL_KEYWORDS)

# Literal values: a keyword anywhere in the dequoted text.
LITERAL_SQL_RE = re.compile(f"({_KEYWORD_GROUP})", re.IGNORECASE)

# Raw lines: a quoted span holding a keyword, or a bare keyword.
LINE_SQL_RE = re.compile(
	f"([\"'`].*?({_KEYWORD_GROUP}).*?[\"'`]|\\b({_KEYWORD_GROUP})\\b)",
	re.IGNORECASE,
)

_CONSOLE_IO_RE = re.compile(r"\b(?:out|err)\.(?:print|format|write)|\bSystem\.in\b")

_IDENT = r"[A-Za-z_$][\w$]*"
STRING_DECL_RE = re.compile(rf"\bString\s+({_IDENT})\s*=(?!=)")
BUILDER_DECL_RE = re.compile(rf"\b(?:StringBuilder|StringBuffer)\s+({_IDENT})\s*=(?!=)")
BUILDER_TYPES = ("StringBuilder", "StringBuffer")

# A line that continues a string literal: optional "+" then a quote.
CONTINUATION_HEAD_RE = re.compile(r"^\s*[+]?\s*[\"'`]")
# Accumulated text that still expects more: a quote, optionally followed by "+".
CONTINUATION_TAIL_RE = re.compile(r"[\"'`]\s*[+]?\s*$")


def contains_sql(value: str) -> bool:
	return LITERAL_SQL_RE.search(value) is not None


def line_has_sql(line: str) -> bool:
	return LINE_SQL_RE.search(line) is not None


def first_sql_match(line: str) -> Optional[str]:
	match = LINE_SQL_RE.search(line)
	return match.group(0) if match else None


def is_comment_line(line: str) -> bool:
	stripped = line.strip()
	return (
		stripped.startswith("//")
		or stripped.startswith("/*")
		or stripped.startswith("*")
		or "*/" in stripped
	)


def is_console_io(line: str) -> bool:
	return _CONSOLE_IO_RE.search(line) is not None


def is_string_declaration(line: str) -> bool:
	return STRING_DECL_RE.search(line) is not None


def string_declaration_name(line: str) -> Optional[str]:
	match = STRING_DECL_RE.search(line)
	return match.group(1) if match else None


def builder_declaration_name(line: str) -> Optional[str]:
	match = BUILDER_DECL_RE.search(line)
	return match.group(1) if match else None


def declares_builder(line: str, name: str) -> bool:
	"""True when the line reads like ``StringBuilder <name>``."""
	types = "|".join(BUILDER_TYPES)
	return re.search(rf"\b(?:{types})\s+{re.escape(name)}(?![\w$])", line) is not None


def references(line: str, name: str) -> bool:
	return re.search(rf"(?<![\w$]){re.escape(name)}(?![\w$])", line) is not None
