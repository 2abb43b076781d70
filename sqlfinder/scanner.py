"""Line scanner used when a file cannot be parsed into a tree.

Walks physical lines top to bottom, skipping comments and console output,
and groups keyword-bearing lines into paragraphs. It also follows string
variables and builders while they are being extended with ``+``, ``+=`` or
``.append(`` so a paragraph can reach back to the line where the
construction started.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .merge import merge_paragraphs
from .model import SourceFile, SqlParagraph
from .patterns import (
	CONTINUATION_HEAD_RE,
	CONTINUATION_TAIL_RE,
	builder_declaration_name,
	first_sql_match,
	is_console_io,
	line_has_sql,
	references,
	string_declaration_name,
)

logger = logging.getLogger(__name__)

CONTINUATION_OPERATORS = ("+=", "+", ".append(")


@dataclass
class _OpenParagraph:
	start: int
	end: int
	content: str
	statements: List[str] = field(default_factory=list)


@dataclass
class _StringOperation:
	start: int
	variable: str


class LineScanner:
	def __init__(self, source: SourceFile):
		self.source = source
		self.in_block_comment = False
		self.paragraph: Optional[_OpenParagraph] = None
		self.operation: Optional[_StringOperation] = None
		self.string_vars: Set[str] = set()
		self.builder_vars: Set[str] = set()
		self.emitted: List[SqlParagraph] = []

	def scan(self) -> List[SqlParagraph]:
		for number, line in enumerate(self.source.lines, 1):
			self.feed(number, line)
		self.finish()
		paragraphs = merge_paragraphs(self.emitted)
		if paragraphs:
			logger.debug(
				"Line scan of %s: %d paragraphs with %d statements",
				self.source.path,
				len(paragraphs),
				sum(len(p.sql_statements) for p in paragraphs),
			)
		return paragraphs

	def feed(self, number: int, line: str) -> None:
		stripped = line.strip()
		if self.in_block_comment:
			if "*/" in stripped:
				self.in_block_comment = False
			return
		if stripped.startswith("/*"):
			self.in_block_comment = "*/" not in stripped[2:]
			return
		if stripped.startswith("//") or stripped.startswith("*"):
			return
		if is_console_io(stripped):
			return

		has_sql = line_has_sql(line)
		self._track_declarations(number, stripped, has_sql)

		if has_sql:
			comment_at = line.find("//")
			if comment_at != -1 and not line_has_sql(line[:comment_at]):
				# keyword only inside the trailing comment
				return
			self._collect(number, line)
		elif self.paragraph is not None:
			self._continue_or_close(number, line)

		if self.operation is not None:
			self._follow_operation(number, stripped, has_sql)

	def finish(self) -> None:
		if self.paragraph is None:
			return
		last = self.source.line_count
		if self.operation is not None:
			self.paragraph.start = min(self.paragraph.start, self.operation.start)
			self.paragraph.content = self.source.slice(self.paragraph.start, last)
		self.paragraph.end = last
		self._emit()

	def _track_declarations(self, number: int, stripped: str, has_sql: bool) -> None:
		name = string_declaration_name(stripped)
		if name:
			self.string_vars.add(name)
			if has_sql:
				self.operation = _StringOperation(start=number, variable=name)
		builder = builder_declaration_name(stripped)
		if builder:
			self.builder_vars.add(builder)
		if has_sql and ".append(" in stripped and self.operation is None:
			receiver = stripped.split(".append(", 1)[0].strip()
			if receiver.startswith("this."):
				receiver = receiver[len("this."):]
			if receiver in self.builder_vars:
				self.operation = _StringOperation(start=number, variable=receiver)

	def _collect(self, number: int, line: str) -> None:
		statement = first_sql_match(line) or line.strip()
		paragraph = self.paragraph
		if paragraph is None:
			if self.operation is not None:
				start = self.operation.start
				content = self.source.slice(start, number)
			else:
				start = number
				content = line
			self.paragraph = _OpenParagraph(start=start, end=number, content=content, statements=[statement])
			return
		self._extend(number, line)
		paragraph.statements.append(statement)

	def _extend(self, number: int, line: str) -> None:
		paragraph = self.paragraph
		paragraph.end = number
		if self.operation is not None:
			paragraph.content = self.source.slice(paragraph.start, number)
		else:
			paragraph.content = paragraph.content + "\n" + line

	def _continue_or_close(self, number: int, line: str) -> None:
		if CONTINUATION_HEAD_RE.match(line) or CONTINUATION_TAIL_RE.search(self.paragraph.content):
			self._extend(number, line)
		else:
			self._emit()

	def _follow_operation(self, number: int, stripped: str, has_sql: bool) -> None:
		operation = self.operation
		mentioned = references(stripped, operation.variable)
		if mentioned and any(op in stripped for op in CONTINUATION_OPERATORS):
			if has_sql and self.paragraph is not None:
				self.paragraph.start = min(self.paragraph.start, operation.start)
				self.paragraph.end = number
				self.paragraph.content = self.source.slice(self.paragraph.start, number)
		elif stripped.endswith(";") or mentioned:
			self.operation = None
			if self.paragraph is not None:
				self.paragraph.start = min(self.paragraph.start, operation.start)
				self.paragraph.end = number
				self.paragraph.content = self.source.slice(self.paragraph.start, number)
				self._emit()

	def _emit(self) -> None:
		paragraph = self.paragraph
		self.paragraph = None
		self.emitted.append(
			SqlParagraph(
				line_start=paragraph.start,
				line_end=paragraph.end,
				content=paragraph.content,
				sql_statements=paragraph.statements,
			)
		)


def scan_source(source: SourceFile) -> List[SqlParagraph]:
	"""Heuristic paragraphs for a file that has no usable syntax tree."""
	return LineScanner(source).scan()
