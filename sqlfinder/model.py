from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from itertools import chain
from typing import Iterable, List

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


def ordered_union(*groups: Iterable[str]) -> List[str]:
	"""Union of statement lists, keeping the first-seen order."""
	return list(dict.fromkeys(chain.from_iterable(groups)))


@dataclass(frozen=True)
class SourceFile:
	path: str
	text: str

	@cached_property
	def lines(self) -> List[str]:
		# Split on "\n" only so numbering agrees with the parser's rows.
		return self.text.split("\n")

	@property
	def line_count(self) -> int:
		return len(self.lines)

	def line(self, number: int) -> str:
		if 1 <= number <= len(self.lines):
			return self.lines[number - 1]
		return ""

	def slice(self, start: int, end: int) -> str:
		"""Verbatim text of the inclusive 1-based line range."""
		return "\n".join(self.lines[max(0, start - 1):min(len(self.lines), end)])


@dataclass(frozen=True)
class SqlCandidate:
	value: str
	start_line: int
	end_line: int

	def __post_init__(self) -> None:
		if self.start_line > self.end_line:
			raise ValueError(
				f"candidate starts after it ends ({self.start_line} > {self.end_line})"
			)


class _WireModel(BaseModel):
	model_config = ConfigDict(
		alias_generator=to_camel,
		populate_by_name=True,
		frozen=True,
	)


class SqlParagraph(_WireModel):
	line_start: int
	line_end: int
	content: str
	sql_statements: List[str]

	@field_validator("sql_statements")
	@classmethod
	def _unique_statements(cls, value: List[str]) -> List[str]:
		if not value:
			raise ValueError("a paragraph needs at least one SQL statement")
		return ordered_union(value)

	@property
	def span(self) -> tuple:
		return (self.line_start, self.line_end)


class AnalysisResult(_WireModel):
	file_path: str
	sql_paragraphs: List[SqlParagraph] = []

	def to_wire(self) -> dict:
		return self.model_dump(by_alias=True)
