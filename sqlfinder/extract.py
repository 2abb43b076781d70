"""Tree-based SQL candidate extraction.

Three independent rules run over the whole tree and may overlap; the merger
reconciles them:

- literal: every string literal whose text contains a SQL keyword,
- concatenation: a variable initialized by a ``+`` chain of literals,
- builder append: ``sb.append("...")`` calls on a StringBuilder/StringBuffer.
"""

from __future__ import annotations

from itertools import chain
from typing import Iterator, List, Optional, Tuple

from .model import SourceFile, SqlCandidate
from .patterns import (
	contains_sql,
	declares_builder,
	is_comment_line,
	is_console_io,
	is_string_declaration,
)
from .syntax import STRING_KINDS, Composite, SyntaxNode, Token, dequote, iter_tokens, walk


def _declaration_line(source: SourceFile, line: int) -> int:
	"""Nearest string declaration at or above ``line``, else ``line`` itself."""
	for number in range(line, 0, -1):
		if is_string_declaration(source.line(number)):
			return number
	return line


def literal_candidates(tree: SyntaxNode, source: SourceFile) -> Iterator[SqlCandidate]:
	for token in iter_tokens(tree):
		value = dequote(token.image)
		if not value.strip() or not contains_sql(value):
			continue
		line = source.line(token.start_line)
		if is_comment_line(line) or is_console_io(line):
			continue
		yield SqlCandidate(
			value=value,
			start_line=_declaration_line(source, token.start_line),
			end_line=token.end_line,
		)


def _unwrap(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
	while isinstance(node, Composite) and node.kind == "parenthesized_expression":
		inner = node.named_children()
		node = inner[0] if inner else None
	return node


def _is_concatenation(node: Optional[SyntaxNode]) -> bool:
	if not isinstance(node, Composite) or node.kind != "binary_expression":
		return False
	operator = node.child("operator")
	return isinstance(operator, Token) and operator.kind == "+"


def concatenation_candidates(tree: SyntaxNode, source: SourceFile) -> Iterator[SqlCandidate]:
	for node, ancestors in walk(tree):
		if not isinstance(node, Composite) or node.kind != "variable_declarator":
			continue
		initializer = _unwrap(node.child("value"))
		if not _is_concatenation(initializer):
			continue
		matching: List[Token] = [
			t for t in iter_tokens(initializer) if contains_sql(dequote(t.image))
		]
		# A single match is already reported by the literal rule for the same span.
		if len(matching) < 2:
			continue
		parent = ancestors[-1] if ancestors else None
		if parent is not None and parent.kind == "local_variable_declaration":
			start = parent.start_line
		else:
			start = matching[0].start_line
		yield SqlCandidate(
			value=" ".join(dequote(t.image) for t in matching).strip(),
			start_line=start,
			end_line=max(t.end_line for t in matching),
		)


def _root_identifier(node: Optional[SyntaxNode]) -> Optional[str]:
	"""Name at the root of a call receiver: ``sb`` for ``sb.append(a).append(b)``."""
	while node is not None:
		if isinstance(node, Token):
			return node.image if node.kind == "identifier" else None
		if node.kind == "method_invocation":
			node = node.child("object")
		elif node.kind == "field_access":
			target = node.child("object")
			if isinstance(target, Token) and target.kind == "this":
				field = node.child("field")
				return field.image if isinstance(field, Token) else None
			node = target
		elif node.kind == "parenthesized_expression":
			node = _unwrap(node)
		else:
			return None
	return None


def _single_string_argument(call: Composite) -> Optional[Token]:
	arguments = call.child("arguments")
	if not isinstance(arguments, Composite):
		return None
	values = arguments.named_children()
	if len(values) == 1 and isinstance(values[0], Token) and values[0].kind in STRING_KINDS:
		return values[0]
	return None


def _builder_line(source: SourceFile, name: str, line: int) -> Optional[int]:
	"""Nearest line anywhere in the file declaring the builder; the earlier line wins a tie."""
	declaring = [
		number for number in range(1, source.line_count + 1)
		if declares_builder(source.line(number), name)
	]
	if not declaring:
		return None
	return min(declaring, key=lambda number: (abs(number - line), number))


def append_candidates(tree: SyntaxNode, source: SourceFile) -> Iterator[SqlCandidate]:
	for node, _ in walk(tree):
		if not isinstance(node, Composite) or node.kind != "method_invocation":
			continue
		name = node.child("name")
		if not isinstance(name, Token) or name.image != "append" or node.child("type_arguments"):
			continue
		literal = _single_string_argument(node)
		if literal is None:
			continue
		value = dequote(literal.image)
		if not contains_sql(value):
			continue
		receiver = _root_identifier(node.child("object"))
		declared = _builder_line(source, receiver, node.start_line) if receiver else None
		declared = declared or node.start_line
		# a field declared below the call stretches the span down to it
		yield SqlCandidate(
			value=value,
			start_line=min(declared, node.start_line),
			end_line=max(declared, node.end_line),
		)


def extract_candidates(tree: SyntaxNode, source: SourceFile) -> Tuple[SqlCandidate, ...]:
	"""All candidates of one file, literal rule first, then concatenation, then append."""
	return tuple(
		chain(
			literal_candidates(tree, source),
			concatenation_candidates(tree, source),
			append_candidates(tree, source),
		)
	)
