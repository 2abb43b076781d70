"""Syntax tree adapter: tree-sitter Java parses converted to plain nodes.

The rest of the package only sees two node shapes:

- ``Token``: a leaf with a kind tag, its raw source image and 1-based lines.
  String literals and text blocks are tokens even though tree-sitter gives
  them inner fragment nodes.
- ``Composite``: a kind tag, ordered children and named fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

import tree_sitter_java as tsjava
from tree_sitter import Language, Node, Parser

from .errors import ParseError

JAVA_LANG = Language(tsjava.language())

STRING_KINDS = frozenset({"string_literal", "text_block"})
COMMENT_KINDS = frozenset({"line_comment", "block_comment"})


@dataclass(frozen=True)
class Token:
	kind: str
	image: str
	start_line: int
	end_line: int
	named: bool = True


@dataclass(frozen=True)
class Composite:
	kind: str
	children: Tuple["SyntaxNode", ...]
	start_line: int
	end_line: int
	fields: Dict[str, Tuple[int, ...]] = field(default_factory=dict, compare=False)

	def child(self, name: str) -> Optional["SyntaxNode"]:
		"""First child stored under the given field name."""
		indexes = self.fields.get(name)
		return self.children[indexes[0]] if indexes else None

	def named_children(self) -> List["SyntaxNode"]:
		return [
			c for c in self.children
			if not (isinstance(c, Token) and not c.named) and c.kind not in COMMENT_KINDS
		]


SyntaxNode = Union[Token, Composite]


def dequote(image: str) -> str:
	if image.startswith('"""') and image.endswith('"""') and len(image) >= 6:
		return image[3:-3]
	return image[1:-1]


def _is_token(node: Node) -> bool:
	return node.child_count == 0 or node.type in STRING_KINDS


def _text(node: Node) -> str:
	return node.text.decode("utf-8", errors="replace") if node.text else ""


def _lines(node: Node) -> Tuple[int, int]:
	return node.start_point[0] + 1, node.end_point[0] + 1


def _token(node: Node) -> Token:
	start, end = _lines(node)
	return Token(kind=node.type, image=_text(node), start_line=start, end_line=end, named=node.is_named)


def _composite(node: Node, children: List[SyntaxNode]) -> Composite:
	fields: Dict[str, List[int]] = {}
	for index in range(node.child_count):
		name = node.field_name_for_child(index)
		if name:
			fields.setdefault(name, []).append(index)
	start, end = _lines(node)
	return Composite(
		kind=node.type,
		children=tuple(children),
		start_line=start,
		end_line=end,
		fields={k: tuple(v) for k, v in fields.items()},
	)


def convert(root: Node) -> SyntaxNode:
	"""Convert a tree-sitter node without recursing (long ``+`` chains nest deeply)."""
	if _is_token(root):
		return _token(root)
	# frame: [node, its children, next child index, converted children]
	frames: List[list] = [[root, root.children, 0, []]]
	result: Optional[Composite] = None
	while frames:
		frame = frames[-1]
		node, kids, index, done = frame
		if index < len(kids):
			frame[2] = index + 1
			child = kids[index]
			if _is_token(child):
				done.append(_token(child))
			else:
				frames.append([child, child.children, 0, []])
			continue
		frames.pop()
		built = _composite(node, done)
		if frames:
			frames[-1][3].append(built)
		else:
			result = built
	assert result is not None
	return result


def parse(text: str) -> Composite:
	"""Parse Java source text; raise ``ParseError`` unless the tree is clean."""
	parser = Parser(JAVA_LANG)
	tree = parser.parse(text.encode("utf-8"))
	if tree is None:
		raise ParseError("parser returned no tree")
	root = tree.root_node
	if root.has_error:
		raise ParseError(f"syntax error near line {_first_error_line(root)}")
	converted = convert(root)
	if isinstance(converted, Token):
		return Composite(kind=converted.kind, children=(), start_line=1, end_line=1)
	return converted


def _first_error_line(root: Node) -> int:
	stack = [root]
	while stack:
		node = stack.pop()
		if node.type == "ERROR" or node.is_missing:
			return node.start_point[0] + 1
		stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
	return root.start_point[0] + 1


def walk(root: SyntaxNode) -> Iterator[Tuple[SyntaxNode, Tuple[Composite, ...]]]:
	"""Pre-order traversal yielding each node with its ancestors, outermost first."""
	stack: List[Tuple[SyntaxNode, Tuple[Composite, ...]]] = [(root, ())]
	while stack:
		node, ancestors = stack.pop()
		yield node, ancestors
		if isinstance(node, Composite):
			inner = ancestors + (node,)
			for child in reversed(node.children):
				stack.append((child, inner))


def iter_tokens(root: SyntaxNode, kinds: frozenset = STRING_KINDS) -> Iterator[Token]:
	for node, _ in walk(root):
		if isinstance(node, Token) and node.kind in kinds:
			yield node
