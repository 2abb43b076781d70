"""Detection of SQL embedded in Java source files.

Modules:
- syntax.py: tree-sitter Java parsing into plain Token/Composite nodes.
- extract.py: Tree-based extraction of SQL candidates.
- scanner.py: Line-based fallback when a file does not parse.
- merge.py: Merging and deduplication of a file's paragraphs.
- detector.py: Per-file and batch orchestration.
- fs_scan.py: Directory discovery and file reading.
- model.py: Data structures for candidates, paragraphs and results.
- patterns.py: Keyword and line regexes shared by the extractor and scanner.
- settings.py: Environment-driven configuration.
- errors.py: Exception hierarchy.
"""

__all__ = [
	"syntax",
	"extract",
	"scanner",
	"merge",
	"detector",
	"fs_scan",
	"model",
	"patterns",
	"errors",
	"settings",
]
