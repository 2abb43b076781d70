"""Per-file and batch SQL detection.

Each file is parsed into a syntax tree and run through the tree extractor.
Files that do not parse (or whose parse exceeds the configured timeout) go
through the line scanner instead. Batch runs isolate failures per file: an
unreadable or crashing file is logged and left out, only an invalid root
directory aborts the run.
"""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, List, Optional

from . import syntax
from .errors import AnalysisError, FileReadError, ParseError
from .extract import extract_candidates
from .fs_scan import read_source, scan_repository
from .merge import merge_candidates
from .model import AnalysisResult, SourceFile, SqlParagraph
from .scanner import scan_source
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


def parse_tree(text: str, timeout: float) -> syntax.Composite:
	"""Parse ``text``, raising ``ParseError`` on syntax errors or after ``timeout`` seconds.

	A timed parse runs on its own daemon thread; one that never returns is left behind.
	"""
	if timeout <= 0:
		return syntax.parse(text)
	outcome: dict = {}

	def run() -> None:
		try:
			outcome["tree"] = syntax.parse(text)
		except Exception as exc:
			outcome["error"] = exc

	worker = threading.Thread(target=run, name="sqlfinder-parse", daemon=True)
	worker.start()
	worker.join(timeout)
	if worker.is_alive():
		raise ParseError(f"parse timed out after {timeout:g}s")
	if "error" in outcome:
		raise outcome["error"]
	return outcome["tree"]


def _detect(source: SourceFile, settings: Settings, use_tree: bool) -> List[SqlParagraph]:
	if use_tree:
		try:
			tree = parse_tree(source.text, settings.parse_timeout_seconds)
		except ParseError as exc:
			logger.warning("Could not parse %s: %s", source.path, exc)
		else:
			paragraphs = merge_candidates(extract_candidates(tree, source), source)
			logger.debug("Found %d SQL paragraphs using the syntax tree in %s", len(paragraphs), source.path)
			return paragraphs
	paragraphs = scan_source(source)
	logger.debug("Found %d SQL paragraphs using the line scanner in %s", len(paragraphs), source.path)
	return paragraphs


def analyze_file(
	path: str,
	content: str,
	settings: Optional[Settings] = None,
	use_tree: bool = True,
) -> AnalysisResult:
	"""Analyze one file's text. The result may hold no paragraphs."""
	settings = settings or get_settings()
	try:
		paragraphs = _detect(SourceFile(path=path, text=content), settings, use_tree)
	except Exception as exc:
		raise AnalysisError(path, f"{type(exc).__name__}: {exc}") from exc
	return AnalysisResult(file_path=path, sql_paragraphs=paragraphs)


def _analyze_path(path: str, settings: Settings, use_tree: bool) -> AnalysisResult:
	return analyze_file(path, read_source(path), settings=settings, use_tree=use_tree)


def analyze_batch(
	paths: Iterable[str],
	settings: Optional[Settings] = None,
	use_tree: bool = True,
) -> List[AnalysisResult]:
	"""Analyze files concurrently; files without SQL or that fail are left out."""
	settings = settings or get_settings()
	paths = list(paths)
	results: List[AnalysisResult] = []
	if not paths:
		return results
	with ThreadPoolExecutor(max_workers=min(settings.worker_count(), len(paths))) as executor:
		futures = {executor.submit(_analyze_path, p, settings, use_tree): p for p in paths}
		for future in as_completed(futures):
			path = futures[future]
			try:
				result = future.result()
			except FileReadError as exc:
				logger.error("Could not read %s: %s", path, exc.reason)
				continue
			except AnalysisError as exc:
				logger.error("Error analyzing file %s: %s", path, exc.reason)
				continue
			if result.sql_paragraphs:
				results.append(result)
	results.sort(key=lambda r: r.file_path)
	logger.info("Found SQL in %d of %d files", len(results), len(paths))
	return results


def analyze_directory(
	directory: str,
	settings: Optional[Settings] = None,
	use_tree: bool = True,
) -> List[AnalysisResult]:
	settings = settings or get_settings()
	root = os.path.abspath(directory)
	logger.info("Analyzing Java files in directory: %s", root)
	files = scan_repository(root, settings.extensions, settings.skip_dirs)
	logger.info("Found %d Java files", len(files))
	return analyze_batch([f.path for f in files], settings=settings, use_tree=use_tree)
