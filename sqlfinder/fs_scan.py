from __future__ import annotations

import os
from typing import Iterable, List

from pydantic import BaseModel

from .errors import DiscoveryError, FileReadError


DEFAULT_SKIP_DIRS = (".git", "node_modules", "target", "build", "dist", "out", ".idea", "__pycache__")


class FileInfo(BaseModel):
	path: str
	rel_path: str


def has_extension(filename: str, extensions: Iterable[str]) -> bool:
	_, ext = os.path.splitext(filename)
	return ext.lower() in {e.lower() for e in extensions}


def scan_repository(
	root: str,
	extensions: Iterable[str] = (".java",),
	skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
) -> List[FileInfo]:
	"""Every file under ``root`` with one of ``extensions``, sorted by path."""
	root = os.path.abspath(root)
	if not os.path.isdir(root):
		raise DiscoveryError(f"Invalid directory: {root}")
	extensions = tuple(extensions)
	skip = set(skip_dirs)
	files: List[FileInfo] = []
	for dirpath, dirnames, filenames in os.walk(root):
		dirnames[:] = sorted(d for d in dirnames if d not in skip)
		for filename in filenames:
			if not has_extension(filename, extensions):
				continue
			path = os.path.join(dirpath, filename)
			files.append(FileInfo(path=path, rel_path=os.path.relpath(path, root)))
	files.sort(key=lambda f: f.path)
	return files


def read_source(path: str) -> str:
	try:
		with open(path, "r", encoding="utf-8") as fh:
			return fh.read()
	except (OSError, UnicodeDecodeError) as exc:
		raise FileReadError(path, str(exc)) from exc
