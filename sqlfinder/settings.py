"""Settings loaded from ``SQLFINDER_*`` environment variables or a ``.env`` file."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .fs_scan import DEFAULT_SKIP_DIRS


class Settings(BaseSettings):
	model_config = SettingsConfigDict(
		env_prefix="SQLFINDER_",
		env_file=".env",
		env_file_encoding="utf-8",
		extra="ignore",
	)

	# Discovery
	extensions: List[str] = Field(
		default_factory=lambda: [".java"],
		description="File extensions analyzed when scanning a directory",
	)
	skip_dirs: List[str] = Field(
		default_factory=lambda: list(DEFAULT_SKIP_DIRS),
		description="Directory names never descended into",
	)

	# Analysis
	max_workers: Optional[int] = Field(
		default=None,
		description="Worker threads for batch analysis (default: CPU count)",
	)
	parse_timeout_seconds: float = Field(
		default=30.0,
		description="Seconds before a file's tree parse is abandoned for the line scanner; 0 disables",
	)

	log_level: str = "INFO"

	# API
	api_host: str = "127.0.0.1"
	api_port: int = 3001

	def worker_count(self) -> int:
		return self.max_workers or os.cpu_count() or 1


@lru_cache
def get_settings() -> Settings:
	return Settings()
