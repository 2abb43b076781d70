from __future__ import annotations

from typing import List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from sqlfinder.detector import analyze_directory
from sqlfinder.errors import DiscoveryError
from sqlfinder.model import AnalysisResult


app = FastAPI(
	title="Java SQL Analyzer API",
	description="Analyze Java files to detect embedded SQL",
	version="1.0",
)


class AnalyzeRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	directory_path: str = Field(
		alias="directoryPath",
		description="The path to the directory containing Java files to analyze",
		examples=["test-data"],
	)


def _analyze(directory: str) -> List[AnalysisResult]:
	try:
		return analyze_directory(directory)
	except DiscoveryError as exc:
		raise HTTPException(status_code=400, detail=str(exc))


@app.get("/health")
def health() -> dict:
	return {"status": "ok"}


@app.post("/java-analyzer/analyze", response_model=List[AnalysisResult], tags=["java-analyzer"])
def analyze(req: AnalyzeRequest) -> List[AnalysisResult]:
	return _analyze(req.directory_path)


@app.get("/java-analyzer/analyze/{directory_path:path}", response_model=List[AnalysisResult], tags=["java-analyzer"])
def analyze_get(directory_path: str) -> List[AnalysisResult]:
	return _analyze(directory_path)


def create_app() -> FastAPI:
	return app
