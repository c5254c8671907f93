from fastapi import APIRouter, HTTPException
from pathlib import Path
from typing import List, Optional

from phpcity.config import DEFAULT_OUTPUT_DIR
from phpcity.errors import InvalidInputError
from phpcity.models import LayoutResult, NamespaceNode, ScanSummary, TypeMetrics
from phpcity.services import analysis, output
from phpcity.services.hierarchy import build_hierarchy
from phpcity.services.layout import compute_layout

router = APIRouter(prefix="/api", tags=["analysis"])

ROOT_PATH = Path.cwd()
OUTPUT_DIR = Path(DEFAULT_OUTPUT_DIR)
SCAN_WORKERS = 1


def _scan(path: Optional[str]) -> List[TypeMetrics]:
    target_path = Path(path) if path else ROOT_PATH
    try:
        return analysis.scan_project(target_path, max_workers=SCAN_WORKERS)
    except InvalidInputError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/analysis", response_model=List[TypeMetrics])
async def get_analysis(path: Optional[str] = None):
    """
    Scan the project (the server's root by default) and return its records.
    Every request rescans from scratch.
    """
    return _scan(path)


@router.get("/analysis/summary", response_model=ScanSummary)
async def get_summary(path: Optional[str] = None):
    return analysis.summarize(_scan(path))


@router.post("/hierarchy", response_model=NamespaceNode)
async def post_hierarchy(records: List[TypeMetrics]):
    return build_hierarchy(records)


@router.post("/layout", response_model=LayoutResult)
async def post_layout(records: List[TypeMetrics]):
    """Lay out records a renderer already holds (e.g. an uploaded JSON file)."""
    return compute_layout(build_hierarchy(records))


@router.get("/layout", response_model=LayoutResult)
async def get_layout(path: Optional[str] = None):
    return compute_layout(build_hierarchy(_scan(path)))


@router.get("/projects", response_model=List[str])
async def get_projects():
    """Names of the record files written to the output directory."""
    return output.list_projects(OUTPUT_DIR)


@router.get("/projects/{name}/layout", response_model=LayoutResult)
async def get_project_layout(name: str):
    project_file = OUTPUT_DIR / f"{output.sanitize_project_name(name)}.json"
    if not project_file.is_file():
        raise HTTPException(status_code=404, detail="Project not found")
    try:
        records = output.load_records(project_file)
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return compute_layout(build_hierarchy(records))
