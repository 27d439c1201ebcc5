"""FastAPI web application for depalign."""

from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from core.errors import ManifestError
from core.mismatch import apply_mismatches, detect_mismatches
from core.parse_node import dump_manifest, load_manifest, parse_package_json
from core.reconcile import TEMPLATE_MANIFEST, TOOL_MANIFEST

app = FastAPI(
    title="depalign",
    description="Check a project's dependencies against the CLI and new-project manifests",
    version="0.1.0",
)


class CheckRequest(BaseModel):
    """Request model for checking a project manifest."""
    project: str
    tool: Optional[str] = None
    template: Optional[str] = None


class CheckResponse(BaseModel):
    """Response model for a mismatch check."""
    mismatches: dict[str, dict]
    has_mismatches: bool
    updated_content: str


@app.get("/api/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@app.post("/api/check", response_model=CheckResponse)
async def check_manifest(request: CheckRequest):
    """Compare a pasted package.json with the tool and template manifests."""
    if not request.project.strip():
        raise HTTPException(status_code=400, detail="No project manifest provided")

    try:
        project = parse_package_json(request.project, "project")
        tool = (
            parse_package_json(request.tool, "tool")
            if request.tool
            else load_manifest(TOOL_MANIFEST)
        )
        template = (
            parse_package_json(request.template, "template")
            if request.template
            else load_manifest(TEMPLATE_MANIFEST)
        )
    except ManifestError as e:
        raise HTTPException(status_code=400, detail=str(e))

    mismatches = detect_mismatches(project, tool, template)
    updated_content = dump_manifest(apply_mismatches(project, mismatches)) if mismatches else request.project

    return CheckResponse(
        mismatches={name: record.to_dict() for name, record in mismatches.items()},
        has_mismatches=bool(mismatches),
        updated_content=updated_content,
    )
