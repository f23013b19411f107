"""HTTP routes for the panel.

Handlers are thin: they pull values out of the request, call the matching
function in ``ledger_panel.tools`` and return its text.  The two HTML pages
are Jinja2 templates under ``web/templates``.  Errors raised by
the tools are turned into responses by the handlers registered in
``web.app``.  Handlers that run external commands are plain ``def`` so
FastAPI runs them in its threadpool instead of blocking the event loop.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from ..constants import AUTHOR_EMAIL_HEADER
from ..tools import git_tools, ledger_tools, report_tools
from ..workspace import Workspace

TEMPLATES_DIR = Path(__file__).parent / "templates"

router = APIRouter()
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


class GitRunRequest(BaseModel):
    command: list[str]


def get_workspace(request: Request) -> Workspace:
    return request.app.state.workspace


@router.get("/", response_class=HTMLResponse)
def index(request: Request, workspace: Workspace = Depends(get_workspace)) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "repo_url": workspace.config.repo_url,
            "queries": ledger_tools.SAVED_QUERIES,
        },
    )


@router.post("/git/run", response_class=PlainTextResponse)
def git_run(payload: GitRunRequest, workspace: Workspace = Depends(get_workspace)) -> str:
    return git_tools.run_git_command(workspace, payload.command)


@router.get("/git/diff", response_class=PlainTextResponse)
def git_diff(workspace: Workspace = Depends(get_workspace)) -> str:
    return git_tools.git_diff(workspace)


@router.post("/git/create-pr-with-edits", response_class=PlainTextResponse)
def create_pr_with_edits(
    commit_msg: str | None = Query(default=None),
    author_email: str | None = Header(default=None, alias=AUTHOR_EMAIL_HEADER),
    workspace: Workspace = Depends(get_workspace),
) -> str:
    result = git_tools.create_pr_with_edits(workspace, commit_msg, author_email)
    return str(result) + "\n"


@router.post("/git/bean-query", response_class=PlainTextResponse)
async def bean_query(request: Request, workspace: Workspace = Depends(get_workspace)) -> str:
    body = await request.body()
    query = body.decode("utf-8", errors="replace")
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, ledger_tools.run_bean_query, workspace, query)


@router.get("/git/fetch-hbl-report", response_class=PlainTextResponse)
def fetch_hbl_report(
    date: str | None = Query(default=None),
    workspace: Workspace = Depends(get_workspace),
) -> str:
    return report_tools.fetch_report(workspace, date)


@router.get("/git/fetch-latest-hbl", response_class=PlainTextResponse)
def fetch_latest_hbl(workspace: Workspace = Depends(get_workspace)) -> str:
    return report_tools.fetch_latest_reports(workspace)


@router.get("/git/hbl/", response_class=HTMLResponse)
def list_hbl_reports(request: Request, workspace: Workspace = Depends(get_workspace)) -> HTMLResponse:
    names = report_tools.list_reports(workspace.config.reports_dir)
    return templates.TemplateResponse(request, "reports.html", {"reports": names})


@router.get("/git/hbl/{name:path}")
def get_hbl_report(name: str, workspace: Workspace = Depends(get_workspace)) -> FileResponse:
    path = report_tools.resolve_report(workspace.config.reports_dir, name)
    if path is None:
        raise HTTPException(status_code=404, detail="report not found")
    return FileResponse(path)
