"""
HTML routes of the fund management screen.

    GET  /                       render the page
    POST /funds/add              apply form fields, add
    POST /funds/update           apply form fields, update
    POST /funds/cancel           leave update mode
    POST /funds/{fund_id}/edit   enter update mode for a row
    POST /funds/{fund_id}/delete delete a row
    POST /lookup                 fetch one fund by id

Every POST answers ``303 See Other`` back to the page (post/redirect/get),
so a browser refresh never replays an action.
"""

import os

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from fundmanager.services.fund_manager import FundManager
from fundmanager.ui.views import build_page_context

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")

router = APIRouter()
templates = Jinja2Templates(directory=TEMPLATES_DIR)


# ── Dependency injection ──
# The manager is created in the application lifespan; tests swap it via
# ``app.dependency_overrides``.


def get_fund_manager(request: Request) -> FundManager:
    """The application's single fund manager."""
    return request.app.state.fund_manager


def _back_to_page(request: Request) -> RedirectResponse:
    return RedirectResponse(url=str(request.url_for("fund_page")), status_code=303)


# ── Routes ──


@router.get("/", response_class=HTMLResponse, summary="Fund management page")
async def fund_page(request: Request, manager: FundManager = Depends(get_fund_manager)):
    return templates.TemplateResponse(request, "index.html", build_page_context(manager.state))


@router.post("/funds/add", summary="Add a fund from the form")
async def add_fund(request: Request, manager: FundManager = Depends(get_fund_manager)):
    manager.change_form(await request.form())
    await manager.add_fund()
    return _back_to_page(request)


@router.post("/funds/update", summary="Update the fund being edited")
async def update_fund(request: Request, manager: FundManager = Depends(get_fund_manager)):
    manager.change_form(await request.form())
    await manager.update_fund()
    return _back_to_page(request)


@router.post("/funds/cancel", summary="Cancel editing")
async def cancel_edit(request: Request, manager: FundManager = Depends(get_fund_manager)):
    manager.cancel_edit()
    return _back_to_page(request)


@router.post("/funds/{fund_id}/edit", summary="Edit a fund from the list")
async def edit_fund(
    fund_id: int, request: Request, manager: FundManager = Depends(get_fund_manager)
):
    manager.edit_fund(fund_id)
    return _back_to_page(request)


@router.post("/funds/{fund_id}/delete", summary="Delete a fund")
async def delete_fund(
    fund_id: int, request: Request, manager: FundManager = Depends(get_fund_manager)
):
    await manager.delete_fund(fund_id)
    return _back_to_page(request)


@router.post("/lookup", summary="Fetch one fund by id")
async def lookup_fund(request: Request, manager: FundManager = Depends(get_fund_manager)):
    form = await request.form()
    lookup_id = form.get("lookupId", "")
    await manager.get_fund_by_id(lookup_id if isinstance(lookup_id, str) else "")
    return _back_to_page(request)
