"""Mini README: FastAPI-powered transaction manager page.

Structure:
    * create_application - application factory wiring routes and templates.
    * One ``TransactionView`` per process mirrors the backend; every
      dashboard load refetches it, and the filters come from that load's
      query string only.

The page shows summary cards, the add form, filter controls and the
transaction history. Forms post back to the server, which runs the matching
view operation and redirects to the dashboard so a reload never resubmits.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from ..api import TransactionApiClient
from ..configuration import LedgerviewSettings, get_settings
from ..finance import FilterState, FilterType, TransactionDraft, TransactionType
from ..logging_utils import configure_root_logger, get_logger
from ..state import TransactionView
from .presentation import TABLE_COLUMNS, build_summary_cards, build_table_rows

LOGGER = get_logger(__name__)


def build_view(settings: LedgerviewSettings) -> TransactionView:
    """Create a view talking to the configured backend."""

    return TransactionView(
        TransactionApiClient.from_settings(settings),
        resync_on_failed_delete=settings.resync_on_failed_delete,
    )


def _parse_filters(filter_type: Optional[str], filter_date: Optional[str]) -> FilterState:
    try:
        return FilterState.from_query(filter_type, filter_date)
    except ValueError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error


def _filter_query(filters: FilterState) -> str:
    return urlencode(filters.as_dict()) if filters.is_active else ""


def _back_to_dashboard(filters: Optional[FilterState] = None) -> RedirectResponse:
    """Redirect to the dashboard, keeping the filters the form was posted from."""

    query = _filter_query(filters) if filters is not None else ""
    return RedirectResponse(f"/?{query}" if query else "/", status_code=303)


def create_application(
    view: Optional[TransactionView] = None,
    settings: Optional[LedgerviewSettings] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    configure_root_logger(settings.log_level)
    view = view or build_view(settings)

    app = FastAPI(title="Transaction Manager", version="0.1.0")
    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
    static_directory = Path(__file__).parent / "static"
    app.mount("/static", StaticFiles(directory=str(static_directory)), name="static")
    app.state.view = view

    @app.get("/", response_class=HTMLResponse)
    async def dashboard(
        request: Request,
        filter_type: Optional[str] = None,
        filter_date: Optional[str] = None,
    ) -> HTMLResponse:
        """Render the summary, add form, filters and transaction history.

        Each load is a fresh mount: all three resources are fetched again and
        only this request's query decides the filters.
        """

        filters = _parse_filters(filter_type, filter_date)
        displayed = await view.mount(filters)
        LOGGER.debug(
            "Rendering dashboard with %s of %s transactions",
            len(displayed),
            len(view.transactions.value),
        )
        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {
                "cards": build_summary_cards(view.balance.value, view.summary.value),
                "rows": build_table_rows(displayed, view.tz),
                "columns": TABLE_COLUMNS,
                "form": view.form,
                "filters": filters.as_dict(),
                "filter_query": _filter_query(filters),
                "transaction_types": list(TransactionType),
                "filter_types": list(FilterType),
                "busy": view.busy,
                "loading": view.loading,
                "notices": view.notices,
            },
        )

    @app.post("/transactions")
    async def add_transaction(
        transaction_type: str = Form(..., alias="type"),
        amount: str = Form(...),
        description: str = Form(...),
        filter_type: str = Form(""),
        filter_date: str = Form(""),
    ) -> RedirectResponse:
        """Submit the add form and resynchronise on success."""

        filters = _parse_filters(filter_type, filter_date)
        try:
            draft = TransactionDraft.from_form(transaction_type, amount, description)
            await view.add_transaction(draft)
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return _back_to_dashboard(filters)

    @app.post("/transactions/{transaction_id:path}/delete")
    async def delete_transaction(
        transaction_id: str,
        filter_type: str = Form(""),
        filter_date: str = Form(""),
    ) -> RedirectResponse:
        """Delete a single transaction by identifier."""

        filters = _parse_filters(filter_type, filter_date)
        await view.delete_transaction(transaction_id)
        return _back_to_dashboard(filters)

    @app.get("/export")
    async def export_csv(
        filter_type: Optional[str] = None,
        filter_date: Optional[str] = None,
    ) -> Response:
        """Serve the backend's CSV export as a download."""

        filters = _parse_filters(filter_type, filter_date)
        exported = await view.export_csv()
        if exported is None:
            return _back_to_dashboard(filters)
        LOGGER.info("Serving CSV export (%s bytes)", len(exported.content))
        return Response(
            content=exported.content,
            media_type=exported.media_type,
            headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
        )

    @app.get("/state")
    async def state(
        filter_type: Optional[str] = None,
        filter_date: Optional[str] = None,
    ) -> JSONResponse:
        """Return the view state of a fresh load as JSON."""

        await view.mount(_parse_filters(filter_type, filter_date))
        return JSONResponse(view.snapshot())

    return app
