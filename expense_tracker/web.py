from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict
from urllib.parse import urlencode

from fastapi import FastAPI, Form, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from expense_tracker.config import load_config
from expense_tracker.core.aggregator import format_amount
from expense_tracker.core.models import FilterMode
from expense_tracker.database import ExpenseNotFoundError, ExpenseStore
from expense_tracker.outputs import get_chart
from expense_tracker.screen import ExpenseScreen, FormState

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).with_name("templates")


def _redirect(filter_mode: str = FilterMode.ALL.value, **params: Any) -> RedirectResponse:
    query = {"filter": filter_mode}
    query.update({key: value for key, value in params.items() if value not in (None, "")})
    return RedirectResponse(f"/?{urlencode(query)}", status_code=303)


def _summary_payload(screen: ExpenseScreen, symbol: str) -> Dict[str, Any]:
    summary = screen.summary()
    return {
        "filter": screen.state.filter_mode.value,
        "total": summary.total,
        "total_display": format_amount(summary.total, symbol),
        "categories": [
            {
                "category": category,
                "total": total,
                "total_display": format_amount(total, symbol),
            }
            for category, total in summary.categories.items()
        ],
        "chart": {"labels": summary.labels, "values": summary.values},
    }


def create_app(config: Dict[str, Any] | None = None, today: date | None = None) -> FastAPI:
    """Build the expense screen application.

    Parameters
    ----------
    config:
        Loaded configuration; defaults are used when omitted.
    today:
        Fixed reference date, mainly for tests. Defaults to the local date at
        request time.
    """
    config = config or load_config()
    app = FastAPI(title="Spendlog")
    app.state.config = config
    app.state.store = ExpenseStore(config["db_path"])
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    symbol = str(config.get("currency_symbol", ""))

    def new_screen() -> ExpenseScreen:
        return ExpenseScreen(app.state.store, today=today)

    def render(request: Request, screen: ExpenseScreen, status_code: int = 200):
        view = screen.view_model()
        chart = get_chart("html", config)
        context = dict(view)
        context.update(
            {
                "chart_html": chart.render(view["chart"]["labels"], view["chart"]["values"]),
                "symbol": symbol,
                "format_amount": format_amount,
            }
        )
        return templates.TemplateResponse(
            request, "index.html", context, status_code=status_code
        )

    @app.get("/", response_class=HTMLResponse)
    def index(
        request: Request,
        filter_mode: str = Query(FilterMode.ALL.value, alias="filter"),
        edit: str | None = None,
        message: str | None = None,
        error: str | None = None,
    ):
        screen = new_screen()
        try:
            screen.set_filter(filter_mode)
        except ValueError as exc:
            return _redirect(error=str(exc))
        screen.reload()
        if edit is not None and edit.strip():
            try:
                edit_id = int(edit)
            except ValueError:
                return _redirect(
                    screen.state.filter_mode.value, error=f"Invalid expense id '{edit}'"
                )
            try:
                screen.start_edit(edit_id)
            except ExpenseNotFoundError as exc:
                return _redirect(screen.state.filter_mode.value, error=str(exc))
        screen.state.message = message
        screen.state.error = error
        return render(request, screen)

    @app.post("/expenses")
    def submit_expense(
        request: Request,
        amount: str = Form(""),
        category: str = Form(""),
        note: str = Form(""),
        expense_date: str = Form("", alias="date"),
        editing_id: str = Form(""),
        filter_mode: str = Form(FilterMode.ALL.value, alias="filter"),
    ):
        screen = new_screen()
        try:
            mode = screen.set_filter(filter_mode).value
        except ValueError:
            mode = FilterMode.ALL.value
        try:
            target = int(editing_id) if editing_id.strip() else None
        except ValueError:
            return _redirect(mode, error=f"Invalid expense id '{editing_id}'")

        screen.state.form = FormState(
            amount=amount,
            category=category,
            note=note,
            date=expense_date,
            editing_id=target,
        )
        try:
            saved = screen.handle_submit()
        except ExpenseNotFoundError as exc:
            return _redirect(mode, error=str(exc))
        if not saved:
            screen.reload()
            return render(request, screen, status_code=400)
        return _redirect(mode, message=screen.state.message)

    @app.post("/expenses/{expense_id}/delete")
    def delete_expense(
        expense_id: int,
        filter_mode: str = Form(FilterMode.ALL.value, alias="filter"),
    ):
        screen = new_screen()
        screen.delete(expense_id)
        return _redirect(
            filter_mode, message=screen.state.message, error=screen.state.error
        )

    @app.post("/reset")
    def reset_form(filter_mode: str = Form(FilterMode.ALL.value, alias="filter")):
        return _redirect(filter_mode)

    @app.get("/api/expenses")
    def api_expenses(filter_mode: str = Query(FilterMode.ALL.value, alias="filter")):
        screen = new_screen()
        try:
            screen.set_filter(filter_mode)
        except ValueError as exc:
            return JSONResponse({"error": str(exc)}, status_code=400)
        screen.reload()
        return {
            "filter": screen.state.filter_mode.value,
            "expenses": [e.to_dict() for e in screen.visible_expenses()],
        }

    @app.get("/api/expenses/{expense_id}")
    def api_expense(expense_id: int):
        try:
            expense = app.state.store.get(expense_id)
        except ExpenseNotFoundError as exc:
            return JSONResponse({"error": str(exc)}, status_code=404)
        return expense.to_dict()

    @app.get("/api/summary")
    def api_summary(filter_mode: str = Query(FilterMode.ALL.value, alias="filter")):
        screen = new_screen()
        try:
            screen.set_filter(filter_mode)
        except ValueError as exc:
            return JSONResponse({"error": str(exc)}, status_code=400)
        screen.reload()
        return _summary_payload(screen, symbol)

    logger.debug("Expense screen app created for %s", config["db_path"])
    return app
