"""
Budget Workbook Service exports budgets to spreadsheet workbooks, generates
starter templates from recurring items, and imports edited workbooks back into
structured line items for the budget-creation flow.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Union
from urllib.parse import quote

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

SRC_DIR = Path(__file__).resolve().parent
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

SERVICES_ROOT = SRC_DIR.parents[1]
if str(SERVICES_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICES_ROOT))

from exporters.budget_exporter import export_budget_file
from models.budget import (
    BudgetDocument,
    DeductionItem,
    ExpenseItem,
    ImportedBudgetData,
    IncomeItem,
    RecurringDeduction,
    RecurringExpense,
    RecurringIncome,
)
from parsers.workbook_importer import WorkbookParseError, import_budget_workbook
from settings import WorkbookSettings, WorkbookSettingsError, load_workbook_settings
from shared.observability import (
    bind_request_context,
    describe_upload,
    ensure_request_id,
    reset_request_context,
    setup_telemetry,
)
from templates.template_generator import generate_template_file
from workbook.layout import XLSX_MEDIA_TYPE, XLSX_SUFFIX
from workbook.sheets import WorkbookFile

logger = logging.getLogger(__name__)

SERVICE_NAME = "budget-workbook-service"

app = FastAPI(title="Budget Workbook Service")
setup_telemetry(app, service_name=SERVICE_NAME)

try:
    WORKBOOK_SETTINGS: WorkbookSettings = load_workbook_settings()
except WorkbookSettingsError as exc:
    logger.error("Failed to load workbook settings: %s", exc)
    raise


def reload_workbook_settings_for_tests() -> None:
    """Refresh settings after tests mutate environment variables."""

    global WORKBOOK_SETTINGS
    WORKBOOK_SETTINGS = load_workbook_settings()


XLSX_CONTENT_TYPES = {
    XLSX_MEDIA_TYPE,
    "application/vnd.ms-excel",
}


class IncomeItemModel(BaseModel):
    item_name: str
    date: Optional[str] = None
    full_amount: float = 0.0
    notes: Optional[str] = None


class DeductionItemModel(BaseModel):
    item_name: str
    date: Optional[str] = None
    full_amount: float = 0.0
    notes: Optional[str] = None


class ExpenseItemModel(BaseModel):
    item_name: str
    date: Optional[str] = None
    full_amount: float = 0.0
    amount_used: Optional[float] = None
    notes: Optional[str] = None


class BudgetDocumentModel(BaseModel):
    month_year: str
    created_at: Union[datetime, str]
    primary_income: float = 0.0
    total_expenses: float = 0.0
    savings: float = 0.0
    income_items: List[IncomeItemModel] = Field(default_factory=list)
    deduction_items: List[DeductionItemModel] = Field(default_factory=list)
    expense_items: List[ExpenseItemModel] = Field(default_factory=list)


class RecurringIncomeModel(BaseModel):
    description: str
    amount: float = 0.0


class RecurringDeductionModel(BaseModel):
    description: str
    amount: float = 0.0


class RecurringExpenseModel(BaseModel):
    description: str
    full_amount: float = 0.0


class TemplateRequestModel(BaseModel):
    recurring_incomes: List[RecurringIncomeModel] = Field(default_factory=list)
    recurring_deductions: List[RecurringDeductionModel] = Field(default_factory=list)
    recurring_expenses: List[RecurringExpenseModel] = Field(default_factory=list)


class ImportResponseModel(BaseModel):
    income_items: List[IncomeItemModel] = Field(default_factory=list)
    deduction_items: List[DeductionItemModel] = Field(default_factory=list)
    expense_items: List[ExpenseItemModel] = Field(default_factory=list)
    counts: Dict[str, int] = Field(default_factory=dict)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = ensure_request_id(request)
    token = bind_request_context(request_id)
    try:
        response = await call_next(request)
        response.headers.setdefault("x-request-id", request_id)
        return response
    finally:
        reset_request_context(token)


def error_response(status_code: int, error_code: str, details: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error_code, "details": details},
    )


@app.get("/health")
def health_check() -> dict:
    """
    Report overall service health; expects no payload.
    Returns a minimal status object for uptime probes and orchestrators.
    """
    return {"status": "ok", "service": SERVICE_NAME}


@app.post("/export", response_class=Response)
def export_budget_endpoint(payload: BudgetDocumentModel) -> Response:
    """
    Serialize a budget into an `.xlsx` download.
    Expects a JSON `BudgetDocumentModel`; summary figures are written as supplied.
    """
    workbook_file = export_budget_file(_model_to_document(payload), WORKBOOK_SETTINGS.currency)
    return _workbook_response(workbook_file)


@app.post("/template", response_class=Response)
def template_endpoint(payload: Optional[TemplateRequestModel] = None) -> Response:
    """
    Generate a starter workbook from the caller's recurring items.
    An empty or missing payload yields the generic sample template.
    """
    payload = payload or TemplateRequestModel()
    workbook_file = generate_template_file(
        [RecurringIncome(description=item.description, amount=item.amount) for item in payload.recurring_incomes],
        [RecurringDeduction(description=item.description, amount=item.amount) for item in payload.recurring_deductions],
        [
            RecurringExpense(description=item.description, full_amount=item.full_amount)
            for item in payload.recurring_expenses
        ],
        WORKBOOK_SETTINGS.currency,
    )
    return _workbook_response(workbook_file)


@app.post("/import", response_model=ImportResponseModel)
async def import_workbook_endpoint(file: UploadFile = File(...)) -> Union[ImportResponseModel, JSONResponse]:
    """
    Parse an uploaded budget workbook into income, deduction and expense items.
    Expects a multipart/form-data payload with a single `file` field containing `.xlsx` bytes.
    Returns the recovered items plus per-category counts; categories without a sheet come back empty.
    """
    if not _is_xlsx_upload(file):
        return error_response(400, "unsupported_file_type", "Please upload a valid Excel file (.xlsx).")

    file_bytes = await file.read()
    if not file_bytes:
        return error_response(400, "file_empty", "Uploaded file is empty.")

    upload_summary = describe_upload(file.filename, file_bytes)
    if len(file_bytes) > WORKBOOK_SETTINGS.max_upload_bytes:
        logger.warning({"event": "workbook_upload_rejected", "reason": "too_large", **upload_summary})
        return error_response(
            413,
            "file_too_large",
            f"Uploaded file exceeds {WORKBOOK_SETTINGS.max_upload_bytes} bytes.",
        )

    try:
        imported = import_budget_workbook(file_bytes, WORKBOOK_SETTINGS.currency)
    except WorkbookParseError as exc:
        logger.warning({"event": "workbook_upload_rejected", "reason": "unreadable", **upload_summary})
        return error_response(422, "invalid_workbook", str(exc))

    logger.info({"event": "workbook_upload_parsed", **upload_summary, **imported.counts()})
    return _imported_to_response(imported)


def _is_xlsx_upload(file: UploadFile) -> bool:
    content_type = (file.content_type or "").lower()
    filename = (file.filename or "").lower()
    return content_type in XLSX_CONTENT_TYPES or filename.endswith(XLSX_SUFFIX)


def _workbook_response(workbook_file: WorkbookFile) -> Response:
    return Response(
        content=workbook_file.content,
        media_type=workbook_file.media_type,
        headers={"Content-Disposition": _content_disposition(workbook_file.filename)},
    )


def _content_disposition(filename: str) -> str:
    # Month labels are free text; keep an ASCII fallback next to the RFC 5987 form.
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace('"', "'")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


def _model_to_document(payload: BudgetDocumentModel) -> BudgetDocument:
    return BudgetDocument(
        month_year=payload.month_year,
        created_at=payload.created_at,
        primary_income=payload.primary_income,
        total_expenses=payload.total_expenses,
        savings=payload.savings,
        income_items=[
            IncomeItem(item_name=item.item_name, date=item.date, full_amount=item.full_amount, notes=item.notes)
            for item in payload.income_items
        ],
        deduction_items=[
            DeductionItem(item_name=item.item_name, date=item.date, full_amount=item.full_amount, notes=item.notes)
            for item in payload.deduction_items
        ],
        expense_items=[
            ExpenseItem(
                item_name=item.item_name,
                date=item.date,
                full_amount=item.full_amount,
                amount_used=item.amount_used,
                notes=item.notes,
            )
            for item in payload.expense_items
        ],
    )


def _imported_to_response(imported: ImportedBudgetData) -> ImportResponseModel:
    return ImportResponseModel(
        income_items=[
            IncomeItemModel(item_name=item.item_name, date=item.date, full_amount=item.full_amount, notes=item.notes)
            for item in imported.income_items
        ],
        deduction_items=[
            DeductionItemModel(item_name=item.item_name, date=item.date, full_amount=item.full_amount, notes=item.notes)
            for item in imported.deduction_items
        ],
        expense_items=[
            ExpenseItemModel(
                item_name=item.item_name,
                date=item.date,
                full_amount=item.full_amount,
                amount_used=item.amount_used,
                notes=item.notes,
            )
            for item in imported.expense_items
        ],
        counts=imported.counts(),
    )
