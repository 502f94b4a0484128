"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as a shared backend because:
1. The ledger can be viewed and exported directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- The whole ledger sheet is rewritten on every save (fine for a
  personal ledger, not for high volume)
- No transactions (one sheet per concern keeps writes independent)
- Saves run while the Ledger holds its lock, so writes retry once after
  a short pause instead of backing off like the initial connection

The implementation follows the abstract interfaces, so the Ledger does
not know which backend it is writing to.
"""

import math
from typing import Optional, Sequence

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential, wait_fixed

from expense_tracker.audit import AuditLogger
from expense_tracker.config import GoogleSheetsSettings, get_settings
from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.services.storage.interface import (
    BudgetConfigStorageInterface,
    ConnectionError,
    DeserializationError,
    LedgerStorageInterface,
    StorageError,
)
from expense_tracker.services.storage.serialization import (
    RECORD_FIELDS,
    ledger_from_list,
    record_to_dict,
)


BUDGET_CELL_LABEL = "totalBudget"

# Writes block ledger readers while they retry
WRITE_ATTEMPTS = 2
WRITE_RETRY_WAIT = 0.5


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(self, title: str, header: list[str], rows: int) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(header),
            )
            sheet.append_row(header)
        return sheet

    def get_expenses_sheet(self) -> gspread.Worksheet:
        """Get or create the Expenses worksheet."""
        return self._get_or_create_sheet(
            self._settings.expenses_sheet_name,
            RECORD_FIELDS,
            rows=1000,
        )

    def get_budget_sheet(self) -> gspread.Worksheet:
        """Get or create the Budget worksheet."""
        return self._get_or_create_sheet(
            self._settings.budget_sheet_name,
            [BUDGET_CELL_LABEL, "0"],
            rows=1,
        )


def _record_to_row(record: ExpenseRecord) -> list[str]:
    """Convert a record to a spreadsheet row in RECORD_FIELDS order."""
    data = record_to_dict(record)
    row = []
    for field in RECORD_FIELDS:
        value = data.get(field)
        row.append("" if value is None else str(value))
    return row


def _row_to_dict(header: list[str], row: list[str]) -> dict:
    """Map a row back to stored field names, blanks meaning 'not set'."""
    data = {}
    for index, field in enumerate(header):
        if field not in RECORD_FIELDS:
            continue
        value = row[index] if index < len(row) else ""
        if value != "":
            data[field] = value
    return data


class GoogleSheetsLedgerStorage(LedgerStorageInterface):
    """
    Google Sheets implementation of ledger storage.

    One record per row, stable field names as the header row.
    Rows are kept in ledger order.
    """

    def __init__(
        self,
        client: Optional[GoogleSheetsClient] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._client = client or GoogleSheetsClient()
        self._audit_logger = audit_logger or AuditLogger()

    def load_ledger(self) -> list[ExpenseRecord]:
        """Load every row; any unreadable row discards the stored ledger."""
        source = "google_sheets"
        try:
            values = self._client.get_expenses_sheet().get_all_values()
        except Exception as e:
            self._audit_logger.log_ledger_load_failed(source, str(e))
            return []

        if len(values) < 2:
            return []

        header, rows = values[0], values[1:]
        data = [_row_to_dict(header, row) for row in rows if any(row)]
        try:
            records = ledger_from_list(data)
        except DeserializationError as e:
            self._audit_logger.log_ledger_load_failed(source, str(e))
            return []

        self._audit_logger.log_ledger_loaded(len(records), source)
        return records

    @retry(
        stop=stop_after_attempt(WRITE_ATTEMPTS),
        wait=wait_fixed(WRITE_RETRY_WAIT),
        reraise=True,
    )
    def save_ledger(self, records: Sequence[ExpenseRecord]) -> bool:
        """Rewrite the Expenses sheet with the current ledger."""
        try:
            sheet = self._client.get_expenses_sheet()
            values = [RECORD_FIELDS] + [_record_to_row(record) for record in records]
            sheet.clear()
            sheet.update(values=values, range_name="A1", value_input_option="RAW")
            return True
        except Exception as e:
            raise StorageError(f"Failed to save ledger: {e}")


class GoogleSheetsBudgetStorage(BudgetConfigStorageInterface):
    """The monthly budget lives in cell B1 of the Budget sheet."""

    def __init__(
        self,
        client: Optional[GoogleSheetsClient] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._client = client or GoogleSheetsClient()
        self._audit_logger = audit_logger or AuditLogger()

    def load_total_budget(self) -> float:
        source = "google_sheets"
        try:
            raw = self._client.get_budget_sheet().acell("B1").value
        except Exception as e:
            self._audit_logger.log_budget_load_failed(source, str(e))
            return 0.0

        if raw in (None, ""):
            return 0.0
        try:
            value = float(raw)
        except ValueError:
            self._audit_logger.log_budget_load_failed(
                source, f"Budget value is not a number: {raw!r}"
            )
            return 0.0
        if not math.isfinite(value) or value < 0:
            self._audit_logger.log_budget_load_failed(
                source, f"Budget value out of range: {value!r}"
            )
            return 0.0
        return value

    @retry(
        stop=stop_after_attempt(WRITE_ATTEMPTS),
        wait=wait_fixed(WRITE_RETRY_WAIT),
        reraise=True,
    )
    def save_total_budget(self, value: float) -> bool:
        try:
            sheet = self._client.get_budget_sheet()
            sheet.update(
                values=[[BUDGET_CELL_LABEL, str(value)]],
                range_name="A1:B1",
                value_input_option="RAW",
            )
            return True
        except Exception as e:
            raise StorageError(f"Failed to save budget: {e}")
