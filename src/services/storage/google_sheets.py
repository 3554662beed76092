"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets serves as the remote keyed-record store:
1. Users can view their transactions directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (fine for personal use)
- No transactions; every write is a whole-row overwrite, last write wins
- Limited query capabilities (we filter in Python)

One row per transaction, keyed by the `id` column. The implementation
follows the abstract interface, so the backend can be swapped without
changing the repository or the screens.
"""

from datetime import datetime
from decimal import InvalidOperation
from typing import Optional

import gspread
from gspread.utils import rowcol_to_a1
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from src.config import get_settings
from src.config.settings import GoogleSheetsSettings
from src.models.transaction import Transaction, ensure_utc
from src.services.storage.interface import (
    StorageError,
    StoreConnectionError,
    TransactionStoreInterface,
)
from src.services.storage.keys import generate_push_id


# Column mappings for Transactions sheet
TRANSACTION_COLUMNS = [
    "id",
    "amount",
    "type",
    "category",
    "description",
    "timestamp",
    "owner_id",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for connecting.
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
                raise StoreConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StoreConnectionError(f"Failed to connect to Google Sheets: {e}")

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
                raise StoreConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_transactions_sheet(self) -> gspread.Worksheet:
        """Get or create the Transactions worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.transactions_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.transactions_sheet_name,
                rows=1000,
                cols=len(TRANSACTION_COLUMNS),
            )
            sheet.append_row(TRANSACTION_COLUMNS)
        return sheet


class GoogleSheetsTransactionStore(TransactionStoreInterface):
    """
    Google Sheets implementation of the transaction store.

    Transactions are stored as rows in a worksheet, one transaction per row.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _transaction_to_row(self, transaction: Transaction) -> list:
        """Convert a Transaction to a spreadsheet row."""
        record = transaction.to_record()
        return [record[column] for column in TRANSACTION_COLUMNS]

    def _row_to_transaction(self, row: list) -> Transaction:
        """Convert a spreadsheet row to a Transaction."""
        # Short rows come back when trailing cells are empty
        padded = list(row) + [""] * (len(TRANSACTION_COLUMNS) - len(row))
        return Transaction.from_record(dict(zip(TRANSACTION_COLUMNS, padded)))

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _read_rows(self) -> list[list]:
        """All data rows (header excluded)."""
        sheet = self._client.get_transactions_sheet()
        return sheet.get_all_values()[1:]

    def _read_transactions(self) -> list[Transaction]:
        transactions = []
        for row in self._read_rows():
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                transactions.append(self._row_to_transaction(row))
            except (ValueError, KeyError, InvalidOperation):
                continue  # Skip malformed rows
        return transactions

    def generate_key(self) -> str:
        return generate_push_id()

    async def put(self, transaction: Transaction) -> None:
        """Write a transaction row, overwriting the row with the same id."""
        if not transaction.id:
            raise StorageError("Cannot store a transaction without an id")
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()
            new_row = self._transaction_to_row(transaction)

            for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is header
                if row and row[0] == transaction.id:
                    last_col = rowcol_to_a1(idx, len(TRANSACTION_COLUMNS))
                    sheet.update(
                        range_name=f"A{idx}:{last_col}",
                        values=[new_row],
                        value_input_option="RAW",
                    )
                    return

            sheet.append_row(new_row, value_input_option="RAW")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write transaction: {e}")

    async def remove(self, transaction_id: str) -> None:
        """Delete the row with this id, if any."""
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()

            for idx, row in enumerate(all_rows[1:], start=2):
                if row and row[0] == transaction_id:
                    sheet.delete_rows(idx)
                    return
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete transaction: {e}")

    async def get(self, transaction_id: str) -> Optional[Transaction]:
        """Retrieve a transaction by its ID."""
        try:
            for row in self._read_rows():
                if row and row[0] == transaction_id:
                    return self._row_to_transaction(row)
            return None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get transaction: {e}")

    async def query_by_owner(self, owner_id: str) -> list[Transaction]:
        try:
            return [t for t in self._read_transactions() if t.owner_id == owner_id]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list transactions: {e}")

    async def query_by_timestamp(
        self,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> list[Transaction]:
        start = ensure_utc(start) if start is not None else None
        end = ensure_utc(end) if end is not None else None
        try:
            transactions = [
                t for t in self._read_transactions()
                if (start is None or t.timestamp >= start)
                and (end is None or t.timestamp <= end)
            ]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to query transactions: {e}")

        transactions.sort(key=lambda t: t.timestamp)
        return transactions
