import logging
import time
from pathlib import Path
from typing import Any, Optional, Protocol
from urllib.parse import quote

import requests
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from sheetbind.exceptions import ConfigError, DataSourceError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class SheetsValuesProvider(Protocol):
    def get_values(self, spreadsheet_id: str, range_a1: str) -> list[list[Any]]:
        ...

    def update_values(self, spreadsheet_id: str, range_a1: str, rows: list[list[Any]]) -> dict:
        ...

    def append_values(self, spreadsheet_id: str, range_a1: str, rows: list[list[Any]]) -> dict:
        ...


class GoogleSheetsValuesProvider:
    """
    Reads and writes cell values through the Sheets v4 values endpoints, using
    either a service account or an API key (read-only).
    """

    VALUES_URL = "https://sheets.googleapis.com/v4/spreadsheets/{spreadsheet_id}/values/{range}"

    def __init__(
        self,
        service_account_file: Optional[Path] = None,
        api_key: Optional[str] = None,
        max_retries: int = 3,
        backoff_seconds: float = 1.0,
        value_render_option: str = "UNFORMATTED_VALUE",
        value_input_option: str = "USER_ENTERED",
        session: Optional[Any] = None,
    ):
        self.api_key = api_key
        self.max_retries = max(1, max_retries)
        self.backoff_seconds = backoff_seconds
        self.value_render_option = value_render_option
        self.value_input_option = value_input_option
        self.session = session
        if self.session is None and service_account_file and Path(service_account_file).exists():
            creds = service_account.Credentials.from_service_account_file(
                service_account_file,
                scopes=["https://www.googleapis.com/auth/spreadsheets"],
            )
            self.session = AuthorizedSession(creds)

    @classmethod
    def from_settings(cls, google_settings) -> "GoogleSheetsValuesProvider":
        return cls(
            service_account_file=google_settings.service_account_file,
            api_key=google_settings.api_key,
            max_retries=google_settings.max_retries,
            backoff_seconds=google_settings.backoff_seconds,
            value_render_option=google_settings.value_render_option,
            value_input_option=google_settings.value_input_option,
        )

    def _url(self, spreadsheet_id: str, range_a1: str) -> str:
        if not spreadsheet_id:
            raise ConfigError("Google Sheets spreadsheet_id is not configured.")
        return self.VALUES_URL.format(spreadsheet_id=spreadsheet_id, range=quote(range_a1, safe="!:"))

    def _request(self, method: str, url: str, params: dict, json: Optional[dict] = None):
        if self.session is not None:
            requester = self.session
        elif self.api_key and method == "GET":
            params = {**params, "key": self.api_key}
            requester = requests
        else:
            raise ConfigError("No credentials or API key configured for Google Sheets.")

        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries):
            try:
                resp = requester.request(method, url, params=params, json=json)
            except requests.RequestException as exc:
                last_error = DataSourceError(f"Sheets request failed: {exc}")
                if attempt < self.max_retries - 1:
                    time.sleep(self.backoff_seconds * (2**attempt))
                    continue
                break

            if resp.status_code == 200:
                return resp.json()

            last_error = DataSourceError(f"Sheets request {method} {url} failed: {resp.status_code}")
            if attempt < self.max_retries - 1 and resp.status_code in RETRYABLE_STATUS:
                logger.warning("retrying sheets request", extra={"status": resp.status_code, "attempt": attempt + 1})
                time.sleep(self.backoff_seconds * (2**attempt))
                continue
            break

        raise last_error or DataSourceError(f"Sheets request {method} {url} failed")

    def get_values(self, spreadsheet_id: str, range_a1: str) -> list[list[Any]]:
        payload = self._request(
            "GET",
            self._url(spreadsheet_id, range_a1),
            params={"valueRenderOption": self.value_render_option, "majorDimension": "ROWS"},
        )
        return payload.get("values", [])

    def update_values(self, spreadsheet_id: str, range_a1: str, rows: list[list[Any]]) -> dict:
        # None leaves a cell unchanged in a values update
        body = {"range": range_a1, "majorDimension": "ROWS", "values": rows}
        return self._request(
            "PUT",
            self._url(spreadsheet_id, range_a1),
            params={"valueInputOption": self.value_input_option},
            json=body,
        )

    def append_values(self, spreadsheet_id: str, range_a1: str, rows: list[list[Any]]) -> dict:
        body = {"range": range_a1, "majorDimension": "ROWS", "values": rows}
        return self._request(
            "POST",
            self._url(spreadsheet_id, range_a1) + ":append",
            params={"valueInputOption": self.value_input_option, "insertDataOption": "INSERT_ROWS"},
            json=body,
        )
