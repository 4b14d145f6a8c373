"""Medicine Tracker API client.

A thin wrapper around the REST API served by ``medicine_tracker_api``.
Every method maps to one service operation and returns a tuple
``(data, error)``: on success ``error`` is ``None``; on failure ``data``
is ``None`` (or an empty list for list operations) and ``error`` is a
dictionary with ``status_code`` and the server's ``message``.

Authentication uses the bearer token issued for the caller's
principal (see ``create_token.py``)::

    api = MedicineTrackerAPI(base_url="http://localhost:8000", api_key=token)
    medicine, error = api.add_medicine(
        title="Amoxicillin", description="Twice daily",
        assigned_to="nurse-7", expiry_date="2026-12-01",
    )
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class MedicineTrackerAPI:
    """Client for the medicine endpoints of API v1."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Server root, e.g. ``http://localhost:8000``.
            api_key: Bearer token identifying the caller.  Required for
                every update and for :meth:`get_medicine`.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request below ``/api/v1``.

        Returns ``(data, None)`` with the parsed JSON body on success or
        ``(None, error)`` on failure.
        """
        url = f"{self.base_url}/api/v1{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _list(
        self, path: str, params: Dict[str, Any] | None = None
    ) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", path, params=params)
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    @staticmethod
    def _path(medicine_id: str, suffix: str = "") -> str:
        return f"/medicines/{quote(str(medicine_id), safe='')}{suffix}"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_initial_medicines(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/medicines/initial")

    def load_more_medicines(self, offset: int, limit: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/medicines/", {"offset": offset, "limit": limit})

    def get_medicine(self, medicine_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", self._path(medicine_id))

    def get_medicines_by_tag(self, tag: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/medicines/by-tag", {"tag": tag})

    def search_medicines(self, query: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/medicines/search", {"q": query})

    def get_medicines_by_status(self, status: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/medicines/by-status", {"status": status})

    def get_medicines_by_creator(self, creator: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/medicines/by-creator", {"creator": creator})

    def get_overdue_medicines(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/medicines/overdue")

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------
    def add_medicine(
        self, *, title: str, description: str, assigned_to: str, expiry_date: str
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        payload = {
            "title": title,
            "description": description,
            "assigned_to": assigned_to,
            "expiry_date": expiry_date,
        }
        return self._request("POST", "/medicines/", json_body=payload)

    def update_medicine(
        self, medicine_id: str, *, title: str, description: str, assigned_to: str, expiry_date: str
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        payload = {
            "title": title,
            "description": description,
            "assigned_to": assigned_to,
            "expiry_date": expiry_date,
        }
        return self._request("PUT", self._path(medicine_id), json_body=payload)

    def delete_medicine(self, medicine_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("DELETE", self._path(medicine_id))

    def complete_medicine(self, medicine_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", self._path(medicine_id, "/complete"))

    def add_tags(self, medicine_id: str, tags: List[str]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", self._path(medicine_id, "/tags"), json_body={"tags": list(tags)})

    def assign_medicine(self, medicine_id: str, assigned_to: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request(
            "PUT", self._path(medicine_id, "/assignee"), json_body={"assigned_to": assigned_to}
        )

    def change_medicine_status(self, medicine_id: str, status: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("PUT", self._path(medicine_id, "/status"), json_body={"status": status})

    def set_medicine_priority(self, medicine_id: str, priority: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request(
            "PUT", self._path(medicine_id, "/priority"), json_body={"priority": priority}
        )

    def send_due_date_reminder(self, medicine_id: str) -> Tuple[Optional[str], Optional[Error]]:
        """Return the reminder message text for an overdue medicine."""
        data, error = self._request("POST", self._path(medicine_id, "/reminder"))
        if error:
            return None, error
        return (data or {}).get("message"), None

    def add_medicine_comment(self, medicine_id: str, comment: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request(
            "POST", self._path(medicine_id, "/comments"), json_body={"comment": comment}
        )
