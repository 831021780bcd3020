"""
Exam Session API Client

HTTP client used by the proctoring monitor to talk to the exam REST API.
Error responses are mapped back to the exception classes raised on the
server (``create_exception_from_response``); network failures raise
``ProctoringTransportError``.

The client authenticates either with the cookies set by ``login`` or with
an explicit bearer token.

Author: Exam Platform Development Team
Version: 1.0.0
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..exceptions import ProctoringTransportError, create_exception_from_response

logger = logging.getLogger(__name__)


class ExamSessionClient:
    """
    Client für die Prüfungs-API (``/api/exams/``).

    Example:
        >>> client = ExamSessionClient("https://exams.example.com")
        >>> client.login("student", "secret")
        >>> attempt = client.start_exam(12)
        >>> client.save_answer(attempt["attempt_id"], 5, {"choice_id": 17})
    """

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 10,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        if access_token:
            self.session.headers["Authorization"] = f"Bearer {access_token}"

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = self._url(path)
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout:
            logger.warning(f"Timeout bei {method} {url}")
            raise ProctoringTransportError("Request to the exam server timed out")
        except requests.exceptions.RequestException as e:
            logger.warning(f"Netzwerkfehler bei {method} {url}: {e}")
            raise ProctoringTransportError(f"Network error: {e}")
        return self._handle_response(response)

    def _handle_response(self, response: requests.Response) -> Dict[str, Any]:
        """
        Verarbeitet die API Response und wirft die passende Exception.

        Raises:
            ExamSessionException: Unterklasse passend zum ``error_code``
        """
        try:
            response_data = response.json()
        except ValueError:
            # Fallback für leere oder non-JSON responses
            response_data = {}

        if response.status_code >= 400:
            if not isinstance(response_data, dict):
                response_data = {}
            message = response_data.get("message") or response_data.get("detail") or f"HTTP {response.status_code}"
            logger.error(f"Exam API Error {response.status_code}: {message}")
            raise create_exception_from_response(
                response.status_code,
                message=str(message),
                error_code=response_data.get("error_code"),
                details=response_data.get("details") or {},
            )

        return response_data if isinstance(response_data, dict) else {"results": response_data}

    # --- Authentifizierung ---

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """Setzt die JWT-Cookies in der Session."""
        return self._request("POST", "/api/token/", {"username": username, "password": password})

    # --- Sitzung ---

    def start_exam(self, exam_id: int) -> Dict[str, Any]:
        return self._request("POST", f"/api/exams/{exam_id}/start/")

    def get_attempt(self, attempt_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/exams/attempts/{attempt_id}/")

    def save_answer(self, attempt_id: int, question_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/api/exams/attempts/{attempt_id}/answers/{question_id}/", payload)

    def submit(
        self,
        attempt_id: int,
        trigger: str = "manual",
        violation: Optional[str] = None,
        answers: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"trigger": trigger}
        if violation:
            payload["violation"] = violation
        if answers:
            payload["answers"] = answers
        return self._request("POST", f"/api/exams/attempts/{attempt_id}/submit/", payload)

    def report_violation(
        self,
        attempt_id: int,
        violation_type: str,
        details: str = "",
        answers: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"violation_type": violation_type, "details": details}
        if answers:
            payload["answers"] = answers
        return self._request("POST", f"/api/exams/attempts/{attempt_id}/violations/", payload)

    def get_results(self, attempt_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/exams/attempts/{attempt_id}/results/")
