"""Course Signup API client.

A thin wrapper around the REST API served by ``course_signup_api``.
Each public method maps to exactly one endpoint:

* courses – :meth:`create_course`, :meth:`list_courses`, :meth:`delete_course`
* rosters – :meth:`add_members`, :meth:`list_members`, :meth:`delete_members`
* signup sheets – :meth:`create_signup_sheet`, :meth:`list_signup_sheets`,
  :meth:`delete_signup_sheet`
* slots – :meth:`add_slots`, :meth:`list_slots`, :meth:`update_slot`,
  :meth:`list_slot_members`
* signups – :meth:`signup`, :meth:`remove_signup`
* grades – :meth:`submit_grade`, :meth:`get_grade`

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is ``None`` (or an empty list for
listing calls) and ``error`` is a dictionary with ``status_code`` and
``message`` keys, ``message`` being the server's ``error`` text.
Request failures are logged and never raised.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class CourseSignupAPI:
    """Client for the course signup REST API."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``http://localhost:3000``.
                The ``/api`` prefix is added by the client.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request against ``/api<path>``.

        Returns:
            A tuple ``(data, error)`` as described in the module docstring.
        """
        url = f"{self.base_url}/api{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers={"Content-Type": "application/json"},
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
                    message = err_json.get("error") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _list(self, path: str, params: Dict[str, Any] | None = None) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", path, params=params)
        if error:
            return [], error
        return (data if isinstance(data, list) else []), None

    @staticmethod
    def _course_path(term_code: Any, section: Any = 1) -> str:
        return f"/courses/{term_code}/{section}"

    # ------------------------------------------------------------------
    # Courses and rosters
    # ------------------------------------------------------------------
    def create_course(self, term_code: Any, course_name: str, section: Any = 1) -> Result:
        payload = {"termCode": term_code, "courseName": course_name, "section": section}
        return self._request("POST", "/courses", json_body=payload)

    def list_courses(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._list("/courses")

    def delete_course(self, term_code: Any, section: Any = 1) -> Result:
        return self._request("DELETE", self._course_path(term_code, section))

    def add_members(self, term_code: Any, members: List[Dict[str, Any]], section: Any = 1) -> Result:
        """Add roster entries.

        Args:
            members: Dictionaries with ``memberId``, ``firstName``,
                ``lastName`` and optionally ``role``.
        Returns:
            ``(summary, error)``; the summary lists rejected ids under
            ``ignoredIds``.
        """
        path = self._course_path(term_code, section) + "/members"
        return self._request("POST", path, json_body={"members": members})

    def list_members(
        self, term_code: Any, section: Any = 1, role: Optional[str] = None
    ) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        params = {"role": role} if role else None
        return self._list(self._course_path(term_code, section) + "/members", params)

    def delete_members(self, term_code: Any, member_ids: List[str], section: Any = 1) -> Result:
        path = self._course_path(term_code, section) + "/members"
        return self._request("DELETE", path, json_body={"memberIds": member_ids})

    # ------------------------------------------------------------------
    # Signup sheets and slots
    # ------------------------------------------------------------------
    def create_signup_sheet(
        self, term_code: Any, assignment_name: str, not_before: str, not_after: str, section: Any = 1
    ) -> Result:
        payload = {
            "termCode": term_code,
            "section": section,
            "assignmentName": assignment_name,
            "notBefore": not_before,
            "notAfter": not_after,
        }
        return self._request("POST", "/signupsheets", json_body=payload)

    def list_signup_sheets(self, term_code: Any, section: Any = 1) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._list(self._course_path(term_code, section) + "/signupsheets")

    def delete_signup_sheet(self, sheet_id: Any) -> Result:
        return self._request("DELETE", f"/signupsheets/{sheet_id}")

    def add_slots(self, sheet_id: Any, start: str, slot_duration: int, num_slots: int, max_members: int) -> Result:
        payload = {
            "start": start,
            "slotDuration": slot_duration,
            "numSlots": num_slots,
            "maxMembers": max_members,
        }
        return self._request("POST", f"/signupsheets/{sheet_id}/slots", json_body=payload)

    def list_slots(self, sheet_id: Any) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._list(f"/signupsheets/{sheet_id}/slots")

    def update_slot(
        self,
        slot_id: Any,
        *,
        start_time: Optional[str] = None,
        duration: Optional[int] = None,
        max_members: Optional[int] = None,
    ) -> Result:
        """Update a slot; only the given fields are sent."""
        payload: Dict[str, Any] = {}
        if start_time is not None:
            payload["startTime"] = start_time
        if duration is not None:
            payload["duration"] = duration
        if max_members is not None:
            payload["maxMembers"] = max_members
        return self._request("PUT", f"/slots/{slot_id}", json_body=payload)

    def list_slot_members(self, slot_id: Any) -> Result:
        return self._request("GET", f"/slots/{slot_id}/members")

    # ------------------------------------------------------------------
    # Signups
    # ------------------------------------------------------------------
    def signup(self, sheet_id: Any, slot_id: Any, member_id: str) -> Result:
        payload = {"slotId": slot_id, "memberId": member_id}
        return self._request("POST", f"/signupsheets/{sheet_id}/signup", json_body=payload)

    def remove_signup(self, sheet_id: Any, member_id: str) -> Result:
        return self._request("DELETE", f"/signupsheets/{sheet_id}/signup/{member_id}")

    # ------------------------------------------------------------------
    # Grades
    # ------------------------------------------------------------------
    def submit_grade(self, member_id: str, signup_sheet_id: Any, grade: int, comment: str = "") -> Result:
        """Record a grade.

        Returns:
            ``(result, error)``; when a previous grade was overwritten
            ``result["originalGrade"]`` holds it.
        """
        payload = {
            "memberId": member_id,
            "signupSheetId": signup_sheet_id,
            "grade": grade,
            "comment": comment,
        }
        return self._request("POST", "/grades", json_body=payload)

    def get_grade(self, member_id: str, signup_sheet_id: Any) -> Result:
        """Fetch a grade; a missing grade comes back as a 404 error."""
        return self._request("GET", f"/grades/{member_id}/{signup_sheet_id}")
