from typing import Optional

import requests
import streamlit as st


class APIClient:
    """Thin requests wrapper around the OpinionPointer API.

    Every call returns ``{"status": int, "data": ...}`` or, when the backend
    cannot be reached, ``{"status": 0, "error": str}``.
    """

    def __init__(self, base_url: str, timeout: float = 30):
        self.base_url = base_url
        self.timeout = timeout

    def _token(self) -> Optional[str]:
        return st.session_state.get("token")

    def _parse_json(self, resp) -> Optional[dict]:
        """Safely parse JSON, return None or raw text on failure."""
        if resp is None or not resp.text:
            return None
        try:
            return resp.json()
        except ValueError:
            return {"raw": resp.text}

    def _request(
        self,
        method: str,
        endpoint: str,
        data: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> dict:
        params = dict(params or {})
        token = self._token()
        if token:
            params["token"] = token
        try:
            resp = requests.request(
                method,
                f"{self.base_url}{endpoint}",
                json=data,
                params=params,
                timeout=self.timeout,
            )
            return {"status": resp.status_code, "data": self._parse_json(resp)}
        except requests.exceptions.ConnectionError:
            return {"status": 0, "error": "Cannot connect to backend"}
        except requests.exceptions.RequestException as e:
            return {"status": 0, "error": str(e)}

    def _get(self, endpoint: str, params: Optional[dict] = None) -> dict:
        return self._request("GET", endpoint, params=params)

    def _post(self, endpoint: str, data: Optional[dict] = None, params: Optional[dict] = None) -> dict:
        return self._request("POST", endpoint, data=data or {}, params=params)

    # Auth endpoints
    def login(self, email: str, password: str) -> dict:
        """Login; the response carries the token and the session."""
        return self._post("/auth/login", {
            "email": email,
            "password": password,
        })

    def register(self, email: str, password: str, full_name: Optional[str] = None) -> dict:
        """Register new user."""
        return self._post("/auth/register", {
            "email": email,
            "password": password,
            "password_confirm": password,
            "full_name": full_name,
        })

    def get_session(self) -> dict:
        """Current session (user identity, role, subscription, expiry)."""
        return self._get("/auth/session")

    # Market sentiment
    def get_market_sentiment(self) -> dict:
        return self._get("/market/sentiment")

    def get_fresh_market_sentiment(self) -> dict:
        return self._get("/market/sentiment/fresh")

    def get_market_health(self) -> dict:
        return self._get("/market/health")

    # Admin
    def get_admin_health_check(self) -> dict:
        """Aggregated service health; 500 responses still carry a body."""
        return self._get("/api/admin/health-check")

    def start_services(self) -> dict:
        return self._post("/api/admin/start-services")
