"""GoHighLevel CRM client.

Read-only access to the v1 REST API for the configured location:
users and calendar appointments. Responses are loosely typed dicts;
callers pick out the fields they need.

All failures (transport, non-2xx, unparseable body) raise GhlApiError so
callers can decide how to degrade.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import jwt

from app.core.config import settings
from app.core.security import decode_unverified_claims

logger = logging.getLogger(__name__)

# Appointment window queried from the CRM
LOOKBACK_DAYS = 60
LOOKAHEAD_DAYS = 90
PAGE_LIMIT = 1000


class GhlApiError(Exception):
    """GoHighLevel request failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class GhlCredentials:
    access_token: str
    location_id: str


def get_ghl_credentials(
    access_token: str | None = None,
    location_id: str | None = None,
) -> GhlCredentials | None:
    """Resolve the API token and location id.

    The location id comes from GHL_LOCATION_ID when set, otherwise from the
    `location_id` / `locationId` claim of the location API key. Returns None
    when either part is missing.
    """
    token = access_token if access_token is not None else settings.GHL_API_TOKEN
    if not token:
        logger.warning("GHL API token not configured")
        return None

    location = location_id if location_id is not None else settings.GHL_LOCATION_ID
    if not location:
        try:
            claims = decode_unverified_claims(token)
        except jwt.DecodeError:
            logger.error("GHL API token is not a JWT; set GHL_LOCATION_ID explicitly")
            return None
        location = claims.get("location_id") or claims.get("locationId")

    if not location:
        logger.warning("Location ID not found in GHL token")
        return None

    return GhlCredentials(access_token=token, location_id=str(location))


def appointment_window(now: datetime | None = None) -> tuple[int, int]:
    """Return (start, end) epoch milliseconds for appointment queries."""
    now = now or datetime.now(timezone.utc)
    start = now - timedelta(days=LOOKBACK_DAYS)
    end = now + timedelta(days=LOOKAHEAD_DAYS)
    return int(start.timestamp() * 1000), int(end.timestamp() * 1000)


class GoHighLevelClient:
    """Async client bound to one location's credentials.

    Implements the UserDirectory and AppointmentSource protocols used by
    ghl_appointment_service.
    """

    def __init__(
        self,
        credentials: GhlCredentials,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.credentials = credentials
        self.base_url = (base_url or settings.GHL_API_BASE).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.GHL_TIMEOUT_SECONDS
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.credentials.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _get_list(self, path: str, params: dict[str, Any], key: str) -> list[dict]:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.get(url, headers=self._headers(), params=params)
        except httpx.HTTPError as exc:
            raise GhlApiError(f"GET {path} failed: {exc}") from exc

        if response.status_code >= 400:
            logger.error(
                "GHL API error",
                extra={"path": path, "status_code": response.status_code},
            )
            raise GhlApiError(
                f"GET {path} returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise GhlApiError(f"GET {path} returned a non-JSON body") from exc

        items = data.get(key) if isinstance(data, dict) else None
        if not isinstance(items, list):
            return []
        # null or scalar entries are dropped so callers can rely on dicts
        return [item for item in items if isinstance(item, dict)]

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def list_users(self) -> list[dict]:
        """All users of the location."""
        users = await self._get_list(
            "/users/",
            {"locationId": self.credentials.location_id, "limit": PAGE_LIMIT},
            "users",
        )
        logger.info("Fetched %d users from GHL", len(users))
        return users

    # ------------------------------------------------------------------
    # Appointments
    # ------------------------------------------------------------------

    def _appointment_params(self) -> dict[str, Any]:
        start_ms, end_ms = appointment_window()
        return {
            "startDate": start_ms,
            "endDate": end_ms,
            "includeAll": "true",
            "limit": PAGE_LIMIT,
        }

    async def get_appointments_by_user_id(self, ghl_user_id: str) -> list[dict]:
        """Appointments the CRM associates with one user."""
        params = {**self._appointment_params(), "userId": ghl_user_id}
        appointments = await self._get_list("/appointments/", params, "appointments")
        logger.info("Fetched %d appointments by GHL user id", len(appointments))
        return appointments

    async def get_appointments(self) -> list[dict]:
        """Every appointment for the location.

        The v1 endpoint requires one of calendarId/userId/teamId; the
        location id is accepted as each of them depending on account setup,
        so they are tried in that order.
        """
        base = self._appointment_params()
        location_id = self.credentials.location_id
        attempts = ("calendarId", "userId", "teamId")

        for index, param in enumerate(attempts):
            try:
                appointments = await self._get_list(
                    "/appointments/", {**base, param: location_id}, "appointments"
                )
            except GhlApiError as exc:
                if index == len(attempts) - 1:
                    raise
                logger.warning("GHL appointments by %s failed, trying next: %s", param, exc)
                continue
            logger.info("Fetched %d appointments for location (%s)", len(appointments), param)
            return appointments

        return []

    # Protocol adapters

    async def fetch_for_user(self, ghl_user_id: str) -> list[dict]:
        return await self.get_appointments_by_user_id(ghl_user_id)

    async def fetch_all(self) -> list[dict]:
        return await self.get_appointments()
