from types import TracebackType
from typing import Any, TypeVar
from urllib.parse import quote

import httpx

from . import __version__
from ._logging import logger, redact
from .config import DEFAULT_BASE_URL, DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT, Settings
from .exceptions import handle_http_errors
from .models import (
    ATSApplication,
    ATSCandidate,
    ATSDepartment,
    ATSJob,
    ATSJobPosting,
    ATSLocation,
    ATSOffer,
    Contract,
    DeelModel,
    ITAsset,
    LegalEntity,
    ListResponse,
    OffCyclePayment,
    OnboardingEmployee,
    PaymentReceipt,
    Person,
    Task,
    Team,
    Timesheet,
)
from .pagination import Page

M = TypeVar("M", bound=DeelModel)


class DeelClient:
    """
    Thin synchronous client for the Deel REST API.

    Every list_* method fetches exactly one page and returns it as a Page, so
    it can be handed to pagination.aggregate() as the fetch function.

    Usage:
        with DeelClient(token) as client:
            page = client.list_contracts(limit=50, status="active")
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        # Connection failures are retried by the transport; HTTP errors are not.
        if transport is None:
            transport = httpx.HTTPTransport(retries=max_retries)
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
                "User-Agent": f"deelcli/{__version__}",
            },
        )
        logger.debug(
            "Client initialised",
            extra={"base_url": self.base_url, "token_hash": redact(token), "timeout": timeout},
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.BaseTransport | None = None
    ) -> "DeelClient":
        """Builds a client from Settings. Raises ConfigError when no token is set."""
        return cls(
            token=settings.require_token(),
            base_url=settings.base_url,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "DeelClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # --- RAW REQUESTS ---

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        Performs a GET request and returns the decoded JSON body.

        Raises:
            APIError subclasses for error statuses, NetworkError for transport
            failures, ResponseParseError for non-JSON bodies.
        """
        logger.debug("GET request", extra={"path": path, "params": sorted(params or {})})

        with handle_http_errors(operation=f"GET {path}"):
            response = self._http.get(path, params=params)
            if response.is_error:
                logger.warning(
                    "API error response",
                    extra={"path": path, "status": response.status_code},
                )
            response.raise_for_status()
            return response.json()

    def list_page(
        self,
        path: str,
        model: type[M],
        cursor: str = "",
        limit: int = 0,
        **filters: str,
    ) -> Page[M]:
        """
        Fetches one page of a cursor-paginated endpoint.

        Args:
            path: Endpoint path, e.g. "/rest/v2/contracts"
            model: Record model used to parse each element of "data"
            cursor: Cursor from a previous page ("" for the first page)
            limit: Page size; omitted from the query when 0
            **filters: Extra query parameters; empty values are omitted
        """
        params: dict[str, Any] = {k: v for k, v in filters.items() if v}
        if limit > 0:
            params["limit"] = limit
        if cursor:
            params["cursor"] = cursor

        body = self.get(path, params=params)

        with handle_http_errors(operation=f"parsing {path}"):
            envelope = ListResponse[model].model_validate(body)  # type: ignore[valid-type]

        page = envelope.to_page()
        logger.debug(
            "Page received",
            extra={
                "path": path,
                "count": len(page.items),
                "has_more": page.has_more,
                "total": page.total,
            },
        )
        return page

    # --- RESOURCES ---

    def list_contracts(
        self, cursor: str = "", limit: int = 0, status: str = "", type: str = ""
    ) -> Page[Contract]:
        return self.list_page(
            "/rest/v2/contracts", Contract, cursor, limit, status=status, type=type
        )

    def list_people(self, cursor: str = "", limit: int = 0) -> Page[Person]:
        return self.list_page("/rest/v2/people", Person, cursor, limit)

    def list_teams(self, cursor: str = "", limit: int = 0) -> Page[Team]:
        return self.list_page("/rest/v2/teams", Team, cursor, limit)

    def list_timesheets(
        self, cursor: str = "", limit: int = 0, contract_id: str = "", status: str = ""
    ) -> Page[Timesheet]:
        return self.list_page(
            "/rest/v2/timesheets",
            Timesheet,
            cursor,
            limit,
            contract_id=contract_id,
            status=status,
        )

    def list_off_cycle_payments(
        self, cursor: str = "", limit: int = 0, contract_id: str = "", status: str = ""
    ) -> Page[OffCyclePayment]:
        return self.list_page(
            "/rest/v2/payments/off-cycle",
            OffCyclePayment,
            cursor,
            limit,
            contract_id=contract_id,
            status=status,
        )

    def list_payment_receipts(
        self, cursor: str = "", limit: int = 0, contract_id: str = "", payment_id: str = ""
    ) -> Page[PaymentReceipt]:
        return self.list_page(
            "/rest/v2/payment-receipts",
            PaymentReceipt,
            cursor,
            limit,
            contract_id=contract_id,
            payment_id=payment_id,
        )

    def list_it_assets(
        self, cursor: str = "", limit: int = 0, status: str = "", type: str = ""
    ) -> Page[ITAsset]:
        return self.list_page("/rest/v2/it/assets", ITAsset, cursor, limit, status=status, type=type)

    def list_onboarding_employees(
        self, cursor: str = "", limit: int = 0, status: str = ""
    ) -> Page[OnboardingEmployee]:
        return self.list_page(
            "/rest/v2/onboarding", OnboardingEmployee, cursor, limit, status=status
        )

    def list_tasks(
        self, contract_id: str, cursor: str = "", limit: int = 0, status: str = ""
    ) -> Page[Task]:
        """Lists the tasks of one contract. contract_id is required and path-escaped."""
        if not contract_id:
            raise ValueError("contract_id is required to list tasks")
        path = f"/rest/v2/contracts/{quote(contract_id, safe='')}/tasks"
        return self.list_page(path, Task, cursor, limit, status=status)

    def list_legal_entities(self) -> list[LegalEntity]:
        """Returns every legal entity of the organization (the endpoint is not paginated)."""
        body = self.get("/rest/v2/legal-entities")
        with handle_http_errors(operation="parsing /rest/v2/legal-entities"):
            return ListResponse[LegalEntity].model_validate(body).data

    # --- ATS ---

    def list_ats_offers(
        self, cursor: str = "", limit: int = 0, status: str = ""
    ) -> Page[ATSOffer]:
        return self.list_page("/rest/v2/ats/offers", ATSOffer, cursor, limit, status=status)

    def list_ats_jobs(
        self,
        cursor: str = "",
        limit: int = 0,
        status: str = "",
        department_id: str = "",
        location_id: str = "",
    ) -> Page[ATSJob]:
        return self.list_page(
            "/rest/v2/ats/jobs",
            ATSJob,
            cursor,
            limit,
            status=status,
            department_id=department_id,
            location_id=location_id,
        )

    def list_ats_job_postings(
        self, cursor: str = "", limit: int = 0, status: str = "", job_id: str = ""
    ) -> Page[ATSJobPosting]:
        return self.list_page(
            "/rest/v2/ats/job-postings", ATSJobPosting, cursor, limit, status=status, job_id=job_id
        )

    def list_ats_applications(
        self,
        cursor: str = "",
        limit: int = 0,
        status: str = "",
        job_id: str = "",
        candidate_id: str = "",
        stage: str = "",
    ) -> Page[ATSApplication]:
        return self.list_page(
            "/rest/v2/ats/applications",
            ATSApplication,
            cursor,
            limit,
            status=status,
            job_id=job_id,
            candidate_id=candidate_id,
            stage=stage,
        )

    def list_ats_candidates(
        self, cursor: str = "", limit: int = 0, search: str = ""
    ) -> Page[ATSCandidate]:
        return self.list_page("/rest/v2/ats/candidates", ATSCandidate, cursor, limit, search=search)

    def list_ats_departments(self, cursor: str = "", limit: int = 0) -> Page[ATSDepartment]:
        return self.list_page("/rest/v2/ats/departments", ATSDepartment, cursor, limit)

    def list_ats_locations(
        self, cursor: str = "", limit: int = 0, remote: bool | None = None
    ) -> Page[ATSLocation]:
        """remote=None leaves the parameter out; True/False filter on remote locations."""
        remote_param = "" if remote is None else str(remote).lower()
        return self.list_page(
            "/rest/v2/ats/locations", ATSLocation, cursor, limit, remote=remote_param
        )
