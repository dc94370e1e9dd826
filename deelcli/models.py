"""
Pydantic models for Deel API resources.

The API is inconsistent about nulls and numeric types: amounts may arrive as
strings, fields may be null or missing. The models normalise these so list
commands can render rows without special cases.
"""

from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from .pagination import Page

T = TypeVar("T")


def _flex_float(value: Any) -> Any:
    """Accepts numbers or numeric strings; empty strings become 0."""
    if isinstance(value, str):
        value = value.strip()
        return float(value) if value else 0.0
    return value


FlexFloat = Annotated[float, BeforeValidator(_flex_float)]


class DeelModel(BaseModel):
    """Base for API records. Unknown fields are ignored and nulls fall back to defaults."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class PageInfo(BaseModel):
    """The "page" block of a list response."""

    model_config = ConfigDict(extra="ignore")

    next: str = ""
    total: int = 0

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ListResponse(BaseModel, Generic[T]):
    """Envelope of every cursor-paginated endpoint: {"data": [...], "page": {...}}."""

    model_config = ConfigDict(extra="ignore")

    data: list[T] = Field(default_factory=list)
    page: PageInfo = Field(default_factory=PageInfo)

    @model_validator(mode="before")
    @classmethod
    def _null_envelope(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if data.get("data") is None:
                data["data"] = []
            if data.get("page") is None:
                data["page"] = {}
        return data

    def to_page(self) -> Page[T]:
        return Page(items=list(self.data), next_cursor=self.page.next, total=self.page.total)


class Contract(DeelModel):
    """A Deel contract, flattened from the nested worker/client/compensation payload."""

    id: str
    title: str = ""
    type: str = ""
    status: str = ""
    worker_name: str = ""
    worker_email: str = ""
    entity: str = ""
    entity_id: str = ""
    country: str = ""
    start_date: str = ""
    end_date: str = ""
    currency: str = ""
    compensation_amount: FlexFloat = 0.0

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        flat = dict(data)
        worker = data.get("worker") or {}
        client = data.get("client") or {}
        legal_entity = client.get("legal_entity") or {}
        compensation = data.get("compensation_details") or {}

        flat.setdefault("worker_name", worker.get("full_name"))
        flat.setdefault("worker_email", worker.get("email"))
        flat.setdefault("country", worker.get("country"))
        flat.setdefault("entity", legal_entity.get("name"))
        flat.setdefault("entity_id", legal_entity.get("id"))
        flat.setdefault("currency", compensation.get("currency_code"))
        flat.setdefault("compensation_amount", compensation.get("amount"))
        flat.setdefault("end_date", data.get("termination_date"))
        return {k: v for k, v in flat.items() if v is not None}


class Person(DeelModel):
    id: str
    hris_profile_id: str = ""
    first_name: str = ""
    last_name: str = ""
    name: str = ""
    email: str = ""
    job_title: str = ""
    department: str = ""
    status: str = ""
    start_date: str = ""
    country: str = ""
    hiring_type: str = ""

    @model_validator(mode="before")
    @classmethod
    def _normalise(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # department is either a plain string or {"id": ..., "name": ...}
        department = data.get("department")
        if isinstance(department, dict):
            data["department"] = department.get("name") or ""
        if not data.get("name"):
            first = data.get("first_name") or ""
            last = data.get("last_name") or ""
            data["name"] = f"{first} {last}".strip()
        return data


class Team(DeelModel):
    id: str
    name: str = ""
    description: str = ""
    manager_id: str = ""
    manager_name: str = ""
    member_count: int = 0
    created_at: str = ""


class TimesheetEntry(DeelModel):
    id: str = ""
    timesheet_id: str = ""
    date: str = ""
    hours: FlexFloat = 0.0
    description: str = ""


class Timesheet(DeelModel):
    id: str
    contract_id: str = ""
    status: str = ""
    period_start: str = ""
    period_end: str = ""
    total_hours: FlexFloat = 0.0
    entries: list[TimesheetEntry] = Field(default_factory=list)
    created_at: str = ""


class OffCyclePayment(DeelModel):
    id: str
    contract_id: str = ""
    worker_name: str = ""
    amount: FlexFloat = 0.0
    currency: str = ""
    type: str = ""
    status: str = ""
    description: str = ""
    payment_date: str = ""
    created_at: str = ""


class PaymentReceipt(DeelModel):
    id: str
    payment_id: str = ""
    receipt_url: str = ""
    amount: FlexFloat = 0.0
    currency: str = ""
    issue_date: str = ""
    contract_id: str = ""
    worker_name: str = ""
    description: str = ""


class ITAsset(DeelModel):
    id: str
    type: str = ""
    name: str = ""
    serial_number: str = ""
    status: str = ""
    assigned_to: str = ""
    assigned_date: str = ""
    condition: str = ""


class OnboardingEmployee(DeelModel):
    id: str
    name: str = ""
    email: str = ""
    country: str = ""
    status: str = ""
    stage: str = ""
    start_date: str = ""
    contract_id: str = ""
    progress: int = Field(default=0, alias="progress_percent")


class Task(DeelModel):
    id: str
    title: str = ""
    description: str = ""
    amount: FlexFloat = 0.0
    currency: str = ""
    status: str = ""
    contract_id: str = ""
    created_at: str = ""


class LegalEntity(DeelModel):
    id: str
    name: str = ""
    country: str = ""
    type: str = ""
    status: str = ""
    registration_number: str = ""


# --- ATS ---


class ATSOffer(DeelModel):
    id: str
    candidate_id: str = ""
    candidate: str = Field(default="", alias="candidate_name")
    position: str = ""
    status: str = ""
    salary: FlexFloat = 0.0
    currency: str = ""
    start_date: str = ""
    created_at: str = ""


class ATSJob(DeelModel):
    id: str
    title: str = ""
    department: str = ""
    department_id: str = ""
    location: str = ""
    location_id: str = ""
    status: str = ""
    employment_type: str = ""
    created_at: str = ""
    updated_at: str = ""


class ATSJobPosting(DeelModel):
    id: str
    job_id: str = ""
    title: str = ""
    description: str = ""
    department: str = ""
    location: str = ""
    employment_type: str = ""
    status: str = ""
    posted_at: str = ""
    closed_at: str = ""
    url: str = ""


class ATSApplication(DeelModel):
    id: str
    candidate_id: str = ""
    candidate_name: str = ""
    job_id: str = ""
    job_title: str = ""
    status: str = ""
    stage: str = ""
    applied_at: str = ""
    updated_at: str = ""


class ATSCandidate(DeelModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin_url: str = ""
    resume_url: str = ""
    created_at: str = ""

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ATSDepartment(DeelModel):
    id: str
    name: str = ""
    parent_id: str = ""
    created_at: str = ""


class ATSLocation(DeelModel):
    id: str
    name: str = ""
    city: str = ""
    country: str = ""
    remote: bool = False
    created_at: str = ""
