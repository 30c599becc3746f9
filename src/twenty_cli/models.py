"""Canonical Pydantic models shared across all twenty_cli modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Configuration models** -- serialised as JSON in the user's config
directory: :class:`RequestConfig` and :class:`GlobalConfig`.

**Listing models** -- the request and response side of a paginated list
call: :class:`ListQueryOptions`, :class:`PageInfo` and :class:`ListResult`.

**Records** -- one model per CRM resource (:class:`Task`, :class:`Person`,
:class:`Company`, :class:`Opportunity`, :class:`Note`, :class:`Webhook`,
:class:`Attachment`, :class:`Favorite`), all deriving from :class:`Record`.
Field names are snake_case in Python and camelCase on the wire; unknown
fields sent by the server are preserved (``extra="allow"``) so that JSON
output never drops data the CLI does not know about yet.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from twenty_cli.records import format_cell


DEFAULT_BASE_URL = "https://api.twenty.com"


# --- Configuration ---


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every API call."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    max_retries: int = Field(
        default=3, description="Retry attempts on 429/502/503/504 and network errors"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/twenty/config.json``.

    Loaded and saved by :func:`~twenty_cli.config.load_global_config` and
    :func:`~twenty_cli.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by environment variables or CLI
    flags. See :func:`~twenty_cli.config.resolve_config` for the full
    precedence chain.
    """

    model_config = ConfigDict(extra="allow")

    base_url: str = Field(default=DEFAULT_BASE_URL, description="Twenty API base URL")
    output: str = Field(default="text", description="Output format: text, json, yaml, csv")
    default_profile: Optional[str] = Field(
        default=None, description="Profile used when --profile is not given"
    )
    token_source: Optional[str] = Field(
        default=None,
        description="Credential source: env:VAR, file:/path, prompt, store:PROFILE",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)


# --- Listing ---


class ListQueryOptions(BaseModel):
    """Parameters of one list request.

    Built fresh for every invocation from the list flags and frozen before it
    reaches the transport; the paginator derives per-page copies with
    ``model_copy(update={"cursor": ...})``.
    """

    model_config = ConfigDict(frozen=True)

    limit: int = Field(default=20, gt=0)
    cursor: str = ""
    filter: dict[str, Any] = Field(default_factory=dict)
    sort: str = ""
    order: Optional[Literal["asc", "desc"]] = None
    fields: list[str] = Field(default_factory=list)
    include: list[str] = Field(default_factory=list)
    params: list[tuple[str, str]] = Field(default_factory=list)


class PageInfo(BaseModel):
    """Cursor metadata for one page. ``end_cursor`` is only meaningful
    while ``has_next_page`` is true."""

    model_config = ConfigDict(populate_by_name=True)

    has_next_page: bool = Field(default=False, alias="hasNextPage")
    end_cursor: Optional[str] = Field(default=None, alias="endCursor")


T = TypeVar("T")


class ListResult(BaseModel, Generic[T]):
    """One page of records as returned by a list call, in server order."""

    model_config = ConfigDict(populate_by_name=True)

    data: list[T] = Field(default_factory=list)
    total_count: int = Field(default=0, alias="totalCount")
    page_info: Optional[PageInfo] = Field(default=None, alias="pageInfo")


# --- Records ---


class Record(BaseModel):
    """Base class for CRM records.

    Subclasses declare their fields in the order they should appear in
    single-record and CSV output; :meth:`to_pairs` is the serialisation
    contract the renderer relies on.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = ""

    @classmethod
    def headers(cls) -> list[str]:
        """Wire names of the declared fields, in declaration order."""
        return [info.alias or name for name, info in cls.model_fields.items()]

    def to_pairs(self) -> list[tuple[str, str]]:
        """Ordered ``(wire name, formatted value)`` pairs for every declared field."""
        return [
            (info.alias or name, format_cell(getattr(self, name)))
            for name, info in type(self).model_fields.items()
        ]

    def to_json(self) -> dict[str, Any]:
        """The fields received from the server, under their wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class _Composite(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class FullName(_Composite):
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Emails(_Composite):
    primary_email: str = Field(default="", alias="primaryEmail")
    additional_emails: Optional[list[str]] = Field(default=None, alias="additionalEmails")


class Phones(_Composite):
    primary_phone_number: str = Field(default="", alias="primaryPhoneNumber")
    primary_phone_country_code: str = Field(default="", alias="primaryPhoneCountryCode")


class Link(_Composite):
    primary_link_url: str = Field(default="", alias="primaryLinkUrl")
    primary_link_label: str = Field(default="", alias="primaryLinkLabel")


class Address(_Composite):
    address_street1: str = Field(default="", alias="addressStreet1")
    address_city: str = Field(default="", alias="addressCity")
    address_country: str = Field(default="", alias="addressCountry")


class RichText(_Composite):
    markdown: str = ""
    blocknote: str = ""


class Task(Record):
    title: str = ""
    status: Optional[str] = None
    due_at: Optional[datetime] = Field(default=None, alias="dueAt")
    assignee_id: Optional[str] = Field(default=None, alias="assigneeId")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class Person(Record):
    name: FullName = Field(default_factory=FullName)
    emails: Emails = Field(default_factory=Emails)
    phones: Phones = Field(default_factory=Phones)
    job_title: str = Field(default="", alias="jobTitle")
    city: str = ""
    company_id: Optional[str] = Field(default=None, alias="companyId")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    def to_pairs(self) -> list[tuple[str, str]]:
        pairs = super().to_pairs()
        flat = {
            "name": str(self.name),
            "emails": self.emails.primary_email,
            "phones": self.phones.primary_phone_number,
        }
        return [(key, flat.get(key, value)) for key, value in pairs]


class Company(Record):
    name: str = ""
    domain_name: Link = Field(default_factory=Link, alias="domainName")
    address: Address = Field(default_factory=Address)
    employees: Optional[int] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    def to_pairs(self) -> list[tuple[str, str]]:
        pairs = super().to_pairs()
        flat = {
            "domainName": self.domain_name.primary_link_url,
            "address": self.address.address_city,
        }
        return [(key, flat.get(key, value)) for key, value in pairs]


class Currency(_Composite):
    amount_micros: Optional[float] = Field(default=None, alias="amountMicros")
    currency_code: str = Field(default="", alias="currencyCode")

    def __str__(self) -> str:
        if self.amount_micros is None:
            return ""
        amount = self.amount_micros / 1_000_000
        return f"{amount:.2f} {self.currency_code}".strip()


class Opportunity(Record):
    name: str = ""
    amount: Optional[Currency] = None
    stage: Optional[str] = None
    close_date: Optional[str] = Field(default=None, alias="closeDate")
    probability: Optional[int] = None
    company_id: Optional[str] = Field(default=None, alias="companyId")
    point_of_contact_id: Optional[str] = Field(default=None, alias="pointOfContactId")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    def to_pairs(self) -> list[tuple[str, str]]:
        amount = str(self.amount) if self.amount is not None else ""
        return [(key, amount if key == "amount" else value) for key, value in super().to_pairs()]


class Note(Record):
    title: str = ""
    body_v2: Optional[RichText] = Field(default=None, alias="bodyV2")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @property
    def body(self) -> str:
        return self.body_v2.markdown if self.body_v2 else ""

    def to_pairs(self) -> list[tuple[str, str]]:
        return [
            (key, self.body if key == "bodyV2" else value)
            for key, value in super().to_pairs()
        ]


class Webhook(Record):
    target_url: str = Field(default="", alias="targetUrl")
    operation: str = ""
    description: str = ""
    is_active: bool = Field(default=False, alias="isActive")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @field_validator("operation", mode="before")
    @classmethod
    def _join_operations(cls, value: Any) -> Any:
        # Newer servers send a list of operations
        if isinstance(value, list):
            return ",".join(str(item) for item in value)
        return value


class Attachment(Record):
    name: str = ""
    full_path: str = Field(default="", alias="fullPath")
    type: str = ""
    company_id: Optional[str] = Field(default=None, alias="companyId")
    person_id: Optional[str] = Field(default=None, alias="personId")
    task_id: Optional[str] = Field(default=None, alias="taskId")
    note_id: Optional[str] = Field(default=None, alias="noteId")
    author_id: Optional[str] = Field(default=None, alias="authorId")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class Favorite(Record):
    position: float = 0
    workspace_member_id: Optional[str] = Field(default=None, alias="workspaceMemberId")
    company_id: Optional[str] = Field(default=None, alias="companyId")
    person_id: Optional[str] = Field(default=None, alias="personId")
    opportunity_id: Optional[str] = Field(default=None, alias="opportunityId")
    task_id: Optional[str] = Field(default=None, alias="taskId")
    note_id: Optional[str] = Field(default=None, alias="noteId")
    view_id: Optional[str] = Field(default=None, alias="viewId")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @property
    def target(self) -> str:
        """``kind:id`` of the favourited record, or ``""``."""
        for kind in ("company", "person", "opportunity", "task", "note", "view"):
            target_id = getattr(self, f"{kind}_id")
            if target_id:
                return f"{kind}:{target_id}"
        return ""
