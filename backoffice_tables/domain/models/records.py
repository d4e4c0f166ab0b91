from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, Field

from backoffice_tables.domain.models.entity import BaseEntity


class ContractStatus(str, Enum):
    PENDING = "pending"
    SIGNED = "signed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class ServiceOrderStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReceiptStatus(str, Enum):
    DRAFT = "draft"
    ISSUED = "issued"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class ClientSource(str, Enum):
    MANUAL = "manual"
    SMART_LINK = "smart-link"


class ProductType(str, Enum):
    EQUIPMENT = "equipment"
    SERVICE = "service"


class ClientSummary(BaseEntity):
    name: str
    email: str | None = None
    phone: str | None = None


class Client(BaseEntity):
    name: str
    email: str | None = None
    phone: str | None = None
    cpf: str | None = None
    address: str | None = None
    source: ClientSource = ClientSource.MANUAL
    created_at: datetime | None = Field(default=None, validation_alias=AliasChoices("created_at", "createdAt"))


class Contract(BaseEntity):
    title: str
    description: str = ""
    status: ContractStatus = ContractStatus.PENDING
    client: ClientSummary | None = None
    document_url: str | None = Field(default=None, validation_alias=AliasChoices("document_url", "documentUrl"))
    signed_at: datetime | None = Field(default=None, validation_alias=AliasChoices("signed_at", "signedAt"))
    expires_at: datetime | None = Field(default=None, validation_alias=AliasChoices("expires_at", "expiresAt"))
    created_at: datetime | None = Field(default=None, validation_alias=AliasChoices("created_at", "createdAt"))


class ServiceOrder(BaseEntity):
    number: str
    description: str = ""
    technical_notes: str = Field(default="", validation_alias=AliasChoices("technical_notes", "technicalNotes"))
    status: ServiceOrderStatus = ServiceOrderStatus.PENDING
    client: ClientSummary | None = None
    scheduled_date: datetime | None = Field(default=None, validation_alias=AliasChoices("scheduled_date", "scheduledDate"))
    attachments: list[dict] = Field(default_factory=list)


class Receipt(BaseEntity):
    number: str
    notes: str | None = None
    status: ReceiptStatus = ReceiptStatus.DRAFT
    client: ClientSummary | None = None
    total: float = 0.0
    date: datetime | None = None
    due_date: datetime | None = Field(default=None, validation_alias=AliasChoices("due_date", "dueDate"))


class Product(BaseEntity):
    name: str
    type: ProductType = ProductType.EQUIPMENT
    description: str = ""
    category: str = ""
    application: str = ""
    price: float = 0.0
