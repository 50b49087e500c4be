# client_schema.py
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from models.models import ClientStatus
from schemas.common import PageMeta, blank_to_none


class ClientCreate(BaseModel):
    name: str = Field(..., max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    company: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = None
    status: ClientStatus = ClientStatus.ACTIVE
    notes: Optional[str] = None
    # user_id is set server-side from the authenticated admin


    model_config = ConfigDict(use_enum_values=True)

    @field_validator("email", "phone", "company", "address", "notes", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        return blank_to_none(v)


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    company: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = None
    status: Optional[ClientStatus] = None
    notes: Optional[str] = None


    model_config = ConfigDict(use_enum_values=True)

    @field_validator("email", "phone", "company", "address", "notes", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        return blank_to_none(v)


class ClientRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None
    status: ClientStatus
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ClientPage(PageMeta):
    clients: List[ClientRead]


class ClientStats(BaseModel):
    active: int = 0
    inactive: int = 0
    archived: int = 0
    total: int = 0
