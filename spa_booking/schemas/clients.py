# spa_booking/schemas/clients.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ValidationInfo, field_validator

from .common import reject_null


class ClientCreate(BaseModel):
    first_name: str
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class ClientUpdate(BaseModel):
    is_active: Optional[bool] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("first_name", "is_active")
    @classmethod
    def not_null(cls, v, info: ValidationInfo):
        return reject_null(v, info.field_name)


class ClientRead(BaseModel):
    id: int
    first_name: str
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
