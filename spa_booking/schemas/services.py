# spa_booking/schemas/services.py

from typing import Optional
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from .common import reject_null


class ServiceCreate(BaseModel):
    name: str
    category: Optional[str] = None
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class ServiceUpdate(BaseModel):
    is_active: Optional[bool] = None
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("name", "is_active")
    @classmethod
    def not_null(cls, v, info: ValidationInfo):
        return reject_null(v, info.field_name)


class ServiceRead(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    is_active: bool

    model_config = {"from_attributes": True}


class VariantCreate(BaseModel):
    duration_minutes: int = Field(gt=0, le=24 * 60)
    regular_price: float = Field(ge=0)
    promo_price: Optional[float] = Field(default=None, ge=0)

    model_config = {"from_attributes": True}


class VariantUpdate(BaseModel):
    duration_minutes: Optional[int] = Field(default=None, gt=0, le=24 * 60)
    regular_price: Optional[float] = Field(default=None, ge=0)
    promo_price: Optional[float] = Field(default=None, ge=0)

    model_config = {"from_attributes": True}

    @field_validator("duration_minutes", "regular_price")
    @classmethod
    def not_null(cls, v, info: ValidationInfo):
        return reject_null(v, info.field_name)


class VariantRead(BaseModel):
    id: int
    service_id: int
    duration_minutes: int
    regular_price: float
    promo_price: Optional[float] = None

    model_config = {"from_attributes": True}
