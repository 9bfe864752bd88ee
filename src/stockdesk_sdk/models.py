from __future__ import annotations

from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Item(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: int
    name: str = Field(alias="itemName", min_length=1)
    price: Decimal | None = Field(default=None, ge=0)
    is_active: bool | None = Field(default=None, alias="isActive")


class ItemListResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: List[Item] = Field(default_factory=list)


class ItemCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="itemName", min_length=1)
    price: Decimal | None = Field(default=None, ge=0)


class StockBalance(BaseModel):
    model_config = ConfigDict(extra="allow")

    item: int
    balance: int


class StockMovementRequest(BaseModel):
    item: int
    qty: int
    note: str | None = None

    @field_validator("qty")
    @classmethod
    def _nonzero(cls, value: int) -> int:
        if value == 0:
            raise ValueError("qty must be a nonzero integer")
        return value


class SaleLineCreate(BaseModel):
    item: int
    amount: int = Field(gt=0)
    price: Decimal = Field(ge=0)


class SaleCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    seller: str = Field(min_length=1)
    lines: List[SaleLineCreate] = Field(alias="items", min_length=1)


class MeResponse(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    auth_user_id: str = Field(alias="authUserId")
    email: str | None = None
    profile_id: int | None = Field(default=None, alias="profileId")
    fullname: str | None = None
    is_admin: bool = Field(default=False, alias="isAdmin")


class SessionData(BaseModel):
    access_token: str
    env_name: str | None = None
