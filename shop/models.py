"""Payload schemas for the entity managers.

Create models coerce a complete record; update models carry the same fields
as optionals so only supplied values are merged. Persisted records use the
camelCase keys of the JSON collections (``skuList``, ``orderDate`` ...), so
models are dumped ``by_alias``.
"""

from __future__ import annotations

from typing import Annotated, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from storekit.coerce import coerce_bool
from storekit.errors import ValidationError


def _as_bool(value):
    if value is None:
        return value
    try:
        return coerce_bool(value)
    except ValidationError as exc:
        raise ValueError(exc.message) from exc


Flag = Annotated[bool, BeforeValidator(_as_bool)]


class RecordModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    def to_record(self, *, exclude_none: bool = False) -> dict:
        return self.model_dump(by_alias=True, exclude_none=exclude_none)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class ProductModel(RecordModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    status: Flag = True
    stock: int = Field(..., ge=0)
    category: str = Field(..., min_length=1)
    thumbnails: List[str] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, value):
        return True if value is None else value

    @field_validator("thumbnails", mode="before")
    @classmethod
    def default_thumbnails(cls, value):
        return [] if value is None else value


class ProductUpdateModel(RecordModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    code: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    status: Optional[Flag] = None
    stock: Optional[int] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1)
    thumbnails: Optional[List[str]] = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineModel(RecordModel):
    sku_id: int = Field(..., alias="skuId", ge=1)
    quantity: int = Field(1, ge=1)


class OrderModel(RecordModel):
    sku_list: List[OrderLineModel] = Field(..., alias="skuList")
    customer: str = Field(..., min_length=1)
    order_date: str = Field(..., alias="orderDate", min_length=1)

    @field_validator("sku_list")
    @classmethod
    def merge_duplicate_lines(cls, lines: List[OrderLineModel]) -> List[OrderLineModel]:
        merged: dict[int, OrderLineModel] = {}
        for line in lines:
            if line.sku_id in merged:
                merged[line.sku_id].quantity += line.quantity
            else:
                merged[line.sku_id] = line.model_copy()
        return list(merged.values())


# ---------------------------------------------------------------------------
# Skus
# ---------------------------------------------------------------------------
class SkuModel(RecordModel):
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    availability: Flag
    thumbnail: Optional[str] = None


class SkuUpdateModel(RecordModel):
    name: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    availability: Optional[Flag] = None


class QuantityModel(BaseModel):
    quantity: int = Field(1, ge=1)
