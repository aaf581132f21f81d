from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class LinkRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    bank: int
    bank_name: str
    product: int
    product_name: str
    name: Optional[str] = None
    user_id: Optional[str] = None
    password: Optional[str] = None
    utm_link: Optional[str] = None
    description: Optional[str] = None
    unique_customer_link: Optional[str] = None
    created_at: Optional[datetime] = None


class LinkCreate(BaseModel):
    bank: int
    product: int
    name: str = Field(..., min_length=1)
    user_id: str = ""
    password: str = ""
    utm_link: str = ""
    description: str = ""


class BankRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class ProductRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class LinkMatrixOut(BaseModel):
    rows: list[BankRef]
    columns: list[ProductRef]
    cells: list[list[Optional[LinkRecord]]]
    error: Optional[str] = None


class ShareOut(BaseModel):
    message: str
    url: str
