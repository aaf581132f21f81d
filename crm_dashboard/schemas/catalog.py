from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class BankOut(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    logo: Optional[str] = None


class ProductTypeOut(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str


class ProductTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
