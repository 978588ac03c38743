"""Transaction-related request and response models.

Field names follow Python conventions; the JSON names clients see
(``typeId``, ``createdAt``, ``for``) are declared as aliases.
"""

from typing import Optional, Union
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class TransactionBase(BaseModel):
    type_id: Union[int, float] = Field(alias="typeId")
    amount: float
    created_at: datetime = Field(alias="createdAt")
    description: Optional[str] = Field(default=None, alias="for")

    model_config = ConfigDict(populate_by_name=True)


class TransactionCreate(TransactionBase):
    id: str = Field(description="Caller-generated UUID")


class TransactionUpdate(BaseModel):
    type_id: Optional[Union[int, float]] = Field(default=None, alias="typeId")
    amount: Optional[float] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    description: Optional[str] = Field(default=None, alias="for")


class TransactionRead(BaseModel):
    id: str
    type_id: Union[int, float] = Field(serialization_alias="typeId")
    amount: float
    created_at: datetime = Field(serialization_alias="createdAt")
    description: Optional[str] = Field(default=None, serialization_alias="for")

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    error: str
