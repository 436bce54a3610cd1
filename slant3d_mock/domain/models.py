"""
Entity models held by the store.

Attributes are snake_case in Python and serialize to the camelCase names the
real API uses (``model_dump(by_alias=True)``).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    PENDING = "pending"
    PRINTING = "printing"
    PRINTED = "printed"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED})


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Address(ApiModel):
    first_name: str = ""
    last_name: str = ""
    address1: str = ""
    address2: Optional[str] = None
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""
    phone: Optional[str] = None

    @classmethod
    def from_full_name(cls, full_name: str, **fields: Any) -> "Address":
        """Split "First Rest Of Name" into first/last name parts."""
        parts = (full_name or "").split(" ")
        return cls(first_name=parts[0], last_name=" ".join(parts[1:]), **fields)


class Order(ApiModel):
    order_id: str
    order_number: str
    status: str = OrderStatus.PENDING.value
    filename: str = ""
    file_url: str = Field(default="", alias="fileURL")
    quantity: str = "1"
    color: str = ""
    profile: str = "PLA"
    printing_cost: float = 0.0
    shipping_cost: float = 0.0
    total_price: float = 0.0
    tracking_numbers: List[str] = Field(default_factory=list)
    billing_address: Optional[Address] = None
    shipping_address: Optional[Address] = None
    email: str = ""
    residential: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Webhook(ApiModel):
    end_point: str = Field(alias="endPoint")
    api_key: str = ""
    registered_at: datetime = Field(default_factory=utcnow)
    delivery_attempts: List[Dict[str, Any]] = Field(default_factory=list)


class RequestLog(ApiModel):
    id: str
    timestamp: datetime
    method: str
    path: str
    status_code: int
    duration: float
    api_key: Optional[str] = None
    # Snapshots vary per endpoint: any JSON value (object, array, scalar, null)
    request_body: Any = None
    response_body: Any = None

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
