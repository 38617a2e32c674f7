"""
Request bodies

Fields are optional at the schema level: presence (and non-emptiness) of the
required ones is checked by the services so that missing fields produce the
same error messages the frontend already displays.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AdminLoginRequest(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AddAdminRequest(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


class BatchDeleteRequest(CamelModel):
    table_name: Optional[str] = Field(None, alias="tableName")
    ids: Optional[List[str]] = None


class ContactRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class BusinessOrderRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    selected_products: Optional[List[Any]] = Field(None, alias="selectedProducts")
    shipping_address: Optional[Any] = Field(None, alias="shippingAddress")
    billing_address: Optional[Any] = Field(None, alias="billingAddress")
    total: Optional[Any] = None


class ProductSurveyRequest(CamelModel):
    product_name: Optional[str] = Field(None, alias="productName")
    rating: Optional[Any] = None
    feedback: Optional[str] = None


class MediaQueryRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    query: Optional[str] = None


class DealerRegistrationRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None


class DealerLoginRequest(CamelModel):
    email: Optional[str] = None
    phone: Optional[str] = None
