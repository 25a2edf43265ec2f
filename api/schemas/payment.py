"""
Payment-related request and response schemas.

These Pydantic models define the API contract for the store payment
endpoints. Unknown fields in the request are kept so the accepted body
can be echoed back unchanged.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class SetPaymentMethodRequest(BaseModel):
    """Request body for attaching a payment method to a cart or customer."""

    payment_method_id: StrictStr = Field(
        ...,
        alias="paymentMethodId",
        min_length=1,
        description="Payment provider reference for the payment method",
        examples=["pm_1NqQ0a2eZvKYlo2C"],
    )

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "examples": [
                {"paymentMethodId": "pm_1NqQ0a2eZvKYlo2C"},
            ]
        },
    )


class SetPaymentMethodResponse(BaseModel):
    """Response after a payment method was accepted."""

    success: bool = Field(
        default=True,
        description="Whether the payment method was accepted",
    )
    received: dict[str, Any] = Field(
        ...,
        description="The request body as it was received",
    )


class ErrorResponse(BaseModel):
    """Error body returned by the store payment endpoints."""

    error: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Invalid request body"],
    )
