"""
Pydantic schemas for API request/response validation.
"""

from api.schemas.payment import (
    ErrorResponse,
    SetPaymentMethodRequest,
    SetPaymentMethodResponse,
)

__all__ = [
    "ErrorResponse",
    "SetPaymentMethodRequest",
    "SetPaymentMethodResponse",
]
