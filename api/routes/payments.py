"""
Store payment endpoints.

- POST /store/custom/stripe/set-payment-method - Accept a payment method

The handler validates the body and echoes it back; persisting the payment
method with the payment provider is left to the commerce runtime.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.schemas.payment import (
    ErrorResponse,
    SetPaymentMethodRequest,
    SetPaymentMethodResponse,
)
from core.logging import get_logger


logger = get_logger(__name__)
router = APIRouter(prefix="/store/custom/stripe", tags=["Payments"])

SET_PAYMENT_METHOD_PATH = "/set-payment-method"


def _error(status_code: int, message: str, **headers: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers or None,
    )


@router.post(
    SET_PAYMENT_METHOD_PATH,
    response_model=SetPaymentMethodResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def set_payment_method(request: Request):
    """
    Set the payment method for a cart or customer.

    The body must be a JSON object with a non-empty string
    `paymentMethodId`. On success the accepted body is echoed back.
    """
    try:
        try:
            body = await request.json()
        except ValueError:
            return _error(400, "Invalid request body")

        if not isinstance(body, dict):
            return _error(400, "Invalid request body")

        try:
            payload = SetPaymentMethodRequest.model_validate(body)
        except ValidationError as e:
            logger.info(
                "Rejected payment method request",
                errors=[".".join(str(part) for part in err["loc"]) for err in e.errors()],
            )
            return _error(400, "Invalid request body")

        logger.info(
            "Payment method received",
            payment_method_id=payload.payment_method_id,
        )
        return SetPaymentMethodResponse(success=True, received=body)

    except Exception as e:
        # Details stay in the server log
        logger.error(
            "Set payment method failed",
            error=str(e),
            exc_info=True,
        )
        return _error(500, "Internal server error")


@router.api_route(
    SET_PAYMENT_METHOD_PATH,
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def set_payment_method_not_allowed() -> JSONResponse:
    return _error(405, "Method Not Allowed", Allow="POST")
