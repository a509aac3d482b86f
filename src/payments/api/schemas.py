"""Pydantic request/response schemas for the Payments API."""

from pydantic import BaseModel, Field


class CreatePaymentIntentRequest(BaseModel):
    order_id: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"order_id": "6f1c2b9e-2d4a-4c7e-9a51-0b8f3e2d7a10"},
            ]
        }
    }


class VerifyPaymentRequest(BaseModel):
    order_id: str
    payment_intent_id: str = Field(..., min_length=1, max_length=255)


class PaymentIntentResponse(BaseModel):
    order_id: str
    payment_intent_id: str
    client_secret: str | None = None
