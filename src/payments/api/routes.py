"""FastAPI routes for paying placed orders."""

from fastapi import APIRouter

from identity.auth.dependencies import CurrentIdentity
from ordering.api.schemas import OrderResponse
from ordering.store import SqlAlchemyStore
from payments.api.schemas import CreatePaymentIntentRequest, PaymentIntentResponse, VerifyPaymentRequest
from payments.gateway import get_gateway
from payments.verification import PaymentService
from shared.config import get_settings
from shared.database import get_database
from shared.responses import ApiResponse

router = APIRouter(prefix="/payments", tags=["payments"])


def _payments() -> PaymentService:
    return PaymentService(SqlAlchemyStore(get_database()), get_gateway(), currency=get_settings().currency)


@router.post("/intents", status_code=201, response_model=ApiResponse[PaymentIntentResponse])
def create_payment_intent(
    body: CreatePaymentIntentRequest, identity: CurrentIdentity
) -> ApiResponse[PaymentIntentResponse]:
    result = _payments().create_payment_intent(identity.id, body.order_id)
    return ApiResponse(
        message="Payment intent created",
        data=PaymentIntentResponse(
            order_id=body.order_id,
            payment_intent_id=result.payment_intent_id,
            client_secret=result.client_secret,
        ),
    )


@router.post("/verify", response_model=ApiResponse[OrderResponse])
def verify_payment(body: VerifyPaymentRequest, identity: CurrentIdentity) -> ApiResponse[OrderResponse]:
    order = _payments().verify_payment(identity.id, body.order_id, body.payment_intent_id)
    return ApiResponse(message="Payment verified successfully", data=OrderResponse.model_validate(order))
