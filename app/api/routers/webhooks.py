from fastapi import APIRouter, Depends, Request, status

from app.api.dependencies import get_use_cases
from app.api.schemas.common import ApiResponse

router = APIRouter()


@router.post("/webhooks/stripe", response_model=ApiResponse[dict], status_code=status.HTTP_200_OK)
async def stripe_webhook(
    request: Request,
    use_cases=Depends(get_use_cases),
) -> ApiResponse[dict]:
    raw_body = await request.body()
    signature = request.headers.get("Stripe-Signature")
    booking_id = await use_cases["handle_webhook"].execute(raw_body=raw_body, signature=signature)
    if booking_id is None:
        return ApiResponse(message="Event ignored", data={"received": True})
    return ApiResponse(
        message="Payment status updated successfully",
        data={"received": True, "bookingId": booking_id},
    )
