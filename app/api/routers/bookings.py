from fastapi import APIRouter, BackgroundTasks, Depends, status

from app.api.dependencies import get_principal, get_use_cases, schedule_dispatch
from app.api.schemas.bookings import (
    AssignDriverRequest,
    BookingDetail,
    BookingOut,
    BookingView,
    CarData,
    CreateBookingRequest,
    CreateBookingResponse,
    DeletedBookingResponse,
    UpdateDriverStatusRequest,
    UpdatePartnerStatusRequest,
    UpdatePaymentStatusRequest,
)
from app.api.schemas.common import ApiResponse
from app.domain.value_objects.principal import AuthenticatedPrincipal

router = APIRouter(prefix="/booking")


@router.post(
    "/createBooking",
    response_model=ApiResponse[CreateBookingResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: CreateBookingRequest,
    background_tasks: BackgroundTasks,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[CreateBookingResponse]:
    change = await use_cases["create_booking"].execute(request=payload, principal=principal)
    schedule_dispatch(background_tasks, change)

    car = change.car
    data = CreateBookingResponse(
        **BookingOut.fields_from(change.booking, formatted=False),
        car_data=CarData(brand=car.brand, model=car.model, price_per_day=car.price_per_day),
    )
    return ApiResponse(message="Booking created successfully", data=data)


@router.post("/updatePartnerStatus", response_model=ApiResponse[BookingOut])
async def update_partner_status(
    payload: UpdatePartnerStatusRequest,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[BookingOut]:
    change = await use_cases["update_partner_status"].execute(
        booking_id=payload.booking_id,
        partner_status=payload.partner_status,
    )
    return ApiResponse(
        message="Partner status updated successfully",
        data=BookingOut.from_entity(change.booking),
    )


@router.post("/assignDriver", response_model=ApiResponse[BookingOut])
async def assign_driver(
    payload: AssignDriverRequest,
    background_tasks: BackgroundTasks,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[BookingOut]:
    change = await use_cases["assign_driver"].execute(
        booking_id=payload.booking_id,
        driver_id=payload.driver_id,
        principal=principal,
    )
    schedule_dispatch(background_tasks, change)
    return ApiResponse(
        message="Driver assigned successfully",
        data=BookingOut.from_entity(change.booking),
    )


@router.post("/updateDriverStatus", response_model=ApiResponse[BookingOut])
async def update_driver_status(
    payload: UpdateDriverStatusRequest,
    background_tasks: BackgroundTasks,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[BookingOut]:
    change = await use_cases["update_driver_status"].execute(
        booking_id=payload.booking_id,
        driver_status=payload.driver_status,
        principal=principal,
        rejection_reason=payload.rejection_reason,
    )
    schedule_dispatch(background_tasks, change)
    return ApiResponse(
        message="Driver status updated successfully",
        data=BookingOut.from_entity(change.booking),
    )


@router.put("/paymentstatus", response_model=ApiResponse[BookingOut])
async def update_payment_status(
    payload: UpdatePaymentStatusRequest,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[BookingOut]:
    change = await use_cases["update_payment_status"].execute(
        booking_id=payload.booking_id,
        payment_status=payload.payment_status,
    )
    return ApiResponse(
        message="Payment status updated successfully",
        data=BookingOut.from_entity(change.booking),
    )


# === Consultas ===


@router.get("/getBookingBypartner", response_model=ApiResponse[list[BookingView]])
async def get_bookings_by_partner(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[list[BookingView]]:
    bookings = await use_cases["get_bookings"].by_partner(principal.linked_id)
    return ApiResponse(message="Bookings retrieved successfully", data=bookings)


@router.get("/getBookingByuserId", response_model=ApiResponse[list[BookingView]])
async def get_bookings_by_customer(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[list[BookingView]]:
    bookings = await use_cases["get_bookings"].by_customer(principal.linked_id)
    return ApiResponse(message="Bookings retrieved successfully", data=bookings)


@router.get("/getBookingBydriverId", response_model=ApiResponse[list[BookingView]])
async def get_bookings_by_driver(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[list[BookingView]]:
    bookings = await use_cases["get_bookings"].by_driver(principal.linked_id)
    return ApiResponse(message="Bookings retrieved successfully", data=bookings)


@router.get("/getBookingByCarId/{car_id}", response_model=ApiResponse[list[BookingOut]])
async def get_bookings_by_car(
    car_id: str,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[list[BookingOut]]:
    bookings = await use_cases["get_bookings"].by_car(car_id)
    return ApiResponse(message="Bookings retrieved successfully", data=bookings)


@router.get("/byId/{booking_id}", response_model=ApiResponse[BookingDetail])
async def get_booking_by_id(
    booking_id: str,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[BookingDetail]:
    booking = await use_cases["get_bookings"].by_id(booking_id)
    return ApiResponse(message="Booking retrieved successfully", data=booking)


@router.get("/getAllBooking", response_model=ApiResponse[list[BookingOut]])
async def get_all_bookings(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[list[BookingOut]]:
    bookings = await use_cases["get_bookings"].all()
    return ApiResponse(message="Bookings retrieved successfully", data=bookings)


@router.delete("/delete/{driver_id}", response_model=ApiResponse[DeletedBookingResponse])
async def delete_booking_by_driver(
    driver_id: str,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[DeletedBookingResponse]:
    booking = await use_cases["delete_booking"].execute(driver_id=driver_id)
    return ApiResponse(
        message="Booking deleted successfully",
        data=DeletedBookingResponse(id=booking.id, driver_id=booking.driver_id),
    )
