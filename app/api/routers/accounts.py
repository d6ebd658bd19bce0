from fastapi import APIRouter, Depends

from app.api.dependencies import get_principal, get_use_cases
from app.api.schemas.accounts import AccountRemovalResponse
from app.api.schemas.common import ApiResponse
from app.domain.value_objects.principal import AuthenticatedPrincipal, Role

router = APIRouter()


async def _remove(use_cases: dict, role: Role, principal: AuthenticatedPrincipal) -> ApiResponse:
    result = await use_cases["remove_account"].execute(role=role, account_id=principal.linked_id)
    return ApiResponse(
        message=f"{role.value.capitalize()} removed successfully",
        data=AccountRemovalResponse(
            account_id=result.account_id,
            role=result.role,
            deleted_bookings=result.deleted_bookings,
            deleted_cars=result.deleted_cars,
        ),
    )


@router.delete("/customers/remove", response_model=ApiResponse[AccountRemovalResponse])
async def remove_customer(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[AccountRemovalResponse]:
    return await _remove(use_cases, Role.CUSTOMER, principal)


@router.delete("/drivers/remove", response_model=ApiResponse[AccountRemovalResponse])
async def remove_driver(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[AccountRemovalResponse]:
    return await _remove(use_cases, Role.DRIVER, principal)


@router.delete("/partners/remove", response_model=ApiResponse[AccountRemovalResponse])
async def remove_partner(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[AccountRemovalResponse]:
    return await _remove(use_cases, Role.PARTNER, principal)
