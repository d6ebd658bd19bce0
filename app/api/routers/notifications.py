from fastapi import APIRouter, Depends

from app.api.dependencies import get_principal, get_use_cases
from app.api.schemas.common import ApiResponse
from app.api.schemas.notifications import DeletedCount, NotificationOut
from app.domain.value_objects.principal import AuthenticatedPrincipal

router = APIRouter(prefix="/notifications")


@router.get("", response_model=ApiResponse[list[NotificationOut]])
async def list_notifications(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[list[NotificationOut]]:
    notifications = await use_cases["list_notifications"].execute(receiver_id=principal.linked_id)
    return ApiResponse(
        message="Notifications retrieved successfully",
        data=[NotificationOut.from_entity(n) for n in notifications],
    )


@router.delete("/{notification_id}", response_model=ApiResponse[DeletedCount])
async def delete_notification(
    notification_id: str,
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[DeletedCount]:
    await use_cases["delete_notification"].execute(
        notification_id=notification_id,
        receiver_id=principal.linked_id,
    )
    return ApiResponse(message="Notification deleted successfully", data=DeletedCount(deleted_count=1))


@router.delete("", response_model=ApiResponse[DeletedCount])
async def delete_all_notifications(
    principal: AuthenticatedPrincipal = Depends(get_principal),
    use_cases=Depends(get_use_cases),
) -> ApiResponse[DeletedCount]:
    deleted = await use_cases["delete_all_notifications"].execute(receiver_id=principal.linked_id)
    return ApiResponse(message="Notifications deleted successfully", data=DeletedCount(deleted_count=deleted))
