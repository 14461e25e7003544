from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from remindpay.api import deps
from remindpay.models.user import User
from .exceptions import ReminderAccessError, ReminderError, ReminderNotFoundError
from .schemas import ReminderCreate, ReminderDeleted, ReminderRead, RemindersDeleted, ReminderUpdate
from .service import ReminderService


router = APIRouter()


def _http_error(exc: ReminderError) -> HTTPException:
    if isinstance(exc, ReminderNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Couldn't find reminder.")
    if isinstance(exc, ReminderAccessError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized.")
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


@router.post("", response_model=ReminderRead, status_code=status.HTTP_201_CREATED)
def create_reminder_endpoint(
    payload: ReminderCreate,
    current_user: User = Depends(deps.get_current_user),
    service: ReminderService = Depends(deps.get_reminder_service),
):
    return service.create_reminder(current_user.id, payload)


@router.get("", response_model=List[ReminderRead])
def list_reminders_endpoint(
    current_user: User = Depends(deps.get_current_user),
    service: ReminderService = Depends(deps.get_reminder_service),
):
    return service.list_reminders(current_user.id)


@router.get("/upcoming", response_model=List[ReminderRead])
def upcoming_reminders_endpoint(
    current_user: User = Depends(deps.get_current_user),
    service: ReminderService = Depends(deps.get_reminder_service),
):
    """Reminders due within the next window; each one is advanced to its next occurrence."""
    return service.upcoming(current_user.id)


@router.get("/{reminder_id}", response_model=ReminderRead)
def get_reminder_endpoint(
    reminder_id: int,
    current_user: User = Depends(deps.get_current_user),
    service: ReminderService = Depends(deps.get_reminder_service),
):
    try:
        return service.get_reminder(current_user.id, reminder_id)
    except ReminderError as e:
        raise _http_error(e)


@router.put("/{reminder_id}", response_model=ReminderRead)
def update_reminder_endpoint(
    reminder_id: int,
    payload: ReminderUpdate,
    current_user: User = Depends(deps.get_current_user),
    service: ReminderService = Depends(deps.get_reminder_service),
):
    try:
        return service.update_reminder(current_user.id, reminder_id, payload)
    except ReminderError as e:
        raise _http_error(e)


@router.delete("/{reminder_id}", response_model=ReminderDeleted)
def delete_reminder_endpoint(
    reminder_id: int,
    current_user: User = Depends(deps.get_current_user),
    service: ReminderService = Depends(deps.get_reminder_service),
):
    try:
        service.delete_reminder(current_user.id, reminder_id)
    except ReminderError as e:
        raise _http_error(e)
    return ReminderDeleted(id=reminder_id)


@router.delete("", response_model=RemindersDeleted)
def delete_all_reminders_endpoint(
    current_user: User = Depends(deps.get_current_user),
    service: ReminderService = Depends(deps.get_reminder_service),
):
    deleted = service.delete_all_reminders(current_user.id)
    return RemindersDeleted(success=True, deleted=deleted)
