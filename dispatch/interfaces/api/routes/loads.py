"""Load board, lifecycle and tracking endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from dispatch.application.use_cases.lifecycle import (
    DEFAULT_CANCEL_REASON,
    LoadLifecycle,
    TransitionResult,
)
from dispatch.application.use_cases.loads import (
    create_load as create_load_uc,
    get_load_for_user as get_load_for_user_uc,
    get_load_location_history as get_load_location_history_uc,
    list_active_loads_for_customer as list_active_loads_for_customer_uc,
    list_active_loads_for_driver as list_active_loads_for_driver_uc,
    list_available_loads as list_available_loads_uc,
    list_driver_loads_by_sequence as list_driver_loads_by_sequence_uc,
    list_load_history_for_customer as list_load_history_for_customer_uc,
    list_load_history_for_driver as list_load_history_for_driver_uc,
    record_load_location as record_load_location_uc,
    update_delivery_sequence as update_delivery_sequence_uc,
)
from dispatch.application.use_cases.locations import LocationTracker
from dispatch.application.use_cases.notifications import NotificationDispatcher
from dispatch.domain.entities import Load, User
from dispatch.infrastructure.database import get_db
from dispatch.interfaces.api.dependencies import (
    get_current_active_user,
    get_load_lifecycle,
    get_location_tracker,
    get_notification_dispatcher,
    require_customer,
    require_driver,
)
from dispatch.interfaces.api.routes_helpers import http_error_from
from dispatch.interfaces.api.schemas import (
    AcceptLoadRequest,
    CancelLoadRequest,
    DeliverySequenceRequest,
    EtaUpdateRequest,
    LoadCreate,
    LoadRead,
    LocationRead,
    LocationReport,
    TransitionResponse,
)

router = APIRouter(prefix="/loads", tags=["loads"])


def _load_to_read_model(load: Load) -> LoadRead:
    return LoadRead.model_validate(load)


def _loads_to_read_models(loads) -> list[LoadRead]:
    return [_load_to_read_model(load) for load in loads]


def _transition_response(result: TransitionResult) -> TransitionResponse:
    success, message = result
    if not success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    return TransitionResponse(message=message)


@router.post("", response_model=LoadRead, status_code=status.HTTP_201_CREATED)
def create_load(
    payload: LoadCreate,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_user: User = Depends(require_customer),
) -> LoadRead:
    """Post a new load to the board."""

    try:
        load = create_load_uc(db, dispatcher, current_user, **payload.model_dump())
    except (PermissionError, ValueError) as exc:
        raise http_error_from(exc) from exc
    return _load_to_read_model(load)


@router.get("/available", response_model=list[LoadRead])
def list_available_loads(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    _: User = Depends(require_driver),
) -> list[LoadRead]:
    return _loads_to_read_models(list_available_loads_uc(db, skip=skip, limit=limit))


@router.get("/driver/active", response_model=list[LoadRead])
def list_driver_active_loads(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_driver),
) -> list[LoadRead]:
    return _loads_to_read_models(list_active_loads_for_driver_uc(db, current_user.id))


@router.get("/driver/history", response_model=list[LoadRead])
def list_driver_load_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_driver),
) -> list[LoadRead]:
    return _loads_to_read_models(list_load_history_for_driver_uc(db, current_user.id))


@router.get("/customer/active", response_model=list[LoadRead])
def list_customer_active_loads(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_customer),
) -> list[LoadRead]:
    return _loads_to_read_models(list_active_loads_for_customer_uc(db, current_user.id))


@router.get("/customer/history", response_model=list[LoadRead])
def list_customer_load_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_customer),
) -> list[LoadRead]:
    return _loads_to_read_models(list_load_history_for_customer_uc(db, current_user.id))


@router.post("/driver/sequence", response_model=TransitionResponse)
def update_delivery_sequence(
    payload: DeliverySequenceRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_driver),
) -> TransitionResponse:
    """Store the order in which the driver intends to deliver their loads."""

    try:
        update_delivery_sequence_uc(
            db, driver_id=current_user.id, sequences=payload.as_mapping()
        )
    except (LookupError, PermissionError) as exc:
        raise http_error_from(exc) from exc
    return TransitionResponse(message="Delivery sequence updated")


@router.get("/driver/sequence", response_model=list[LoadRead])
def list_driver_loads_by_sequence(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_driver),
) -> list[LoadRead]:
    return _loads_to_read_models(list_driver_loads_by_sequence_uc(db, current_user.id))


@router.get("/{load_id}", response_model=LoadRead)
def get_load(
    load_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> LoadRead:
    try:
        load = get_load_for_user_uc(db, load_id, current_user)
    except (LookupError, PermissionError) as exc:
        raise http_error_from(exc) from exc
    return _load_to_read_model(load)


@router.post("/{load_id}/accept", response_model=TransitionResponse)
def accept_load(
    load_id: int,
    payload: AcceptLoadRequest | None = None,
    lifecycle: LoadLifecycle = Depends(get_load_lifecycle),
    current_user: User = Depends(require_driver),
) -> TransitionResponse:
    estimated_minutes = payload.estimated_minutes if payload else None
    return _transition_response(
        lifecycle.accept(load_id, current_user.id, estimated_minutes)
    )


@router.post("/{load_id}/arrive-pickup", response_model=TransitionResponse)
def arrive_at_pickup(
    load_id: int,
    lifecycle: LoadLifecycle = Depends(get_load_lifecycle),
    current_user: User = Depends(require_driver),
) -> TransitionResponse:
    return _transition_response(
        lifecycle.notify_arrival_at_pickup(load_id, current_user.id)
    )


@router.post("/{load_id}/pickup", response_model=TransitionResponse)
def pick_up_load(
    load_id: int,
    lifecycle: LoadLifecycle = Depends(get_load_lifecycle),
    current_user: User = Depends(require_driver),
) -> TransitionResponse:
    return _transition_response(lifecycle.pick_up(load_id, current_user.id))


@router.post("/{load_id}/start-transit", response_model=TransitionResponse)
def start_transit(
    load_id: int,
    lifecycle: LoadLifecycle = Depends(get_load_lifecycle),
    current_user: User = Depends(require_driver),
) -> TransitionResponse:
    return _transition_response(lifecycle.start_transit(load_id, current_user.id))


@router.post("/{load_id}/arrive-dropoff", response_model=TransitionResponse)
def arrive_at_dropoff(
    load_id: int,
    lifecycle: LoadLifecycle = Depends(get_load_lifecycle),
    current_user: User = Depends(require_driver),
) -> TransitionResponse:
    return _transition_response(
        lifecycle.notify_arrival_at_dropoff(load_id, current_user.id)
    )


@router.post("/{load_id}/deliver", response_model=TransitionResponse)
def deliver_load(
    load_id: int,
    lifecycle: LoadLifecycle = Depends(get_load_lifecycle),
    current_user: User = Depends(require_driver),
) -> TransitionResponse:
    return _transition_response(lifecycle.deliver(load_id, current_user.id))


@router.post("/{load_id}/complete", response_model=TransitionResponse)
def complete_load(
    load_id: int,
    lifecycle: LoadLifecycle = Depends(get_load_lifecycle),
    current_user: User = Depends(require_customer),
) -> TransitionResponse:
    return _transition_response(lifecycle.complete(load_id, current_user.id))


@router.post("/{load_id}/cancel", response_model=TransitionResponse)
def cancel_load(
    load_id: int,
    payload: CancelLoadRequest | None = None,
    lifecycle: LoadLifecycle = Depends(get_load_lifecycle),
    current_user: User = Depends(get_current_active_user),
) -> TransitionResponse:
    reason = (payload.reason if payload else None) or DEFAULT_CANCEL_REASON
    return _transition_response(lifecycle.cancel(load_id, current_user.id, reason))


@router.post("/{load_id}/eta", response_model=TransitionResponse)
def update_eta(
    load_id: int,
    payload: EtaUpdateRequest,
    lifecycle: LoadLifecycle = Depends(get_load_lifecycle),
    current_user: User = Depends(require_driver),
) -> TransitionResponse:
    return _transition_response(
        lifecycle.update_eta(load_id, current_user.id, payload.estimated_minutes)
    )


@router.post(
    "/{load_id}/location",
    response_model=LocationRead,
    status_code=status.HTTP_201_CREATED,
)
def report_location(
    load_id: int,
    payload: LocationReport,
    db: Session = Depends(get_db),
    tracker: LocationTracker = Depends(get_location_tracker),
    current_user: User = Depends(require_driver),
) -> LocationRead:
    """Record the driver's current position against the load."""

    try:
        sample = record_load_location_uc(
            db,
            tracker,
            load_id=load_id,
            driver_id=current_user.id,
            latitude=payload.latitude,
            longitude=payload.longitude,
            notes=payload.notes,
        )
    except (LookupError, PermissionError, ValueError) as exc:
        raise http_error_from(exc) from exc
    return LocationRead.model_validate(sample)


@router.get("/{load_id}/location-history", response_model=list[LocationRead])
def location_history(
    load_id: int,
    db: Session = Depends(get_db),
    tracker: LocationTracker = Depends(get_location_tracker),
    current_user: User = Depends(get_current_active_user),
) -> list[LocationRead]:
    try:
        samples = get_load_location_history_uc(
            db, tracker, load_id=load_id, user=current_user
        )
    except (LookupError, PermissionError) as exc:
        raise http_error_from(exc) from exc
    return [LocationRead.model_validate(sample) for sample in samples]
