from fastapi import APIRouter, Body, Depends

from cyberwatch.api.deps import get_alert_store
from cyberwatch.schemas.alert import AlertSetting, AlertToggle, PendingDelete
from cyberwatch.services.alert_store import AlertStore
from cyberwatch.services.validation import validate_form

router = APIRouter()


@router.get("", response_model=list[AlertSetting])
async def list_alerts(store: AlertStore = Depends(get_alert_store)):
    return store.list_alerts()


@router.post("", response_model=AlertSetting, status_code=201)
async def create_alert(payload: dict = Body(...), store: AlertStore = Depends(get_alert_store)):
    return store.create(payload)


# Registered before "/{alert_id}" routes so "delete" is not read as an id
@router.get("/delete/pending", response_model=PendingDelete)
async def pending_delete(store: AlertStore = Depends(get_alert_store)):
    return PendingDelete(alert_id=store.pending_delete)


@router.post("/delete/confirm", response_model=AlertSetting | None)
async def confirm_delete(store: AlertStore = Depends(get_alert_store)):
    """Second step of deletion. Returns the removed alert, or null if nothing was pending."""
    return store.confirm_delete()


@router.post("/delete/cancel", response_model=PendingDelete)
async def cancel_delete(store: AlertStore = Depends(get_alert_store)):
    store.cancel_delete()
    return PendingDelete(alert_id=None)


@router.get("/{alert_id}", response_model=AlertSetting)
async def get_alert(alert_id: str, store: AlertStore = Depends(get_alert_store)):
    return store.get(alert_id)


@router.put("/{alert_id}", response_model=AlertSetting)
async def update_alert(alert_id: str, payload: dict = Body(...), store: AlertStore = Depends(get_alert_store)):
    return store.update(alert_id, payload)


@router.patch("/{alert_id}/toggle", response_model=AlertSetting)
async def toggle_alert(
    alert_id: str,
    payload: dict | None = Body(None),
    store: AlertStore = Depends(get_alert_store),
):
    toggle = validate_form(AlertToggle, payload or {}).unwrap()
    return store.toggle(alert_id, toggle.is_enabled)


@router.post("/{alert_id}/delete-request", response_model=PendingDelete)
async def request_delete(alert_id: str, store: AlertStore = Depends(get_alert_store)):
    """First step of deletion: nothing is removed until /delete/confirm."""
    return PendingDelete(alert_id=store.request_delete(alert_id))
