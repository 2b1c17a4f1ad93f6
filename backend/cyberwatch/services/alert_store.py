import time
from typing import Any, Iterable

import structlog

from cyberwatch.errors import NotFoundError, ValidationError
from cyberwatch.schemas.alert import AlertSetting, AlertSettingForm
from cyberwatch.services.validation import ValidationResult, validate_form

logger = structlog.get_logger()

ALERTS_PATH = "/dashboard/alerts"


def validate_alert_form(data: Any) -> ValidationResult[AlertSettingForm]:
    return validate_form(AlertSettingForm, data)


def new_alert_id() -> str:
    return f"alert-{time.time_ns() // 1_000_000}"


class AlertStore:
    """Session-scoped, in-memory alert settings keyed by id, in insertion order."""

    def __init__(self, seeds: Iterable[AlertSetting] = ()):
        self._alerts: list[AlertSetting] = [a.model_copy(deep=True) for a in seeds]
        self._pending_delete: str | None = None

    def __len__(self) -> int:
        return len(self._alerts)

    def list_alerts(self) -> list[AlertSetting]:
        return list(self._alerts)

    def _index(self, alert_id: str) -> int:
        for i, alert in enumerate(self._alerts):
            if alert.id == alert_id:
                return i
        raise NotFoundError("Alert", alert_id, back_to=ALERTS_PATH)

    def get(self, alert_id: str) -> AlertSetting:
        return self._alerts[self._index(alert_id)]

    def _has(self, alert_id: str) -> bool:
        return any(alert.id == alert_id for alert in self._alerts)

    def _fresh_id(self) -> str:
        alert_id = new_alert_id()
        while self._has(alert_id):
            alert_id = f"alert-{int(alert_id.rsplit('-', 1)[1]) + 1}"
        return alert_id

    def create(self, data: Any) -> AlertSetting:
        form = validate_alert_form(data).unwrap()
        if form.id and self._has(form.id):
            raise ValidationError(
                f"Alert {form.id} already exists",
                fields={"id": [f"An alert with id '{form.id}' already exists."]},
            )
        alert = AlertSetting(**form.model_dump(exclude={"id"}), id=form.id or self._fresh_id())
        self._alerts.append(alert)
        logger.info("Alert created", alert_id=alert.id, name=alert.name)
        return alert

    def update(self, alert_id: str, data: Any) -> AlertSetting:
        form = validate_alert_form(data).unwrap()
        idx = self._index(alert_id)
        alert = AlertSetting(**form.model_dump(exclude={"id"}), id=alert_id)
        self._alerts[idx] = alert
        logger.info("Alert updated", alert_id=alert_id)
        return alert

    def toggle(self, alert_id: str, is_enabled: bool | None = None) -> AlertSetting:
        """Flip (or set) ``is_enabled`` without re-validating the rest of the record."""
        idx = self._index(alert_id)
        current = self._alerts[idx]
        enabled = (not current.is_enabled) if is_enabled is None else is_enabled
        alert = current.model_copy(update={"is_enabled": enabled})
        self._alerts[idx] = alert
        logger.info("Alert toggled", alert_id=alert_id, is_enabled=enabled)
        return alert

    # ─── Two-step delete ──────────────────────────────────────────

    @property
    def pending_delete(self) -> str | None:
        return self._pending_delete

    def request_delete(self, alert_id: str) -> str:
        self._index(alert_id)
        self._pending_delete = alert_id
        return alert_id

    def cancel_delete(self) -> None:
        self._pending_delete = None

    def confirm_delete(self) -> AlertSetting | None:
        """Delete the alert named by the last ``request_delete``; None if nothing is pending."""
        if self._pending_delete is None:
            return None
        alert_id, self._pending_delete = self._pending_delete, None
        try:
            idx = self._index(alert_id)
        except NotFoundError:
            logger.warning("Pending delete target vanished", alert_id=alert_id)
            return None
        removed = self._alerts.pop(idx)
        logger.info("Alert deleted", alert_id=alert_id)
        return removed
