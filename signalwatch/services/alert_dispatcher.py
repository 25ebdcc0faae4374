"""Alert dispatching and the alert lifecycle state machine.

A low-signal event is routed according to the user's alert mode:

- AUTOMATIC: notify right away. Recipient is the first EMERGENCY contact,
  falling back to the account email. No Alert row is written.
- MANUAL: create one PENDING LOW_SIGNAL alert for the user to confirm or
  dismiss later. Nothing is sent yet.
- UNCONFIGURED: log only.

Alert lifecycle:
    PENDING -> CONFIRMED   (owner is emailed the alert message)
    PENDING -> DISMISSED   (nothing is sent)

Both transitions are terminal and run as one conditional UPDATE guarded on
``status = PENDING``, so concurrent calls cannot both win.

State is committed before any notification attempt. A failed delivery is
reported as NotificationDeliveryError and never undoes committed state.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from signalwatch.core.exceptions import (
    AlertAlreadyHandledError,
    AlertNotFoundError,
    NotificationDeliveryError,
)
from signalwatch.core.logging import get_logger
from signalwatch.models import (
    Alert,
    AlertMechanism,
    AlertStatus,
    AlertType,
    ConnectivitySample,
    Device,
    User,
)
from signalwatch.repositories import AlertRepository, UserRepository
from signalwatch.services.notification import NotificationDelivery, NotificationService

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from signalwatch.core.identity import Identity

logger = get_logger(__name__)

LOW_SIGNAL_ALERT_MESSAGE = "Low signal detected on your device"
AUTO_ALERT_SUBJECT = "Low Signal Alert"
AUTO_ALERT_BODY = "Your device has low signal."
AUTO_ALERT_SMS = "Low signal detected on a device you are an emergency contact for."


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class DispatchOutcome:
    """What a low-signal dispatch did.

    ``alert`` is set only for the MANUAL mechanism. ``deliveries`` holds the
    notification attempts of the AUTOMATIC mechanism.
    """

    mechanism: AlertMechanism
    alert: Alert | None = None
    deliveries: list[NotificationDelivery] = field(default_factory=list)


class AlertDispatcher:
    """Routes low-signal events and drives confirm/dismiss transitions."""

    def __init__(
        self,
        session: AsyncSession,
        notifier: NotificationService,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.session = session
        self.notifier = notifier
        self.clock = clock
        self.alerts = AlertRepository(session)
        self.users = UserRepository(session)

    def resolve_mechanism(self, user: User) -> AlertMechanism:
        if user.alert_mode is None:
            return AlertMechanism.UNCONFIGURED
        return AlertMechanism.from_mode_key(user.alert_mode.key)

    async def dispatch_low_signal(
        self,
        user_id: str,
        device: Device,
        sample: ConnectivitySample | None,
    ) -> DispatchOutcome:
        """Handle one low-signal event for a user's device.

        Raises:
            NotificationDeliveryError: If the automatic email could not be delivered.
                The sample and reading stay committed.
        """
        user = await self.users.get_with_alert_mode(user_id)
        if user is None:
            logger.warning(f"Low signal on device {device.id} for unknown user {user_id}")
            return DispatchOutcome(mechanism=AlertMechanism.UNCONFIGURED)

        mechanism = self.resolve_mechanism(user)
        match mechanism:
            case AlertMechanism.AUTOMATIC:
                return await self._notify_automatically(user, device)
            case AlertMechanism.MANUAL:
                return await self._create_pending_alert(user, device, sample)
            case AlertMechanism.UNCONFIGURED:
                logger.info(
                    f"Low signal on device {device.id}: no alert mode configured for user {user.id}"
                )
                return DispatchOutcome(mechanism=mechanism)

    async def _notify_automatically(self, user: User, device: Device) -> DispatchOutcome:
        contact = await self.users.get_first_emergency_contact(user.id)
        recipient = contact.email if contact is not None and contact.email else user.email

        await self.session.commit()

        logger.info(f"Automatic low-signal alert for device {device.id}, user {user.id}")
        deliveries = [await self.notifier.send_email(recipient, AUTO_ALERT_SUBJECT, AUTO_ALERT_BODY)]
        if contact is not None and contact.phone:
            deliveries.append(await self.notifier.send_sms(contact.phone, AUTO_ALERT_SMS))

        email_delivery = deliveries[0]
        if not email_delivery.success:
            logger.error(f"Automatic alert email failed for user {user.id}: {email_delivery.error}")
            raise NotificationDeliveryError(details={"reason": email_delivery.error})

        return DispatchOutcome(mechanism=AlertMechanism.AUTOMATIC, deliveries=deliveries)

    async def _create_pending_alert(
        self,
        user: User,
        device: Device,
        sample: ConnectivitySample | None,
    ) -> DispatchOutcome:
        alert = await self.alerts.create(
            Alert(
                user_id=user.id,
                device_id=device.id,
                sample_id=sample.id if sample is not None else None,
                type=AlertType.LOW_SIGNAL,
                message=LOW_SIGNAL_ALERT_MESSAGE,
                status=AlertStatus.PENDING,
                mechanism=AlertMechanism.MANUAL,
                created_at=self.clock(),
            )
        )
        logger.info(f"Created pending alert {alert.id} for device {device.id}, user {user.id}")
        return DispatchOutcome(mechanism=AlertMechanism.MANUAL, alert=alert)

    async def _load_owned(self, alert_id: str, identity: Identity) -> Alert:
        alert = await self.alerts.get_by_id(alert_id)
        if alert is None or alert.user_id != identity.user_id:
            raise AlertNotFoundError(alert_id)
        if alert.status is not AlertStatus.PENDING:
            raise AlertAlreadyHandledError(alert_id)
        return alert

    async def _transition(self, alert_id: str, identity: Identity, to_status: AlertStatus) -> Alert:
        await self._load_owned(alert_id, identity)
        alert = await self.alerts.transition_from_pending(
            alert_id, to_status, resolved_at=self.clock()
        )
        if alert is None:
            # Lost a race with a concurrent transition
            raise AlertAlreadyHandledError(alert_id)
        logger.info(f"Alert {alert_id} {to_status.value.lower()} by user {identity.user_id}")
        return alert

    async def confirm_alert(self, alert_id: str, identity: Identity) -> Alert:
        """Confirm a pending alert and email its owner.

        Raises:
            AlertNotFoundError: The alert does not exist or belongs to someone else.
            AlertAlreadyHandledError: The alert is no longer PENDING.
            NotificationDeliveryError: The email failed; the alert stays CONFIRMED.
        """
        alert = await self._transition(alert_id, identity, AlertStatus.CONFIRMED)
        await self.session.commit()

        user = await self.users.get_by_id(alert.user_id)
        recipient = user.email if user is not None else ""
        delivery = await self.notifier.send_email(
            recipient, f"Confirmed Alert: {alert.message}", alert.message
        )
        if not delivery.success:
            logger.error(f"Confirmation email failed for alert {alert.id}: {delivery.error}")
            raise NotificationDeliveryError(details={"alert_id": alert.id, "reason": delivery.error})
        return alert

    async def dismiss_alert(self, alert_id: str, identity: Identity) -> Alert:
        """Dismiss a pending alert without sending anything."""
        return await self._transition(alert_id, identity, AlertStatus.DISMISSED)
