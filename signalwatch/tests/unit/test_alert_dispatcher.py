"""Unit tests for alert dispatching and the alert lifecycle."""

from datetime import UTC, datetime

import pytest
from sqlalchemy import select

from signalwatch.core.exceptions import (
    AlertAlreadyHandledError,
    AlertNotFoundError,
    NotificationDeliveryError,
)
from signalwatch.core.identity import Identity
from signalwatch.models import Alert, AlertMechanism, AlertStatus, AlertType
from signalwatch.services.alert_dispatcher import (
    AUTO_ALERT_BODY,
    AUTO_ALERT_SUBJECT,
    LOW_SIGNAL_ALERT_MESSAGE,
    AlertDispatcher,
)
from signalwatch.tests.conftest import RecordingNotifier
from signalwatch.tests.factories import (
    AlertFactory,
    AlertModeFactory,
    ConnectivitySampleFactory,
    DeviceFactory,
    EmergencyContactFactory,
    UserFactory,
)

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def dispatcher(session, notifier) -> AlertDispatcher:
    return AlertDispatcher(session, notifier, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_owner(persist):
    """Persist a user with the given alert mode key, a device and a sample."""

    async def _make(mode_key=None, **user_kwargs):
        mode = AlertModeFactory(key=mode_key) if mode_key else None
        user = UserFactory(alert_mode=mode, **user_kwargs)
        device = DeviceFactory(owner_id=user.id)
        sample = ConnectivitySampleFactory(device_id=device.id, is_connected=False)
        await persist(user, device, sample)
        return user, device, sample

    return _make


async def _all_alerts(session):
    result = await session.execute(select(Alert))
    return result.scalars().all()


# =============================================================================
# dispatch_low_signal
# =============================================================================


class TestAutomaticMechanism:
    async def test_emails_first_emergency_contact(
        self, session, persist, dispatcher, notifier, make_owner
    ):
        user, device, sample = await make_owner(AlertMechanism.AUTOMATIC.value)
        first = EmergencyContactFactory(
            user_id=user.id, email="first@example.com", created_at=datetime(2026, 1, 1, tzinfo=UTC)
        )
        second = EmergencyContactFactory(
            user_id=user.id, email="second@example.com", created_at=datetime(2026, 2, 1, tzinfo=UTC)
        )
        await persist(second, first)

        outcome = await dispatcher.dispatch_low_signal(user.id, device, sample)

        assert outcome.mechanism is AlertMechanism.AUTOMATIC
        assert outcome.alert is None
        assert notifier.emails == [("first@example.com", AUTO_ALERT_SUBJECT, AUTO_ALERT_BODY)]

    async def test_sms_sent_to_contact_phone(self, persist, dispatcher, notifier, make_owner):
        user, device, sample = await make_owner(AlertMechanism.AUTOMATIC.value)
        await persist(EmergencyContactFactory(user_id=user.id, phone="+201234567890"))

        outcome = await dispatcher.dispatch_low_signal(user.id, device, sample)

        assert [phone for phone, _ in notifier.sms] == ["+201234567890"]
        assert len(outcome.deliveries) == 2

    async def test_falls_back_to_account_email(self, persist, dispatcher, notifier, make_owner):
        user, device, sample = await make_owner(
            AlertMechanism.AUTOMATIC.value, email="owner@example.com"
        )
        # Favorites are never alert recipients
        await persist(EmergencyContactFactory(user_id=user.id, favorite=True))

        await dispatcher.dispatch_low_signal(user.id, device, sample)

        assert [to for to, _, _ in notifier.emails] == ["owner@example.com"]
        assert notifier.sms == []

    async def test_never_creates_alert(self, session, dispatcher, make_owner):
        user, device, sample = await make_owner(AlertMechanism.AUTOMATIC.value)

        await dispatcher.dispatch_low_signal(user.id, device, sample)

        assert await _all_alerts(session) == []

    async def test_delivery_failure_raises_after_commit(self, session, make_owner):
        user, device, sample = await make_owner(AlertMechanism.AUTOMATIC.value)
        failing = RecordingNotifier(email_success=False)
        dispatcher = AlertDispatcher(session, failing, clock=lambda: FIXED_NOW)

        with pytest.raises(NotificationDeliveryError) as exc_info:
            await dispatcher.dispatch_low_signal(user.id, device, sample)

        assert exc_info.value.status_code == 503
        assert len(failing.emails) == 1
        # The triggering sample survives a rollback of the failed request
        await session.rollback()
        assert await session.get(type(sample), sample.id) is not None


class TestManualMechanism:
    async def test_creates_one_pending_alert(self, session, dispatcher, notifier, make_owner):
        user, device, sample = await make_owner(AlertMechanism.MANUAL.value)

        outcome = await dispatcher.dispatch_low_signal(user.id, device, sample)

        assert outcome.mechanism is AlertMechanism.MANUAL
        alert = outcome.alert
        assert alert is not None
        assert alert.status is AlertStatus.PENDING
        assert alert.type is AlertType.LOW_SIGNAL
        assert alert.mechanism is AlertMechanism.MANUAL
        assert alert.message == LOW_SIGNAL_ALERT_MESSAGE
        assert (alert.user_id, alert.device_id, alert.sample_id) == (user.id, device.id, sample.id)
        assert alert.resolved_at is None
        assert notifier.emails == []
        assert len(await _all_alerts(session)) == 1

    async def test_each_event_creates_its_own_alert(self, session, dispatcher, make_owner):
        user, device, sample = await make_owner(AlertMechanism.MANUAL.value)

        await dispatcher.dispatch_low_signal(user.id, device, sample)
        await dispatcher.dispatch_low_signal(user.id, device, sample)

        assert len(await _all_alerts(session)) == 2


class TestUnconfiguredMechanism:
    @pytest.mark.parametrize("mode_key", [None, "silent_mode"])
    async def test_no_side_effects(self, session, dispatcher, notifier, make_owner, mode_key):
        user, device, sample = await make_owner(mode_key)

        outcome = await dispatcher.dispatch_low_signal(user.id, device, sample)

        assert outcome.mechanism is AlertMechanism.UNCONFIGURED
        assert outcome.alert is None
        assert notifier.emails == []
        assert await _all_alerts(session) == []

    async def test_unknown_user(self, dispatcher, notifier, make_owner):
        _, device, sample = await make_owner(AlertMechanism.AUTOMATIC.value)

        outcome = await dispatcher.dispatch_low_signal("missing-user", device, sample)

        assert outcome.mechanism is AlertMechanism.UNCONFIGURED
        assert notifier.emails == []


class TestMechanismFromModeKey:
    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("auto_alert", AlertMechanism.AUTOMATIC),
            ("manual_alert", AlertMechanism.MANUAL),
            ("AUTO_ALERT", AlertMechanism.UNCONFIGURED),
            ("", AlertMechanism.UNCONFIGURED),
            (None, AlertMechanism.UNCONFIGURED),
        ],
    )
    def test_from_mode_key(self, key, expected):
        assert AlertMechanism.from_mode_key(key) is expected


# =============================================================================
# confirm / dismiss
# =============================================================================


@pytest.fixture
def make_alert(persist):
    async def _make(**alert_kwargs):
        user = UserFactory(email="owner@example.com")
        device = DeviceFactory(owner_id=user.id)
        alert = AlertFactory(user_id=user.id, device_id=device.id, **alert_kwargs)
        await persist(user, device, alert)
        return user, alert

    return _make


class TestConfirmAlert:
    async def test_confirms_and_notifies_owner(self, dispatcher, notifier, make_alert):
        user, alert = await make_alert()

        confirmed = await dispatcher.confirm_alert(alert.id, Identity(user.id))

        assert confirmed.status is AlertStatus.CONFIRMED
        assert confirmed.resolved_at is not None
        assert notifier.emails == [
            (
                "owner@example.com",
                f"Confirmed Alert: {LOW_SIGNAL_ALERT_MESSAGE}",
                LOW_SIGNAL_ALERT_MESSAGE,
            )
        ]

    async def test_other_users_alert_is_not_found(self, dispatcher, notifier, make_alert):
        _, alert = await make_alert()

        with pytest.raises(AlertNotFoundError) as exc_info:
            await dispatcher.confirm_alert(alert.id, Identity("someone-else"))

        assert exc_info.value.message == "Alert not found or access denied"
        assert notifier.emails == []

    async def test_missing_alert_is_not_found(self, dispatcher):
        with pytest.raises(AlertNotFoundError):
            await dispatcher.confirm_alert("does-not-exist", Identity("user"))

    @pytest.mark.parametrize("trait", ["confirmed", "dismissed"])
    async def test_terminal_alert_is_already_handled(
        self, session, dispatcher, notifier, make_alert, trait
    ):
        user, alert = await make_alert(**{trait: True})
        before = (alert.status, alert.resolved_at)

        with pytest.raises(AlertAlreadyHandledError) as exc_info:
            await dispatcher.confirm_alert(alert.id, Identity(user.id))

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Alert already handled"
        await session.refresh(alert)
        assert alert.status == before[0]
        assert notifier.emails == []

    async def test_delivery_failure_keeps_alert_confirmed(self, session, make_alert):
        user, alert = await make_alert()
        dispatcher = AlertDispatcher(session, RecordingNotifier(email_success=False))

        with pytest.raises(NotificationDeliveryError):
            await dispatcher.confirm_alert(alert.id, Identity(user.id))

        await session.rollback()
        reloaded = await session.get(Alert, alert.id, populate_existing=True)
        assert reloaded.status is AlertStatus.CONFIRMED


class TestDismissAlert:
    async def test_dismisses_without_notification(self, dispatcher, notifier, make_alert):
        user, alert = await make_alert()

        dismissed = await dispatcher.dismiss_alert(alert.id, Identity(user.id))

        assert dismissed.status is AlertStatus.DISMISSED
        assert dismissed.resolved_at is not None
        assert notifier.emails == []

    async def test_second_transition_fails(self, dispatcher, notifier, make_alert):
        user, alert = await make_alert()
        identity = Identity(user.id)
        await dispatcher.dismiss_alert(alert.id, identity)

        with pytest.raises(AlertAlreadyHandledError):
            await dispatcher.confirm_alert(alert.id, identity)
        with pytest.raises(AlertAlreadyHandledError):
            await dispatcher.dismiss_alert(alert.id, identity)
        assert notifier.emails == []

    async def test_other_users_alert_is_not_found(self, dispatcher, make_alert):
        _, alert = await make_alert()

        with pytest.raises(AlertNotFoundError):
            await dispatcher.dismiss_alert(alert.id, Identity("someone-else"))


class TestConditionalTransition:
    async def test_losing_a_race_reports_already_handled(self, session, dispatcher, make_alert):
        from signalwatch.repositories import AlertRepository

        user, alert = await make_alert()
        repo = AlertRepository(session)

        first = await repo.transition_from_pending(
            alert.id, AlertStatus.DISMISSED, resolved_at=FIXED_NOW
        )
        second = await repo.transition_from_pending(
            alert.id, AlertStatus.CONFIRMED, resolved_at=FIXED_NOW
        )

        assert first is not None
        assert first.status is AlertStatus.DISMISSED
        assert second is None
