"""Mock session gate and auth-screen policy tests."""

import pytest

from premo.session import (
    ACCOUNT_NOT_FOUND,
    ALREADY_REGISTERED,
    CREDENTIALS_INCOMPLETE,
    INVALID_SECURITY_KEY,
    NAME_REQUIRED,
    RESET_DISPATCHED,
    RESET_EMAIL_REQUIRED,
    AuthDelays,
    AuthFlow,
    AuthMode,
    SessionGate,
    StudioSession,
)


@pytest.fixture
def studio(clock):
    return StudioSession(clock=clock)


def _complete(auth: AuthFlow, **fields):
    ticket = auth.submit(**fields)
    assert ticket is not None, auth.error
    return auth.complete(ticket)


def test_gate_register_login_logout():
    gate = SessionGate()
    assert not gate.is_registered("a@b.com")

    gate.register("a@b.com")
    gate.register("a@b.com")
    gate.login("ada")

    assert gate.is_registered("a@b.com")
    assert gate.registered_count == 1
    assert gate.identity == "ada"
    assert gate.is_authenticated

    gate.logout()
    assert not gate.is_authenticated


def test_registration_logs_in_with_codename(studio):
    studio.auth.switch_mode(AuthMode.REGISTER)

    assert _complete(studio.auth, name="Ada", email="a@b.com", password="secret1") is True

    assert studio.identity == "Ada"
    assert studio.gate.is_registered("a@b.com")
    assert studio.auth.error == ""


def test_duplicate_registration_is_a_conflict(studio, clock):
    studio.auth.switch_mode(AuthMode.REGISTER)
    _complete(studio.auth, name="Ada", email="a@b.com", password="secret1")
    studio.logout()
    studio.auth.switch_mode(AuthMode.REGISTER)

    assert _complete(studio.auth, name="Imposter", email="a@b.com", password="secret1") is False

    assert studio.auth.error == ALREADY_REGISTERED
    assert studio.gate.registered_count == 1
    assert not studio.is_authenticated

    clock.advance(studio.auth.delays.mode_switch)
    assert studio.auth.tick() is True
    assert studio.auth.mode is AuthMode.LOGIN


def test_unknown_account_switches_to_registration_after_delay(studio, clock):
    auth = studio.auth

    assert _complete(auth, email="ghost@b.com", password="whatever") is False
    assert auth.error == ACCOUNT_NOT_FOUND
    assert auth.mode is AuthMode.LOGIN

    clock.advance(1.0)
    assert auth.tick() is False
    assert auth.mode is AuthMode.LOGIN
    assert auth.seconds_until_switch() == pytest.approx(0.5)

    clock.advance(0.5)
    assert auth.tick() is True
    assert auth.mode is AuthMode.REGISTER
    assert auth.error == ""
    assert auth.seconds_until_switch() is None


def test_login_requires_six_character_password(studio):
    studio.gate.register("ada@studio.io")

    assert _complete(studio.auth, email="ada@studio.io", password="12345") is False
    assert studio.auth.error == INVALID_SECURITY_KEY
    assert not studio.is_authenticated

    assert _complete(studio.auth, email="ada@studio.io", password="123456") is True
    assert studio.identity == "ada"


@pytest.mark.parametrize(
    "fields",
    [
        {"email": "", "password": "secret1"},
        {"email": "a@b.com", "password": ""},
        {"email": "   ", "password": "secret1"},
    ],
)
def test_incomplete_credentials_rejected_immediately(studio, fields):
    assert studio.auth.submit(**fields) is None
    assert studio.auth.error == CREDENTIALS_INCOMPLETE
    assert not studio.auth.is_busy


def test_registration_requires_name(studio):
    studio.auth.switch_mode(AuthMode.REGISTER)
    assert studio.auth.submit(name=" ", email="a@b.com", password="secret1") is None
    assert studio.auth.error == NAME_REQUIRED


def test_reset_credentials_reports_success_without_side_effects(studio, clock):
    auth = studio.auth
    auth.toggle_reset()
    assert auth.mode is AuthMode.RESET

    assert auth.submit(email="") is None
    assert auth.error == RESET_EMAIL_REQUIRED

    ticket = auth.submit(email="nobody@b.com")
    assert ticket.delay == AuthDelays().reset_submit
    assert auth.complete(ticket) is False
    assert auth.notice == RESET_DISPATCHED
    assert not studio.gate.is_registered("nobody@b.com")
    assert not studio.is_authenticated

    clock.advance(auth.delays.reset_notice)
    assert auth.tick() is True
    assert auth.mode is AuthMode.LOGIN
    assert auth.notice == ""


def test_submit_delay_comes_from_settings(clock):
    auth = AuthFlow(SessionGate(), delays=AuthDelays(submit=0.0), clock=clock)
    ticket = auth.submit(email="a@b.com", password="secret1")
    assert ticket.delay == 0.0
    assert auth.is_busy


def test_manual_toggle_cancels_scheduled_switch(studio, clock):
    auth = studio.auth
    _complete(auth, email="ghost@b.com", password="whatever")

    auth.toggle_reset()
    clock.advance(10)

    assert auth.tick() is False
    assert auth.mode is AuthMode.RESET
    assert auth.error == ""


def test_mode_switch_invalidates_outstanding_ticket(studio):
    studio.gate.register("a@b.com")
    ticket = studio.auth.submit(email="a@b.com", password="secret1")

    studio.auth.toggle_register()

    assert studio.auth.complete(ticket) is False
    assert not studio.is_authenticated
    assert not studio.auth.is_busy


def test_abandoned_ticket_cannot_complete(studio):
    studio.gate.register("a@b.com")
    ticket = studio.auth.submit(email="a@b.com", password="secret1")
    assert studio.auth.is_busy

    studio.auth.abandon()

    assert not studio.auth.is_busy
    assert studio.auth.complete(ticket) is False
    assert not studio.is_authenticated
    assert studio.auth.mode is AuthMode.LOGIN


def test_logout_returns_to_login_screen(studio):
    studio.gate.register("a@b.com")
    _complete(studio.auth, email="a@b.com", password="secret1")
    studio.project.edit(title="Neon Corridor")

    studio.logout()

    assert not studio.is_authenticated
    assert studio.auth.mode is AuthMode.LOGIN
    assert studio.project.form.title == ""
    assert studio.gate.is_registered("a@b.com")
