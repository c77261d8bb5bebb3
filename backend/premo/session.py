"""Mock session gate and the auth screen's state machine.

Nothing here is a security model: emails live in an in-memory set for the
lifetime of the browser session and passwords are never stored.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Set

from .flow import ProjectFlow
from .tokens import RequestToken, RequestTokens

RESET_EMAIL_REQUIRED = "Please enter your email to reset credentials."
CREDENTIALS_INCOMPLETE = "Credentials incomplete."
NAME_REQUIRED = "Identity confirmation required (Name)."
ALREADY_REGISTERED = "Identity already registered. Proceed to login."
ACCOUNT_NOT_FOUND = "Account not found. Initiating registration protocol..."
INVALID_SECURITY_KEY = "Invalid security key (Password too short)."
RESET_DISPATCHED = "Reset link dispatched to secure channel."

MIN_PASSWORD_LENGTH = 6

_SUBMIT = "auth_submit"
_SWITCH = "auth_switch"


class SessionGate:
    """In-memory identity check: a set of known emails and one active identity."""

    def __init__(self) -> None:
        self._registered: Set[str] = set()
        self.identity: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    def login(self, identity: str) -> None:
        self.identity = identity

    def logout(self) -> None:
        self.identity = None

    def register(self, email: str) -> None:
        self._registered.add(email)

    def is_registered(self, email: str) -> bool:
        return email in self._registered

    @property
    def registered_count(self) -> int:
        return len(self._registered)


class AuthMode(str, Enum):
    LOGIN = "login"
    REGISTER = "register"
    RESET = "reset"


@dataclass(frozen=True)
class AuthDelays:
    """Artificial latencies, in seconds."""

    submit: float = 1.2
    reset_submit: float = 1.5
    mode_switch: float = 1.5
    reset_notice: float = 3.0


@dataclass(frozen=True)
class AuthTicket:
    """An accepted submission waiting out its simulated latency."""

    token: RequestToken
    mode: AuthMode
    name: str
    email: str
    password: str
    delay: float


@dataclass(frozen=True)
class ScheduledSwitch:
    token: RequestToken
    mode: AuthMode
    due_at: float
    clear_error: bool = False
    clear_notice: bool = False


def _local_part(email: str) -> str:
    return email.split("@")[0]


class AuthFlow:
    """Login / register / reset-credentials policy over a SessionGate."""

    def __init__(
        self,
        gate: SessionGate,
        delays: AuthDelays | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.gate = gate
        self.delays = delays or AuthDelays()
        self._clock = clock
        self._tokens = RequestTokens()
        self.mode = AuthMode.LOGIN
        self.error = ""
        self.notice = ""
        self.scheduled: Optional[ScheduledSwitch] = None

    @property
    def is_busy(self) -> bool:
        return self._tokens.pending(_SUBMIT)

    def switch_mode(self, mode: AuthMode) -> None:
        """Manual mode change. Cancels anything outstanding."""
        self._tokens.invalidate()
        self.scheduled = None
        self.mode = mode
        self.error = ""
        self.notice = ""

    def toggle_register(self) -> None:
        self.switch_mode(AuthMode.LOGIN if self.mode is AuthMode.REGISTER else AuthMode.REGISTER)

    def toggle_reset(self) -> None:
        self.switch_mode(AuthMode.LOGIN if self.mode is AuthMode.RESET else AuthMode.RESET)

    def submit(self, name: str = "", email: str = "", password: str = "") -> Optional[AuthTicket]:
        """Validate synchronously. Returns a ticket to complete after `ticket.delay`."""
        self.error = ""
        self.notice = ""
        name, email = name.strip(), email.strip()

        if self.mode is AuthMode.RESET:
            if not email:
                self.error = RESET_EMAIL_REQUIRED
                return None
            delay = self.delays.reset_submit
        else:
            if not email or not password:
                self.error = CREDENTIALS_INCOMPLETE
                return None
            if self.mode is AuthMode.REGISTER and not name:
                self.error = NAME_REQUIRED
                return None
            delay = self.delays.submit

        return AuthTicket(
            token=self._tokens.issue(_SUBMIT),
            mode=self.mode,
            name=name,
            email=email,
            password=password,
            delay=delay,
        )

    def complete(self, ticket: AuthTicket) -> bool:
        """Apply a ticket's outcome. Returns True when a session was opened."""
        if not self._tokens.finish(ticket.token) or ticket.mode is not self.mode:
            return False

        if ticket.mode is AuthMode.RESET:
            self.notice = RESET_DISPATCHED
            self._schedule(AuthMode.LOGIN, self.delays.reset_notice, clear_notice=True)
            return False

        if ticket.mode is AuthMode.REGISTER:
            if self.gate.is_registered(ticket.email):
                self.error = ALREADY_REGISTERED
                self._schedule(AuthMode.LOGIN, self.delays.mode_switch)
                return False
            self.gate.register(ticket.email)
            self._open_session(ticket.name or _local_part(ticket.email))
            return True

        if not self.gate.is_registered(ticket.email):
            self.error = ACCOUNT_NOT_FOUND
            self._schedule(AuthMode.REGISTER, self.delays.mode_switch, clear_error=True)
            return False
        if len(ticket.password) < MIN_PASSWORD_LENGTH:
            self.error = INVALID_SECURITY_KEY
            return False
        self._open_session(_local_part(ticket.email))
        return True

    def tick(self) -> bool:
        """Apply a scheduled switch whose time has come. Returns True if applied."""
        switch = self.scheduled
        if switch is None or self._clock() < switch.due_at:
            return False
        self.scheduled = None
        if not self._tokens.finish(switch.token):
            return False
        self.mode = switch.mode
        if switch.clear_error:
            self.error = ""
        if switch.clear_notice:
            self.notice = ""
        return True

    def abandon(self) -> None:
        """Drop a submission whose run ended before `complete` was called."""
        self._tokens.invalidate(_SUBMIT)

    def seconds_until_switch(self) -> Optional[float]:
        if self.scheduled is None:
            return None
        return max(0.0, self.scheduled.due_at - self._clock())

    def cancel(self) -> None:
        self._tokens.invalidate()
        self.scheduled = None

    def _schedule(self, mode: AuthMode, delay: float, clear_error: bool = False, clear_notice: bool = False) -> None:
        self.scheduled = ScheduledSwitch(
            token=self._tokens.issue(_SWITCH),
            mode=mode,
            due_at=self._clock() + delay,
            clear_error=clear_error,
            clear_notice=clear_notice,
        )

    def _open_session(self, identity: str) -> None:
        self.cancel()
        self.error = ""
        self.notice = ""
        self.gate.login(identity)


class StudioSession:
    """Everything one browser session owns: gate, auth screen, project flow."""

    def __init__(self, delays: AuthDelays | None = None, clock: Callable[[], float] = time.monotonic):
        self.gate = SessionGate()
        self.auth = AuthFlow(self.gate, delays=delays, clock=clock)
        self.project = ProjectFlow()

    @property
    def identity(self) -> Optional[str]:
        return self.gate.identity

    @property
    def is_authenticated(self) -> bool:
        return self.gate.is_authenticated

    def logout(self) -> None:
        self.gate.logout()
        self.project.clear()
        self.auth.switch_mode(AuthMode.LOGIN)
