"""
Project: Restaurant Directory (Foodie Finder)
Date: October 2025

Description:
Payment dialog core. Validates cardholder input, filters field input events,
and drives the simulated payment lifecycle (editing -> submitting ->
confirmed -> reset) with cancellable deferred callbacks.
"""

import logging
import re
import time
import uuid
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

CARD_MIN_DIGITS = 13
CARD_MAX_DIGITS = 19
CVV_MAX_DIGITS = 4
EXPIRY_PIVOT_YEARS = 50
MASK = "••••"

_TWO_DIGITS = re.compile(r"^[0-9]{2}$")
_NON_DIGITS = re.compile(r"[^0-9]")
_WHITESPACE = re.compile(r"\s")


class PaymentError(Exception):
    pass


class PaymentStateError(PaymentError):
    """Raised when an operation is not allowed in the current lifecycle status."""


class Status(str, Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"


class ValidationError(Enum):
    INVALID_CARDHOLDER_NAME = "invalid_cardholder_name"
    INVALID_CARD_NUMBER_FORMAT = "invalid_card_number_format"
    INVALID_CARD_NUMBER_CHECKSUM = "invalid_card_number_checksum"
    INVALID_OR_EXPIRED_DATE = "invalid_or_expired_date"
    INVALID_CVV = "invalid_cvv"

    @property
    def title(self):
        return ERROR_MESSAGES[self][0]

    @property
    def description(self):
        return ERROR_MESSAGES[self][1]

    def to_dict(self):
        return {"error": self.value, "title": self.title, "description": self.description}


ERROR_MESSAGES = {
    ValidationError.INVALID_CARDHOLDER_NAME: ("Invalid Cardholder Name", "Please enter a valid cardholder name."),
    ValidationError.INVALID_CARD_NUMBER_FORMAT: ("Invalid Card Number", "Card number must contain only digits."),
    ValidationError.INVALID_CARD_NUMBER_CHECKSUM: ("Invalid Card Number", "Please enter a valid card number."),
    ValidationError.INVALID_OR_EXPIRED_DATE: ("Invalid Expiry Date", "Card has expired or expiry date is invalid."),
    ValidationError.INVALID_CVV: ("Invalid CVV", "Please enter a valid CVV (3-4 digits)."),
}


# ---------- input filters ----------

def digits_only(value: str) -> str:
    return _NON_DIGITS.sub("", value or "")


def filter_card_number(value: str) -> str:
    return digits_only(value)[:CARD_MAX_DIGITS]


def filter_cvv(value: str) -> str:
    return digits_only(value)[:CVV_MAX_DIGITS]


def format_expiry(value: str) -> str:
    """Mask raw expiry input into ``MM/YY`` shape as the user types."""
    cleaned = digits_only(value)
    if len(cleaned) >= 2:
        return cleaned[:2] + "/" + cleaned[2:4]
    return cleaned


def group_card_number(digits: str) -> str:
    return " ".join(digits[i:i + 4] for i in range(0, len(digits), 4))


def mask_card_number(digits: str) -> str:
    if len(digits) < 4:
        return MASK
    return f"{MASK} {digits[-4:]}"


# ---------- validation rules ----------

def validate_card_number(raw: str) -> bool:
    """Length check (13-19 digits) followed by the Luhn checksum.

    Only structural well-formedness is checked; a passing number may still
    belong to no real card.
    """
    cleaned = _WHITESPACE.sub("", raw or "")
    if len(cleaned) < CARD_MIN_DIGITS or len(cleaned) > CARD_MAX_DIGITS:
        return False
    if not cleaned.isascii() or not cleaned.isdigit():
        return False

    total = 0
    for i, ch in enumerate(reversed(cleaned)):
        digit = int(ch)
        if i % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def expand_year(two_digit: int, today: date) -> int:
    """Map a two-digit year onto a full year.

    The year lands in the current century unless that puts it more than
    EXPIRY_PIVOT_YEARS in the past, in which case it rolls to the next one.
    In 2080 "05" means 2105, while "40" still means 2040.
    """
    year = (today.year // 100) * 100 + two_digit
    if year < today.year - EXPIRY_PIVOT_YEARS:
        year += 100
    return year


def validate_expiry(raw: str, today: Optional[date] = None) -> bool:
    if not raw or len(raw) != 5 or raw[2] != "/":
        return False
    month, year = raw[:2], raw[3:]
    if not _TWO_DIGITS.match(month) or not _TWO_DIGITS.match(year):
        return False

    month_num = int(month)
    if month_num < 1 or month_num > 12:
        return False

    today = today or date.today()
    full_year = expand_year(int(year), today)
    return (full_year, month_num) >= (today.year, today.month)


def first_validation_error(state, today: Optional[date] = None):
    """Return the error for the first rule the state violates, or None."""
    if not state.cardholder_name.strip():
        return ValidationError.INVALID_CARDHOLDER_NAME
    cleaned = digits_only(state.card_number)
    if not cleaned:
        return ValidationError.INVALID_CARD_NUMBER_FORMAT
    if not validate_card_number(state.card_number):
        return ValidationError.INVALID_CARD_NUMBER_CHECKSUM
    if not validate_expiry(state.expiry, today):
        return ValidationError.INVALID_OR_EXPIRED_DATE
    if len(state.cvv) < 3 or len(state.cvv) > CVV_MAX_DIGITS or not state.cvv.isdigit():
        return ValidationError.INVALID_CVV
    return None


# ---------- state ----------

@dataclass(frozen=True)
class PaymentContext:
    restaurant_name: str
    amount: str = "50.00"


@dataclass(frozen=True)
class PaymentFormState:
    cardholder_name: str = ""
    card_number: str = ""
    expiry: str = ""
    cvv: str = ""
    status: Status = Status.EDITING

    @property
    def display_card_number(self) -> str:
        return group_card_number(self.card_number)

    def to_dict(self):
        return {
            "cardholder_name": self.cardholder_name,
            "card_number": self.display_card_number,
            "expiry": self.expiry,
            "cvv_length": len(self.cvv),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class Confirmation:
    restaurant_name: str
    amount: str
    masked_card_number: str
    cardholder_name: str = ""
    card_last4: str = ""

    def to_dict(self):
        return {
            "restaurant_name": self.restaurant_name,
            "amount": self.amount,
            "masked_card_number": self.masked_card_number,
        }


@dataclass(frozen=True)
class SubmitResult:
    error: ValidationError = None

    @property
    def ok(self) -> bool:
        return self.error is None


FIELD_FILTERS = {
    "cardholder_name": lambda v: v or "",
    "card_number": filter_card_number,
    "expiry": format_expiry,
    "cvv": filter_cvv,
}


# ---------- scheduling ----------

class ScheduledCall:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True

    def run(self):
        if self.cancelled or self.fired:
            return
        self.fired = True
        self.callback()


class SocketIOScheduler:
    """Runs deferred calls on Flask-SocketIO background tasks."""

    def __init__(self, socketio):
        self.socketio = socketio

    def call_later(self, delay, callback) -> ScheduledCall:
        call = ScheduledCall(delay, callback)

        def _task():
            self.socketio.sleep(delay)
            call.run()

        self.socketio.start_background_task(_task)
        return call


class ManualScheduler:
    """Collects deferred calls until ``run_pending`` is called. Used by tests and scripts."""

    def __init__(self):
        self.pending = []

    def call_later(self, delay, callback) -> ScheduledCall:
        call = ScheduledCall(delay, callback)
        self.pending.append(call)
        return call

    def run_next(self):
        while self.pending:
            call = self.pending.pop(0)
            if not call.cancelled:
                call.run()
                return True
        return False

    def run_pending(self):
        ran = 0
        while self.pending:
            call = self.pending.pop(0)
            if not call.cancelled:
                call.run()
                ran += 1
        return ran


# ---------- session ----------

class PaymentForm:
    """One payment dialog interaction.

    ``on_confirmed(confirmation)`` fires once per accepted submission and
    ``on_closed()`` fires when the dialog resets after confirmation or is
    dismissed. Dismissal cancels any in-flight timers.
    """

    def __init__(self, context: PaymentContext, scheduler, on_confirmed=None, on_closed=None,
                 processing_delay=1.5, display_delay=3.0, clock=date.today, now=time.monotonic):
        self.id = uuid.uuid4().hex
        self.context = context
        self.scheduler = scheduler
        self.on_confirmed = on_confirmed
        self.on_closed = on_closed
        self.processing_delay = processing_delay
        self.display_delay = display_delay
        self.clock = clock
        self.now = now
        self.state = PaymentFormState()
        self.closed = False
        self.last_touched = now()
        self._timer = None

    @property
    def status(self) -> Status:
        return self.state.status

    def touch(self):
        self.last_touched = self.now()

    def idle_for(self):
        return self.now() - self.last_touched

    def update_field(self, name, raw):
        if self.closed:
            raise PaymentStateError("payment dialog is closed")
        if self.status != Status.EDITING:
            raise PaymentStateError(f"cannot edit while {self.status.value}")
        if name not in FIELD_FILTERS:
            raise KeyError(name)
        raw = "" if raw is None else str(raw)
        self.touch()
        self.state = replace(self.state, **{name: FIELD_FILTERS[name](raw)})
        return self.state

    def update(self, **fields):
        unknown = sorted(set(fields) - set(FIELD_FILTERS))
        if unknown:
            raise KeyError(unknown[0])
        for name, raw in fields.items():
            self.update_field(name, raw)
        return self.state

    def submit(self) -> SubmitResult:
        if self.closed:
            raise PaymentStateError("payment dialog is closed")
        if self.status != Status.EDITING:
            raise PaymentStateError(f"cannot submit while {self.status.value}")

        self.touch()
        error = first_validation_error(self.state, self.clock())
        if error is not None:
            logger.debug("payment %s rejected: %s", self.id, error.value)
            return SubmitResult(error)

        self.state = replace(self.state, status=Status.SUBMITTING)
        logger.info("payment %s accepted for %s", self.id, self.context.restaurant_name)
        self._timer = self.scheduler.call_later(self.processing_delay, self._confirm)
        return SubmitResult()

    def dismiss(self):
        """Close the dialog. Safe to call any number of times."""
        if self.closed:
            return
        self._cancel_timer()
        self._close()

    def _confirm(self):
        if self.closed or self.status != Status.SUBMITTING:
            return
        self.state = replace(self.state, status=Status.CONFIRMED)
        confirmation = Confirmation(
            restaurant_name=self.context.restaurant_name,
            amount=self.context.amount,
            masked_card_number=mask_card_number(self.state.card_number),
            cardholder_name=self.state.cardholder_name.strip(),
            card_last4=self.state.card_number[-4:],
        )
        logger.info("payment %s confirmed (%s)", self.id, confirmation.masked_card_number)
        # listeners see the confirmed state before the reset can be scheduled
        if self.on_confirmed:
            self.on_confirmed(confirmation)
        if not self.closed:
            self._timer = self.scheduler.call_later(self.display_delay, self._reset)

    def _reset(self):
        if self.closed or self.status != Status.CONFIRMED:
            return
        self._timer = None
        self._close()

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _close(self):
        self.state = PaymentFormState()
        self.closed = True
        logger.info("payment %s closed", self.id)
        if self.on_closed:
            self.on_closed()

    def to_dict(self):
        data = self.state.to_dict()
        data.update({
            "session_id": self.id,
            "restaurant_name": self.context.restaurant_name,
            "amount": self.context.amount,
            "closed": self.closed,
        })
        return data


class PaymentSessionRegistry:
    """Live payment dialogs for one application, keyed by session id.

    Dialogs left in ``editing`` longer than ``idle_timeout`` seconds are
    dismissed the next time the registry is used. Dialogs that were already
    submitted finish on their own timers.
    """

    def __init__(self, scheduler, processing_delay=1.5, display_delay=3.0, clock=date.today,
                 idle_timeout=None, now=time.monotonic):
        self.scheduler = scheduler
        self.processing_delay = processing_delay
        self.display_delay = display_delay
        self.clock = clock
        self.idle_timeout = idle_timeout
        self.now = now
        self._sessions = {}

    def open(self, context: PaymentContext, on_confirmed=None, on_closed=None) -> PaymentForm:
        """Open a dialog session.

        Callbacks receive the form first: ``on_confirmed(form, confirmation)``
        and ``on_closed(form)``.
        """
        self.sweep()
        form = PaymentForm(
            context,
            self.scheduler,
            processing_delay=self.processing_delay,
            display_delay=self.display_delay,
            clock=self.clock,
            now=self.now,
        )

        def _confirmed(confirmation):
            if on_confirmed:
                on_confirmed(form, confirmation)

        def _closed():
            self._sessions.pop(form.id, None)
            if on_closed:
                on_closed(form)

        form.on_confirmed = _confirmed
        form.on_closed = _closed
        self._sessions[form.id] = form
        logger.info("payment %s opened for %s", form.id, context.restaurant_name)
        return form

    def get(self, session_id):
        self.sweep()
        form = self._sessions.get(session_id)
        if form is not None:
            form.touch()
        return form

    def close(self, session_id):
        form = self._sessions.get(session_id)
        if form is not None:
            form.dismiss()
        return form

    def sweep(self):
        """Dismiss idle editing dialogs; returns how many were closed."""
        if not self.idle_timeout:
            return 0
        expired = [f for f in self._sessions.values()
                   if f.status == Status.EDITING and f.idle_for() >= self.idle_timeout]
        for form in expired:
            logger.info("payment %s idle for %.0fs, dismissing", form.id, form.idle_for())
            form.dismiss()
        return len(expired)

    def __len__(self):
        return len(self._sessions)
