"""
User record normalization.

Maps arbitrary, possibly partial or hostile JSON input onto a complete
``UserRecord``. Every field is checked on its own: a field that is present
and of the expected type wins, anything else falls back to the baseline.
Normalization never raises for JSON-shaped input.
"""

import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.domain.card import synthesize_card
from app.domain.models.user import (
    DEFAULT_CURRENCY,
    WELCOME_BONUS_AMOUNT,
    WELCOME_BONUS_STATUS,
    CardData,
    PendingWithdrawal,
    Transaction,
    TransactionType,
    UserProfile,
    UserRecord,
)

PROFILE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "phone": "phone",
    "email": "email",
    "country": "country",
}
CARD_FIELDS = ("pan", "exp", "cvv", "last4")
FLAG_FIELDS = {
    "cardActive": "card_active",
    "gpay": "gpay",
    "apay": "apay",
    "bybitLinked": "bybit_linked",
    "onboarded": "onboarded",
}


@dataclass(frozen=True)
class FieldResult:
    """Outcome of checking one input field: a usable value, or a fallback marker."""

    valid: bool
    value: Any = None

    def or_else(self, fallback: Any) -> Any:
        return self.value if self.valid else fallback


FALLBACK = FieldResult(valid=False)


def check_string(value: Any, strip: bool = False) -> FieldResult:
    if not isinstance(value, str):
        return FALLBACK
    return FieldResult(True, value.strip() if strip else value)


def check_number(value: Any) -> FieldResult:
    # bool is an int subclass; JSON true/false are not numbers
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return FALLBACK
    if isinstance(value, float) and not math.isfinite(value):
        return FALLBACK
    return FieldResult(True, value)


def check_bool(value: Any) -> FieldResult:
    return FieldResult(True, value) if isinstance(value, bool) else FALLBACK


def current_millis() -> int:
    return int(time.time() * 1000)


def iso_timestamp(millis: int) -> str:
    """Render epoch milliseconds as ``2026-01-01T00:00:00.000Z``."""
    moment = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def welcome_transaction(now_ms: int) -> Transaction:
    return Transaction(
        id=f"welcome-{now_ms}",
        type=TransactionType.REWARD.value,
        amount=WELCOME_BONUS_AMOUNT,
        ccy=DEFAULT_CURRENCY,
        ts=iso_timestamp(now_ms),
        status=WELCOME_BONUS_STATUS,
    )


def default_record(username: str, now_ms: Optional[int] = None) -> UserRecord:
    """Freshly seeded record for a username with no stored data."""
    if now_ms is None:
        now_ms = current_millis()
    return UserRecord(
        profile=UserProfile(),
        balance=0,
        card_active=False,
        card=synthesize_card(username),
        txs=[welcome_transaction(now_ms)],
        pending_withdrawals=[],
        created_at=now_ms,
        gpay=False,
        apay=False,
        bybit_linked=False,
        onboarded=False,
    )


def parse_transaction(value: Any) -> Optional[Transaction]:
    """Return a Transaction when ``value`` has the full required shape, else None."""
    if not isinstance(value, dict):
        return None
    checks = {
        "id": check_string(value.get("id")),
        "type": check_string(value.get("type")),
        "amount": check_number(value.get("amount")),
        "ccy": check_string(value.get("ccy")),
        "ts": check_string(value.get("ts")),
        "status": check_string(value.get("status")),
    }
    if not all(result.valid for result in checks.values()):
        return None
    fields = {name: result.value for name, result in checks.items()}
    for optional in ("merchant", "network"):
        result = check_string(value.get(optional))
        if result.valid:
            fields[optional] = result.value
    return Transaction(**fields)


def parse_pending_withdrawal(value: Any) -> Optional[PendingWithdrawal]:
    if not isinstance(value, dict):
        return None
    checks = {
        "id": check_string(value.get("id")),
        "amount": check_number(value.get("amount")),
        "ccy": check_string(value.get("ccy")),
        "ts": check_string(value.get("ts")),
        "status": check_string(value.get("status")),
    }
    if not all(result.valid for result in checks.values()):
        return None
    return PendingWithdrawal(**{name: result.value for name, result in checks.items()})


def normalize_profile(value: Any, baseline: UserProfile) -> UserProfile:
    source = value if isinstance(value, dict) else {}
    fields = {
        attr: check_string(source.get(wire), strip=True).or_else(getattr(baseline, attr))
        for wire, attr in PROFILE_FIELDS.items()
    }
    return UserProfile(**fields)


def normalize_card(value: Any, username: str) -> CardData:
    synthesized = synthesize_card(username)
    if not isinstance(value, dict):
        return synthesized
    # Caller-supplied strings are accepted verbatim; only the type is checked.
    return CardData(
        **{
            name: check_string(value.get(name)).or_else(getattr(synthesized, name))
            for name in CARD_FIELDS
        }
    )


def _filter_list(value: Any, parse, fallback: List[Any]) -> List[Any]:
    if not isinstance(value, list):
        return [item.model_copy() for item in fallback]
    parsed = (parse(item) for item in value)
    return [item for item in parsed if item is not None]


def normalize_record(
    username: str,
    data: Any = None,
    baseline: Optional[UserRecord] = None,
    now_ms: Optional[int] = None,
) -> UserRecord:
    """
    Normalize ``data`` into a complete record for ``username``.

    Args:
        username: Record key; drives the synthesized card.
        data: Untrusted input. ``None`` yields the baseline itself.
        baseline: Values used for absent or mistyped fields. Defaults to a
            freshly seeded record built with ``now_ms``.
        now_ms: Creation time for the seeded baseline, captured once per call.

    Returns:
        UserRecord: Always fully populated.
    """
    base = baseline if baseline is not None else default_record(username, now_ms)
    if data is None:
        return base.model_copy(deep=True)

    source: Dict[str, Any] = data if isinstance(data, dict) else {}

    created_at = check_number(source.get("createdAt"))
    flags = {
        attr: check_bool(source.get(wire)).or_else(getattr(base, attr))
        for wire, attr in FLAG_FIELDS.items()
    }

    return UserRecord(
        profile=normalize_profile(source.get("profile"), base.profile),
        balance=check_number(source.get("balance")).or_else(base.balance),
        card=normalize_card(source.get("card"), username),
        txs=_filter_list(source.get("txs"), parse_transaction, base.txs),
        pending_withdrawals=_filter_list(
            source.get("pendingWithdrawals"), parse_pending_withdrawal, base.pending_withdrawals
        ),
        created_at=int(created_at.value) if created_at.valid else base.created_at,
        **flags,
    )
