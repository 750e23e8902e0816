"""
Ledger Service.
Simulated top-ups and withdrawal requests applied to a user record.
No funds move: these only update balance and history.
"""

import math
from typing import Any, Optional

from app.api.services.record_service import RecordService
from app.core.exceptions import InvalidAmountError, PersistenceError
from app.core.logging import get_logger, log_record_operation
from app.domain.identity import derive_user_key
from app.domain.models.network import find_network
from app.domain.models.user import (
    DEFAULT_CURRENCY,
    PendingWithdrawal,
    Transaction,
    TransactionType,
    UserRecord,
)
from app.domain.normalizer import current_millis, iso_timestamp

logger = get_logger(__name__)

WITHDRAWAL_PENDING_STATUS = "Processing"


def _validate_amount(amount: Any) -> float:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise InvalidAmountError(amount)
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidAmountError(amount)
    return amount


class LedgerService:
    """Balance-changing actions layered on the record service."""

    def __init__(self, records: RecordService):
        self.records = records

    async def _commit(self, username: str, record: UserRecord) -> UserRecord:
        if not await self.records.save(username, record):
            raise PersistenceError(username)
        return record

    async def top_up(self, handle: str, amount: Any, network_code: Optional[str] = None) -> UserRecord:
        """
        Credit a deposit minus the network's flat fee.

        Args:
            handle: Client-supplied username
            amount: Gross deposit amount, must be positive
            network_code: Network code; unknown codes use the first network

        Returns:
            UserRecord: The updated record
        """
        amount = _validate_amount(amount)
        username = derive_user_key(handle)
        network = find_network(network_code)
        credited = max(0, amount - network.fee)

        record = await self.records.fetch_or_create(username)
        now_ms = current_millis()
        tx = Transaction(
            id=f"topup-{now_ms}",
            type=TransactionType.TOPUP.value,
            amount=credited,
            ccy=DEFAULT_CURRENCY,
            ts=iso_timestamp(now_ms),
            status=f"Top-up via {network.code}. Fee {network.fee:g} {DEFAULT_CURRENCY}",
            network=network.code,
        )
        updated = record.model_copy(
            update={"balance": record.balance + credited, "txs": [tx, *record.txs]}
        )
        log_record_operation(
            "topup", username, self.records.backend_name, network=network.code, credited=credited
        )
        return await self._commit(username, updated)

    async def request_withdrawal(
        self, handle: str, amount: Any, destination: Optional[str] = None
    ) -> UserRecord:
        """
        Debit the balance and queue a pending withdrawal for external settlement.

        The balance is floored at zero.
        """
        amount = _validate_amount(amount)
        username = derive_user_key(handle)

        record = await self.records.fetch_or_create(username)
        now_ms = current_millis()
        pending = PendingWithdrawal(
            id=f"wd-{now_ms}",
            amount=amount,
            ccy=DEFAULT_CURRENCY,
            ts=iso_timestamp(now_ms),
            status=WITHDRAWAL_PENDING_STATUS,
        )
        updated = record.model_copy(
            update={
                "balance": max(0, record.balance - amount),
                "pending_withdrawals": [pending, *record.pending_withdrawals],
            }
        )
        log_record_operation(
            "withdraw", username, self.records.backend_name, amount=amount, destination=destination
        )
        return await self._commit(username, updated)
