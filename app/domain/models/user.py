"""
User record models for VCard Backend.
One record per username: profile, balance, virtual card, history and feature flags.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]

DEFAULT_FIRST_NAME = "BYBIT"
DEFAULT_LAST_NAME = "VC User"
DEFAULT_CURRENCY = "USDT"

WELCOME_BONUS_AMOUNT = 5
WELCOME_BONUS_STATUS = "Welcome bonus"


class TransactionType(str, Enum):
    """Transaction kinds produced by the application."""

    TOPUP = "topup"
    WITHDRAW = "withdraw"
    PAY = "pay"
    REWARD = "reward"


class UserProfile(BaseModel):
    """Free-text profile fields, trimmed on normalization."""

    first_name: str = Field(DEFAULT_FIRST_NAME, alias="firstName")
    last_name: str = Field(DEFAULT_LAST_NAME, alias="lastName")
    phone: str = ""
    email: str = ""
    country: str = ""

    model_config = ConfigDict(populate_by_name=True)


class CardData(BaseModel):
    """Virtual card data derived from the username."""

    pan: str = Field(..., description="Formatted PAN, 'XXXX XXXX XXXX NNNN'")
    exp: str = Field(..., description="Expiry, 'MM/YY'")
    cvv: str = Field(..., description="3-digit CVV")
    last4: str = Field(..., description="Last 4 digits of the PAN")


class Transaction(BaseModel):
    """Transaction history entry. Stored newest-first."""

    id: str
    type: str = Field(..., description="topup, withdraw, pay or reward")
    amount: Number
    ccy: str
    ts: str = Field(..., description="ISO-8601 timestamp")
    status: str
    merchant: Optional[str] = None
    network: Optional[str] = None


class PendingWithdrawal(BaseModel):
    """Withdrawal request awaiting external settlement."""

    id: str
    amount: Number
    ccy: str
    ts: str
    status: str


class UserRecord(BaseModel):
    """Canonical user record as stored and served."""

    profile: UserProfile
    balance: Number = 0
    card_active: bool = Field(False, alias="cardActive")
    card: CardData
    txs: List[Transaction] = Field(default_factory=list)
    pending_withdrawals: List[PendingWithdrawal] = Field(
        default_factory=list, alias="pendingWithdrawals"
    )
    created_at: int = Field(..., alias="createdAt", description="Epoch milliseconds")
    gpay: bool = False
    apay: bool = False
    bybit_linked: bool = Field(False, alias="bybitLinked")
    onboarded: bool = False

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """Serialize with camelCase field names, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
