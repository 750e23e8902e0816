"""
Top-up networks and their flat fees.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class TopUpNetwork(BaseModel):
    """Deposit network with a flat fee in USDT."""

    code: str = Field(..., description="Network code")
    fee: float = Field(..., description="Flat fee deducted from the deposit")
    eta: str = Field(..., description="Expected settlement time")


NETWORKS: List[TopUpNetwork] = [
    TopUpNetwork(code="TRC20", fee=1, eta="~3-5 min"),
    TopUpNetwork(code="BEP20", fee=0.8, eta="~1-3 min"),
    TopUpNetwork(code="ERC20", fee=5, eta="~5-10 min"),
    TopUpNetwork(code="SOL", fee=0.2, eta="< 1 min"),
]


def find_network(code: Optional[str]) -> TopUpNetwork:
    """Look up a network by code; unknown codes resolve to the first network."""
    for network in NETWORKS:
        if network.code == code:
            return network
    return NETWORKS[0]
