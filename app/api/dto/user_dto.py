"""
DTOs (Data Transfer Objects) for user record endpoints.
The record itself is served in its stored camelCase shape.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from app.domain.models.network import TopUpNetwork


# Request DTOs
class TopUpRequestDTO(BaseModel):
    """Request DTO for a simulated top-up."""
    amount: float = Field(..., description="Gross deposit amount in USDT")
    network: Optional[str] = Field(None, description="Network code, e.g. TRC20")


class WithdrawRequestDTO(BaseModel):
    """Request DTO for a withdrawal request."""
    amount: float = Field(..., description="Amount to withdraw in USDT")
    destination: Optional[str] = Field(None, description="Destination wallet address")


# Response DTOs
class SaveUserResponseDTO(BaseModel):
    """Response DTO for a confirmed record write."""
    ok: bool = Field(True, description="Write confirmed by the backend")


class ErrorResponseDTO(BaseModel):
    """Response DTO for failed requests."""
    error: str = Field(..., description="Error message")


class NetworkListResponseDTO(BaseModel):
    """Response DTO for the top-up network list."""
    networks: List[TopUpNetwork] = Field(..., description="Available networks")


class HealthCheckResponseDTO(BaseModel):
    """Response DTO for health check endpoint."""
    status: str = Field(..., description="Service status")
    environment: str = Field(..., description="Deployment environment")
    backend: str = Field(..., description="Active storage backend")
