"""Agent model."""

from typing import Optional
from pydantic import BaseModel, Field


class Agent(BaseModel):
    """Real estate agent."""
    id: str = Field(..., description="Agent ID (ULID text)")
    name: str = Field(..., description="Full name")
    phone: Optional[str] = Field(None, description="Phone number")
    email: Optional[str] = Field(None, description="Email address")
    agency: Optional[str] = Field(None, description="Agency name")
