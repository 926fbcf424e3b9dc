"""
Pydantic schemas for admin reporting responses.
"""

from pydantic import BaseModel, Field
from typing import Dict, List
from app.schemas.property import PropertyResponse
from app.schemas.user import UserResponse


class StatisticsOverview(BaseModel):
    """Platform totals."""

    total_users: int = Field(..., ge=0)
    total_properties: int = Field(..., ge=0)
    total_bids: int = Field(..., ge=0)


class StatisticsResponse(BaseModel):
    """Aggregate counts and most recent activity."""

    overview: StatisticsOverview
    users_by_role: Dict[str, int] = Field(..., description="User count per role")
    properties_by_type: Dict[str, int] = Field(..., description="Property count per type")
    properties_by_status: Dict[str, int] = Field(..., description="Property count per status")
    recent_users: List[UserResponse] = Field(..., description="Five most recent users")
    recent_properties: List[PropertyResponse] = Field(..., description="Five most recent properties")
