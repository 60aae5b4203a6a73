from pydantic import BaseModel
from typing import List


class DashboardStats(BaseModel):
    total_escorts: int = 0
    total_taxis: int = 0
    verified_escorts: int = 0
    verified_taxis: int = 0
    recent_escorts: int = 0
    recent_taxis: int = 0
    banned_escorts: int = 0
    banned_taxis: int = 0
    recent_window_days: int = 7
    errors: List[str] = []  # tables that could not be read; the other table's counts are still valid


class AdminActionResponse(BaseModel):
    profile_id: str
    user_id: str
    message: str
