from pydantic import BaseModel
from typing import Optional, List


class FieldError(BaseModel):
    field: str
    message: str


class EscortRegistrationForm(BaseModel):
    """Escort wizard data. Everything is optional so a single step can be checked on its own."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    password: str = ""
    confirm_password: str = ""
    languages: List[str] = []
    services: List[str] = []
    hourly_rate: Optional[float] = None
    availability_days: List[str] = []
    bio: Optional[str] = None


class TaxiRegistrationForm(BaseModel):
    """Taxi owner wizard data. Images are uploaded beforehand and passed as public URLs."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    business_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: str = ""
    confirm_password: str = ""
    license_number: Optional[str] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    vehicle_year: Optional[int] = None
    vehicle_color: Optional[str] = None
    vehicle_registration: Optional[str] = None
    insurance_provider: Optional[str] = None
    insurance_policy_number: Optional[str] = None
    service_areas: List[str] = []
    hourly_rate: Optional[float] = None
    availability_days: List[str] = []
    profile_image_url: Optional[str] = None
    gallery_image_urls: List[str] = []


class StepValidationResponse(BaseModel):
    step: int
    step_title: str
    can_advance: bool
    next_step: Optional[int] = None
    errors: List[FieldError] = []


class EmailCheckRequest(BaseModel):
    email: str


class EmailCheckResponse(BaseModel):
    is_unique: bool
    message: Optional[str] = None


class RegistrationResponse(BaseModel):
    user_id: str
    profile_id: Optional[str] = None
    redirect_to: str  # /profile/{type} when signed in, /signin when the email must be confirmed first
    message: str
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
