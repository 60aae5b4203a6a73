from fastapi import APIRouter
from snyklynk.config.options_config import get_options
from snyklynk.modules.registration.validation import ESCORT_STEPS, TAXI_STEPS

router = APIRouter(tags=["catalog"])


@router.get("/options")
async def list_options():
    """Pick-list values for the registration wizards and profile editors"""
    return get_options()


@router.get("/prereg")
async def preregistration():
    """The two ways to join, with the wizard each one starts"""
    return {
        "profile_types": [
            {
                "type": "escort",
                "title": "Escort",
                "register_path": "/register/escort",
                "steps": ESCORT_STEPS,
            },
            {
                "type": "taxi",
                "title": "Taxi Driver",
                "register_path": "/register/taxi",
                "steps": TAXI_STEPS,
            },
        ]
    }
