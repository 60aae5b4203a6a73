"""
Pick-list options shared by the registration wizards and profile editors.
Served to the front-ends by the catalog module.
"""
from datetime import date
from typing import List

# South African official languages first, then other common languages
LANGUAGES = [
    "English",
    "Afrikaans",
    "Zulu",
    "Xhosa",
    "Northern Sotho",
    "Tswana",
    "Southern Sotho",
    "Tsonga",
    "Swati",
    "Venda",
    "Ndebele",
    "Spanish",
    "French",
    "German",
    "Italian",
    "Portuguese",
    "Chinese (Mandarin)",
    "Japanese",
    "Korean",
    "Arabic",
    "Hindi",
    "Russian",
    "Dutch",
    "Swedish",
    "Norwegian",
    "Danish",
    "Finnish",
    "Polish",
    "Turkish",
    "Greek",
    "Hebrew",
    "Thai",
    "Vietnamese",
    "Other",
]

ESCORT_SERVICES = [
    "Social Events",
    "Business Meetings",
    "Dinner Companionship",
    "Travel Companionship",
    "Event Companion",
    "Corporate Functions",
    "Gala Events",
    "Wedding Companion",
    "Photoshoot Modeling",
    "Fashion Shows",
    "Other",
]

AVAILABILITY_OPTIONS = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

GENDERS = ["Female", "Male", "Non-binary", "Other"]

VEHICLE_MAKES = [
    "Toyota",
    "Honda",
    "Ford",
    "Chevrolet",
    "Nissan",
    "BMW",
    "Mercedes-Benz",
    "Audi",
    "Volkswagen",
    "Hyundai",
    "Kia",
    "Mazda",
    "Subaru",
    "Lexus",
    "Acura",
    "Infiniti",
    "Cadillac",
    "Lincoln",
    "Jeep",
    "Ram",
    "GMC",
    "Dodge",
    "Chrysler",
    "Buick",
    "Volvo",
    "Tesla",
    "Other",
]

SOUTH_AFRICAN_CITIES = [
    # Major metropolitan areas
    "Johannesburg",
    "Cape Town",
    "Durban",
    "Pretoria",
    "Port Elizabeth",
    "East London",
    "Bloemfontein",
    "Nelspruit",
    "Polokwane",
    "Kimberley",
    # Gauteng
    "Alexandra",
    "Benoni",
    "Boksburg",
    "Brakpan",
    "Carletonville",
    "Diepsloot",
    "Germiston",
    "Katlehong",
    "Kempton Park",
    "Krugersdorp",
    "Midrand",
    "Randburg",
    "Roodepoort",
    "Sandton",
    "Soweto",
    "Tembisa",
    "Vereeniging",
    "Westonaria",
    # Western Cape
    "Caledon",
    "George",
    "Gugulethu",
    "Hermanus",
    "Khayelitsha",
    "Knysna",
    "Malmesbury",
    "Mitchells Plain",
    "Mossel Bay",
    "Oudtshoorn",
    "Paarl",
    "Saldanha",
    "Stellenbosch",
    "Vredenburg",
    "Worcester",
    # KwaZulu-Natal
    "Amanzimtoti",
    "Ballito",
    "Inanda",
    "Ladysmith",
    "Margate",
    "Newcastle",
    "Pietermaritzburg",
    "Pinetown",
    "Port Shepstone",
    "Richards Bay",
    "Scottburgh",
    "Umhlanga",
    "Umlazi",
    # Eastern Cape
    "Grahamstown",
    "Jeffreys Bay",
    "King William's Town",
    "Mthatha",
    "Port Alfred",
    "Queenstown",
    "Uitenhage",
    # Free State
    "Bethlehem",
    "Kroonstad",
    "Sasolburg",
    "Virginia",
    "Welkom",
    # Mpumalanga
    "Ermelo",
    "Middelburg",
    "Secunda",
    "Standerton",
    "Witbank",
    # Limpopo
    "Louis Trichardt",
    "Musina",
    "Phalaborwa",
    "Thohoyandou",
    "Tzaneen",
    # North West
    "Brits",
    "Klerksdorp",
    "Mahikeng",
    "Potchefstroom",
    "Rustenburg",
    # Northern Cape
    "De Aar",
    "Kuruman",
    "Springbok",
    "Upington",
    # Other
    "Sun City",
]

# Taxi owners pick service areas from the same city list
SERVICE_AREAS = SOUTH_AFRICAN_CITIES


def get_vehicle_years(count: int = 30) -> List[str]:
    """Most recent `count` model years, newest first."""
    current_year = date.today().year
    return [str(current_year - i) for i in range(count)]


def get_options() -> dict:
    return {
        "languages": LANGUAGES,
        "escort_services": ESCORT_SERVICES,
        "availability": AVAILABILITY_OPTIONS,
        "genders": GENDERS,
        "vehicle_makes": VEHICLE_MAKES,
        "vehicle_years": get_vehicle_years(),
        "cities": SOUTH_AFRICAN_CITIES,
        "service_areas": SERVICE_AREAS,
    }
