# Supabase tables: escort_profiles, taxi_owner_profiles, profile_pictures
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Rows are created by the create_*_profile RPCs, never by direct insert

"""
Expected Supabase table structure:

escort_profiles:
- id: uuid (primary key)
- user_id: uuid (references auth.users.id)
- first_name, last_name: text (not null)
- email: text (not null) - expected unique across both profile tables
- phone: text (not null)
- date_of_birth: date (not null)
- gender: text (not null)
- location: text (not null)
- languages: text[] (nullable)
- services: text[] (nullable)
- hourly_rate: numeric (nullable)
- availability: text (nullable) - comma separated weekdays
- bio: text (nullable)
- profile_image_url: text (nullable)
- verified: boolean (default: false)
- banned: boolean (default: false)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

taxi_owner_profiles:
- id, user_id, first_name, last_name, email, phone: as above
- business_name: text (nullable)
- license_number: text (not null)
- vehicle_make, vehicle_model, vehicle_color, vehicle_registration: text
- vehicle_year: integer
- insurance_provider, insurance_policy_number: text (nullable)
- service_areas: text[] (nullable)
- hourly_rate, availability, profile_image_url, verified, banned,
  created_at, updated_at: as above

profile_pictures:
- id: uuid (primary key)
- profile_id: uuid (escort_profiles.id or taxi_owner_profiles.id, cascade delete)
- profile_type: text ('escort' | 'taxi')
- image_url: text (public URL in the gallery-pictures bucket)
- display_order: integer - assigned as current gallery length, not enforced unique
- created_at, updated_at: timestamp

RPC functions (SECURITY DEFINER):
- create_escort_profile(p_user_id, p_first_name, ...) -> uuid
- create_taxi_owner_profile(p_user_id, p_first_name, ...) -> uuid
- get_profile_pictures_admin(p_profile_id, p_profile_type) -> setof profile_pictures
- insert_profile_picture(p_profile_id, p_profile_type, p_image_url, p_display_order) -> uuid
- check_email_in_auth(p_email) -> boolean
"""

ESCORT = "escort"
TAXI = "taxi"

PROFILE_TABLES = {
    ESCORT: "escort_profiles",
    TAXI: "taxi_owner_profiles",
}

PROFILE_PICTURES_TABLE = "profile_pictures"
