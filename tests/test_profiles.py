# tests/test_profiles.py

from conftest import make_taxi, auth_headers


def test_own_escort_profile_with_gallery(client, fake_supabase, escort_user):
    fake_supabase.add_row("profile_pictures", profile_id=escort_user.profile["id"], profile_type="escort",
                          image_url="https://img/1.png", display_order=0)
    response = client.get("/api/v1/profile/escort", headers=escort_user.headers)
    assert response.status_code == 200
    body = response.json()
    assert body["first_name"] == "Thandi"
    assert body["languages"] == ["English", "Xhosa"]
    assert [p["image_url"] for p in body["gallery"]] == ["https://img/1.png"]


def test_missing_profile_is_404(client, escort_user):
    response = client.get("/api/v1/profile/taxi", headers=escort_user.headers)
    assert response.status_code == 404


def test_own_profile_needs_a_token(client):
    response = client.get("/api/v1/profile/escort")
    assert response.status_code in (401, 403)


def test_update_only_touches_sent_fields(client, escort_user):
    response = client.patch(
        "/api/v1/profile/escort",
        json={"location": "  Johannesburg ", "services": ["Travel Companion"]},
        headers=escort_user.headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["location"] == "Johannesburg"
    assert body["services"] == ["Travel Companion"]
    assert body["first_name"] == "Thandi"
    assert escort_user.profile["updated_at"] is not None


def test_update_rejects_blank_required_field(client, escort_user):
    response = client.patch("/api/v1/profile/escort", json={"first_name": "  "}, headers=escort_user.headers)
    assert response.status_code == 422
    assert escort_user.profile["first_name"] == "Thandi"


def test_update_rejects_short_phone(client, escort_user):
    response = client.patch("/api/v1/profile/escort", json={"phone": "12345"}, headers=escort_user.headers)
    assert response.status_code == 422


def test_blank_number_is_stored_as_null(client, escort_user):
    escort_user.profile["hourly_rate"] = 800
    response = client.patch(
        "/api/v1/profile/escort", json={"hourly_rate": "", "bio": ""}, headers=escort_user.headers
    )
    assert response.status_code == 200
    assert response.json()["hourly_rate"] is None
    assert escort_user.profile["hourly_rate"] is None
    assert escort_user.profile["bio"] is None


def test_taxi_owner_updates_vehicle(client, fake_supabase):
    user = fake_supabase.auth.add_user("sipho@example.com")
    taxi = make_taxi(fake_supabase, user_id=user.id)
    headers = auth_headers(fake_supabase.auth.issue_token(user))

    response = client.patch(
        "/api/v1/profile/taxi",
        json={"vehicle_year": 2021, "business_name": "", "service_areas": None},
        headers=headers,
    )
    assert response.status_code == 200
    assert taxi["vehicle_year"] == 2021
    assert taxi["business_name"] is None
    assert taxi["service_areas"] == []


def test_taxi_owner_rejects_impossible_vehicle_year(client, fake_supabase):
    user = fake_supabase.auth.add_user("sipho@example.com")
    make_taxi(fake_supabase, user_id=user.id)
    headers = auth_headers(fake_supabase.auth.issue_token(user))
    response = client.patch("/api/v1/profile/taxi", json={"vehicle_year": 1850}, headers=headers)
    assert response.status_code == 422
