# tests/test_pictures.py

from conftest import FakeAPIError

PNG = b"\x89PNG\r\n\x1a\n" + b"0" * 64
GALLERY_URL = "https://example.supabase.co/storage/v1/object/public/gallery-pictures/"


def _png(name="photo.png", content=PNG, content_type="image/png"):
    return ("files", (name, content, content_type))


def _add_pictures(fake, profile_id, count):
    for index in range(count):
        fake.add_row(
            "profile_pictures",
            profile_id=profile_id,
            profile_type="escort",
            image_url=f"{GALLERY_URL}u/{index}.png",
            display_order=index,
        )


def test_oversized_file_is_rejected_before_any_remote_call(client, fake_supabase, escort_user):
    big = b"0" * (5 * 1024 * 1024 + 1)
    response = client.post(
        "/api/v1/profile/escort/gallery", files=[_png(content=big)], headers=escort_user.headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "File size must be less than 5MB"
    assert fake_supabase.calls == []


def test_non_image_is_rejected_before_any_remote_call(client, fake_supabase, escort_user):
    response = client.post(
        "/api/v1/profile/escort/gallery",
        files=[_png(name="notes.pdf", content_type="application/pdf")],
        headers=escort_user.headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Please select an image file"
    assert fake_supabase.calls == []


def test_upload_goes_through_rpc(client, fake_supabase, escort_user):
    fake_supabase.rpc_handlers["insert_profile_picture"] = lambda params: "picture-1"
    _add_pictures(fake_supabase, escort_user.profile["id"], 2)

    response = client.post("/api/v1/profile/escort/gallery", files=[_png()], headers=escort_user.headers)
    assert response.status_code == 201
    body = response.json()
    assert body["count"] == 3
    assert body["max_images"] == 5
    new = body["pictures"][-1]
    assert new["id"] == "picture-1"
    assert new["display_order"] == 2
    assert new["image_url"].startswith(GALLERY_URL + escort_user.user.id + "/")

    name, params = fake_supabase.rpc_calls[-1]
    assert name == "insert_profile_picture"
    assert params["p_profile_id"] == escort_user.profile["id"]
    assert params["p_profile_type"] == "escort"
    assert params["p_display_order"] == 2


def test_upload_falls_back_to_direct_insert(client, fake_supabase, escort_user):
    def missing(params):
        raise FakeAPIError("function insert_profile_picture does not exist", "42883")
    fake_supabase.rpc_handlers["insert_profile_picture"] = missing

    response = client.post("/api/v1/profile/escort/gallery", files=[_png()], headers=escort_user.headers)
    assert response.status_code == 201
    rows = fake_supabase.tables["profile_pictures"]
    assert len(rows) == 1
    assert rows[0]["profile_id"] == escort_user.profile["id"]
    assert rows[0]["display_order"] == 0


def test_failed_row_insert_removes_uploaded_object(client, fake_supabase, escort_user):
    fake_supabase.table_errors[("profile_pictures", "insert")] = FakeAPIError("disk full")

    response = client.post("/api/v1/profile/escort/gallery", files=[_png()], headers=escort_user.headers)
    assert response.status_code == 500
    assert fake_supabase.objects.get("gallery-pictures") == {}
    assert len(fake_supabase.removed["gallery-pictures"]) == 1


def test_row_level_security_error_asks_to_sign_in_again(client, fake_supabase, escort_user):
    fake_supabase.table_errors[("profile_pictures", "insert")] = FakeAPIError(
        "new row violates row-level security policy for table \"profile_pictures\"", "42501"
    )
    response = client.post("/api/v1/profile/escort/gallery", files=[_png()], headers=escort_user.headers)
    assert response.status_code == 403
    assert "sign in again" in response.json()["detail"]


def test_gallery_cap(client, fake_supabase, escort_user):
    _add_pictures(fake_supabase, escort_user.profile["id"], 4)
    response = client.post(
        "/api/v1/profile/escort/gallery", files=[_png("a.png"), _png("b.png")], headers=escort_user.headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "You can only upload up to 5 images. You currently have 4 image(s)."
    assert "gallery-pictures" not in fake_supabase.objects


def test_list_gallery_in_display_order(client, fake_supabase, escort_user):
    fake_supabase.add_row("profile_pictures", id="late", profile_id=escort_user.profile["id"],
                          profile_type="escort", image_url="https://img/b.png", display_order=1)
    fake_supabase.add_row("profile_pictures", id="early", profile_id=escort_user.profile["id"],
                          profile_type="escort", image_url="https://img/a.png", display_order=0)
    response = client.get("/api/v1/profile/escort/gallery", headers=escort_user.headers)
    assert [p["id"] for p in response.json()] == ["early", "late"]


def test_delete_gallery_image(client, fake_supabase, escort_user):
    picture = fake_supabase.add_row(
        "profile_pictures", profile_id=escort_user.profile["id"], profile_type="escort",
        image_url=f"{GALLERY_URL}{escort_user.user.id}/x.png?t=1", display_order=0,
    )
    response = client.delete(f"/api/v1/profile/escort/gallery/{picture['id']}", headers=escort_user.headers)
    assert response.status_code == 204
    assert fake_supabase.tables["profile_pictures"] == []
    assert fake_supabase.removed["gallery-pictures"] == [f"{escort_user.user.id}/x.png"]


def test_cannot_delete_someone_elses_image(client, fake_supabase, escort_user):
    picture = fake_supabase.add_row(
        "profile_pictures", profile_id="another-profile", profile_type="escort",
        image_url=f"{GALLERY_URL}other/x.png", display_order=0,
    )
    response = client.delete(f"/api/v1/profile/escort/gallery/{picture['id']}", headers=escort_user.headers)
    assert response.status_code == 404
    assert len(fake_supabase.tables["profile_pictures"]) == 1


def test_profile_image_retries_with_suffix_when_path_exists(client, fake_supabase, escort_user):
    fake_supabase.upload_errors["profile-pictures"] = [Exception("The resource already exists")]
    response = client.post(
        "/api/v1/profile/escort/image",
        files={"file": ("me.jpg", PNG, "image/jpeg")},
        headers=escort_user.headers,
    )
    assert response.status_code == 200
    url = response.json()["profile_image_url"]
    assert "/profile-pictures/" + escort_user.user.id + "/" in url
    assert escort_user.profile["profile_image_url"] == url
    uploads = [c for c in fake_supabase.calls if c == ("storage", "profile-pictures", "upload")]
    assert len(uploads) == 2


def test_remove_profile_image(client, fake_supabase, escort_user):
    escort_user.profile["profile_image_url"] = (
        f"https://example.supabase.co/storage/v1/object/public/profile-pictures/{escort_user.user.id}/me.jpg"
    )
    response = client.delete("/api/v1/profile/escort/image", headers=escort_user.headers)
    assert response.status_code == 200
    assert response.json()["profile_image_url"] is None
    assert escort_user.profile["profile_image_url"] is None
    assert fake_supabase.removed["profile-pictures"] == [f"{escort_user.user.id}/me.jpg"]


def test_gallery_needs_a_profile(client, fake_supabase):
    user = fake_supabase.auth.add_user("nobody@example.com")
    token = fake_supabase.auth.issue_token(user)
    response = client.get("/api/v1/profile/taxi/gallery", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 404
