import pytest

from yourstylist.profiles import to_imperial, to_metric


@pytest.mark.parametrize(
    "feet, inches, lbs, expected",
    [
        ("5", "7", "137", {"height": "170.18", "weight": "62.14"}),
        ("6", "", "200", {"height": "182.88", "weight": "90.72"}),
        ("", "", "", {"height": "", "weight": ""}),
        (None, None, None, {"height": "", "weight": ""}),
        ("5.9", "7in", "137.8", {"height": "170.18", "weight": "62.14"}),
        ("tall", "", "inf", {"height": "", "weight": ""}),
        ("", "", "1e400", {"height": "", "weight": "0.45"}),
        ("9" * 400, "", "9" * 400, {"height": "", "weight": ""}),
    ],
)
def test_to_metric(feet, inches, lbs, expected):
    assert to_metric(feet, inches, lbs) == expected


def test_to_imperial_rounds_inches_and_pounds():
    assert to_imperial("170", "62") == {
        "height_ft": "5",
        "height_in": "7",
        "weight_lbs": "137",
    }


def test_to_imperial_blanks_missing_values():
    assert to_imperial("", None) == {"height_ft": "", "height_in": "", "weight_lbs": ""}
    assert to_imperial("abc", "0") == {"height_ft": "", "height_in": "", "weight_lbs": ""}


@pytest.mark.parametrize("value", ["inf", "-inf", "nan", "1e400"])
def test_to_imperial_blanks_non_finite_values(value):
    assert to_imperial(value, value) == {"height_ft": "", "height_in": "", "weight_lbs": ""}


def test_onboarding_ignores_overflowing_imperial_values(api, register):
    headers = register()

    response = api.post(
        "/profile/onboarding",
        json={
            "name": "Ada",
            "age": "29",
            "gender": "female",
            "units": "imperial",
            "height_ft": "9" * 400,
            "weight_lbs": "inf",
        },
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["profile"]["height"] == ""
    assert response.json()["data"]["profile"]["weight"] == ""


def test_onboarding_prefill_survives_non_finite_measurements(api, register):
    headers = register()
    api.put("/profile", json={"height": "inf", "weight": "inf"}, headers=headers)

    response = api.get("/profile/onboarding", headers=headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["height_cm"] == "inf"
    assert data["height_ft"] == ""
    assert data["weight_lbs"] == ""


def test_onboarding_reads_the_leading_integer_of_age(api, register):
    headers = register()

    response = api.post(
        "/profile/onboarding",
        json={"name": "Ada", "age": "29.5", "gender": "female"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["profile"]["age"] == "29"


def test_profile_is_missing_until_first_write(api, register):
    headers = register()

    response = api.get("/profile", headers=headers)

    assert response.status_code == 404
    assert response.json()["detail"]["redirect"] == "/onboarding"


def test_profile_writes_merge_into_the_stored_document(api, register, image_data_uri):
    headers = register()

    first = api.put("/profile", json={"name": "Ada", "faceScan": image_data_uri}, headers=headers)
    second = api.put("/profile", json={"age": "29"}, headers=headers)
    stored = api.get("/profile", headers=headers).json()["data"]

    assert first.json()["data"]["name"] == "Ada"
    assert second.json()["data"] == stored
    assert stored["name"] == "Ada"
    assert stored["age"] == "29"
    assert stored["faceScan"] == image_data_uri
    assert stored["bodyScan"] is None
    assert stored["height"] == ""
    assert stored["closetItems"] == []


def test_profile_scan_can_be_cleared(api, register, image_data_uri):
    headers = register()
    api.put("/profile", json={"bodyScan": image_data_uri}, headers=headers)

    response = api.put("/profile", json={"bodyScan": None}, headers=headers)

    assert response.json()["data"]["bodyScan"] is None


def test_profile_rejects_malformed_scans(api, register):
    headers = register()

    response = api.put("/profile", json={"faceScan": "not-a-data-uri"}, headers=headers)

    assert response.status_code == 422


def test_onboarding_converts_imperial_measurements(api, register):
    headers = register()

    response = api.post(
        "/profile/onboarding",
        json={
            "name": "Ada",
            "age": "29",
            "gender": "female",
            "units": "imperial",
            "height_ft": "5",
            "height_in": "7",
            "weight_lbs": "137",
        },
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["redirect"] == "/dashboard"
    assert data["profile"]["height"] == "170.18"
    assert data["profile"]["weight"] == "62.14"


def test_onboarding_keeps_existing_scans(api, register, image_data_uri):
    headers = register()
    api.put("/profile", json={"faceScan": image_data_uri}, headers=headers)

    response = api.post(
        "/profile/onboarding",
        json={"name": "Ada", "age": "29", "gender": "female", "height_cm": "170"},
        headers=headers,
    )

    assert response.json()["data"]["profile"]["faceScan"] == image_data_uri


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"name": "A"}, "Name must be at least 2 characters."),
        ({"age": "-3"}, "Invalid age."),
        ({"age": "old"}, "Invalid age."),
        ({"gender": "  "}, "Gender is required."),
    ],
)
def test_onboarding_validation(api, register, overrides, message):
    headers = register()
    form = {"name": "Ada", "age": "29", "gender": "female"}
    form.update(overrides)

    response = api.post("/profile/onboarding", json=form, headers=headers)

    assert response.status_code == 422
    assert message in response.text


def test_onboarding_form_is_prefilled(api, onboarded):
    response = api.get("/profile/onboarding", headers=onboarded)

    data = response.json()["data"]
    assert data["name"] == "Ada"
    assert data["height_cm"] == "170"
    assert data["height_ft"] == "5"
    assert data["height_in"] == "7"
    assert data["weight_lbs"] == "137"


def test_closet_add_list_and_delete(api, register, fake_openai, png_bytes):
    headers = register()
    fake_openai.responses.outputs["ItemDescription"] = {"description": "Blue denim jacket"}

    added = api.post(
        "/profile/closet",
        files={"file": ("jacket.png", png_bytes, "image/png")},
        headers=headers,
    )
    item = added.json()["data"]
    listed = api.get("/profile/closet", headers=headers).json()["data"]
    deleted = api.delete(f"/profile/closet/{item['id']}", headers=headers)
    missing = api.delete(f"/profile/closet/{item['id']}", headers=headers)

    assert added.status_code == 200
    assert added.json()["message"] == "1 item(s) added to your closet."
    assert item["id"].startswith("item-")
    assert item["description"] == "Blue denim jacket"
    assert item["imageDataUri"].startswith("data:image/jpeg;base64,")
    assert listed["total_count"] == 1
    assert listed["closet"][0]["id"] == item["id"]
    assert deleted.json()["data"]["deleted_item"]["id"] == item["id"]
    assert missing.status_code == 404


def test_closet_item_is_kept_when_description_fails(api, register, fake_openai, png_bytes):
    headers = register()
    fake_openai.responses.outputs["ItemDescription"] = RuntimeError("model unavailable")

    response = api.post(
        "/profile/closet",
        files={"file": ("shirt.png", png_bytes, "image/png")},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["description"] is None


def test_closet_rejects_non_images(api, register):
    headers = register()

    response = api.post(
        "/profile/closet",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "File must be an image"


def test_closet_items_appear_in_profile_document(api, onboarded, fake_openai, png_bytes):
    fake_openai.responses.outputs["ItemDescription"] = {"description": "White sneakers"}
    api.post(
        "/profile/closet",
        files={"file": ("shoes.png", png_bytes, "image/png")},
        headers=onboarded,
    )

    document = api.get("/profile", headers=onboarded).json()["data"]

    assert [item["description"] for item in document["closetItems"]] == ["White sneakers"]


def test_closet_items_are_private(api, register, fake_openai, png_bytes):
    owner = register("ada@example.com")
    other = register("bob@example.com")
    fake_openai.responses.outputs["ItemDescription"] = {"description": "Red scarf"}
    item_id = api.post(
        "/profile/closet",
        files={"file": ("scarf.png", png_bytes, "image/png")},
        headers=owner,
    ).json()["data"]["id"]

    response = api.delete(f"/profile/closet/{item_id}", headers=other)

    assert response.status_code == 404
    assert api.get("/profile/closet", headers=other).json()["data"]["total_count"] == 0
