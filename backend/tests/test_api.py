from conftest import FakeBackend

GENERATE_BODY = {
    "destination": "Lisbon",
    "budget": "$1500",
    "startDate": "2025-06-01",
    "endDate": "2025-06-05",
    "travelerType": "couple",
}

TRIP_BODY = dict(GENERATE_BODY, title="", itinerary="1) Overview\n- Trams")


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_generate_missing_budget_returns_400(client, fake_backend):
    body = {k: v for k, v in GENERATE_BODY.items() if k != "budget"}
    resp = client.post("/api/generate", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required fields."}
    assert fake_backend.calls == []


def test_generate_returns_trimmed_text(client):
    resp = client.post("/api/generate", json=GENERATE_BODY)
    assert resp.status_code == 200
    assert resp.json() == {"itinerary": "Plan text"}


def test_generate_rejects_unknown_traveler_type(client):
    resp = client.post("/api/generate", json=dict(GENERATE_BODY, travelerType="backpacker"))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid traveler type."}


def test_generate_gateway_failures_return_500(app, client):
    app.state.completion_backend = FakeBackend(error=RuntimeError("upstream down"))
    resp = client.post("/api/generate", json=GENERATE_BODY)
    assert resp.status_code == 500
    assert resp.json() == {"error": "upstream down"}

    app.state.completion_backend = FakeBackend(reply="")
    resp = client.post("/api/generate", json=GENERATE_BODY)
    assert resp.status_code == 500
    assert "error" in resp.json()


def test_generate_without_body_is_a_validation_error(client):
    resp = client.post("/api/generate")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required fields."}


def test_signup_signin_and_me(client):
    creds = {"email": "Bo@Example.com", "password": "hunter22"}
    signup = client.post("/api/auth/signup", json=creds)
    assert signup.status_code == 200
    user_id = signup.json()["userId"]

    assert client.post("/api/auth/signup", json=creds).status_code == 400
    bad = client.post("/api/auth/signin", json=dict(creds, password="wrong-pass"))
    assert bad.status_code == 401
    assert bad.json() == {"error": "Invalid credentials."}

    token = client.post("/api/auth/signin", json=creds).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}
    assert client.get("/api/me", headers=headers).json() == {
        "userId": user_id,
        "email": "bo@example.com",
    }

    client.post("/api/auth/signout", headers=headers)
    assert client.get("/api/me", headers=headers).status_code == 401


def test_short_password_rejected(client):
    resp = client.post("/api/auth/signup", json={"email": "a@example.com", "password": "123"})
    assert resp.status_code == 400
    assert "at least 6" in resp.json()["error"]


def test_trip_routes_require_token(client):
    resp = client.get("/api/trips")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}


def test_bearer_scheme_is_case_insensitive_and_required(client, auth_headers):
    token = auth_headers["Authorization"].split(" ", 1)[1]
    lower = client.get("/api/me", headers={"Authorization": f"bearer {token}"})
    assert lower.status_code == 200
    bare = client.get("/api/me", headers={"Authorization": token})
    assert bare.status_code == 401
    other_scheme = client.get("/api/me", headers={"Authorization": f"Basic {token}"})
    assert other_scheme.status_code == 401


def test_trip_routes_report_unconfigured_store(app, client, auth_headers):
    app.state.document_store = None
    resp = client.get("/api/trips", headers=auth_headers)
    assert resp.status_code == 503
    assert "error" in resp.json()


def test_trip_lifecycle(client, auth_headers):
    listing = client.get("/api/trips", headers=auth_headers).json()
    assert listing == {"version": 0, "trips": []}

    body = dict(TRIP_BODY, favorite=True, createdAt="1999-01-01T00:00:00Z")
    created = client.post("/api/trips", json=body, headers=auth_headers)
    assert created.status_code == 201
    trip_id = created.json()["id"]

    trip = client.get(f"/api/trips/{trip_id}", headers=auth_headers).json()
    assert trip["title"] == "Lisbon itinerary"
    assert trip["costBreakdown"] is None
    assert trip["favorite"] is False
    assert trip["createdAt"] == trip["updatedAt"]
    assert not trip["createdAt"].startswith("1999")

    patched = client.patch(
        f"/api/trips/{trip_id}", json={"favorite": True, "title": "Tiles"}, headers=auth_headers
    ).json()
    assert patched["favorite"] is True
    assert patched["title"] == "Tiles"
    assert patched["updatedAt"] > patched["createdAt"]

    listing = client.get("/api/trips", headers=auth_headers).json()
    assert listing["version"] == 2
    assert [t["id"] for t in listing["trips"]] == [trip_id]

    assert client.delete(f"/api/trips/{trip_id}", headers=auth_headers).status_code == 204
    missing = client.get(f"/api/trips/{trip_id}", headers=auth_headers)
    assert missing.status_code == 404
    assert missing.json() == {"error": "Trip not found."}
    assert client.patch(
        f"/api/trips/{trip_id}", json={"title": "x"}, headers=auth_headers
    ).status_code == 404


def test_save_requires_itinerary_and_known_traveler_type(client, auth_headers):
    resp = client.post("/api/trips", json=dict(TRIP_BODY, itinerary=""), headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Generate an itinerary first."}

    resp = client.post(
        "/api/trips", json=dict(TRIP_BODY, travelerType="backpacker"), headers=auth_headers
    )
    assert resp.status_code == 400

    resp = client.post("/api/trips", json={"title": "only"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required fields."}


def test_trips_are_scoped_to_their_owner(client, auth_headers):
    trip_id = client.post("/api/trips", json=TRIP_BODY, headers=auth_headers).json()["id"]
    other = client.post(
        "/api/auth/signup", json={"email": "eve@example.com", "password": "secret123"}
    ).json()["token"]
    other_headers = {"Authorization": f"Bearer {other}"}

    assert client.get("/api/trips", headers=other_headers).json()["trips"] == []
    assert client.get(f"/api/trips/{trip_id}", headers=other_headers).status_code == 404
