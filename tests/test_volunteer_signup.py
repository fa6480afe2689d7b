import pytest

from volunteer_hub.models.volunteer import VolunteerRegistration
from volunteer_hub.services.match_service import compute_match, tokenize
from volunteer_hub.services.volunteer_service import base_username, unique_username
from volunteer_hub.utils.dates import ts_in


@pytest.fixture
def signup_payload():
    return {
        "first_name": "Jamie",
        "last_name": "O'Neil",
        "email": " Jamie.ONeil@Example.org",
        "birth_date": "1990-04-12",
        "address": "100 Main St",
        "city": "Norfolk",
        "state": "VA",
        "zipcode": "23510",
        "skills": ["cooking", "driving"],
        "interests": ["food pantry"],
        "emergency_contact_name": "Sam O'Neil",
        "emergency_contact_phone": "757-555-0100",
        "emergency_contact_relationship": "sibling",
    }


class TestUsernames:
    def test_base_username(self):
        assert base_username("Jamie", "O'Neil", "1990-04-12") == "jaoneil1990"

    def test_unparseable_birth_date_uses_current_year(self):
        assert base_username("Al", "Smith", "someday")[:7] == "alsmith"

    def test_counter_appended_when_taken(self, client, signup_payload, db):
        client.post("/api/volunteer-signup", json=signup_payload)
        client.post("/api/volunteer-signup", json={**signup_payload, "email": "jamie2@example.org"})
        assert unique_username(db, "Jamie", "O'Neil", "1990-04-12") == "jaoneil19902"


class TestSignup:
    def test_register_with_nearby_opportunities(self, client, signup_payload, make_job):
        make_job(title="Food pantry cooking shift", description="Cooking meals", city="Norfolk", state="VA")
        make_job(title="Expired", expires_at=ts_in(days=-1))
        make_job(title="Closed", status="cancelled")
        r = client.post("/api/volunteer-signup", json=signup_payload)
        assert r.status_code == 201, r.text
        body = r.json()
        assert body["success"] is True
        assert body["volunteer"]["username"] == "jaoneil1990"
        assert body["volunteer"]["email"] == "jamie.oneil@example.org"
        assert body["volunteer"]["name"] == "Jamie O'Neil"
        assert "jaoneil1990" in body["message"]
        titles = [o["title"] for o in body["nearby_opportunities"]]
        assert titles == ["Food pantry cooking shift"]
        opportunity = body["nearby_opportunities"][0]
        assert opportunity["distance"] == 0
        assert opportunity["location"] == "Norfolk, VA"
        assert opportunity["match_score"] > 0
        assert "cooking" in opportunity["matched_keywords"]

    def test_coordinates_from_zip_and_defaults(self, client, signup_payload, db):
        client.post("/api/volunteer-signup", json=signup_payload)
        volunteer = db.query(VolunteerRegistration).one()
        assert (volunteer.latitude, volunteer.longitude) == (36.847, -76.295)
        assert volunteer.max_distance == 25
        assert volunteer.experience_level == "beginner"
        assert volunteer.email_notifications is True
        assert volunteer.skills == ["cooking", "driving"]

    def test_zip_plus_four_uses_five_digit_coordinates(self, client, signup_payload, make_job, db):
        make_job(title="Riverfront cleanup")
        r = client.post("/api/volunteer-signup", json={**signup_payload, "zipcode": "23510-1234"})
        assert r.status_code == 201
        assert [o["title"] for o in r.json()["nearby_opportunities"]] == ["Riverfront cleanup"]
        volunteer = db.query(VolunteerRegistration).one()
        assert volunteer.zipcode == "23510-1234"
        assert volunteer.latitude == 36.847

    def test_unknown_zip_has_no_suggestions(self, client, signup_payload, make_job):
        make_job()
        r = client.post("/api/volunteer-signup", json={**signup_payload, "zipcode": "99999"})
        assert r.status_code == 201
        assert r.json()["nearby_opportunities"] == []

    def test_missing_fields(self, client):
        r = client.post("/api/volunteer-signup", json={"first_name": "Jamie"})
        assert r.status_code == 400
        assert r.json()["error"].startswith("Missing required fields: last_name, email")

    @pytest.mark.parametrize("field,value,error", [
        ("email", "not-an-email", "Invalid email format"),
        ("zipcode", "2351", "Invalid zipcode format"),
    ])
    def test_format_checks(self, client, signup_payload, field, value, error):
        r = client.post("/api/volunteer-signup", json={**signup_payload, field: value})
        assert r.status_code == 400
        assert r.json()["error"] == error

    def test_duplicate_email(self, client, signup_payload):
        first = client.post("/api/volunteer-signup", json=signup_payload).json()
        r = client.post("/api/volunteer-signup", json=signup_payload)
        assert r.status_code == 409
        body = r.json()
        assert body["error"] == "Email address already registered"
        assert body["existing_volunteer"] == {
            "id": first["volunteer"]["id"], "username": first["volunteer"]["username"],
        }


class TestRegistrationList:
    def test_requires_admin(self, client, user_client):
        assert client.get("/api/volunteer-signup").status_code == 401
        assert user_client.get("/api/volunteer-signup").status_code == 403

    def test_search_and_pagination(self, admin_client, signup_payload):
        admin_client.post("/api/volunteer-signup", json=signup_payload)
        admin_client.post("/api/volunteer-signup", json={
            **signup_payload, "first_name": "Robin", "last_name": "Lee", "email": "robin@example.org",
        })
        r = admin_client.get("/api/volunteer-signup", params={"search": "robin"})
        assert r.status_code == 200
        body = r.json()
        assert [v["username"] for v in body["volunteers"]] == ["rolee1990"]
        assert body["pagination"]["total"] == 1

        page = admin_client.get("/api/volunteer-signup", params={"limit": 1, "page": 2}).json()
        assert len(page["volunteers"]) == 1
        assert page["pagination"] == {
            "page": 2, "limit": 1, "total": 2, "totalPages": 2, "hasNext": False, "hasPrev": True,
        }


class TestMatching:
    def test_tokenize_drops_stopwords(self):
        assert tokenize("Help the food pantry with cooking") == {"food", "pantry", "cooking"}

    def test_score(self):
        result = compute_match("food pantry cooking", "cooking and driving")
        assert result == {"score": 33.3, "matched": ["cooking"]}

    def test_empty_job_text(self):
        assert compute_match("", "cooking") == {"score": 0.0, "matched": []}
