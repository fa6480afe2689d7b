from volunteer_hub.models.application import JobApplication
from volunteer_hub.utils.dates import now_ts, ts_in


def _apply(client, job_id, email="volunteer@example.org", **extra):
    body = {"job_id": job_id, "volunteer_name": "Sam Rivera", "email": email}
    body.update(extra)
    return client.post("/api/job-applications", json=body)


def _seed(db, job, email, status="pending"):
    now = now_ts()
    application = JobApplication(
        job_id=job.id, volunteer_name="Seeded", email=email, phone="555-0100",
        admin_notes="called once", status=status, applied_at=now, updated_at=now,
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


class TestSubmitApplication:
    def test_submit(self, client, make_job):
        job = make_job()
        r = _apply(client, job.id, email="  Volunteer@Example.ORG ", phone="555-0101")
        assert r.status_code == 201
        data = r.json()
        assert data["success"] is True
        assert data["application"]["email"] == "volunteer@example.org"
        assert data["application"]["status"] == "pending"

    def test_duplicate_is_conflict(self, client, make_job, db):
        job = make_job()
        first = _apply(client, job.id)
        assert first.status_code == 201

        second = _apply(client, job.id, email="VOLUNTEER@example.org")
        assert second.status_code == 409
        data = second.json()
        assert data["existing_application_id"] == first.json()["application"]["id"]
        assert data["status"] == "pending"
        assert db.query(JobApplication).filter(JobApplication.job_id == job.id).count() == 1

    def test_missing_fields(self, client):
        r = client.post("/api/job-applications", json={"volunteer_name": "Sam"})
        assert r.status_code == 400
        assert r.json()["error"] == "Missing required fields: job_id, email"

    def test_unknown_job(self, client):
        assert _apply(client, 9999).status_code == 404

    def test_inactive_job(self, client, make_job):
        job = make_job(status="cancelled")
        r = _apply(client, job.id)
        assert r.status_code == 400
        assert "no longer accepting" in r.json()["error"]

    def test_expired_job(self, client, make_job):
        job = make_job(expires_at=ts_in(days=-2))
        r = _apply(client, job.id)
        assert r.status_code == 400
        assert "expired" in r.json()["error"]

    def test_full_job(self, client, make_job, db):
        job = make_job(volunteers_needed=1)
        _seed(db, job, "taken@example.org", status="accepted")
        r = _apply(client, job.id)
        assert r.status_code == 400
        assert r.json()["error"] == "This position is now full. No more volunteers needed."


class TestListApplications:
    def test_anonymous_without_filters_gets_empty_page(self, client, make_job, db):
        _seed(db, make_job(), "a@example.org")
        r = client.get("/api/job-applications")
        data = r.json()
        assert data["applications"] == []
        assert data["pagination"]["total"] == 0
        assert data["message"]

    def test_lookup_by_email_hides_private_fields(self, client, make_job, db):
        job = make_job()
        _seed(db, job, "a@example.org")
        _seed(db, job, "b@example.org")

        r = client.get("/api/job-applications", params={"email": "A@example.org"})
        data = r.json()
        assert [a["email"] for a in data["applications"]] == ["a@example.org"]
        assert data["applications"][0]["phone"] is None
        assert data["applications"][0]["admin_notes"] is None
        assert data["applications"][0]["job_title"] == "Park Cleanup"

    def test_admin_sees_everything(self, admin_client, make_job, db):
        job = make_job()
        for i in range(3):
            _seed(db, job, f"v{i}@example.org")

        r = admin_client.get("/api/job-applications", params={"limit": 2})
        data = r.json()
        assert len(data["applications"]) == 2
        assert data["pagination"] == {"total": 3, "limit": 2, "offset": 0, "hasMore": True}
        assert data["applications"][0]["phone"] == "555-0100"

        r = admin_client.get("/api/job-applications", params={"limit": 2, "offset": 2})
        assert r.json()["pagination"]["hasMore"] is False


class TestUpdateApplication:
    def test_admin_only(self, user_client, make_job, db):
        application = _seed(db, make_job(), "a@example.org")
        r = user_client.put("/api/job-applications", json={"application_id": application.id, "status": "accepted"})
        assert r.status_code == 403

    def test_accept_sets_responded_at(self, admin_client, make_job, db):
        application = _seed(db, make_job(), "a@example.org")
        r = admin_client.put("/api/job-applications", json={
            "application_id": application.id, "status": "accepted", "admin_notes": "Great fit",
        })
        assert r.status_code == 200
        data = r.json()["application"]
        assert data["status"] == "accepted"
        assert data["admin_notes"] == "Great fit"
        assert data["responded_at"] is not None

    def test_accept_beyond_capacity_is_conflict(self, admin_client, make_job, db):
        job = make_job(volunteers_needed=1)
        _seed(db, job, "first@example.org", status="accepted")
        late = _seed(db, job, "late@example.org")

        r = admin_client.put("/api/job-applications", json={"application_id": late.id, "status": "accepted"})
        assert r.status_code == 409
        assert r.json()["error"] == "Job is already at capacity"

        r = admin_client.put("/api/job-applications", json={"application_id": late.id, "status": "rejected"})
        assert r.status_code == 200

    def test_capacity_reached_then_listing_shows_zero(self, client, admin_client, make_job):
        job = make_job(volunteers_needed=2)
        ids = [_apply(client, job.id, email=f"v{i}@example.org").json()["application"]["id"] for i in range(2)]
        for application_id in ids:
            r = admin_client.put("/api/job-applications", json={"application_id": application_id, "status": "accepted"})
            assert r.status_code == 200

        listed = client.get("/api/jobs").json()["jobs"][0]
        assert listed["positions_remaining"] == 0
        assert _apply(client, job.id, email="third@example.org").status_code == 400

    def test_invalid_status(self, admin_client, make_job, db):
        application = _seed(db, make_job(), "a@example.org")
        r = admin_client.put("/api/job-applications", json={"application_id": application.id, "status": "maybe"})
        assert r.status_code == 400

    def test_unknown_application(self, admin_client):
        r = admin_client.put("/api/job-applications", json={"application_id": 9999, "status": "rejected"})
        assert r.status_code == 404
