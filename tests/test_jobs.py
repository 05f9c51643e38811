"""
Tests for the job board API: listing, posting, applying and withdrawing.
"""
from jobquest.db.models.job_posting import JobPosting


def _stored_applicants(db_session, job_id):
    db_session.expire_all()
    return db_session.get(JobPosting, job_id).applicants


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

def test_list_jobs_is_public(client, make_job):
    make_job(title="Backend Engineer")
    make_job(title="Designer")

    response = client.get("/api/jobs")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert {job["title"] for job in body["jobs"]} == {"Backend Engineer", "Designer"}


def test_list_jobs_search(client, make_job):
    make_job(title="Backend Engineer")
    make_job(title="Designer", description="Figma all day")
    make_job(title="Frontend", keywords=["reactive", "ui"])

    response = client.get("/api/jobs", params={"search": "REACT"})

    assert response.status_code == 200
    assert [job["title"] for job in response.json()["jobs"]] == ["Frontend"]
    assert response.json()["search"] == "REACT"


def test_list_jobs_search_no_match(client, make_job):
    make_job(title="Backend Engineer")

    response = client.get("/api/jobs", params={"search": "astronaut"})

    assert response.json()["jobs"] == []
    assert response.json()["total"] == 0


def test_get_job(client, make_job):
    job = make_job(title="Backend Engineer", keywords=["python"])

    response = client.get(f"/api/jobs/{job.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == job.id
    assert body["jobType"] == "full-time"
    assert body["keywords"] == ["python"]
    assert body["applicants"] == []


def test_get_missing_job(client):
    response = client.get("/api/jobs/does-not-exist")

    assert response.status_code == 404
    assert response.json()["detail"] == "Job not found"


# ---------------------------------------------------------------------------
# Posting and deleting
# ---------------------------------------------------------------------------

def test_admin_posts_job(client, admin, admin_headers, db_session):
    response = client.post(
        "/api/jobs",
        json={
            "title": "  Frontend Engineer ",
            "description": "Build the UI.",
            "salary": 50000,
            "jobType": "part-time",
            "keywords": " React, UI ,frontend,react",
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Job posted successfully!"
    job = body["job"]
    assert job["title"] == "Frontend Engineer"
    assert job["jobType"] == "part-time"
    assert job["keywords"] == ["react", "ui", "frontend"]
    assert job["postedBy"] == admin.uid
    assert job["applicants"] == []

    stored = db_session.get(JobPosting, job["id"])
    assert stored is not None
    assert stored.salary == 50000


def test_post_job_accepts_keyword_list(client, admin_headers):
    response = client.post(
        "/api/jobs",
        json={"title": "Data", "description": "SQL", "salary": 1, "keywords": ["SQL", " etl "]},
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["job"]["keywords"] == ["sql", "etl"]
    assert response.json()["job"]["jobType"] == "full-time"


def test_post_job_requires_title(client, admin_headers):
    response = client.post(
        "/api/jobs",
        json={"title": "   ", "description": "x", "salary": 1},
        headers=admin_headers,
    )

    assert response.status_code == 422
    assert any("This field is required." in e["msg"] for e in response.json()["detail"])


def test_post_job_rejects_negative_salary(client, admin_headers):
    response = client.post(
        "/api/jobs",
        json={"title": "T", "description": "D", "salary": -5},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_post_job_rejects_unknown_job_type(client, admin_headers):
    response = client.post(
        "/api/jobs",
        json={"title": "T", "description": "D", "salary": 5, "jobType": "contract"},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_standard_user_cannot_post(client, seeker_headers, db_session):
    response = client.post(
        "/api/jobs",
        json={"title": "T", "description": "D", "salary": 5},
        headers=seeker_headers,
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "You do not have permission to perform this action."
    assert db_session.query(JobPosting).count() == 0


def test_guest_cannot_post(client):
    response = client.post("/api/jobs", json={"title": "T", "description": "D", "salary": 5})
    assert response.status_code == 401


def test_admin_deletes_job(client, admin_headers, make_job, db_session):
    job_id = make_job().id

    response = client.delete(f"/api/jobs/{job_id}", headers=admin_headers)

    assert response.status_code == 204
    db_session.expire_all()
    assert db_session.get(JobPosting, job_id) is None


def test_delete_missing_job(client, admin_headers):
    response = client.delete("/api/jobs/nope", headers=admin_headers)
    assert response.status_code == 404


def test_standard_user_cannot_delete(client, seeker_headers, make_job, db_session):
    job = make_job()

    response = client.delete(f"/api/jobs/{job.id}", headers=seeker_headers)

    assert response.status_code == 403
    assert db_session.get(JobPosting, job.id) is not None


# ---------------------------------------------------------------------------
# Applying and withdrawing
# ---------------------------------------------------------------------------

def test_apply_adds_pending_record(client, seeker, seeker_headers, make_job, db_session):
    job = make_job()

    response = client.post(f"/api/jobs/{job.id}/apply", headers=seeker_headers)

    assert response.status_code == 200
    applicants = response.json()["applicants"]
    assert len(applicants) == 1
    assert applicants[0]["id"] == seeker.uid
    assert applicants[0]["status"] == "pending"
    assert applicants[0]["appliedAt"].endswith("Z")
    assert "updatedAt" not in applicants[0] or applicants[0]["updatedAt"] is None

    stored = _stored_applicants(db_session, job.id)
    assert stored == [{"id": seeker.uid, "status": "pending", "appliedAt": applicants[0]["appliedAt"]}]


def test_apply_twice_adds_two_records(client, seeker, seeker_headers, make_job, db_session):
    """Applying is not deduplicated; each record carries its own appliedAt."""
    job = make_job()

    client.post(f"/api/jobs/{job.id}/apply", headers=seeker_headers)
    client.post(f"/api/jobs/{job.id}/apply", headers=seeker_headers)

    stored = _stored_applicants(db_session, job.id)
    assert len(stored) == 2
    assert all(record["id"] == seeker.uid for record in stored)
    assert stored[0]["appliedAt"] != stored[1]["appliedAt"]


def test_guest_cannot_apply(client, make_job):
    job = make_job()

    response = client.post(f"/api/jobs/{job.id}/apply")

    assert response.status_code == 401
    assert response.json()["detail"] == "You must be logged in."


def test_admin_cannot_apply(client, admin_headers, make_job, db_session):
    job = make_job()

    response = client.post(f"/api/jobs/{job.id}/apply", headers=admin_headers)

    assert response.status_code == 403
    assert response.json()["detail"] == "Admins cannot apply to jobs."
    db_session.expire_all()
    assert db_session.get(JobPosting, job.id).applicants == []


def test_admin_cannot_withdraw(client, admin, admin_headers, make_job):
    record = {"id": admin.uid, "status": "pending", "appliedAt": "2024-01-01T00:00:00+00:00"}
    job = make_job(applicants=[record])

    response = client.post(
        f"/api/jobs/{job.id}/withdraw",
        json={"status": "pending", "appliedAt": record["appliedAt"]},
        headers=admin_headers,
    )

    assert response.status_code == 403


def test_apply_to_missing_job(client, seeker_headers):
    response = client.post("/api/jobs/nope/apply", headers=seeker_headers)
    assert response.status_code == 404


def test_withdraw_removes_exact_record(client, seeker, seeker_headers, make_job, db_session):
    job = make_job()
    record = client.post(f"/api/jobs/{job.id}/apply", headers=seeker_headers).json()["applicants"][0]

    response = client.post(
        f"/api/jobs/{job.id}/withdraw",
        json={"status": "pending", "appliedAt": record["appliedAt"]},
        headers=seeker_headers,
    )

    assert response.status_code == 200
    assert response.json()["applicants"] == []
    assert _stored_applicants(db_session, job.id) == []


def test_withdraw_with_stale_copy_is_noop(client, seeker, seeker_headers, make_job, db_session):
    job = make_job()
    client.post(f"/api/jobs/{job.id}/apply", headers=seeker_headers)
    before = _stored_applicants(db_session, job.id)

    response = client.post(
        f"/api/jobs/{job.id}/withdraw",
        json={"status": "pending", "appliedAt": "2000-01-01T00:00:00.000000Z"},
        headers=seeker_headers,
    )

    assert response.status_code == 200
    assert len(response.json()["applicants"]) == 1
    assert _stored_applicants(db_session, job.id) == before


def test_withdraw_removes_only_one_of_duplicates(client, seeker_headers, make_job, db_session):
    job = make_job()
    client.post(f"/api/jobs/{job.id}/apply", headers=seeker_headers)
    second = client.post(f"/api/jobs/{job.id}/apply", headers=seeker_headers).json()["applicants"][1]

    client.post(
        f"/api/jobs/{job.id}/withdraw",
        json={"status": "pending", "appliedAt": second["appliedAt"]},
        headers=seeker_headers,
    )

    stored = _stored_applicants(db_session, job.id)
    assert len(stored) == 1
    assert stored[0]["appliedAt"] != second["appliedAt"]


def test_withdraw_only_touches_callers_record(client, seeker, other_seeker, seeker_headers, make_job, db_session):
    """The applicant id comes from the session, so another user's record cannot be removed."""
    applied_at = "2024-05-01T10:00:00.000000Z"
    job = make_job(applicants=[{"id": other_seeker.uid, "status": "pending", "appliedAt": applied_at}])

    client.post(
        f"/api/jobs/{job.id}/withdraw",
        json={"status": "pending", "appliedAt": applied_at},
        headers=seeker_headers,
    )

    assert len(_stored_applicants(db_session, job.id)) == 1


def test_withdraw_decided_application_rejected(client, seeker_headers, make_job):
    job = make_job()

    response = client.post(
        f"/api/jobs/{job.id}/withdraw",
        json={"status": "accepted", "appliedAt": "2024-05-01T10:00:00.000000Z"},
        headers=seeker_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Only pending applications can be withdrawn"


def test_applied_jobs_lists_own_records(client, seeker, other_seeker, seeker_headers, make_job):
    mine = make_job(title="Mine")
    make_job(title="Theirs", applicants=[{"id": other_seeker.uid, "status": "pending", "appliedAt": "t"}])
    decided = make_job(
        title="Decided",
        applicants=[{"id": seeker.uid, "status": "accepted", "appliedAt": "t0", "updatedAt": "t1"}],
    )
    client.post(f"/api/jobs/{mine.id}/apply", headers=seeker_headers)

    response = client.get("/api/jobs/applied", headers=seeker_headers)

    assert response.status_code == 200
    entries = {entry["job"]["id"]: entry for entry in response.json()}
    assert set(entries) == {mine.id, decided.id}
    assert entries[mine.id]["canWithdraw"] is True
    assert entries[decided.id]["canWithdraw"] is False
    assert entries[decided.id]["application"]["status"] == "accepted"


def test_applied_jobs_requires_session(client):
    assert client.get("/api/jobs/applied").status_code == 401
