"""
Tests for the job tracking endpoints
"""
from bson import ObjectId

from app.models.job import JOBS
from tests.conftest import run

JOBS_URL = "/api/jobs/"


def create_job(client, headers, **overrides):
    body = {"title": "Backend Engineer", "company": "Acme"}
    body.update(overrides)
    return client.post(JOBS_URL, json=body, headers=headers)


class TestCreateJob:
    """Creating jobs"""

    def test_create_sets_owner_and_defaults(self, client, alice):
        user, headers = alice
        response = create_job(client, headers, location="Remote")

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Job application created successfully"
        job = body["data"]
        assert job["postedBy"] == {"id": str(user["_id"]), "name": "Alice", "email": "alice@example.com"}
        assert job["status"] == "applied"
        assert job["jobType"] == "full-time"
        assert job["roleTitle"] == "Backend Engineer"
        assert job["dateAdded"]
        assert ObjectId.is_valid(job["id"])

    def test_location_defaults_when_missing(self, client, alice):
        _, headers = alice
        job = create_job(client, headers).json()["data"]
        assert job["location"] == "Not specified"

    def test_client_supplied_owner_is_rejected(self, client, alice, bob):
        _, headers = alice
        bob_user, _ = bob
        response = create_job(client, headers, postedBy=str(bob_user["_id"]))

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Validation failed"
        assert "postedBy" in body["details"]["fieldErrors"]

    def test_missing_title(self, client, alice):
        _, headers = alice
        response = client.post(JOBS_URL, json={"company": "Acme"}, headers=headers)

        assert response.status_code == 400
        details = response.json()["details"]
        assert "title" in details["fieldErrors"]
        assert details["errorCount"] == 1

    def test_interview_before_deadline_rejected(self, client, alice, db):
        _, headers = alice
        response = create_job(client, headers, deadlineDate="2024-05-10", interviewDate="2024-05-01")

        assert response.status_code == 400
        field_errors = response.json()["details"]["fieldErrors"]
        assert field_errors["interviewDate"] == ["Interview date cannot be before deadline date"]
        assert run(db[JOBS].count_documents({})) == 0

    def test_salary_range_order(self, client, alice):
        _, headers = alice
        response = create_job(client, headers, salaryRange={"min": 100, "max": 50})
        assert response.status_code == 400

    def test_invalid_link_url(self, client, alice):
        _, headers = alice
        response = create_job(client, headers, links=[{"label": "Posting", "url": "ftp://example.com"}])

        assert response.status_code == 400
        assert "links.0.url" in response.json()["details"]["fieldErrors"]

    def test_invalid_status(self, client, alice):
        _, headers = alice
        response = create_job(client, headers, status="ghosted")
        assert response.status_code == 400

    def test_duplicate_in_pipeline_conflicts(self, client, alice):
        _, headers = alice
        assert create_job(client, headers).status_code == 201

        response = create_job(client, headers)

        assert response.status_code == 409
        assert response.json()["error"] == "Duplicate job application for this company and position"

    def test_duplicate_outside_pipeline_allowed(self, client, alice):
        _, headers = alice
        assert create_job(client, headers, status="open").status_code == 201
        assert create_job(client, headers, status="open").status_code == 201

    def test_same_job_for_different_owners(self, client, alice, bob):
        assert create_job(client, alice[1]).status_code == 201
        assert create_job(client, bob[1]).status_code == 201

    def test_requires_authentication(self, client):
        response = create_job(client, {})

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Access token required"}


class TestListJobs:
    """Listing, filtering and paginating jobs"""

    def test_owner_scoping_scenario(self, client, alice, bob):
        _, alice_headers = alice
        _, bob_headers = bob
        job = create_job(client, alice_headers).json()["data"]

        assert client.get(f"{JOBS_URL}{job['id']}", headers=bob_headers).status_code == 404

        response = client.get(JOBS_URL, params={"status": "applied", "page": 1, "limit": 10}, headers=alice_headers)

        assert response.status_code == 200
        body = response.json()
        assert [item["id"] for item in body["data"]] == [job["id"]]
        assert body["meta"] == {
            "total": 1,
            "page": 1,
            "limit": 10,
            "pages": 1,
            "sort": "-dateAdded",
            "userJobsOnly": True,
        }

    def test_admin_lists_only_own_jobs(self, client, alice, admin):
        create_job(client, alice[1])

        body = client.get(JOBS_URL, headers=admin[1]).json()

        assert body["data"] == []
        assert body["meta"]["total"] == 0
        assert body["meta"]["pages"] == 0

    def test_pagination(self, client, alice):
        _, headers = alice
        for i in range(5):
            create_job(client, headers, title=f"Engineer {i}")

        body = client.get(JOBS_URL, params={"page": 2, "limit": 2}, headers=headers).json()

        assert len(body["data"]) == 2
        assert body["meta"]["total"] == 5
        assert body["meta"]["pages"] == 3

    def test_limit_is_clamped(self, client, alice):
        _, headers = alice
        assert client.get(JOBS_URL, params={"limit": 5000}, headers=headers).json()["meta"]["limit"] == 1000
        assert client.get(JOBS_URL, params={"limit": 0}, headers=headers).json()["meta"]["limit"] == 1

    def test_page_must_be_positive(self, client, alice):
        response = client.get(JOBS_URL, params={"page": 0}, headers=alice[1])

        assert response.status_code == 400
        assert "page" in response.json()["details"]["fieldErrors"]

    def test_search_and_company_filter(self, client, alice):
        _, headers = alice
        create_job(client, headers, title="Data Scientist", company="Initech")
        create_job(client, headers, title="C++ Developer", company="Globex", notes="systems role")

        by_q = client.get(JOBS_URL, params={"q": "c++"}, headers=headers).json()
        assert [job["title"] for job in by_q["data"]] == ["C++ Developer"]

        by_company = client.get(JOBS_URL, params={"company": "init"}, headers=headers).json()
        assert [job["company"] for job in by_company["data"]] == ["Initech"]

    def test_sort_ascending_by_title(self, client, alice):
        _, headers = alice
        for title in ("Beta", "Alpha", "Gamma"):
            create_job(client, headers, title=title)

        body = client.get(JOBS_URL, params={"sort": "title"}, headers=headers).json()

        assert [job["title"] for job in body["data"]] == ["Alpha", "Beta", "Gamma"]
        assert body["meta"]["sort"] == "title"

    def test_unknown_sort_field(self, client, alice):
        response = client.get(JOBS_URL, params={"sort": "-password"}, headers=alice[1])

        assert response.status_code == 400
        assert "sort" in response.json()["details"]["fieldErrors"]


class TestJobStats:
    def test_counts_by_status(self, client, alice, bob):
        _, headers = alice
        create_job(client, headers, title="A")
        create_job(client, headers, title="B", status="interview")
        create_job(client, headers, title="C", status="open")
        create_job(client, bob[1], title="D")

        data = client.get(f"{JOBS_URL}stats", headers=headers).json()["data"]

        assert data == {
            "total": 3,
            "applied": 1,
            "interview": 1,
            "pending": 0,
            "offer": 0,
            "accepted": 0,
            "rejected": 0,
        }


class TestUpdateJob:
    """Updating jobs"""

    def test_owner_updates(self, client, alice):
        _, headers = alice
        job = create_job(client, headers).json()["data"]

        response = client.put(f"{JOBS_URL}{job['id']}", json={"status": "interview", "notes": "Round 1"}, headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Job updated successfully"
        assert body["data"]["status"] == "interview"
        assert body["data"]["notes"] == "Round 1"
        assert body["data"]["title"] == "Backend Engineer"

    def test_non_owner_forbidden_and_unchanged(self, client, alice, bob, db):
        _, headers = alice
        job = create_job(client, headers).json()["data"]

        response = client.put(f"{JOBS_URL}{job['id']}", json={"title": "Hijacked"}, headers=bob[1])

        assert response.status_code == 403
        stored = run(db[JOBS].find_one({"_id": ObjectId(job["id"])}))
        assert stored["title"] == "Backend Engineer"

    def test_admin_may_update(self, client, alice, admin):
        job = create_job(client, alice[1]).json()["data"]

        response = client.put(f"{JOBS_URL}{job['id']}", json={"status": "offer"}, headers=admin[1])

        assert response.status_code == 200
        assert response.json()["data"]["postedBy"] == job["postedBy"]

    def test_nonexistent(self, client, alice):
        response = client.put(f"{JOBS_URL}{ObjectId()}", json={"notes": "x"}, headers=alice[1])

        assert response.status_code == 404
        assert response.json()["error"] == "Job not found"

    def test_invalid_id(self, client, alice):
        response = client.put(f"{JOBS_URL}not-an-id", json={"notes": "x"}, headers=alice[1])

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid ID format"

    def test_required_field_cannot_be_nulled(self, client, alice):
        _, headers = alice
        job = create_job(client, headers).json()["data"]

        response = client.put(f"{JOBS_URL}{job['id']}", json={"title": None}, headers=headers)

        assert response.status_code == 400
        assert "title" in response.json()["details"]["fieldErrors"]

    def test_date_order_checked_against_stored_record(self, client, alice):
        _, headers = alice
        job = create_job(client, headers, deadlineDate="2024-05-10").json()["data"]

        response = client.put(f"{JOBS_URL}{job['id']}", json={"interviewDate": "2024-05-01"}, headers=headers)

        assert response.status_code == 400
        assert "interviewDate" in response.json()["details"]["fieldErrors"]

    def test_update_into_duplicate_conflicts(self, client, alice):
        _, headers = alice
        create_job(client, headers, title="Engineer")
        other = create_job(client, headers, title="Manager").json()["data"]

        response = client.put(f"{JOBS_URL}{other['id']}", json={"title": "Engineer"}, headers=headers)

        assert response.status_code == 409

    def test_cannot_change_owner(self, client, alice, bob):
        _, headers = alice
        job = create_job(client, headers).json()["data"]

        response = client.put(f"{JOBS_URL}{job['id']}", json={"postedBy": str(bob[0]["_id"])}, headers=headers)

        assert response.status_code == 400


class TestDeleteJob:
    def test_delete_twice(self, client, alice):
        _, headers = alice
        job = create_job(client, headers).json()["data"]

        first = client.delete(f"{JOBS_URL}{job['id']}", headers=headers)
        second = client.delete(f"{JOBS_URL}{job['id']}", headers=headers)

        assert first.status_code == 200
        assert first.json() == {
            "success": True,
            "message": "Job deleted successfully",
            "data": {"deletedId": job["id"]},
        }
        assert second.status_code == 404

    def test_non_owner_forbidden(self, client, alice, bob):
        job = create_job(client, alice[1]).json()["data"]
        assert client.delete(f"{JOBS_URL}{job['id']}", headers=bob[1]).status_code == 403

    def test_delete_all_only_removes_own(self, client, alice, bob, db):
        create_job(client, alice[1], title="A")
        create_job(client, alice[1], title="B")
        create_job(client, bob[1], title="C")

        response = client.delete(JOBS_URL, headers=alice[1])

        assert response.status_code == 200
        assert response.json()["data"] == {"deletedCount": 2}
        assert response.json()["message"] == "2 jobs deleted successfully"
        assert run(db[JOBS].count_documents({})) == 1


class TestCollectionPathsWithoutSlash:
    """Collection routes answer without a redirect"""

    def test_create_list_and_delete_all(self, client, alice):
        _, headers = alice

        created = client.post("/api/jobs", json={"title": "SRE", "company": "Acme"}, headers=headers)
        listed = client.get("/api/jobs", params={"page": 1, "limit": 10}, headers=headers, follow_redirects=False)
        deleted = client.delete("/api/jobs", headers=headers, follow_redirects=False)

        assert created.status_code == 201
        assert listed.status_code == 200
        assert listed.json()["meta"]["total"] == 1
        assert deleted.json()["data"] == {"deletedCount": 1}

    def test_other_collections(self, client, alice, admin):
        _, headers = alice
        internship = client.post(
            "/internships",
            json={"title": "Research Intern", "company": "Acme Labs"},
            headers=headers,
            follow_redirects=False,
        )
        application = client.post(
            "/api/applications",
            json={"candidate": "Alice", "company": "Acme", "roleTitle": "Engineer"},
            headers=headers,
            follow_redirects=False,
        )

        assert internship.status_code == 201
        assert client.get("/internships", headers=headers, follow_redirects=False).status_code == 200
        assert application.status_code == 201
        assert client.get("/users", headers=admin[1], follow_redirects=False).status_code == 200
