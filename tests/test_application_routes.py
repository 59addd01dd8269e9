"""
Tests for applying, reviewing applicants and the status lifecycle.
"""

import pytest

from jobportal.services.entity_service import ApplicationService


@pytest.fixture
def application(applicant, posted_job, repo) -> dict:
    resp = applicant.client.post(f"/api/v1/application/apply/{posted_job['id']}")
    assert resp.status_code == 201, resp.text
    return repo.find_one("applications", {"job": posted_job["id"], "applicant": applicant.user["id"]})


class TestApply:

    def test_apply_creates_pending_application(self, application):
        assert application["status"] == "pending"

    def test_second_apply_is_conflict(self, applicant, posted_job, application, repo):
        resp = applicant.client.post(f"/api/v1/application/apply/{posted_job['id']}")
        assert resp.status_code == 409
        assert resp.json() == {"success": False, "message": "You have already applied for this job"}
        assert len(repo.find("applications", {"job": posted_job["id"], "applicant": applicant.user["id"]})) == 1

    def test_racing_apply_caught_by_unique_key(self, applicant, posted_job, application, repo, monkeypatch):
        # the pre-check misses the existing application; the unique key must still hold
        monkeypatch.setattr(ApplicationService, "exists", lambda self, job_id, applicant_id: False)
        resp = applicant.client.post(f"/api/v1/application/apply/{posted_job['id']}")
        assert resp.status_code == 409
        assert len(repo.find("applications")) == 1

    def test_recruiter_cannot_apply(self, recruiter, posted_job, repo):
        resp = recruiter.client.post(f"/api/v1/application/apply/{posted_job['id']}")
        assert resp.status_code == 403
        assert repo.find("applications") == []

    def test_anonymous_cannot_apply(self, anonymous, posted_job):
        assert anonymous.post(f"/api/v1/application/apply/{posted_job['id']}").status_code == 401

    def test_apply_to_missing_job(self, applicant):
        assert applicant.client.post("/api/v1/application/apply/doesnotexist").status_code == 404


class TestApplicantsList:

    def test_owner_sees_applicants(self, recruiter, applicant, posted_job, application):
        resp = recruiter.client.get(f"/api/v1/application/{posted_job['id']}/applicants")
        assert resp.status_code == 200
        job = resp.json()["job"]
        assert job["id"] == posted_job["id"]
        assert len(job["applications"]) == 1
        entry = job["applications"][0]
        assert entry["applicant"]["id"] == applicant.user["id"]
        assert "password" not in entry["applicant"]
        assert entry["orphaned"] is False

    def test_other_recruiter_denied(self, other_recruiter, posted_job, application):
        resp = other_recruiter.client.get(f"/api/v1/application/{posted_job['id']}/applicants")
        assert resp.status_code == 403

    def test_applicant_denied(self, applicant, posted_job, application):
        resp = applicant.client.get(f"/api/v1/application/{posted_job['id']}/applicants")
        assert resp.status_code == 403

    def test_deleted_applicant_is_flagged(self, recruiter, applicant, posted_job, application, repo):
        repo.delete("users", applicant.user["id"])
        resp = recruiter.client.get(f"/api/v1/application/{posted_job['id']}/applicants")
        assert resp.status_code == 200
        entry = resp.json()["job"]["applications"][0]
        assert entry["applicant"] is None
        assert entry["orphaned"] is True


class TestAppliedJobs:

    def test_applicant_sees_own_applications(self, applicant, posted_job, application):
        resp = applicant.client.get("/api/v1/application/get")
        assert resp.status_code == 200
        applications = resp.json()["applications"]
        assert len(applications) == 1
        assert applications[0]["job"]["id"] == posted_job["id"]
        assert applications[0]["orphaned"] is False

    def test_deleted_job_is_flagged_not_fatal(self, recruiter, applicant, posted_job, application):
        recruiter.client.delete(f"/api/v1/job/{posted_job['id']}")
        resp = applicant.client.get("/api/v1/application/get")
        assert resp.status_code == 200
        applications = resp.json()["applications"]
        assert applications[0]["job"] is None
        assert applications[0]["orphaned"] is True

    def test_recruiter_forbidden(self, recruiter):
        assert recruiter.client.get("/api/v1/application/get").status_code == 403


class TestStatusLifecycle:

    def url(self, application):
        return f"/api/v1/application/status/{application['id']}"

    @pytest.mark.parametrize("status", ["accepted", "Rejected"])
    def test_owner_decides_pending_application(self, recruiter, application, repo, status):
        resp = recruiter.client.put(self.url(application), json={"status": status})
        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert repo.get("applications", application["id"])["status"] == status.lower()

    @pytest.mark.parametrize("first,second", [
        ("accepted", "rejected"),
        ("rejected", "accepted"),
        ("accepted", "pending"),
        ("rejected", "rejected"),
    ])
    def test_decided_application_is_final(self, recruiter, application, repo, first, second):
        recruiter.client.put(self.url(application), json={"status": first})
        resp = recruiter.client.put(self.url(application), json={"status": second})
        assert resp.status_code == 400
        assert repo.get("applications", application["id"])["status"] == first

    def test_other_recruiter_cannot_change_status(self, other_recruiter, application, repo):
        resp = other_recruiter.client.put(self.url(application), json={"status": "accepted"})
        assert resp.status_code == 403
        assert repo.get("applications", application["id"])["status"] == "pending"

    def test_applicant_cannot_change_status(self, applicant, application, repo):
        resp = applicant.client.put(self.url(application), json={"status": "accepted"})
        assert resp.status_code == 403
        assert repo.get("applications", application["id"])["status"] == "pending"

    def test_orphaned_application_is_immutable(self, recruiter, posted_job, application, repo):
        recruiter.client.delete(f"/api/v1/job/{posted_job['id']}")
        resp = recruiter.client.put(self.url(application), json={"status": "accepted"})
        assert resp.status_code == 404
        assert repo.get("applications", application["id"])["status"] == "pending"

    def test_unknown_status_value(self, recruiter, application):
        resp = recruiter.client.put(self.url(application), json={"status": "maybe"})
        assert resp.status_code == 422

    def test_missing_application(self, recruiter):
        resp = recruiter.client.put("/api/v1/application/status/doesnotexist", json={"status": "accepted"})
        assert resp.status_code == 404
