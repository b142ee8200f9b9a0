"""Job endpoints: public listing/filters, owner-only posting and management."""
import pytest
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from tests.conftest import login, make_job

NEW_JOB = {
    "title": "Backend Engineer",
    "location": "Dhaka",
    "jobType": "Full-time",
    "category": "Engineering",
    "salaryRange": {"min": 40000, "max": 60000, "currency": "bdt"},
    "description": "Build APIs",
    "company": "Acme",
    "company_logo": "https://acme.test/logo.png",
    "hr_name": "A",
    "hr_email": "a@x.com",
    "applicationDeadline": "2026-12-31",
    "requirements": ["Python", "MongoDB"],
    "responsibilities": ["Ship it"],
}


@pytest.fixture
def seeded(store):
    ids = {
        "backend": make_job(store, title="Backend", location="Dhaka",
                            salaryRange={"min": 40000, "max": 60000}),
        "frontend": make_job(store, title="Frontend", location="Chittagong", hr_email="b@x.com",
                             salaryRange={"min": 30000, "max": 50000}),
        "data": make_job(store, title="Data", location="Dhaka North",
                         salaryRange={"min": 70000, "max": 90000}),
    }
    return ids


def titles(response):
    assert response.status_code == 200
    return [job["title"] for job in response.json()]


def test_list_all_jobs(client, seeded):
    assert sorted(titles(client.get("/jobs"))) == ["Backend", "Data", "Frontend"]


def test_list_by_owner(client, seeded):
    assert titles(client.get("/jobs", params={"email": "b@x.com"})) == ["Frontend"]


def test_search_location_case_insensitive(client, seeded):
    assert sorted(titles(client.get("/jobs", params={"search": "dhaka"}))) == ["Backend", "Data"]


def test_salary_filters(client, seeded):
    assert sorted(titles(client.get("/jobs", params={"minSalary": "40000"}))) == ["Backend", "Data"]
    assert sorted(titles(client.get("/jobs", params={"maxSalary": "60000"}))) == ["Backend", "Frontend"]


def test_bad_salary_filters_ignored(client, seeded):
    params = {"minSalary": "abc", "maxSalary": "0", "search": ""}
    assert len(titles(client.get("/jobs", params=params))) == 3


def test_sort_by_min_salary(client, seeded):
    assert titles(client.get("/jobs", params={"sort": "true"})) == ["Data", "Backend", "Frontend"]


def test_front_end_style_query_string(client, seeded):
    # The client always sends every parameter, empty or not
    response = client.get("/jobs?sort=false&search=&minSalary=&maxSalary=")
    assert len(titles(response)) == 3


def test_pagination_and_count(client, seeded):
    first = titles(client.get("/jobs", params={"sort": "true", "page": "0", "size": "2"}))
    second = titles(client.get("/jobs", params={"sort": "true", "page": "1", "size": "2"}))
    assert first == ["Data", "Backend"]
    assert second == ["Frontend"]
    assert client.get("/jobs/count").json() == {"count": 3}
    assert client.get("/jobs/count", params={"search": "dhaka"}).json() == {"count": 2}


def test_get_job_by_id(client, seeded):
    response = client.get(f"/jobs/{seeded['data']}")
    assert response.status_code == 200
    job = response.json()
    assert job["_id"] == seeded["data"]
    assert job["title"] == "Data"


def test_get_missing_job_is_null(client):
    response = client.get("/jobs/64b7f0c2a1b2c3d4e5f60718")
    assert response.status_code == 200
    assert response.json() is None


def test_get_malformed_id_is_invalid_argument(client):
    response = client.get("/jobs/not-an-id")
    assert response.status_code == 400
    assert response.json()["status"] == 400


def test_my_posted_jobs_scenario(client, seeded):
    login(client, "a@x.com")
    response = client.get("/jobs/myposted", params={"email": "a@x.com"})
    assert response.status_code == 200
    jobs = response.json()
    assert sorted(j["title"] for j in jobs) == ["Backend", "Data"]
    assert all(j["hr_email"] == "a@x.com" for j in jobs)

    assert client.get("/jobs/myposted", params={"email": "b@x.com"}).status_code == 403


def test_post_job_requires_login(client):
    assert client.post("/jobs", json=NEW_JOB).status_code == 401


def test_post_job_under_someone_else_is_forbidden(client):
    login(client, "b@x.com")
    assert client.post("/jobs", json=NEW_JOB).status_code == 403


def test_post_job(client, store):
    login(client, "a@x.com")
    response = client.post("/jobs", json={**NEW_JOB, "applicationCount": 42, "extra": "kept"})
    assert response.status_code == 200
    body = response.json()
    assert body["acknowledged"] is True

    job = client.get(f"/jobs/{body['insertedId']}").json()
    assert job["title"] == "Backend Engineer"
    assert job["salaryRange"] == {"min": 40000, "max": 60000, "currency": "bdt"}
    assert job["requirements"] == ["Python", "MongoDB"]
    assert job["applicationCount"] == 0
    assert job["extra"] == "kept"


def test_post_job_validation(client):
    login(client, "a@x.com")
    response = client.post("/jobs", json={"hr_email": "a@x.com"})
    assert response.status_code == 400
    assert response.json()["errors"]


def test_update_own_job(client, seeded):
    login(client, "a@x.com")
    response = client.put(f"/jobs/{seeded['backend']}", json={"title": "Senior Backend", "hr_email": "b@x.com"})
    assert response.status_code == 200
    assert response.json() == {"acknowledged": True, "matchedCount": 1, "modifiedCount": 1}
    job = client.get(f"/jobs/{seeded['backend']}").json()
    assert job["title"] == "Senior Backend"
    assert job["hr_email"] == "a@x.com"


def test_update_other_recruiters_job_forbidden(client, seeded):
    login(client, "a@x.com")
    assert client.put(f"/jobs/{seeded['frontend']}", json={"title": "Mine now"}).status_code == 403


def test_update_missing_job(client):
    login(client, "a@x.com")
    assert client.put("/jobs/64b7f0c2a1b2c3d4e5f60718", json={"title": "x"}).status_code == 404


def test_delete_job(client, seeded):
    login(client, "b@x.com")
    assert client.delete(f"/jobs/{seeded['backend']}").status_code == 403

    response = client.delete(f"/jobs/{seeded['frontend']}")
    assert response.json() == {"acknowledged": True, "deletedCount": 1}
    assert client.get(f"/jobs/{seeded['frontend']}").json() is None
    assert client.delete(f"/jobs/{seeded['frontend']}").status_code == 404


def test_health(client):
    root = client.get("/")
    assert root.status_code == 200
    assert root.text == "Job is falling from the sky"
    assert client.get("/health").json() == {"status": "healthy", "mongodb": "connected"}


def test_mixed_case_recruiter_email_kept_as_posted(client, store):
    login(client, "Rifat@Example.COM")
    response = client.post("/jobs", json={**NEW_JOB, "hr_email": "Rifat@Example.COM"})
    assert response.status_code == 200
    assert store.jobs.find_one()["hr_email"] == "Rifat@Example.COM"

    response = client.get("/jobs/myposted", params={"email": "Rifat@Example.COM"})
    assert response.status_code == 200
    assert [j["hr_email"] for j in response.json()] == ["Rifat@Example.COM"]


def test_display_name_email_rejected(client):
    login(client, "a@x.com")
    response = client.post("/jobs", json={**NEW_JOB, "hr_email": "A <a@x.com>"})
    assert response.status_code == 400


@pytest.mark.parametrize("body", [
    {"$where": "sleep(1000)"},
    {"salaryRange": {"$gt": 1}},
    {"requirements": [{"$set": {"x": 1}}]},
])
def test_operator_keys_in_job_body_rejected(client, store, body):
    login(client, "a@x.com")
    response = client.post("/jobs", json={**NEW_JOB, **body})
    assert response.status_code == 400
    assert response.json()["message"] == "invalid request"
    assert store.jobs.count_documents() == 0


def test_operator_keys_in_job_update_rejected(client, seeded):
    login(client, "a@x.com")
    response = client.put(f"/jobs/{seeded['backend']}", json={"title": "X", "$unset": {"hr_email": ""}})
    assert response.status_code == 400
    assert client.get(f"/jobs/{seeded['backend']}").json()["title"] == "Backend"


def test_store_unreachable_is_503(client, store, monkeypatch):
    def unreachable(*args, **kwargs):
        raise ServerSelectionTimeoutError("no servers available")

    monkeypatch.setattr(store.jobs, "find", unreachable)
    response = client.get("/jobs")
    assert response.status_code == 503
    assert response.json() == {"message": "document store unavailable", "status": 503}


def test_store_error_is_generic_500(client, store, monkeypatch):
    def failing(*args, **kwargs):
        raise PyMongoError("cursor killed")

    monkeypatch.setattr(store.jobs, "find", failing)
    response = client.get("/jobs")
    assert response.status_code == 500
    assert response.json() == {"message": "internal server error", "status": 500}
    assert "cursor killed" not in response.text
