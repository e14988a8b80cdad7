"""Tests for HTTP routes using FastAPI TestClient."""

import json
import uuid
from unittest.mock import patch

import pytest

from jobtrack.applications.models import JobApplication
from jobtrack.profile.models import Education, Skill, UserProfile, WorkExperience
from jobtrack.resumes.models import Resume

API = "/api/v1"


@pytest.fixture
def full_profile(db_session, test_user):
    db_session.add(UserProfile(user_id=test_user.id, first_name="Jane", last_name="Doe", email="jane@example.com"))
    db_session.add(WorkExperience(user_id=test_user.id, job_title="Dev", company="Acme", start_date="2020-01"))
    db_session.add(Education(user_id=test_user.id, degree="BSc", institution="UT"))
    db_session.add(Skill(user_id=test_user.id, name="Python", category="technical"))
    db_session.commit()


class TestHealthEndpoint:
    def test_health_returns_ok(self, app_client):
        response = app_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "uptime_seconds" in data


class TestAuth:
    def test_protected_routes_require_session(self, app_client):
        for path in ("/applications", "/resumes", "/cover-letters", "/dashboard/stats", "/profile"):
            response = app_client.get(API + path)
            assert response.status_code == 401, path
            assert response.json() == {"error": "Unauthorized"}

    def test_session_checked_before_body_schema(self, app_client):
        response = app_client.post(f"{API}/applications", json={"company": "", "status": "hired"})
        assert response.status_code == 401

    def test_unparseable_body_is_400_even_without_session(self, app_client):
        response = app_client.post(
            f"{API}/applications", content="{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["details"][0]["type"] == "json_invalid"

    def test_register_login_logout(self, app_client):
        body = {"email": "new@example.com", "password": "s3cret-pass"}
        assert app_client.post(f"{API}/auth/register", json=body).status_code == 201
        assert app_client.get(f"{API}/auth/me").json()["email"] == "new@example.com"
        assert app_client.post(f"{API}/auth/register", json=body).status_code == 409

        app_client.post(f"{API}/auth/logout")
        assert app_client.get(f"{API}/auth/me").status_code == 401

        assert app_client.post(f"{API}/auth/login", json={**body, "password": "wrong-pass"}).status_code == 401
        assert app_client.post(f"{API}/auth/login", json=body).status_code == 200

    def test_short_password_rejected(self, app_client):
        response = app_client.post(f"{API}/auth/register", json={"email": "a@example.com", "password": "short"})
        assert response.status_code == 400


class TestValidationErrors:
    def test_itemised_details(self, auth_client):
        response = auth_client.post(f"{API}/applications", json={"company": ""})
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Invalid request data"
        fields = {tuple(d["loc"])[-1] for d in data["details"]}
        assert {"company", "position"} <= fields
        assert all({"loc", "msg", "type"} <= set(d) for d in data["details"])

    def test_bad_query_params(self, auth_client):
        assert auth_client.get(f"{API}/applications?limit=0").status_code == 400
        assert auth_client.get(f"{API}/dashboard/activity?limit=51").status_code == 400


class TestApplicationRoutes:
    def test_crud_cycle(self, auth_client):
        created = auth_client.post(f"{API}/applications", json={"company": "Acme", "position": "Engineer"})
        assert created.status_code == 201
        app_id = created.json()["id"]
        assert created.json()["status"] == "applied"

        updated = auth_client.put(f"{API}/applications/{app_id}", json={"status": "offer"})
        assert updated.json()["status"] == "offer"
        assert updated.json()["company"] == "Acme"

        assert auth_client.get(f"{API}/applications?status=offer").json()[0]["id"] == app_id
        assert auth_client.delete(f"{API}/applications/{app_id}").json() == {"ok": True}
        assert auth_client.get(f"{API}/applications/{app_id}").status_code == 404

    def test_foreign_application_is_not_found(self, auth_client, db_session, other_user):
        theirs = JobApplication(user_id=other_user.id, company="Secret", position="CEO")
        db_session.add(theirs)
        db_session.commit()

        assert auth_client.get(f"{API}/applications/{theirs.id}").status_code == 404
        assert auth_client.put(f"{API}/applications/{theirs.id}", json={"company": "Mine"}).status_code == 404
        assert auth_client.delete(f"{API}/applications/{theirs.id}").status_code == 404
        db_session.refresh(theirs)
        assert theirs.company == "Secret"
        assert auth_client.get(f"{API}/applications").json() == []

    def test_garbage_id_is_not_found(self, auth_client):
        response = auth_client.get(f"{API}/applications/not-a-uuid")
        assert response.status_code == 404
        assert response.json() == {"error": "Application not found"}

    def test_activity_after_create_and_status_change(self, auth_client):
        app_id = auth_client.post(
            f"{API}/applications", json={"company": "Acme", "position": "Engineer", "status": "applied"}
        ).json()["id"]
        auth_client.put(f"{API}/applications/{app_id}", json={"status": "interviewing"})

        activity = auth_client.get(f"{API}/dashboard/activity").json()
        assert len(activity) == 1
        assert activity[0]["type"] == "application"
        assert activity[0]["action"] == "created"
        assert activity[0]["title"] == "Engineer at Acme"


class TestResumeRoutes:
    def test_content_round_trips(self, auth_client):
        content = json.dumps({"summary": "Engineer — ünïcode", "skills": ["Python", "SQL"]}, ensure_ascii=False)
        created = auth_client.post(f"{API}/resumes", json={"title": "Main", "content": content, "is_default": True})
        assert created.status_code == 201
        fetched = auth_client.get(f"{API}/resumes/{created.json()['id']}").json()
        assert fetched["content"] == content

    def test_single_default(self, auth_client):
        first = auth_client.post(f"{API}/resumes", json={"title": "A", "content": "{}", "is_default": True}).json()
        second = auth_client.post(f"{API}/resumes", json={"title": "B", "content": "{}"}).json()
        auth_client.put(f"{API}/resumes/{second['id']}", json={"is_default": True})

        defaults = auth_client.get(f"{API}/resumes?is_default=true").json()
        assert [r["id"] for r in defaults] == [second["id"]]
        assert auth_client.get(f"{API}/resumes/{first['id']}").json()["is_default"] is False

    def test_linking_foreign_application_is_404(self, auth_client, db_session, other_user):
        theirs = JobApplication(user_id=other_user.id, company="SecretCorp", position="CEO")
        db_session.add(theirs)
        db_session.commit()

        response = auth_client.post(
            f"{API}/resumes", json={"title": "R", "content": "{}", "job_application_id": str(theirs.id)}
        )
        assert response.status_code == 404
        assert response.json()["error"] == "Job application not found"

        mine = auth_client.post(f"{API}/resumes", json={"title": "R", "content": "{}"}).json()
        response = auth_client.put(f"{API}/resumes/{mine['id']}", json={"job_application_id": str(theirs.id)})
        assert response.status_code == 404
        assert db_session.query(Resume).filter(Resume.job_application_id == theirs.id).count() == 0


class TestCoverLetterRoutes:
    def test_generate_without_key_is_503(self, auth_client):
        with patch("jobtrack.integrations.anthropic_client.settings") as mock_settings:
            mock_settings.ai_configured = False
            response = auth_client.post(
                f"{API}/cover-letters/generate", json={"company": "Acme", "position": "Engineer"}
            )
        assert response.status_code == 503
        assert "not configured" in response.json()["error"]

    def test_generate_requires_company_without_application(self, auth_client):
        response = auth_client.post(f"{API}/cover-letters/generate", json={"position": "Engineer"})
        assert response.status_code == 400

    def test_generate_unknown_application_is_404(self, auth_client):
        response = auth_client.post(f"{API}/cover-letters/generate", json={"job_application_id": str(uuid.uuid4())})
        assert response.status_code == 404

    @patch("jobtrack.cover_letters.service.generate_cover_letter_text")
    def test_generate_returns_letter(self, mock_gen, auth_client):
        mock_gen.return_value = {
            "cover_letter": "Dear Acme,",
            "model_used": "m",
            "tokens": {"input": 1, "output": 1, "total": 2},
            "cost_usd": 0.0,
        }
        response = auth_client.post(f"{API}/cover-letters/generate", json={"company": "Acme", "position": "Engineer"})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["cover_letter"] == "Dear Acme,"
        assert data["metadata"]["company"] == "Acme"

    @patch("jobtrack.cover_letters.service.generate_cover_letter_text")
    def test_generation_failure_is_502(self, mock_gen, auth_client):
        from jobtrack.integrations.anthropic_client import AIGenerationError

        mock_gen.side_effect = AIGenerationError("AI returned an empty response")
        response = auth_client.post(f"{API}/cover-letters/generate", json={"company": "Acme", "position": "Engineer"})
        assert response.status_code == 502

    def test_download_docx(self, auth_client):
        cl = auth_client.post(f"{API}/cover-letters", json={"title": "Acme letter", "content": "Dear team,\n\nHi."}).json()
        response = auth_client.get(f"{API}/cover-letters/{cl['id']}/download")
        assert response.status_code == 200
        assert response.content[:4] == b"PK\x03\x04"
        assert 'filename="Cover_Letter_Acme_letter.docx"' in response.headers["content-disposition"]

    def test_linking_foreign_records_is_404(self, auth_client, db_session, other_user):
        theirs = JobApplication(user_id=other_user.id, company="SecretCorp", position="CEO")
        their_resume = Resume(user_id=other_user.id, title="Theirs", content="{}")
        db_session.add_all([theirs, their_resume])
        db_session.commit()

        response = auth_client.post(
            f"{API}/cover-letters",
            json={"title": "Letter", "content": "Hi", "job_application_id": str(theirs.id)},
        )
        assert response.status_code == 404
        response = auth_client.post(
            f"{API}/cover-letters", json={"title": "Letter", "content": "Hi", "resume_id": str(their_resume.id)}
        )
        assert response.status_code == 404
        assert response.json()["error"] == "Resume not found"

        cl = auth_client.post(f"{API}/cover-letters", json={"title": "Letter", "content": "Hi"}).json()
        response = auth_client.put(f"{API}/cover-letters/{cl['id']}", json={"job_application_id": str(theirs.id)})
        assert response.status_code == 404
        download = auth_client.get(f"{API}/cover-letters/{cl['id']}/download")
        assert "SecretCorp" not in download.headers["content-disposition"]


class TestProfileRoutes:
    def test_profile_upsert(self, auth_client):
        assert auth_client.get(f"{API}/profile").status_code == 404
        assert auth_client.put(f"{API}/profile", json={"first_name": "Jane"}).status_code == 201
        response = auth_client.put(f"{API}/profile", json={"last_name": "Doe"})
        assert response.status_code == 200
        assert response.json()["first_name"] == "Jane"

    def test_section_crud_and_reorder(self, auth_client):
        base = f"{API}/profile/skills"
        a = auth_client.post(base, json={"name": "Python", "category": "technical"}).json()
        b = auth_client.post(base, json={"name": "Go", "category": "technical", "display_order": 1}).json()
        assert auth_client.post(base, json={"name": "X", "category": "magic"}).status_code == 400

        response = auth_client.put(
            f"{base}/order",
            json={"items": [{"id": a["id"], "display_order": 5}, {"id": b["id"], "display_order": 0}]},
        )
        assert response.status_code == 200
        assert [s["name"] for s in auth_client.get(base).json()] == ["Go", "Python"]
        assert auth_client.delete(f"{base}/{a['id']}").json() == {"ok": True}
        assert auth_client.get(f"{base}/{a['id']}").status_code == 404


class TestResumeImportRoutes:
    URL = f"{API}/profile/resume-import"

    def test_requires_session(self, app_client):
        response = app_client.post(self.URL, files={"file": ("cv.txt", b"Jane Doe", "text/plain")})
        assert response.status_code == 401

    def test_empty_file_is_400(self, auth_client):
        response = auth_client.post(self.URL, files={"file": ("cv.txt", b"", "text/plain")})
        assert response.status_code == 400
        assert "empty" in response.json()["error"]

    def test_missing_file_is_400(self, auth_client):
        response = auth_client.post(self.URL, data={"note": "no file"})
        assert response.status_code == 400

    def test_too_large_is_413(self, auth_client):
        with patch("jobtrack.profile.routes.settings") as mock_settings:
            mock_settings.resume_import_max_bytes = 16
            response = auth_client.post(self.URL, files={"file": ("cv.txt", b"x" * 17, "text/plain")})
        assert response.status_code == 413
        assert "too large" in response.json()["error"]

    def test_unsupported_type_is_415(self, auth_client):
        response = auth_client.post(self.URL, files={"file": ("me.png", b"\x89PNG\r\n", "image/png")})
        assert response.status_code == 415

    def test_without_key_is_503(self, auth_client):
        with patch("jobtrack.integrations.anthropic_client.settings") as mock_settings:
            mock_settings.ai_configured = False
            response = auth_client.post(self.URL, files={"file": ("cv.txt", b"Jane Doe, engineer", "text/plain")})
        assert response.status_code == 503

    @patch("jobtrack.profile.resume_import.extract_resume_profile")
    def test_ai_failure_is_502(self, mock_extract, auth_client):
        from jobtrack.integrations.anthropic_client import AIGenerationError

        mock_extract.side_effect = AIGenerationError("AI returned an unparsable response")
        response = auth_client.post(self.URL, files={"file": ("cv.txt", b"Jane Doe, engineer", "text/plain")})
        assert response.status_code == 502

    @patch("jobtrack.profile.resume_import.extract_resume_profile")
    def test_returns_sections_without_saving(self, mock_extract, auth_client, db_session):
        mock_extract.return_value = {
            "profile": {"first_name": "Jane", "last_name": "Doe", "email": "jane@doe.dev", "phone": "555 0100"},
            "work_experiences": [{"job_title": "Engineer", "company": "Acme", "start_date": "2021-02"}],
            "education": [],
            "skills": [{"name": "Go", "category": "technical"}],
            "projects": [],
            "certifications": [],
            "achievements": [],
            "references": [],
            "model_used": "m",
            "tokens": {"input": 1, "output": 1, "total": 2},
            "cost_usd": 0.0,
        }
        response = auth_client.post(self.URL, files={"file": ("cv.txt", b"Jane Doe\nEngineer, Acme", "text/plain")})
        assert response.status_code == 200
        data = response.json()
        assert data["profile"]["first_name"] == "Jane"
        assert data["work_experiences"][0]["start_date"] == "2021-02"
        assert data["skills"] == [
            {"name": "Go", "category": "technical", "proficiency_level": None, "years_of_experience": None, "display_order": 0}
        ]
        assert data["warnings"] == []
        assert db_session.query(WorkExperience).count() == 0
        assert db_session.query(UserProfile).count() == 0


class TestResumeGenerationRoutes:
    def test_validation_endpoint(self, auth_client):
        response = auth_client.post(f"{API}/resume-generation", json={"title": "CV"})
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert len(data["errors"]) == 4

    def test_pdf_validation_failure_is_400(self, auth_client):
        response = auth_client.post(f"{API}/resume-generation/pdf", json={"title": "CV"})
        assert response.status_code == 400
        assert response.json()["details"]

    @patch("jobtrack.resume_generation.routes.html_to_pdf", return_value=b"%PDF-1.4 test")
    def test_pdf_headers(self, mock_pdf, auth_client, full_profile):
        response = auth_client.post(f"{API}/resume-generation/pdf", json={"title": "Jane Doe CV"})
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == 'attachment; filename="Jane_Doe_CV.pdf"'
        assert response.headers["content-length"] == str(len(b"%PDF-1.4 test"))
        assert "Jane" in mock_pdf.call_args.args[0]

    def test_preview_is_html(self, auth_client, full_profile):
        response = auth_client.post(f"{API}/resume-generation/preview", json={"title": "CV"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "box-shadow" in response.text

    def test_resume_data(self, auth_client, full_profile):
        data = auth_client.get(f"{API}/resume-generation").json()
        assert data["profile"]["first_name"] == "Jane"
        assert len(data["skills"]) == 1


class TestTailoredResumeRoutes:
    def test_summary_without_tailored_resume(self, auth_client, test_application):
        data = auth_client.get(f"{API}/applications/{test_application.id}/resume").json()
        assert data["company"] == "Acme"
        assert data["has_job_description"] is True
        assert data["tailored_resume"] is None

    def test_ai_selection_needs_job_description(self, auth_client, db_session, test_user):
        app = JobApplication(user_id=test_user.id, company="Acme", position="Dev")
        db_session.add(app)
        db_session.commit()
        response = auth_client.post(f"{API}/applications/{app.id}/resume", json={"title": "CV"})
        assert response.status_code == 400

    def test_render_without_ai_then_save(self, auth_client, test_application, full_profile, db_session):
        url = f"{API}/applications/{test_application.id}/resume"
        rendered = auth_client.post(url, json={"title": "Acme CV", "use_ai_selection": False}).json()
        assert "Dev" in rendered["html"]
        assert rendered["ai_selection"] is None
        assert rendered["application"]["company"] == "Acme"

        saved = auth_client.put(url, json={"title": "Acme CV", "content": rendered["content"]})
        assert saved.json()["is_new"] is True
        assert saved.json()["resume"]["is_tailored"] is True
        again = auth_client.put(url, json={"title": "Acme CV v2", "content": rendered["content"]})
        assert again.json()["is_new"] is False
        assert db_session.query(Resume).count() == 1

        summary = auth_client.get(url).json()
        assert summary["tailored_resume"]["title"] == "Acme CV v2"

    @patch("jobtrack.resume_generation.service.analyze_job_description")
    @patch("jobtrack.resume_generation.service.select_resume_content")
    def test_ai_selection_response(self, mock_select, mock_analyze, auth_client, test_application, full_profile):
        mock_analyze.return_value = {"requirements": [], "skills": [], "seniority": "mid", "industry": ""}
        mock_select.return_value = {"selected_work_experiences": [12345], "selected_skills": []}
        response = auth_client.post(f"{API}/applications/{test_application.id}/resume?format=preview", json={"title": "CV"})
        assert response.status_code == 200
        data = response.json()
        assert data["ai_selection"]["selected_work_experiences"] == []
        assert json.loads(data["content"])["work_experiences"] == []

    def test_foreign_application_is_404(self, auth_client, db_session, other_user):
        theirs = JobApplication(user_id=other_user.id, company="Secret", position="CEO", job_description="x")
        db_session.add(theirs)
        db_session.commit()
        assert auth_client.get(f"{API}/applications/{theirs.id}/resume").status_code == 404
        assert auth_client.put(
            f"{API}/applications/{theirs.id}/resume", json={"title": "T", "content": "{}"}
        ).status_code == 404


class TestConversationStarterRoutes:
    @patch("jobtrack.conversation_starters.service.generate_conversation_starter")
    def test_generate(self, mock_gen, auth_client):
        mock_gen.return_value = {"message": "Hi Sam!", "tokens": {"total": 5}}
        response = auth_client.post(
            f"{API}/conversation-starters/generate",
            json={"prospect_details": "Sam Lee, staff engineer at Globex, Postgres fan."},
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Hi Sam!", "success": True}

    def test_short_details_rejected(self, auth_client):
        response = auth_client.post(f"{API}/conversation-starters/generate", json={"prospect_details": "hi"})
        assert response.status_code == 400
