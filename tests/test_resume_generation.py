"""Tests for resume validation, content selection and rendering."""

from unittest.mock import patch

import pytest

from jobtrack.integrations.anthropic_client import AIGenerationError, AIServiceNotConfigured
from jobtrack.resume_generation.rendering import (
    date_range,
    format_month,
    group_skills,
    pdf_filename,
    preview_html,
    render_resume_html,
)
from jobtrack.resume_generation.schemas import (
    ContentSelection,
    JobApplicationResumeRequest,
    ManualOverrides,
)
from jobtrack.resume_generation.service import (
    fallback_selection,
    filter_resume_data,
    save_tailored_resume,
    select_content_for_application,
    selection_from_data,
    tailor_resume_data,
    validate_generation,
)


@pytest.fixture
def resume_data():
    return {
        "profile": {
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane@example.com",
            "phone": "555-0100",
            "city": "Austin",
            "state": "TX",
            "linkedin_url": "https://linkedin.com/in/jane",
            "github_url": None,
            "portfolio_url": None,
            "professional_summary": "Backend engineer <b>shipping</b> APIs.",
        },
        "work_experiences": [
            {"id": 1, "job_title": "Senior Dev", "company": "Acme", "start_date": "2022-03", "end_date": None,
             "is_current": True, "description": "- Built APIs\n- Led team", "technologies": "Python"},
            {"id": 2, "job_title": "Dev", "company": "Globex", "start_date": "2019-01", "end_date": "2022-02",
             "is_current": False, "description": None, "technologies": None},
            {"id": 3, "job_title": "Intern", "company": "Initech", "start_date": "2018-06", "end_date": "2018-09",
             "is_current": False, "description": None, "technologies": None},
        ],
        "education": [
            {"id": 10, "degree": "BSc", "field_of_study": "CS", "institution": "UT", "start_date": "2014-09",
             "end_date": "2018-05", "gpa": "3.8", "honors": None, "relevant_coursework": None, "location": None},
        ],
        "skills": [
            {"id": 20, "name": "Python", "category": "technical"},
            {"id": 21, "name": "Mentoring", "category": "soft"},
            {"id": 22, "name": "Docker", "category": "tool"},
        ],
        "projects": [
            {"id": 30, "title": "Old", "start_date": "2017-01", "end_date": None, "is_ongoing": False},
            {"id": 31, "title": "New", "start_date": "2023-01", "end_date": None, "is_ongoing": True},
        ],
        "certifications": [],
        "achievements": [],
        "references": [{"id": 50, "name": "Bob", "title": "CTO", "company": "Acme", "email": None, "phone": None}],
    }


class TestValidateGeneration:
    def test_valid_default_selection(self, resume_data):
        assert validate_generation(resume_data, ContentSelection()) == []

    def test_missing_profile(self, resume_data):
        resume_data["profile"] = None
        errors = validate_generation(resume_data, ContentSelection())
        assert len(errors) == 1
        assert "Personal information" in errors[0]

    def test_empty_core_sections(self, resume_data):
        for key in ("work_experiences", "education", "skills"):
            resume_data[key] = []
        assert len(validate_generation(resume_data, ContentSelection())) == 3

    def test_excluded_sections_not_required(self, resume_data):
        resume_data["skills"] = []
        assert validate_generation(resume_data, ContentSelection(include_skills=False)) == []

    def test_unknown_ids_reported(self, resume_data):
        errors = validate_generation(resume_data, ContentSelection(work_experience_ids=[1, 99], education_ids=[77]))
        assert "Work experience IDs not found: 99" in errors
        assert "Education IDs not found: 77" in errors


class TestFilterResumeData:
    def test_ids_and_flags(self, resume_data):
        selection = ContentSelection(work_experience_ids=[2], include_education=False, skill_categories=["soft"])
        filtered = filter_resume_data(resume_data, selection)
        assert [w["id"] for w in filtered["work_experiences"]] == [2]
        assert filtered["education"] == []
        assert [s["name"] for s in filtered["skills"]] == ["Mentoring"]
        assert filtered["projects"] == []
        assert filtered["references"] == []

    def test_omitted_ids_mean_all(self, resume_data):
        filtered = filter_resume_data(resume_data, ContentSelection(include_projects=True))
        assert len(filtered["projects"]) == 2


class TestContentSelection:
    _REQUEST = JobApplicationResumeRequest(title="Acme resume", max_work_experiences=2, max_projects=1, max_skills=5)

    @patch("jobtrack.resume_generation.service.select_resume_content")
    @patch("jobtrack.resume_generation.service.analyze_job_description")
    def test_unknown_ids_dropped_and_capped(self, mock_analyze, mock_select, resume_data):
        mock_analyze.return_value = {"requirements": ["APIs"], "skills": ["Python"], "seniority": "senior", "industry": "SaaS"}
        mock_select.return_value = {
            "selected_work_experiences": [3, 999, 1, 2],
            "selected_education": [10],
            "selected_skills": [20, 404],
            "selected_projects": [31, 30],
            "selected_certifications": [],
            "selected_achievements": [],
            "relevance_scores": [],
            "overall_strategy": "Lead with backend work",
            "key_matching_points": ["Python"],
            "model_used": "m",
            "tokens": {"total": 10},
            "cost_usd": 0.0,
        }
        selection = select_content_for_application(resume_data, "JD", self._REQUEST)
        assert selection["selected_work_experiences"] == [3, 1]
        assert selection["selected_skills"] == [20]
        assert selection["selected_projects"] == [31]
        assert selection["fallback"] is False
        assert selection["job_analysis"]["seniority"] == "senior"

    @patch("jobtrack.resume_generation.service.analyze_job_description", side_effect=AIGenerationError("boom"))
    def test_generation_error_falls_back_to_recent(self, _mock, resume_data):
        selection = select_content_for_application(resume_data, "JD", self._REQUEST)
        assert selection["fallback"] is True
        assert selection["selected_work_experiences"] == [1, 2]
        assert selection["selected_projects"] == [31]

    @patch("jobtrack.resume_generation.service.analyze_job_description", side_effect=AIServiceNotConfigured("no key"))
    def test_missing_key_propagates(self, _mock, resume_data):
        with pytest.raises(AIServiceNotConfigured):
            select_content_for_application(resume_data, "JD", self._REQUEST)

    def test_fallback_keeps_skill_limit(self, resume_data):
        request = JobApplicationResumeRequest(title="T", max_skills=5)
        assert fallback_selection(resume_data, request)["selected_skills"] == [20, 21, 22]


class TestTailorResumeData:
    def test_manual_overrides_replace_only_named_sections(self, resume_data, test_application):
        ai = {
            "selected_work_experiences": [1],
            "selected_education": [10],
            "selected_skills": [20],
            "selected_projects": [],
            "selected_certifications": [],
            "selected_achievements": [],
        }
        request = JobApplicationResumeRequest(title="T", manual_overrides=ManualOverrides(skill_ids=[21, 22]))
        with patch("jobtrack.resume_generation.service.select_content_for_application", return_value=ai):
            selected, ai_selection = tailor_resume_data(resume_data, test_application, request)
        assert ai_selection is ai
        assert [w["id"] for w in selected["work_experiences"]] == [1]
        assert [s["id"] for s in selected["skills"]] == [21, 22]
        assert selected["references"] == []

    def test_without_ai_uses_everything_but_references(self, resume_data, test_application):
        request = JobApplicationResumeRequest(title="T", use_ai_selection=False)
        selected, ai_selection = tailor_resume_data(resume_data, test_application, request)
        assert ai_selection is None
        assert len(selected["work_experiences"]) == 3
        assert selected["references"] == []

    def test_selection_from_data(self, resume_data):
        selection = selection_from_data({**resume_data, "certifications": []})
        assert selection.include_summary is True
        assert selection.include_certifications is False
        assert selection.work_experience_ids == [1, 2, 3]


class TestSaveTailoredResume:
    def test_creates_then_updates(self, db_session, test_user, test_application):
        resume, is_new = save_tailored_resume(db_session, test_user.id, test_application, "Acme v1", '{"a": 1}')
        db_session.commit()
        assert is_new is True
        assert resume.is_tailored is True
        assert resume.job_application_id == test_application.id

        again, is_new = save_tailored_resume(db_session, test_user.id, test_application, "Acme v2", '{"a": 2}')
        db_session.commit()
        assert is_new is False
        assert again.id == resume.id
        assert again.content == '{"a": 2}'


class TestRendering:
    def test_format_month(self):
        assert format_month("2023-04") == "Apr 2023"
        assert format_month(None) == ""
        assert format_month("soon") == "soon"

    def test_date_range(self):
        assert date_range("2022-03", None, current=True) == "Mar 2022 - Present"
        assert date_range("2019-01", "2022-02") == "Jan 2019 - Feb 2022"
        assert date_range(None, "2020-01") == "Jan 2020"

    def test_group_skills_keeps_first_seen_order(self, resume_data):
        assert group_skills(resume_data["skills"]) == [
            ("Technical", ["Python"]),
            ("Soft", ["Mentoring"]),
            ("Tool", ["Docker"]),
        ]

    def test_render_escapes_and_includes_sections(self, resume_data):
        selection = ContentSelection()
        html = render_resume_html(filter_resume_data(resume_data, selection), selection, "Jane <CV>")
        assert "<title>Jane &lt;CV&gt;</title>" in html
        assert "&lt;b&gt;shipping&lt;/b&gt;" in html
        assert "Senior Dev" in html
        assert "Mar 2022 - Present" in html
        assert "<li>Built APIs</li>" in html
        assert "Austin, TX" in html
        assert "Notable Projects" not in html

    def test_render_without_personal_info(self, resume_data):
        selection = ContentSelection(include_personal_info=False, include_summary=False)
        html = render_resume_html(filter_resume_data(resume_data, selection), selection, "CV")
        assert "jane@example.com" not in html
        assert "Professional Summary" not in html

    def test_preview_injects_styles(self):
        html = preview_html("<html><style>body{}</style></html>")
        assert ".resume-container" in html
        assert html.count("</style>") == 1

    def test_pdf_filename(self):
        assert pdf_filename("My Resume 2026!") == "My_Resume_2026_.pdf"
        assert pdf_filename("CV", "Acme Inc.") == "CV_Acme_Inc_.pdf"
