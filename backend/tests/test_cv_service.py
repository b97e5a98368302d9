"""Tests for CV upload, analysis, details and deletion."""

from pathlib import Path

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sqlalchemy.exc import OperationalError

from skillcheck.errors import NotFoundError, PersistenceError, SubmissionError
from skillcheck.services import cv_service, store

PDF = "application/pdf"


class TestValidation:
    def test_format_size(self):
        assert cv_service.format_size(2048) == "2.00 KB"
        assert cv_service.format_size(1536) == "1.50 KB"

    def test_rejects_unknown_type(self):
        with pytest.raises(SubmissionError):
            cv_service.validate_upload("cv.txt", "text/plain", b"hi")

    def test_rejects_large_file(self):
        too_big = b"x" * (5 * 1024 * 1024 + 1)
        with pytest.raises(SubmissionError):
            cv_service.validate_upload("cv.pdf", PDF, too_big)

    def test_rejects_missing_name(self):
        with pytest.raises(SubmissionError):
            cv_service.validate_upload("", PDF, b"%PDF")

    @pytest.mark.parametrize("name", [".", "..", "uploads/..", "a/b/.."])
    def test_rejects_directory_like_names(self, name):
        with pytest.raises(SubmissionError):
            cv_service.validate_upload(name, PDF, b"%PDF")

    def test_returns_bare_name(self):
        assert cv_service.validate_upload("../../cv.pdf", PDF, b"%PDF") == "cv.pdf"


class TestUpload:
    def test_registration_creates_empty_cv(self, db, make_user):
        user = make_user()
        cv = cv_service.get_cv(db, user.id)
        assert cv is not None
        assert cv_service.is_empty(cv)

    def test_upload_stores_file_and_detects_skills(self, db, make_user):
        user = make_user(semester="8", specialization="Data Management")
        cv = cv_service.upload(db, user, "my cv.pdf", PDF, b"%PDF-1.4 data")

        assert cv.file_name == "my cv.pdf"
        assert cv.file_type == PDF
        assert Path(cv.file_url).read_bytes() == b"%PDF-1.4 data"
        assert cv.skill_list == ["SQL", "MongoDB", "PostgreSQL", "Data Modeling", "ETL"]
        assert cv.last_analysis_date is not None

        cv_skills = [s for s in store.get_skills(db, user.id) if s.category == "CV"]
        assert len(cv_skills) == 5
        assert all(s.score == 60 for s in cv_skills)

    def test_path_components_stripped_from_name(self, db, make_user):
        user = make_user()
        cv = cv_service.upload(db, user, "../../etc/cv.pdf", PDF, b"%PDF")
        assert cv.file_name == "cv.pdf"
        assert Path(cv.file_url).parent == cv_service.user_upload_dir(user.id)

    def test_no_specialization_detects_nothing(self, db, make_user):
        user = make_user()
        cv = cv_service.upload(db, user, "cv.pdf", PDF, b"%PDF")
        assert cv.skill_list == []
        assert store.get_skills(db, user.id) == []

    def test_reanalysis_raises_cv_skills(self, db, make_user):
        user = make_user(semester="9", specialization="Security and Networks")
        cv_service.upload(db, user, "cv.pdf", PDF, b"%PDF")
        cv_service.analyze(db, user)
        scores = {s.name: s.score for s in store.get_skills(db, user.id)}
        assert scores["Firewalls"] == 65

    def test_analyze_without_cv(self, db, make_user):
        user = make_user()
        with pytest.raises(NotFoundError):
            cv_service.analyze(db, user)


class TestDetailsAndDelete:
    def test_update_details(self, db, make_user):
        user = make_user()
        experience = [{"title": "Intern", "company": "Acme", "start_date": "2023-01", "end_date": "", "description": ""}]
        cv = cv_service.update_details(db, user.id, experience, None)
        assert cv.experience_list == experience
        assert cv.education_list == []

    def test_delete_leaves_empty_record(self, db, make_user):
        user = make_user(semester="8", specialization="Data Management")
        cv = cv_service.upload(db, user, "cv.pdf", PDF, b"%PDF")
        stored = Path(cv.file_url)

        cv = cv_service.delete(db, user.id)

        assert not stored.exists()
        assert store.get_cv(db, user.id) is not None
        assert cv.file_name == ""
        assert cv.skill_list == []
        assert cv.upload_date is None
        assert cv_service.is_empty(cv)


class TestStoredFiles:
    def _files(self, user):
        return sorted(p.name for p in cv_service.user_upload_dir(user.id).iterdir())

    def test_directory_like_name_rejected_before_writing(self, db, make_user):
        user = make_user()
        with pytest.raises(SubmissionError):
            cv_service.upload(db, user, "..", PDF, b"%PDF")
        assert self._files(user) == []
        assert cv_service.is_empty(store.get_cv(db, user.id))

    def test_failed_commit_leaves_no_file(self, db, make_user, monkeypatch):
        user = make_user()

        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db, "commit", failing_commit)
        with pytest.raises(PersistenceError):
            cv_service.upload(db, user, "new.pdf", PDF, b"%PDF")

        assert self._files(user) == []

    def test_failed_reupload_keeps_previous_file(self, db, make_user, monkeypatch):
        user = make_user()
        cv_service.upload(db, user, "old.pdf", PDF, b"first")

        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db, "commit", failing_commit)
        with pytest.raises(PersistenceError):
            cv_service.upload(db, user, "new.pdf", PDF, b"second")

        assert self._files(user) == ["old.pdf"]
        assert (cv_service.user_upload_dir(user.id) / "old.pdf").read_bytes() == b"first"

    def test_reupload_replaces_previous_file(self, db, make_user):
        user = make_user()
        cv_service.upload(db, user, "a.pdf", PDF, b"first")
        cv_service.upload(db, user, "b.pdf", PDF, b"second")
        assert self._files(user) == ["b.pdf"]

        cv_service.delete(db, user.id)
        assert self._files(user) == []

    def test_reupload_same_name_overwrites(self, db, make_user):
        user = make_user()
        cv_service.upload(db, user, "cv.pdf", PDF, b"first")
        cv = cv_service.upload(db, user, "cv.pdf", PDF, b"second")
        assert self._files(user) == ["cv.pdf"]
        assert Path(cv.file_url).read_bytes() == b"second"
