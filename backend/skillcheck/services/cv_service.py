"""CV service: upload, analysis, manual edits and deletion of a user's CV."""

import logging
from pathlib import Path
from typing import Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from skillcheck.config import settings
from skillcheck.errors import NotFoundError, SubmissionError
from skillcheck.models.user import User
from skillcheck.models.user_cv import UserCV
from skillcheck.services import skill_service, store
from skillcheck.services.locks import user_lock

logger = logging.getLogger(__name__)

ALLOWED_TYPES = {
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
}
MAX_DETECTED_SKILLS = 5

# Skills credited by analysis, keyed by the user's specialization
SPECIALIZATION_SKILLS: dict[str, list[str]] = {
    "Cross-Platform Programming": ["React", "React Native", "Flutter", "JavaScript", "TypeScript", "CSS"],
    "Data Management": ["SQL", "MongoDB", "PostgreSQL", "Data Modeling", "ETL", "Data Analysis"],
    "Security and Networks": ["Network Security", "Firewalls", "Encryption", "VPN", "Security Protocols"],
    "Mobile Data Management": ["SQLite", "Realm", "Firebase", "Offline Storage", "Data Sync"],
}


def user_upload_dir(user_id: str) -> Path:
    return Path(settings.UPLOAD_DIR) / user_id


def empty_cv(cv: UserCV) -> UserCV:
    """Reset every field of `cv` to its empty value."""
    cv.file_name = ""
    cv.file_size = ""
    cv.file_type = ""
    cv.file_url = ""
    cv.upload_date = None
    cv.skills = "[]"
    cv.experience = "[]"
    cv.education = "[]"
    cv.last_analysis_date = None
    return cv


def is_empty(cv: Optional[UserCV]) -> bool:
    return cv is None or not (cv.file_name or cv.skill_list or cv.experience_list or cv.education_list)


def format_size(num_bytes: int) -> str:
    return f"{num_bytes / 1024:.2f} KB"


def initialize(db: Session, user_id: str) -> UserCV:
    """Create the user's empty CV record if there is none. Caller commits."""
    cv = store.get_cv(db, user_id)
    if cv is None:
        cv = store.save_cv(db, empty_cv(UserCV(user_id=user_id)))
    user_upload_dir(user_id).mkdir(parents=True, exist_ok=True)
    return cv


def get_cv(db: Session, user_id: str) -> Optional[UserCV]:
    return store.get_cv(db, user_id)


def detect_skills(user: User) -> list[str]:
    return SPECIALIZATION_SKILLS.get(user.specialization or "", [])[:MAX_DETECTED_SKILLS]


def validate_upload(file_name: str, content_type: str, content: bytes) -> str:
    """Check an upload and return the bare file name it will be stored under.

    Raises:
        SubmissionError: On a missing or unusable name, a type other than
            PDF/DOC/DOCX, or a file above MAX_CV_SIZE_MB.
    """
    safe_name = Path(file_name).name
    if safe_name in ("", ".", ".."):
        raise SubmissionError("Missing file name")
    if content_type not in ALLOWED_TYPES:
        raise SubmissionError("Invalid file format. Upload a PDF or Word document.")
    if len(content) > settings.MAX_CV_SIZE_MB * 1024 * 1024:
        raise SubmissionError(f"File too large. Maximum size is {settings.MAX_CV_SIZE_MB}MB.")
    return safe_name


def _analyze(db: Session, user: User, cv: UserCV) -> UserCV:
    skills = detect_skills(user)
    cv.skills = store.dumps(skills)
    cv.last_analysis_date = store.now_utc()
    store.save_cv(db, cv)
    skill_service.apply_cv_skills(db, user.id, skills)
    return cv


def analyze(db: Session, user: User) -> UserCV:
    """Re-run skill detection on the stored CV."""
    with user_lock(user.id), store.unit_of_work(db):
        cv = store.get_cv(db, user.id)
        if is_empty(cv):
            raise NotFoundError("No CV uploaded")
        _analyze(db, user, cv)
    return cv


def _discard(path: Optional[Path]) -> None:
    if path is not None and path.is_file():
        path.unlink()


def upload(db: Session, user: User, file_name: str, content_type: str, content: bytes) -> UserCV:
    """Store a new CV file and analyze it.

    Skills, experience and education of the previous CV carry over until the
    analysis replaces the skills. The bytes are staged under a temporary name
    and only moved into place once the record is committed; the previous file
    is removed after that.
    """
    safe_name = validate_upload(file_name, content_type, content)

    upload_dir = user_upload_dir(user.id)
    file_path = upload_dir / safe_name
    staged = upload_dir / f".{uuid4().hex}.part"

    with user_lock(user.id):
        upload_dir.mkdir(parents=True, exist_ok=True)
        staged.write_bytes(content)
        try:
            with store.unit_of_work(db):
                cv = store.get_cv(db, user.id) or empty_cv(UserCV(user_id=user.id))
                old_path = Path(cv.file_url) if cv.file_url else None

                cv.file_name = safe_name
                cv.file_size = format_size(len(content))
                cv.file_type = content_type
                cv.file_url = str(file_path)
                cv.upload_date = store.now_utc()
                store.save_cv(db, cv)
                _analyze(db, user, cv)
        except Exception:
            _discard(staged)
            raise

        staged.replace(file_path)
        if old_path is not None and old_path != file_path:
            _discard(old_path)

    logger.info("Stored CV %s for user %s", safe_name, user.id)
    return cv


def update_details(db: Session, user_id: str, experience: Optional[list[dict]], education: Optional[list[dict]]) -> UserCV:
    with user_lock(user_id), store.unit_of_work(db):
        cv = store.get_cv(db, user_id) or empty_cv(UserCV(user_id=user_id))
        if experience is not None:
            cv.experience = store.dumps(experience)
        if education is not None:
            cv.education = store.dumps(education)
        store.save_cv(db, cv)
    return cv


def delete(db: Session, user_id: str) -> UserCV:
    """Overwrite the CV with an empty record and drop the stored file."""
    with user_lock(user_id), store.unit_of_work(db):
        cv = store.get_cv(db, user_id)
        if cv is None:
            cv = UserCV(user_id=user_id)
        old_path = cv.file_url
        store.save_cv(db, empty_cv(cv))

    if old_path:
        _discard(Path(old_path))
    return cv
