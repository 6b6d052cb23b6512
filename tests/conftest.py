"""
Internship Portal - Test Configuration and Fixtures
"""
import io
import os
import time
import uuid
from datetime import timedelta
from typing import Any, AsyncGenerator, Callable

import jwt
import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient

# Settings are read at import time, so the environment comes first
os.environ['SUPABASE_URL'] = 'http://supabase.test'
os.environ['SUPABASE_KEY'] = 'test-anon-key'
os.environ['SUPABASE_SERVICE_ROLE_KEY'] = 'test-service-role-key'
os.environ['SUPABASE_JWT_SECRET'] = 'test-jwt-secret-key-for-testing-only-0123456789'
os.environ['SCHEDULER_ENABLED'] = 'false'

from main import app  # noqa: E402
from portal.adapters.document_adapter import DocumentAdapter  # noqa: E402
from portal.dependencies import get_db, get_document_parser, get_storage  # noqa: E402
from portal.domain.dates import iso, utcnow  # noqa: E402
from portal.domain.enums import ApplicationStatus, InternshipPhase, UserRole  # noqa: E402
from portal.services.audit_service import AuditService  # noqa: E402
from portal.services.faculty_service import FacultyService  # noqa: E402
from portal.services.principal_service import PrincipalService  # noqa: E402
from portal.services.student_service import StudentService  # noqa: E402
from tests.mocks.memory_db import MemoryDatabase  # noqa: E402
from tests.mocks.memory_storage import MemoryStorage  # noqa: E402

fake = Faker()

JWT_SECRET = os.environ['SUPABASE_JWT_SECRET']


def make_token(user_id: str, **claims: Any) -> str:
    """Sign a Supabase-style access token for ``user_id``."""
    payload = {
        'sub': user_id,
        'aud': 'authenticated',
        'role': 'authenticated',
        'exp': int(time.time()) + 3600,
        **claims,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm='HS256')


def auth_header(user: dict[str, Any]) -> dict[str, str]:
    return {'Authorization': f"Bearer {make_token(user['id'])}"}


# ── Doubles ───────────────────────────────────────────────────


@pytest.fixture
def db() -> MemoryDatabase:
    return MemoryDatabase()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def doc_parser() -> DocumentAdapter:
    return DocumentAdapter()


@pytest.fixture
def audit(db: MemoryDatabase) -> AuditService:
    return AuditService(db)


@pytest.fixture
def faculty_service(db, storage, audit) -> FacultyService:
    return FacultyService(db=db, storage=storage, audit=audit)


@pytest.fixture
def student_service(db, storage, doc_parser, audit) -> StudentService:
    return StudentService(db=db, storage=storage, doc_parser=doc_parser, audit=audit)


@pytest.fixture
def principal_service(db, audit) -> PrincipalService:
    return PrincipalService(db=db, audit=audit)


@pytest.fixture
async def client(db, storage, doc_parser) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with in-memory adapters"""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_document_parser] = lambda: doc_parser

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Files ─────────────────────────────────────────────────────


@pytest.fixture
def pdf_bytes() -> bytes:
    """A valid two-page PDF."""
    from pypdf import PdfWriter

    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def docx_bytes() -> bytes:
    from docx import Document

    document = Document()
    document.add_paragraph('Week 1: onboarding and environment setup.')
    document.add_paragraph('Week 2: first feature shipped.')
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


# ── Seed data ─────────────────────────────────────────────────


@pytest.fixture
def institution_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def make_user(db, institution_id) -> Callable[..., dict[str, Any]]:
    def _make(role: UserRole, **extra: Any) -> dict[str, Any]:
        return db.seed('users', {
            'email': fake.unique.email(),
            'name': fake.name(),
            'role': role.value,
            'institution_id': institution_id,
            'is_active': True,
            **extra,
        })
    return _make


@pytest.fixture
def faculty(make_user) -> dict[str, Any]:
    return make_user(UserRole.TEACHER, designation='Assistant Professor')


@pytest.fixture
def other_faculty(make_user) -> dict[str, Any]:
    return make_user(UserRole.TEACHER)


@pytest.fixture
def principal(make_user) -> dict[str, Any]:
    return make_user(UserRole.PRINCIPAL)


@pytest.fixture
def make_student(db, make_user, institution_id) -> Callable[..., tuple[dict, dict]]:
    """Returns (user row, students row)."""
    def _make(**extra: Any) -> tuple[dict[str, Any], dict[str, Any]]:
        user = make_user(UserRole.STUDENT)
        student = db.seed('students', {
            'user_id': user['id'],
            'institution_id': institution_id,
            'name': user['name'],
            'email': user['email'],
            'roll_number': fake.bothify('21CS###'),
            'branch': 'Computer Science',
            'is_active': True,
            **extra,
        })
        return user, student
    return _make


@pytest.fixture
def student_pair(make_student) -> tuple[dict[str, Any], dict[str, Any]]:
    return make_student()


@pytest.fixture
def student_user(student_pair) -> dict[str, Any]:
    return student_pair[0]


@pytest.fixture
def student(student_pair) -> dict[str, Any]:
    return student_pair[1]


@pytest.fixture
def assignment(db, faculty, student, principal) -> dict[str, Any]:
    return db.seed('mentor_assignments', {
        'mentor_id': faculty['id'],
        'student_id': student['id'],
        'assigned_by': principal['id'],
        'is_active': True,
        'assigned_at': iso(utcnow()),
    })


@pytest.fixture
def make_application(db, faculty, student) -> Callable[..., dict[str, Any]]:
    """Self-identified internship that started ~3 months ago and runs ~3 more."""
    def _make(**overrides: Any) -> dict[str, Any]:
        now = utcnow()
        row = {
            'student_id': student['id'],
            'mentor_id': faculty['id'],
            'is_self_identified': True,
            'is_active': True,
            'status': ApplicationStatus.APPROVED.value,
            'internship_phase': InternshipPhase.NOT_STARTED.value,
            'company_name': fake.company(),
            'company_address': fake.address(),
            'start_date': iso(now - timedelta(days=90)),
            'end_date': iso(now + timedelta(days=90)),
        }
        row.update(overrides)
        return db.seed('internship_applications', row)
    return _make


@pytest.fixture
def application(make_application) -> dict[str, Any]:
    return make_application()
