"""
Dependency Injection container.

Wires abstract ports → concrete adapters. To swap a provider
(e.g., Supabase Storage → S3), change the adapter instantiation here.
Nothing else in the codebase changes  (Open/Closed Principle).
"""

from functools import lru_cache

from fastapi import Depends
from supabase import create_client

from portal.adapters.document_adapter import DocumentAdapter
from portal.adapters.supabase_adapter import SupabaseAdapter
from portal.adapters.supabase_storage_adapter import SupabaseStorageAdapter
from portal.config import settings
from portal.ports.database_port import DatabasePort
from portal.ports.document_port import DocumentPort
from portal.ports.storage_port import StoragePort


# ── Singletons (cached) ──────────────────────────────────────


@lru_cache(maxsize=1)
def _get_supabase_client():
    # Use service role key — bypasses RLS for server-side operations
    return create_client(settings.supabase_url, settings.supabase_service_role_key)


@lru_cache(maxsize=1)
def _get_supabase_adapter() -> SupabaseAdapter:
    return SupabaseAdapter(client=_get_supabase_client())


@lru_cache(maxsize=1)
def _get_storage_adapter() -> SupabaseStorageAdapter:
    return SupabaseStorageAdapter(client=_get_supabase_client())


@lru_cache(maxsize=1)
def _get_document_adapter() -> DocumentAdapter:
    return DocumentAdapter()


# ── FastAPI Dependencies (return abstract types) ──────────────


def get_auth_client():
    """Inject the service-role Supabase client used by the auth endpoints."""
    return _get_supabase_client()


def get_db() -> DatabasePort:
    """Inject the database adapter."""
    return _get_supabase_adapter()


def get_storage() -> StoragePort:
    """Inject the file storage adapter."""
    return _get_storage_adapter()


def get_document_parser() -> DocumentPort:
    """Inject the document inspector (PDF + DOCX)."""
    return _get_document_adapter()


# ── Domain Services ───────────────────────────────────────────

from portal.services.audit_service import AuditService  # noqa: E402
from portal.services.faculty_service import FacultyService  # noqa: E402
from portal.services.principal_service import PrincipalService  # noqa: E402
from portal.services.student_service import StudentService  # noqa: E402


def get_audit_service(db: DatabasePort = Depends(get_db)) -> AuditService:
    return AuditService(db=db)


def get_faculty_service(
    db: DatabasePort = Depends(get_db),
    storage: StoragePort = Depends(get_storage),
    audit: AuditService = Depends(get_audit_service),
) -> FacultyService:
    """Injects DB, storage and audit into the faculty domain service."""
    return FacultyService(db=db, storage=storage, audit=audit)


def get_student_service(
    db: DatabasePort = Depends(get_db),
    storage: StoragePort = Depends(get_storage),
    doc_parser: DocumentPort = Depends(get_document_parser),
    audit: AuditService = Depends(get_audit_service),
) -> StudentService:
    """Injects DB, storage, document inspector and audit into the student service."""
    return StudentService(db=db, storage=storage, doc_parser=doc_parser, audit=audit)


def get_principal_service(
    db: DatabasePort = Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
) -> PrincipalService:
    return PrincipalService(db=db, audit=audit)
