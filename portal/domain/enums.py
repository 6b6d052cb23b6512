"""Enums shared across the domain layer."""

from enum import Enum


class UserRole(str, Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    PRINCIPAL = "PRINCIPAL"
    SYSTEM_ADMIN = "SYSTEM_ADMIN"


class InternshipPhase(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    TERMINATED = "TERMINATED"


class ApplicationStatus(str, Enum):
    APPROVED = "APPROVED"
    APPLIED = "APPLIED"
    UNDER_REVIEW = "UNDER_REVIEW"
    SHORTLISTED = "SHORTLISTED"
    SELECTED = "SELECTED"
    REJECTED = "REJECTED"
    JOINED = "JOINED"
    COMPLETED = "COMPLETED"
    WITHDRAWN = "WITHDRAWN"


class MonthlyReportStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    REVISION_REQUIRED = "REVISION_REQUIRED"


class VisitType(str, Enum):
    PHYSICAL = "PHYSICAL"
    VIRTUAL = "VIRTUAL"
    TELEPHONIC = "TELEPHONIC"


class VisitLogStatus(str, Enum):
    DRAFT = "DRAFT"
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class DocumentType(str, Enum):
    MARKSHEET_10TH = "MARKSHEET_10TH"
    MARKSHEET_12TH = "MARKSHEET_12TH"
    CASTE_CERTIFICATE = "CASTE_CERTIFICATE"
    PHOTO = "PHOTO"
    OTHER = "OTHER"


class GrievanceCategory(str, Enum):
    INTERNSHIP_RELATED = "INTERNSHIP_RELATED"
    MENTOR_RELATED = "MENTOR_RELATED"
    INDUSTRY_RELATED = "INDUSTRY_RELATED"
    PAYMENT_ISSUE = "PAYMENT_ISSUE"
    WORKPLACE_HARASSMENT = "WORKPLACE_HARASSMENT"
    WORK_CONDITION = "WORK_CONDITION"
    DOCUMENTATION = "DOCUMENTATION"
    SAFETY_CONCERN = "SAFETY_CONCERN"
    DISCRIMINATION = "DISCRIMINATION"
    WORK_HOURS = "WORK_HOURS"
    OTHER = "OTHER"


class GrievanceSeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class GrievanceStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    PENDING = "PENDING"
    UNDER_REVIEW = "UNDER_REVIEW"
    IN_PROGRESS = "IN_PROGRESS"
    ADDRESSED = "ADDRESSED"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"
    REJECTED = "REJECTED"
    ESCALATED = "ESCALATED"


class EscalationLevel(str, Enum):
    MENTOR = "MENTOR"
    PRINCIPAL = "PRINCIPAL"
    STATE_DIRECTORATE = "STATE_DIRECTORATE"


class AuditAction(str, Enum):
    STUDENT_PROFILE_UPDATE = "STUDENT_PROFILE_UPDATE"
    STUDENT_DOCUMENT_UPLOAD = "STUDENT_DOCUMENT_UPLOAD"
    STUDENT_DOCUMENT_DELETE = "STUDENT_DOCUMENT_DELETE"
    USER_ACTIVATION = "USER_ACTIVATION"
    USER_DEACTIVATION = "USER_DEACTIVATION"
    APPLICATION_SUBMIT = "APPLICATION_SUBMIT"
    APPLICATION_UPDATE = "APPLICATION_UPDATE"
    APPLICATION_WITHDRAW = "APPLICATION_WITHDRAW"
    APPLICATION_APPROVE = "APPLICATION_APPROVE"
    APPLICATION_REJECT = "APPLICATION_REJECT"
    INTERNSHIP_DELETE = "INTERNSHIP_DELETE"
    MENTOR_ASSIGN = "MENTOR_ASSIGN"
    VISIT_LOG_CREATE = "VISIT_LOG_CREATE"
    VISIT_LOG_UPDATE = "VISIT_LOG_UPDATE"
    VISIT_LOG_DELETE = "VISIT_LOG_DELETE"
    MONTHLY_REPORT_SUBMIT = "MONTHLY_REPORT_SUBMIT"
    MONTHLY_REPORT_APPROVE = "MONTHLY_REPORT_APPROVE"
    MONTHLY_REPORT_REJECT = "MONTHLY_REPORT_REJECT"
    MONTHLY_REPORT_DELETE = "MONTHLY_REPORT_DELETE"
    JOINING_LETTER_UPLOAD = "JOINING_LETTER_UPLOAD"
    JOINING_LETTER_VERIFY = "JOINING_LETTER_VERIFY"
    JOINING_LETTER_REJECT = "JOINING_LETTER_REJECT"
    JOINING_LETTER_DELETE = "JOINING_LETTER_DELETE"
    GRIEVANCE_SUBMIT = "GRIEVANCE_SUBMIT"
    INTERNSHIP_PHASE_SWEEP = "INTERNSHIP_PHASE_SWEEP"


class AuditCategory(str, Enum):
    PROFILE_MANAGEMENT = "PROFILE_MANAGEMENT"
    INTERNSHIP_WORKFLOW = "INTERNSHIP_WORKFLOW"
    APPLICATION_PROCESS = "APPLICATION_PROCESS"
    ADMINISTRATIVE = "ADMINISTRATIVE"
    USER_MANAGEMENT = "USER_MANAGEMENT"
    SYSTEM = "SYSTEM"


class AuditSeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"
