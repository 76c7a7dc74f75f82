from enum import StrEnum


class ApprovalStatus(StrEnum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class UserRole(StrEnum):
    student = "student"
    teacher = "teacher"
    admin = "admin"


MAX_QUESTIONS = 6
