"""Dashboard and analytics payloads"""

from typing import Optional, List, Dict, Any
from uuid import UUID
from datetime import date, datetime

from study_portal.models.enums import UserRole, SubmissionStatus
from study_portal.schemas.common import CamelModel
from study_portal.schemas.document import DocumentResponse


class StudentStats(CamelModel):
    total_documents: int
    total_feedback_given: int
    total_feedback_received: int
    average_rating: float
    enrolled_classes: int
    pending_assignments: int


class RecentGrade(CamelModel):
    id: UUID
    points: float
    max_points: float
    percentage: float
    feedback: Optional[str] = None
    graded_at: datetime
    assignment_title: str
    subject_name: str


class StudentDashboard(CamelModel):
    role: UserRole = UserRole.STUDENT
    stats: StudentStats
    recent_activity: List[DocumentResponse]
    recent_grades: List[RecentGrade]


class TeacherStats(CamelModel):
    total_classes: int
    total_students: int
    total_assignments: int
    pending_grading: int


class RecentSubmission(CamelModel):
    id: UUID
    status: SubmissionStatus
    submitted_at: datetime
    student_name: str
    student_email: str
    assignment_title: str
    subject_name: str


class TeacherDashboard(CamelModel):
    role: UserRole = UserRole.TEACHER
    stats: TeacherStats
    recent_documents: List[DocumentResponse]
    recent_submissions: List[RecentSubmission]


# Analytics

class TrendPoint(CamelModel):
    date: date
    count: int
    average_rating: Optional[float] = None


class StatusCount(CamelModel):
    status: SubmissionStatus
    count: int


class ActivityResponse(CamelModel):
    id: UUID
    action: str
    resource: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    created_at: datetime


class ClassPerformance(CamelModel):
    id: UUID
    name: str
    subject: str
    students: int
    assignments: int
    average_grade: int


class StudentAnalytics(CamelModel):
    role: UserRole = UserRole.STUDENT
    period_days: int
    document_trends: List[TrendPoint]
    feedback_trends: List[TrendPoint]
    grade_distribution: Dict[str, int]
    recent_activity: List[ActivityResponse]


class TeacherAnalytics(CamelModel):
    role: UserRole = UserRole.TEACHER
    period_days: int
    enrollment_trends: List[TrendPoint]
    assignment_trends: List[TrendPoint]
    submission_stats: List[StatusCount]
    feedback_trends: List[TrendPoint]
    class_performance: List[ClassPerformance]
