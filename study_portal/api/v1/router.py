"""API V1 Router"""

from fastapi import APIRouter

# Import endpoint routers
from study_portal.api.v1.endpoints import (
    auth, users, subjects, documents, classes,
    assignments, submissions, dashboard, flashcards,
    notes, materials
)

# Create API v1 router
api_router = APIRouter()

# Include endpoint routers with prefixes and tags
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(subjects.router, prefix="/subjects", tags=["Subjects"])
api_router.include_router(documents.router, prefix="/documents", tags=["Documents"])
api_router.include_router(classes.router, prefix="/classes", tags=["Classes"])
api_router.include_router(assignments.router, prefix="/assignments", tags=["Assignments"])
api_router.include_router(submissions.router, prefix="/submissions", tags=["Submissions"])
api_router.include_router(dashboard.router, tags=["Dashboard"])
api_router.include_router(flashcards.router, prefix="/flashcards", tags=["Flashcards"])
api_router.include_router(notes.router, prefix="/notes", tags=["Notes"])
api_router.include_router(materials.router, prefix="/materials", tags=["Materials"])
