#!/usr/bin/env python3
"""
Seed a development database with a teacher, two students, a subject,
a class with one enrollment and an assignment.

Usage:
  python scripts/seed.py
  # Reads DATABASE_URL / SECRET_KEY from .env

Existing rows are left alone, so the script can be re-run.
"""
import asyncio
import os
import sys
from datetime import timedelta

from dotenv import load_dotenv

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(_root, ".env"))

# Add project root to path
sys.path.insert(0, _root)

from sqlalchemy import select  # noqa: E402

from study_portal.database import AsyncSessionLocal, close_db, init_db  # noqa: E402
from study_portal.models import Assignment, Class, ClassEnrollment, Subject, UserRole  # noqa: E402
from study_portal.services.user_service import UserService  # noqa: E402
from study_portal.utils.time import get_utc_now  # noqa: E402

PASSWORD = "password123"
USERS = [
    ("teacher@example.com", "Grace Teacher", UserRole.TEACHER),
    ("alice@example.com", "Alice Student", UserRole.STUDENT),
    ("bob@example.com", "Bob Student", UserRole.STUDENT),
]


async def _user(db, email, name, role):
    user = await UserService.get_user_by_email(db, email)
    if user is None:
        user = await UserService.create_user(db, email, PASSWORD, name, role)
        print(f"created {role.value.lower()} {email}")
    return user


async def seed() -> None:
    await init_db()
    async with AsyncSessionLocal() as db:
        teacher, alice, _bob = [await _user(db, *row) for row in USERS]

        subject = (await db.execute(select(Subject).where(Subject.code == "CS101"))).scalar_one_or_none()
        if subject is None:
            subject = Subject(name="Computer Science", code="CS101", description="Intro to programming")
            db.add(subject)
            await db.commit()
            print("created subject CS101")

        class_ = (await db.execute(
            select(Class).where(Class.teacher_id == teacher.id, Class.name == "CS101 Section A")
        )).scalar_one_or_none()
        if class_ is None:
            class_ = Class(
                name="CS101 Section A",
                subject_id=subject.id,
                teacher_id=teacher.id,
                semester="Fall",
                year=get_utc_now().year,
            )
            db.add(class_)
            await db.commit()
            db.add(ClassEnrollment(class_id=class_.id, student_id=alice.id))
            db.add(Assignment(
                title="HW1",
                description="Write a hello world program",
                subject_id=subject.id,
                class_id=class_.id,
                teacher_id=teacher.id,
                due_date=get_utc_now() + timedelta(days=7),
                max_points=100,
            ))
            await db.commit()
            print("created class CS101 Section A with HW1")

    await close_db()
    print("Seed complete. Mint a cookie with scripts/issue_token.py <email>.")


if __name__ == "__main__":
    asyncio.run(seed())
