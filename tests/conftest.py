import os

# antes de importar certperu: base en memoria y sin migraciones al arrancar
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ADMIN_EMAIL", "admin@certificadosperu.com")
os.environ.setdefault("ADMIN_PASSWORD", "admin12345")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from certperu.core.security_password import hash_password
from certperu.core.tokens import KIND_ADMIN, KIND_PARTICIPANT, create_access_token
from certperu.db.base import Base
from certperu.db.init_db import init_db
from certperu.db.session import enable_sqlite_savepoints, get_db
from certperu.main import app
from certperu.models import (
    AdminRole, AdminUser, Course, CourseType, Enrollment, EnrollmentStatus, Modality, Participant,
)


@pytest.fixture
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    enable_sqlite_savepoints(engine)
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    init_db(session)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def admin_headers_for(admin: AdminUser) -> dict:
    return bearer(create_access_token(sub=admin.id, kind=KIND_ADMIN, role=admin.role.value))


def participant_headers_for(participant: Participant) -> dict:
    return bearer(create_access_token(sub=participant.id, kind=KIND_PARTICIPANT))


# ---------------------------------------------------------------------
# Fábricas
# ---------------------------------------------------------------------

def make_admin(db, role: AdminRole = AdminRole.ADMIN, email: str = "") -> AdminUser:
    email = email or f"{role.value.lower()}@staff.certificadosperu.com"
    admin = AdminUser(name=f"Admin {role.value}", email=email, hashed_password=hash_password("clave-admin"), role=role)
    db.add(admin); db.commit(); db.refresh(admin)
    return admin


def make_participant(db, document: str = "12345678", email: str = "", **kw) -> Participant:
    p = Participant(
        full_name=kw.pop("full_name", "María Quispe Huamán"),
        document_number=document,
        email=email or f"p{document}@correo.pe",
        **kw,
    )
    db.add(p); db.commit(); db.refresh(p)
    return p


def make_course(db, name: str = "Gestión Pública", **kw) -> Course:
    from certperu.core.text import slugify

    c = Course(
        name=name,
        slug=kw.pop("slug", slugify(name)),
        type=kw.pop("type", CourseType.DIPLOMADO),
        modality=kw.pop("modality", Modality.VIRTUAL),
        academic_hours=kw.pop("academic_hours", 120),
        price=kw.pop("price", Decimal("150.00")),
        syllabus=kw.pop("syllabus", ["Módulo I: Estado", "Módulo II: Presupuesto"]),
        **kw,
    )
    db.add(c); db.commit(); db.refresh(c)
    return c


def make_enrollment(db, participant: Participant, course: Course,
                    status: EnrollmentStatus = EnrollmentStatus.PENDIENTE) -> Enrollment:
    e = Enrollment(participant_id=participant.id, course_id=course.id, status=status, amount=course.price)
    db.add(e); db.commit(); db.refresh(e)
    return e


@pytest.fixture
def superadmin(db) -> AdminUser:
    return db.scalar(select(AdminUser).where(AdminUser.role == AdminRole.SUPERADMIN))


@pytest.fixture
def super_headers(superadmin) -> dict:
    return admin_headers_for(superadmin)


@pytest.fixture
def admin_headers(db) -> dict:
    return admin_headers_for(make_admin(db, AdminRole.ADMIN))


@pytest.fixture
def editor_headers(db) -> dict:
    return admin_headers_for(make_admin(db, AdminRole.EDITOR))


@pytest.fixture
def participant(db) -> Participant:
    return make_participant(db)


@pytest.fixture
def participant_headers(participant) -> dict:
    return participant_headers_for(participant)


@pytest.fixture
def course(db) -> Course:
    return make_course(db)


@pytest.fixture
def paid_enrollment(db, participant, course) -> Enrollment:
    return make_enrollment(db, participant, course, EnrollmentStatus.PAGADO)
