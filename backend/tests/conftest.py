import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from classgrid.api.deps import get_db, get_scheduler  # noqa: E402
from classgrid.db.base import Base  # noqa: E402
from classgrid.main import app  # noqa: E402
from classgrid.models import AcademicTerm, ClassSection, Subject, Teacher  # noqa: E402
from classgrid.services.period_scheduler import PeriodScheduler  # noqa: E402


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def scheduler(session_factory):
    return PeriodScheduler(session_factory, retry_backoff_seconds=0)


@pytest.fixture()
def school(session_factory):
    """Two terms, three teachers, four class sections and a few subjects."""
    with session_factory() as db:
        term1 = AcademicTerm(name="Term 1")
        term2 = AcademicTerm(name="Term 2")
        teacher_t = Teacher(full_name="Teacher T", email="t@example.com")
        teacher_u = Teacher(full_name="Teacher U", email="u@example.com")
        teacher_v = Teacher(full_name="Teacher V", email="v@example.com")
        class_a = ClassSection(name="Grade 5A", grade_level=5)
        class_b = ClassSection(name="Grade 5B", grade_level=5)
        class_c = ClassSection(name="Grade 6A", grade_level=6)
        class_d = ClassSection(name="Grade 6B", grade_level=6)
        db.add_all([term1, term2, teacher_t, teacher_u, teacher_v, class_a, class_b, class_c, class_d])
        db.flush()
        math = Subject(code="MATH", name="Math", teacher_id=teacher_t.id)
        science = Subject(code="SCI", name="Science", teacher_id=teacher_u.id)
        art = Subject(code="ART", name="Art", teacher_id=None)
        db.add_all([math, science, art])
        db.commit()
        return SimpleNamespace(
            term1=term1.id,
            term2=term2.id,
            teacher_t=teacher_t.id,
            teacher_u=teacher_u.id,
            teacher_v=teacher_v.id,
            class_a=class_a.id,
            class_b=class_b.id,
            class_c=class_c.id,
            class_d=class_d.id,
            math=math.id,
            science=science.id,
            art=art.id,
        )


@pytest.fixture()
def client(session_factory, scheduler):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_scheduler] = lambda: scheduler

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
