from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from classgrid.api.deps import get_db
from classgrid.models.teacher import Teacher
from classgrid.schemas.teacher import TeacherCreate, TeacherOut

router = APIRouter()


@router.get("", response_model=list[TeacherOut])
def list_teachers(db: Session = Depends(get_db)) -> list[TeacherOut]:
    return list(db.execute(select(Teacher).order_by(Teacher.full_name)).scalars())


@router.post("", response_model=TeacherOut, status_code=status.HTTP_201_CREATED)
def create_teacher(payload: TeacherCreate, db: Session = Depends(get_db)) -> TeacherOut:
    email = payload.email.lower()
    existing = db.execute(select(Teacher).where(Teacher.email == email)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Teacher email already exists")
    teacher = Teacher(full_name=payload.full_name, email=email)
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    return teacher
