from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from classgrid.api.deps import get_db
from classgrid.models.subject import Subject
from classgrid.schemas.subject import SubjectCreate, SubjectOut, SubjectUpdate
from classgrid.services.directory import Directory

router = APIRouter()


@router.get("", response_model=list[SubjectOut])
def list_subjects(db: Session = Depends(get_db)) -> list[SubjectOut]:
    return list(db.execute(select(Subject).order_by(Subject.code)).scalars())


@router.post("", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def create_subject(payload: SubjectCreate, db: Session = Depends(get_db)) -> SubjectOut:
    existing = db.execute(select(Subject).where(Subject.code == payload.code)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject code already exists")
    if payload.teacher_id:
        Directory(db).get_teacher(payload.teacher_id)
    subject = Subject(**payload.model_dump())
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


@router.put("/{subject_id}", response_model=SubjectOut)
def update_subject(subject_id: str, payload: SubjectUpdate, db: Session = Depends(get_db)) -> SubjectOut:
    directory = Directory(db)
    subject = directory.get_subject(subject_id)

    data = payload.model_dump(exclude_unset=True)
    if "code" in data:
        existing = db.execute(
            select(Subject).where(Subject.code == data["code"], Subject.id != subject_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject code already exists")
    if data.get("teacher_id"):
        directory.get_teacher(data["teacher_id"])

    for key, value in data.items():
        setattr(subject, key, value)
    db.commit()
    db.refresh(subject)
    return subject
