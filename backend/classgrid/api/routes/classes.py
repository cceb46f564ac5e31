from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from classgrid.api.deps import get_db
from classgrid.models.class_section import ClassSection
from classgrid.schemas.class_section import ClassSectionCreate, ClassSectionOut

router = APIRouter()


@router.get("", response_model=list[ClassSectionOut])
def list_class_sections(db: Session = Depends(get_db)) -> list[ClassSectionOut]:
    return list(
        db.execute(select(ClassSection).order_by(ClassSection.grade_level, ClassSection.name)).scalars()
    )


@router.post("", response_model=ClassSectionOut, status_code=status.HTTP_201_CREATED)
def create_class_section(payload: ClassSectionCreate, db: Session = Depends(get_db)) -> ClassSectionOut:
    existing = db.execute(select(ClassSection).where(ClassSection.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Class name already exists")
    section = ClassSection(**payload.model_dump())
    db.add(section)
    db.commit()
    db.refresh(section)
    return section
