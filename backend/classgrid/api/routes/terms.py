from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from classgrid.api.deps import get_db, get_scheduler
from classgrid.models.academic_term import AcademicTerm
from classgrid.schemas.term import TermCreate, TermOut
from classgrid.services.period_scheduler import PeriodScheduler

router = APIRouter()


@router.get("", response_model=list[TermOut])
def list_terms(db: Session = Depends(get_db)) -> list[TermOut]:
    return list(db.execute(select(AcademicTerm).order_by(AcademicTerm.name)).scalars())


@router.post("", response_model=TermOut, status_code=status.HTTP_201_CREATED)
def create_term(payload: TermCreate, db: Session = Depends(get_db)) -> TermOut:
    existing = db.execute(select(AcademicTerm).where(AcademicTerm.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Term name already exists")
    term = AcademicTerm(**payload.model_dump())
    db.add(term)
    db.commit()
    db.refresh(term)
    return term


@router.delete("/{term_id}")
def delete_term(term_id: str, scheduler: PeriodScheduler = Depends(get_scheduler)) -> dict:
    removed = scheduler.delete_term(term_id)
    return {"success": True, "deleted_periods": removed}
