from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from classgrid.core.exceptions import ResourceNotFoundError
from classgrid.models.academic_term import AcademicTerm
from classgrid.models.class_section import ClassSection
from classgrid.models.subject import Subject
from classgrid.models.teacher import Teacher


class Directory:
    """Lookups for the records a period refers to."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_subject(self, subject_id: str) -> Subject:
        subject = self.db.get(Subject, subject_id)
        if subject is None:
            raise ResourceNotFoundError("Subject", subject_id)
        return subject

    def get_teacher(self, teacher_id: str) -> Teacher:
        teacher = self.db.get(Teacher, teacher_id)
        if teacher is None:
            raise ResourceNotFoundError("Teacher", teacher_id)
        return teacher

    def get_term(self, term_id: str) -> AcademicTerm:
        term = self.db.get(AcademicTerm, term_id)
        if term is None:
            raise ResourceNotFoundError("AcademicTerm", term_id)
        return term

    def get_class_section(self, class_section_id: str) -> ClassSection:
        section = self.db.get(ClassSection, class_section_id)
        if section is None:
            raise ResourceNotFoundError("ClassSection", class_section_id)
        return section

    def get_class_sections(self, class_section_ids: Sequence[str]) -> list[ClassSection]:
        if not class_section_ids:
            return []
        found = {
            section.id: section
            for section in self.db.execute(
                select(ClassSection).where(ClassSection.id.in_(list(class_section_ids)))
            ).scalars()
        }
        for class_section_id in class_section_ids:
            if class_section_id not in found:
                raise ResourceNotFoundError("ClassSection", class_section_id)
        return [found[class_section_id] for class_section_id in class_section_ids]

