from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from .db import get_db
from .errors import GroupNotFound, StudentNotFound
from .models import GroupRecord, MoodCheckRecord, StudentRecord
from .schemas import (
	DEFAULT_AVATAR,
	Group,
	GroupCreate,
	GroupUpdate,
	MoodCheckCreate,
	MoodCheckOut,
	SeatPosition,
	Student,
	StudentCreate,
	StudentUpdate,
)

logger = logging.getLogger(__name__)

UNGROUPED = "ungrouped"


def to_student(row: StudentRecord) -> Student:
	position = None
	if row.position_x is not None and row.position_y is not None:
		position = SeatPosition(x=row.position_x, y=row.position_y)
	return Student(
		id=row.id,
		name=row.name,
		email=row.email or "",
		grade=row.grade,
		notes=row.notes or "",
		tags=row.tags or [],
		group_id=row.group_id,
		position=position,
		avatar=row.avatar_url or DEFAULT_AVATAR,
	)


def _unique(tags: List[str]) -> List[str]:
	return list(dict.fromkeys(tags))


class StudentStore:
	"""Student, group and mood-check persistence over one SQLAlchemy session."""

	def __init__(self, db: Session) -> None:
		self.db = db

	def _commit(self) -> None:
		try:
			self.db.commit()
		except Exception:
			self.db.rollback()
			raise

	def _require_group(self, group_id: str) -> GroupRecord:
		row = self.db.get(GroupRecord, group_id)
		if row is None:
			raise GroupNotFound(f"Group with ID {group_id} does not exist")
		return row

	def _require_student(self, student_id: str) -> StudentRecord:
		row = self.db.get(StudentRecord, student_id)
		if row is None:
			raise StudentNotFound(f"Student with ID {student_id} does not exist")
		return row

	# ---- students ----

	def list_students(self, query: Optional[str] = None, tag: Optional[str] = None) -> List[Student]:
		rows = self.db.scalars(select(StudentRecord).order_by(StudentRecord.name)).all()
		students = [to_student(r) for r in rows]
		if tag:
			students = [s for s in students if tag in s.tags]
		if query:
			q = query.lower()
			students = [
				s
				for s in students
				if q in s.name.lower()
				or q in s.email.lower()
				or q in s.notes.lower()
				or any(q in t.lower() for t in s.tags)
			]
		return students

	def get_student(self, student_id: str) -> Student:
		return to_student(self._require_student(student_id))

	def add_student(self, data: StudentCreate) -> Student:
		if data.group_id:
			self._require_group(data.group_id)
		row = StudentRecord(
			name=data.name,
			email=data.email,
			grade=data.grade,
			notes=data.notes,
			tags=_unique(data.tags),
			group_id=data.group_id or None,
			position_x=data.position.x if data.position else None,
			position_y=data.position.y if data.position else None,
			avatar_url=data.avatar or DEFAULT_AVATAR,
		)
		self.db.add(row)
		self._commit()
		self.db.refresh(row)
		logger.info("Added student %s", row.id)
		return to_student(row)

	def update_student(self, student_id: str, changes: StudentUpdate) -> Student:
		row = self._require_student(student_id)
		fields = changes.model_dump(exclude_unset=True)
		if fields.get("group_id"):
			self._require_group(fields["group_id"])
		for key in ("name", "email", "grade", "notes"):
			if key in fields:
				setattr(row, key, fields[key])
		if "tags" in fields:
			row.tags = _unique(fields["tags"] or [])
		if "group_id" in fields:
			row.group_id = fields["group_id"] or None
		if "position" in fields:
			position = changes.position
			row.position_x = position.x if position else None
			row.position_y = position.y if position else None
		self._commit()
		self.db.refresh(row)
		return to_student(row)

	def move_student_to_group(self, student_id: str, group_id: str) -> Student:
		target = None if group_id == UNGROUPED else group_id
		return self.update_student(student_id, StudentUpdate(group_id=target))

	# ---- groups ----

	def list_groups(self) -> List[Group]:
		groups = self.db.scalars(select(GroupRecord).order_by(GroupRecord.name)).all()
		members = self.db.execute(
			select(StudentRecord.id, StudentRecord.group_id).where(StudentRecord.group_id.is_not(None))
		).all()
		by_group: dict[str, List[str]] = {}
		for student_id, group_id in members:
			by_group.setdefault(group_id, []).append(student_id)
		return [Group(id=g.id, name=g.name, color=g.color, student_ids=by_group.get(g.id, [])) for g in groups]

	def create_group(self, data: GroupCreate) -> Group:
		row = GroupRecord(name=data.name, color=data.color)
		self.db.add(row)
		self._commit()
		self.db.refresh(row)
		return Group(id=row.id, name=row.name, color=row.color, student_ids=[])

	def update_group(self, group_id: str, changes: GroupUpdate) -> Group:
		row = self._require_group(group_id)
		fields = changes.model_dump(exclude_unset=True, exclude_none=True)
		for key, value in fields.items():
			setattr(row, key, value)
		self._commit()
		return next(g for g in self.list_groups() if g.id == group_id)

	# ---- mood checks ----

	def record_mood_check(self, data: MoodCheckCreate) -> MoodCheckOut:
		self._require_student(data.student_id)
		row = MoodCheckRecord(
			student_id=data.student_id,
			mood=data.mood,
			energy=data.energy,
			stress=data.stress,
			notes=data.notes,
		)
		self.db.add(row)
		self._commit()
		self.db.refresh(row)
		return _to_mood_check(row)

	def list_mood_checks(self, student_id: Optional[str] = None) -> List[MoodCheckOut]:
		stmt = select(MoodCheckRecord).order_by(MoodCheckRecord.created_at.desc())
		if student_id:
			stmt = stmt.where(MoodCheckRecord.student_id == student_id)
		return [_to_mood_check(r) for r in self.db.scalars(stmt).all()]


def _to_mood_check(row: MoodCheckRecord) -> MoodCheckOut:
	return MoodCheckOut(
		id=row.id,
		student_id=row.student_id,
		mood=row.mood,
		energy=row.energy,
		stress=row.stress,
		notes=row.notes or "",
		created_at=row.created_at,
	)


def get_store(db: Session = Depends(get_db)) -> StudentStore:
	return StudentStore(db)
