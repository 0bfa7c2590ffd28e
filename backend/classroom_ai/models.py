from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text
from .db import Base


def _uuid() -> str:
	return uuid.uuid4().hex


class GroupRecord(Base):
	__tablename__ = "groups"
	id = Column(String(64), primary_key=True, default=_uuid)
	name = Column(String(128), nullable=False)
	color = Column(String(32), nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class StudentRecord(Base):
	__tablename__ = "students"
	id = Column(String(64), primary_key=True, default=_uuid)
	name = Column(String(256), nullable=False, index=True)
	email = Column(String(256), nullable=False, default="")
	# 0-100, NULL while ungraded
	grade = Column(Integer, nullable=True)
	notes = Column(Text, nullable=True)
	tags = Column(JSON, nullable=True)
	group_id = Column(String(64), ForeignKey("groups.id", ondelete="SET NULL"), nullable=True, index=True)
	position_x = Column(Float, nullable=True)
	position_y = Column(Float, nullable=True)
	avatar_url = Column(String(512), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class MoodCheckRecord(Base):
	__tablename__ = "mood_checks"
	id = Column(String(64), primary_key=True, default=_uuid)
	student_id = Column(String(64), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
	mood = Column(String(32), nullable=False)
	energy = Column(Integer, nullable=False, default=3)
	stress = Column(Integer, nullable=False, default=2)
	notes = Column(Text, nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
