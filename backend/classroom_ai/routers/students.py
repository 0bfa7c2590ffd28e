from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..errors import GroupNotFound, StudentNotFound
from ..schemas import GroupMoveRequest, Student, StudentCreate, StudentUpdate
from ..store import StudentStore, get_store

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=List[Student])
def list_students(q: Optional[str] = None, tag: Optional[str] = None, store: StudentStore = Depends(get_store)):
	return store.list_students(query=q, tag=tag)


@router.post("", response_model=Student, status_code=201)
def add_student(req: StudentCreate, store: StudentStore = Depends(get_store)):
	try:
		return store.add_student(req)
	except GroupNotFound as e:
		raise HTTPException(status_code=400, detail=str(e))


@router.get("/{student_id}", response_model=Student)
def get_student(student_id: str, store: StudentStore = Depends(get_store)):
	try:
		return store.get_student(student_id)
	except StudentNotFound as e:
		raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{student_id}", response_model=Student)
def update_student(student_id: str, req: StudentUpdate, store: StudentStore = Depends(get_store)):
	try:
		return store.update_student(student_id, req)
	except StudentNotFound as e:
		raise HTTPException(status_code=404, detail=str(e))
	except GroupNotFound as e:
		raise HTTPException(status_code=400, detail=str(e))


@router.put("/{student_id}/group", response_model=Student)
def move_student(student_id: str, req: GroupMoveRequest, store: StudentStore = Depends(get_store)):
	try:
		return store.move_student_to_group(student_id, req.group_id)
	except StudentNotFound as e:
		raise HTTPException(status_code=404, detail=str(e))
	except GroupNotFound as e:
		raise HTTPException(status_code=400, detail=str(e))
