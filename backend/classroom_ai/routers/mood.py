from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..errors import StudentNotFound
from ..schemas import MoodCheckCreate, MoodCheckOut
from ..store import StudentStore, get_store

router = APIRouter(prefix="/mood-checks", tags=["mood"])


@router.post("", response_model=MoodCheckOut, status_code=201)
def record_mood_check(req: MoodCheckCreate, store: StudentStore = Depends(get_store)):
	try:
		return store.record_mood_check(req)
	except StudentNotFound as e:
		raise HTTPException(status_code=404, detail=str(e))


@router.get("", response_model=List[MoodCheckOut])
def list_mood_checks(student_id: Optional[str] = None, store: StudentStore = Depends(get_store)):
	return store.list_mood_checks(student_id)
