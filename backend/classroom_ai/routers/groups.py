from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..errors import GroupNotFound
from ..schemas import Group, GroupCreate, GroupUpdate
from ..store import StudentStore, get_store

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("", response_model=List[Group])
def list_groups(store: StudentStore = Depends(get_store)):
	return store.list_groups()


@router.post("", response_model=Group, status_code=201)
def create_group(req: GroupCreate, store: StudentStore = Depends(get_store)):
	return store.create_group(req)


@router.patch("/{group_id}", response_model=Group)
def update_group(group_id: str, req: GroupUpdate, store: StudentStore = Depends(get_store)):
	try:
		return store.update_group(group_id, req)
	except GroupNotFound as e:
		raise HTTPException(status_code=404, detail=str(e))
