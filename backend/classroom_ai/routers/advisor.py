from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..advisor import ClassroomAdvisor, get_advisor
from ..errors import StudentNotFound
from ..schemas import (
	AdvisorStatus,
	ClassroomReport,
	CommunicationRequest,
	GenerateAllRequest,
	GradePrediction,
	GroupingRequest,
	GroupSuggestion,
	InterventionRequest,
	LearningInsight,
	ParentCommunication,
	PredictionRequest,
	RosterRequest,
	Student,
	StudentRequest,
	TrajectoryRequest,
)
from ..store import StudentStore, get_store

router = APIRouter(prefix="/ai", tags=["ai"])


def _roster(req: RosterRequest, store: StudentStore) -> List[Student]:
	if req.students is not None:
		return list(req.students)
	return store.list_students()


def _student(req: StudentRequest, store: StudentStore) -> Student:
	if req.student is not None:
		return req.student
	if not req.student_id:
		raise HTTPException(status_code=400, detail="student or studentId is required")
	try:
		return store.get_student(req.student_id)
	except StudentNotFound as e:
		raise HTTPException(status_code=404, detail=str(e))


@router.get("/status", response_model=AdvisorStatus)
def status(advisor: ClassroomAdvisor = Depends(get_advisor)):
	return advisor.get_status()


@router.post("/predictions", response_model=List[GradePrediction])
async def predict_grades(
	req: PredictionRequest,
	advisor: ClassroomAdvisor = Depends(get_advisor),
	store: StudentStore = Depends(get_store),
):
	return await advisor.predict_grades(_roster(req, store), req.context)


@router.post("/groups", response_model=List[GroupSuggestion])
async def suggest_groups(
	req: GroupingRequest,
	advisor: ClassroomAdvisor = Depends(get_advisor),
	store: StudentStore = Depends(get_store),
):
	return await advisor.suggest_optimal_groups(_roster(req, store), req.purpose)


@router.post("/insights", response_model=List[LearningInsight])
async def analyze_trajectory(
	req: TrajectoryRequest,
	advisor: ClassroomAdvisor = Depends(get_advisor),
	store: StudentStore = Depends(get_store),
):
	return await advisor.analyze_learning_trajectory(_student(req, store), req.historical_data)


@router.post("/interventions", response_model=List[str])
async def intervention_strategies(
	req: InterventionRequest,
	advisor: ClassroomAdvisor = Depends(get_advisor),
	store: StudentStore = Depends(get_store),
):
	return await advisor.generate_intervention_strategies(_student(req, store), req.risk_factors)


@router.post("/parent-communication", response_model=ParentCommunication)
async def parent_communication(
	req: CommunicationRequest,
	advisor: ClassroomAdvisor = Depends(get_advisor),
	store: StudentStore = Depends(get_store),
):
	return await advisor.generate_parent_communication(_student(req, store), req.context)


@router.post("/generate-all", response_model=ClassroomReport)
async def generate_all(
	req: GenerateAllRequest,
	advisor: ClassroomAdvisor = Depends(get_advisor),
	store: StudentStore = Depends(get_store),
):
	return await advisor.generate_all(_roster(req, store), req.context, req.purpose, req.insight_limit)
