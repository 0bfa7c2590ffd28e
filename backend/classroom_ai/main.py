from fastapi import Depends, FastAPI

from .advisor import ClassroomAdvisor, get_advisor
from .db import init_db
from .logging_config import configure_logging
from .routers import advisor, groups, mood, students

configure_logging()

app = FastAPI(title="Classroom Advisor API")
app.include_router(students.router)
app.include_router(groups.router)
app.include_router(mood.router)
app.include_router(advisor.router)

@app.get("/info")
def root(ai: ClassroomAdvisor = Depends(get_advisor)):
	status = ai.get_status()
	return {"status": "ok", "ai_available": status.available, "ai_message": status.message}

@app.on_event("startup")
async def startup_event():
	# Initialize DB schema
	init_db()
	# Probe the credential once so the mode is logged at boot
	get_advisor()
