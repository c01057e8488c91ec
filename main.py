import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers.admin import router as admin_router

# Routers
from routers.attempts import router as attempts_router
from routers.grading import router as grading_router
from routers.health import router as health_router
from routers.sessions import router as sessions_router
from routers.templates import router as templates_router

logger = logging.getLogger("data-quiz")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Data Interpretation Quiz API")

# Allow calls from the widget dev server and the static site
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5500",
        "http://127.0.0.1:5500",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "x-api-key", "x-admin-token"],
)


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(sessions_router)  # /sessions/...
app.include_router(templates_router)  # /templates/{variant}
app.include_router(grading_router)  # /grade
app.include_router(attempts_router)  # /attempts/...
app.include_router(admin_router)  # /admin/...
app.include_router(health_router)  # /health/...
