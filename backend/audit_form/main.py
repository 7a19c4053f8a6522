# audit_form/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from audit_form.core.settings import settings
from audit_form.routers.audit import router as audit_router
from audit_form.routers.health import router as health_router

app = FastAPI(title=settings.api_title)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.settings = settings

logging.getLogger("uvicorn.error").info(f"[main] mail relay {settings.relay_summary()}")

# Routers
app.include_router(audit_router)
app.include_router(health_router)

@app.get("/__routes")
async def __routes():
    # included routers are not flattened into app.routes on newer FastAPI
    return [
        {"methods": sorted(m.upper() for m in ops), "path": path}
        for path, ops in app.openapi()["paths"].items()
    ]
