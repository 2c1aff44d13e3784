import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from database import connect_to_mongo, close_mongo_connection
from admin.routes import router as admin_router
from doctor.routes import router as doctor_router
from patient.routes import router as patient_router
from appointment.routes import router as appointment_router
from config import settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="OPD Scheduling API")

allowed_origins = (
    [settings.frontend_url]
    if settings.frontend_url
    else ["http://localhost:3000", "http://localhost:5173"]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup():
    await connect_to_mongo()


@app.on_event("shutdown")
async def shutdown():
    close_mongo_connection()


@app.get("/api/health")
async def health():
    return {"status": "OK", "message": f"{settings.hospital_name} OPD backend is running"}


# All Routes Endpoint Setup
app.include_router(admin_router, prefix="/api", tags=["admin"])
app.include_router(doctor_router, prefix="/api", tags=["doctor"])
app.include_router(patient_router, prefix="/api", tags=["patient"])
app.include_router(appointment_router, prefix="/api", tags=["appointment"])
