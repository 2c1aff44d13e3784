from fastapi import HTTPException, APIRouter
from typing import List
import logging
from beanie.operators import In
from models.user import User, UserRole
from schemas.doctor import DoctorResponse
from schemas.user import DoctorCreate, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


@router.post("/doctors", response_model=DoctorResponse, status_code=201)
async def create_doctor(doctor: DoctorCreate):
    existing_user = await User.find_one(User.email == doctor.email)
    if existing_user:
        raise HTTPException(status_code=400, detail="User with this email already exists")

    new_doctor = User(
        **doctor.model_dump(exclude_none=True),
        role=UserRole.DOCTOR,
    )
    await new_doctor.insert()
    logger.info(f"Doctor {new_doctor.full_name} created with id {new_doctor.id}")
    return DoctorResponse.model_validate(new_doctor)


@router.get("/users", response_model=List[UserResponse])
async def get_all_users():
    users = (
        await User.find(In(User.role, [UserRole.DOCTOR, UserRole.RECEPTIONIST, UserRole.MEDICAL]))
        .sort(-User.created_at)
        .to_list()
    )
    return [UserResponse.model_validate(user) for user in users]
