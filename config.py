from pydantic import BaseModel
from typing import Optional
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseModel):
    mongodb_uri: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    mongodb_db_name: str = os.getenv("MONGODB_DB_NAME", "opd_db")
    hospital_name: str = os.getenv("HOSPITAL_NAME", "Tekisky Hospital")
    frontend_url: Optional[str] = os.getenv("FRONTEND_URL")

    # "query" derives the next token from the day's records,
    # "counter" reserves it atomically from a per-doctor-per-day counter
    token_allocation: str = os.getenv("TOKEN_ALLOCATION", "query")
    default_daily_patient_limit: int = int(os.getenv("DEFAULT_DAILY_PATIENT_LIMIT", "20"))

    sms_provider: str = os.getenv("SMS_PROVIDER", "mock")
    twilio_account_sid: Optional[str] = os.getenv("TWILIO_ACCOUNT_SID")
    twilio_auth_token: Optional[str] = os.getenv("TWILIO_AUTH_TOKEN")
    twilio_phone_number: Optional[str] = os.getenv("TWILIO_PHONE_NUMBER")
    twilio_whatsapp_from: Optional[str] = os.getenv("TWILIO_WHATSAPP_FROM")
    default_country_code: str = os.getenv("DEFAULT_COUNTRY_CODE", "91")

    mail_username: Optional[str] = os.getenv("MAIL_USERNAME")
    mail_password: Optional[str] = os.getenv("MAIL_PASSWORD")


settings = Settings()
