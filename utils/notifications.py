import logging
import re
from typing import Optional
import yagmail
from pydantic import BaseModel
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client
from config import settings

logger = logging.getLogger(__name__)


class NotificationResult(BaseModel):
    success: bool
    provider: Optional[str] = None
    actually_sent: bool = False
    sid: Optional[str] = None
    status: Optional[str] = None
    reason: Optional[str] = None


def format_mobile_number(mobile_number: Optional[str]) -> Optional[str]:
    """Normalize a locally typed mobile number to E.164."""
    if not mobile_number:
        return None

    trimmed = mobile_number.strip()
    if trimmed.startswith("+"):
        return trimmed

    digits = re.sub(r"\D", "", trimmed)
    if not digits:
        return None
    if digits.startswith("91") and len(digits) == 12:
        return f"+{digits}"
    if len(digits) == 10 and digits[0] in "6789":
        return f"+91{digits}"
    if 11 <= len(digits) <= 15:
        return f"+{digits}"
    return f"+{settings.default_country_code}{digits.lstrip('0')}"


def _twilio_client() -> Optional[Client]:
    if not settings.twilio_account_sid or not settings.twilio_auth_token:
        return None
    return Client(settings.twilio_account_sid, settings.twilio_auth_token)


def send_sms(mobile_number: str, message: str) -> NotificationResult:
    provider = (settings.sms_provider or "mock").lower().strip()
    if provider != "twilio":
        logger.info(f"SMS (mock mode) to {mobile_number}: {message}")
        return NotificationResult(success=True, provider="mock")

    client = _twilio_client()
    if client is None or not settings.twilio_phone_number:
        logger.warning("Twilio credentials not configured. Using mock SMS.")
        return NotificationResult(success=True, provider="twilio-mock")

    to_number = format_mobile_number(mobile_number)
    if to_number is None:
        return NotificationResult(success=False, provider="twilio", reason="invalid-number")

    # Twilio errors propagate; callers decide whether the request fails
    sent = client.messages.create(to=to_number, from_=settings.twilio_phone_number, body=message)
    logger.info(f"Twilio SMS sent to {to_number}, sid {sent.sid}, status {sent.status}")
    return NotificationResult(
        success=True, provider="twilio", actually_sent=True, sid=sent.sid, status=sent.status
    )


def _whatsapp_address(number: str) -> str:
    if number.startswith("whatsapp:"):
        return number
    return f"whatsapp:{number if number.startswith('+') else '+' + number}"


def send_whatsapp(mobile_number: str, message: str) -> NotificationResult:
    client = _twilio_client()
    if client is None or not settings.twilio_whatsapp_from:
        logger.warning("Twilio credentials missing. Skipping WhatsApp notification.")
        return NotificationResult(success=False, provider="twilio", reason="credentials-missing")

    to_number = format_mobile_number(mobile_number)
    if to_number is None:
        logger.warning(f"Invalid WhatsApp recipient number: {mobile_number}")
        return NotificationResult(success=False, provider="twilio", reason="invalid-number")

    try:
        sent = client.messages.create(
            to=_whatsapp_address(to_number),
            from_=_whatsapp_address(settings.twilio_whatsapp_from),
            body=message,
        )
    except TwilioRestException as e:
        logger.error(f"Failed to send WhatsApp message: {e.msg}")
        return NotificationResult(success=False, provider="twilio", reason="twilio-error")

    logger.info(f"WhatsApp message sid {sent.sid}")
    return NotificationResult(
        success=True, provider="twilio", actually_sent=True, sid=sent.sid, status=sent.status
    )


def send_appointment_email(email: str, subject: str, appointment, doctor_name: str) -> bool:
    if not settings.mail_username or not settings.mail_password:
        logger.info("Mail credentials not configured, skipping appointment email")
        return False

    html_body = f"""
    <h1>{subject}</h1>
    <p>Appointment Details:</p>
    <p>Doctor: Dr. {doctor_name}</p>
    <p>Patient: {appointment.patient_name}</p>
    <p>Time: {appointment.appointment_date:%A, %d %B %Y} at {appointment.appointment_time}</p>
    <p>Status: {appointment.status.value}</p>
    """
    yag = yagmail.SMTP(settings.mail_username, settings.mail_password)
    yag.send(to=email, subject=subject, contents=[html_body])
    return True


def appointment_sms_text(appointment, doctor_name: str, specialization: Optional[str] = None) -> str:
    doctor = f"Dr. {doctor_name}" + (f" ({specialization})" if specialization else "")
    return (
        f"Hello {appointment.patient_name}, your appointment with {doctor} is scheduled for "
        f"{appointment.appointment_date:%A, %B %d, %Y} at {appointment.appointment_time}. "
        f"Please arrive 15 minutes early. - {settings.hospital_name}"
    )


def registration_whatsapp_text(patient, doctor_name: str) -> str:
    return (
        f"Hello {patient.full_name}, you are registered with Dr. {doctor_name} for "
        f"{patient.registration_date:%d %b %Y, %H:%M}. Your token number is "
        f"{patient.token_number}. - {settings.hospital_name}"
    )
