"""Configuration diagnostics endpoints."""

from fastapi import APIRouter, Depends

from app.config import Settings
from app.infrastructure.sms_health import check_sms_configuration
from app.interfaces.api.dependencies import get_app_settings
from app.interfaces.api.schemas import SmsConfigurationRead

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/sms", response_model=SmsConfigurationRead)
def sms_configuration(settings: Settings = Depends(get_app_settings)) -> SmsConfigurationRead:
    """Report whether the SMS carrier credentials are complete and well formed."""

    check = check_sms_configuration(settings)
    return SmsConfigurationRead(
        is_configured=check.is_configured,
        issues=list(check.issues),
        warnings=list(check.warnings),
    )
