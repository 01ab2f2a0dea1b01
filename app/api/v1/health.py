from fastapi import APIRouter

from app.core.config.career_path import get_config_value

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the service.")
async def health_check():
    return {"status": "healthy", "config_version": get_config_value("version")}
