"""
System Settings Routes

GET /admin/settings - All settings
PUT /admin/settings - Upsert settings {settings: {key: value}}
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from typing import List

from admin_console.core import cache
from admin_console.core.auth import get_current_admin
from admin_console.db.postgres import get_db_session
from admin_console.services.activity_service import get_activity_service
from admin_console.services.records import cached
from admin_console.utils.dates import utcnow, to_db_timestamp
from admin_console.schemas.schemas import SettingResponse, SettingsUpdate

router = APIRouter(prefix="/settings", tags=["Settings"])


def _as_response(row: dict) -> SettingResponse:
    return SettingResponse(
        key=row["setting_key"], value=row["value"], description=row["description"],
        updated_by=row["updated_by"], updated_at=row["updated_at"]
    )


@router.get("", response_model=List[SettingResponse])
async def get_settings_list(admin: dict = Depends(get_current_admin)):
    return [_as_response(row) for row in cached(cache.SETTINGS)]


@router.put("", response_model=List[SettingResponse])
async def update_settings(data: SettingsUpdate, admin: dict = Depends(get_current_admin)):
    """Insert or update each key; records who changed it."""
    now = to_db_timestamp(utcnow())
    with get_db_session() as db:
        for key, value in data.settings.items():
            params = {"key": key, "value": value, "admin": admin["user_id"], "now": now}
            exists = db.execute(
                text("SELECT setting_key FROM system_settings WHERE setting_key = :key"), {"key": key}
            ).fetchone()
            if exists:
                db.execute(
                    text("""
                        UPDATE system_settings SET value = :value, updated_by = :admin, updated_at = :now
                        WHERE setting_key = :key
                    """),
                    params
                )
            else:
                db.execute(
                    text("""
                        INSERT INTO system_settings (setting_key, value, updated_by, updated_at)
                        VALUES (:key, :value, :admin, :now)
                    """),
                    params
                )

    cache.invalidate(cache.SETTINGS)
    get_activity_service().log_action(admin, "UPDATE_SETTINGS", "settings", None,
                                      {"keys": sorted(data.settings)})
    return [_as_response(row) for row in cached(cache.SETTINGS)]
