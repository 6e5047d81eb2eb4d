"""FastAPI routes for the tweakhub REST API."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Security
from fastapi.security import APIKeyHeader
from pydantic import BaseModel

from tweakhub import __version__
from tweakhub.hub.core import SettingsHub

logger = logging.getLogger(__name__)

_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


# --- Pydantic request models ---
class FilterUpdate(BaseModel):
    enabled: bool


class ApplyRequest(BaseModel):
    enable: bool = True
    value: Any = None


def _not_initialized(e: RuntimeError) -> HTTPException:
    return HTTPException(status_code=503, detail=str(e))


def _register_setting_routes(router: APIRouter, hub: SettingsHub) -> None:
    """Register catalog and setting endpoints on the router."""

    @router.get("/api/features")
    async def list_features():
        try:
            settings = hub.registry.get_all_filtered_settings()
            return {"features": {feature_id: len(items) for feature_id, items in settings.items()}}
        except RuntimeError as e:
            raise _not_initialized(e) from e

    @router.get("/api/features/{feature_id}/settings")
    async def list_feature_settings(feature_id: str, bypass: bool = Query(False)):
        try:
            if bypass:
                settings = hub.registry.get_bypassed_settings(feature_id)
            else:
                settings = hub.registry.get_filtered_settings(feature_id)
        except RuntimeError as e:
            raise _not_initialized(e) from e
        if feature_id not in hub.registry.feature_ids():
            raise HTTPException(status_code=404, detail=f"Unknown feature: {feature_id}")
        return {"feature": feature_id, "bypass": bypass, "settings": [s.summary() for s in settings]}

    @router.get("/api/settings/{setting_id}/options")
    async def get_setting_options(setting_id: str):
        try:
            definition = hub.get_setting(setting_id)
        except RuntimeError as e:
            raise _not_initialized(e) from e
        if definition is None:
            raise HTTPException(status_code=404, detail=f"Unknown setting: {setting_id}")
        result = await hub.build_options(setting_id)
        return result.to_dict()

    @router.get("/api/settings/{setting_id}/value")
    async def get_setting_value(setting_id: str):
        if not hub.registry.is_initialized:
            raise HTTPException(status_code=503, detail="Registry not initialized; await initialize() first")
        try:
            value = await hub.router.get_setting_value(setting_id)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        except Exception as e:
            logger.exception("Error reading setting %s", setting_id)
            raise HTTPException(status_code=500, detail=str(e)) from e
        return {"setting_id": setting_id, "value": value}

    @router.post("/api/settings/{setting_id}/apply")
    async def apply_setting(setting_id: str, body: ApplyRequest):
        try:
            result = await hub.apply_setting(setting_id, body.enable, body.value)
        except RuntimeError as e:
            raise _not_initialized(e) from e
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        if not result.success:
            raise HTTPException(status_code=400, detail=result.error_message)
        return {"status": "ok", "setting_id": setting_id}

    @router.put("/api/filter")
    async def set_filter(body: FilterUpdate):
        hub.registry.set_filter_enabled(body.enabled)
        return {"filter_enabled": hub.registry.filter_enabled}


def _register_recommended_routes(router: APIRouter, hub: SettingsHub) -> None:
    """Register recommended-settings endpoints on the router."""

    @router.get("/api/recommended/{setting_id}")
    async def get_recommended(setting_id: str):
        try:
            settings = await hub.recommended.get_recommended_settings(setting_id)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        except Exception as e:
            logger.exception("Error listing recommended settings for %s", setting_id)
            raise HTTPException(status_code=500, detail=str(e)) from e
        return {"setting_id": setting_id, "settings": [s.summary() for s in settings]}

    @router.post("/api/recommended/{setting_id}")
    async def apply_recommended(setting_id: str):
        try:
            results = await hub.recommended.apply_recommended_settings(setting_id)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        except Exception as e:
            logger.exception("Error applying recommended settings for %s", setting_id)
            raise HTTPException(status_code=500, detail=str(e)) from e
        return {
            "applied": [r.setting_id for r in results if r.success],
            "failed": {r.setting_id: r.error_message for r in results if not r.success},
        }


def create_api(hub: SettingsHub) -> FastAPI:
    """Create the FastAPI application for a hub."""
    app = FastAPI(title="tweakhub", version=__version__)
    api_key = hub.config.server.api_key

    async def verify_api_key(key: str = Security(_api_key_header)):
        """Verify the API key if one is configured, otherwise allow all."""
        if api_key and key != api_key:
            raise HTTPException(status_code=403, detail="Invalid API key")

    router = APIRouter(dependencies=[Depends(verify_api_key)])

    @app.get("/")
    async def root():
        return {"service": "tweakhub", "version": __version__}

    @app.get("/health")
    async def health():
        try:
            return await hub.health_check()
        except Exception as e:
            logger.exception("Health check failed")
            raise HTTPException(status_code=500, detail=str(e)) from e

    _register_setting_routes(router, hub)
    _register_recommended_routes(router, hub)
    app.include_router(router)
    return app
