from typing import Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(description="`ok`, or `degraded` when the latest snapshot is an estimate")
    uptime_s: float = Field(ge=0)
    version: str
    app_name: str
    app_env: str
    location: str = Field(description="Name of the session's current location")
    last_request_id: int = Field(ge=0, description="Newest request id issued by the session")
    snapshot_request_id: Optional[int] = Field(None, description="Request id of the committed snapshot, if any")
    snapshot_estimated: Optional[bool] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "ok",
                    "uptime_s": 12.34,
                    "version": "0.1.0",
                    "app_name": "EcoScope",
                    "app_env": "development",
                    "location": "New York",
                    "last_request_id": 3,
                    "snapshot_request_id": 3,
                    "snapshot_estimated": False,
                }
            ]
        }
    }
