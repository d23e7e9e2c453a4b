"""
# Health Routes

Liveness and readiness probes for container orchestration.

- `GET /health` / `GET /health/liveness`: the process answers requests.
- `GET /health/readiness`: MongoDB answers a ping; 503 otherwise.

```yaml
readinessProbe:
  httpGet:
    path: /health/readiness
    port: 8000
```
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from admin_backend.config import settings
from admin_backend.database import db_manager

router = APIRouter(prefix="/health", tags=["System"])


@router.get("")
@router.get("/liveness")
async def liveness_probe():
    """Returns 200 as long as the application can respond."""
    return {"status": "healthy", "environment": settings.ENVIRONMENT}


@router.get("/readiness")
async def readiness_probe():
    """
    Returns 200 only when the database is reachable.

    The orchestrator stops routing traffic to the instance on 503.
    """
    if await db_manager.health_check():
        return {"status": "ready", "database": "connected"}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "database": "unavailable"},
    )
