"""Background job tasks"""

import asyncio
import structlog

from app.jobs.celery_app import celery_app
from app.config import settings

logger = structlog.get_logger()


def run_async(coro):
    """Helper to run async functions in sync context"""
    return asyncio.run(coro)


@celery_app.task(name="sweep_domain_health")
def sweep_domain_health():
    """Ping every active domain and record the results"""
    logger.info("Sweeping domain health")

    async def _sweep():
        import httpx
        from app.database import SessionLocal, engine
        from app.services.health_check import run_health_sweep

        try:
            async with httpx.AsyncClient(timeout=settings.health_check_timeout_seconds) as client:
                async with SessionLocal() as db:
                    results = await run_health_sweep(db, client)
        finally:
            # Pooled connections belong to this task's event loop
            await engine.dispose()

        failed = [r for r in results if not r["success"]]
        logger.info("Domain health sweep finished", checked=len(results), failed=len(failed))
        return {"checked": len(results), "failed": len(failed)}

    return run_async(_sweep())


async def request_schedule_refresh(http_client) -> dict:
    """
    Ask the API to refresh its schedule cache.

    The cache lives in the API process, so the worker triggers the cron
    endpoint instead of fetching schedules itself.
    """
    headers = {}
    if settings.cron_secret:
        headers["Authorization"] = f"Bearer {settings.cron_secret}"

    response = await http_client.post("/cron/schedule-refresh", headers=headers)
    response.raise_for_status()
    outcome = response.json()

    for failure in outcome["failed"]:
        logger.warning("Team schedule refresh failed", **failure)
    return {"refreshed": len(outcome["refreshed"]), "failed": len(outcome["failed"])}


@celery_app.task(name="refresh_schedules")
def refresh_schedules():
    """Warm the API's schedule cache for every configured home team"""
    logger.info("Refreshing team schedules")

    async def _refresh():
        import httpx

        async with httpx.AsyncClient(base_url=settings.api_internal_url, timeout=60.0) as client:
            return await request_schedule_refresh(client)

    return run_async(_refresh())
