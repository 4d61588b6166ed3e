"""Uptime checks for tenant domains and dashboard statistics"""

import asyncio
import time
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.models.audit import AuditLog
from app.models.event import Event
from app.models.health import HealthPing
from app.models.special import Special
from app.models.tenant import Domain, DomainStatus, Tenant

logger = structlog.get_logger()

# Recorded when the request never produced a response
FAILED_STATUS = 500


async def check_url(http_client: httpx.AsyncClient, url: str, timeout: Optional[float] = None) -> Dict[str, Any]:
    """HEAD the url. Network errors become a failed result, never an exception."""
    started = time.perf_counter()
    try:
        response = await http_client.head(
            url,
            timeout=timeout or settings.health_check_timeout_seconds,
            follow_redirects=True,
        )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        return {
            "status_code": FAILED_STATUS,
            "response_time_ms": None,
            "error": str(e) or e.__class__.__name__,
        }
    return {
        "status_code": response.status_code,
        "response_time_ms": int((time.perf_counter() - started) * 1000),
        "error": None,
    }


async def ping_url(db: AsyncSession, http_client: httpx.AsyncClient, tenant_id: UUID, url: str) -> HealthPing:
    """Check one url and store the result"""
    outcome = await check_url(http_client, url)
    ping = HealthPing(tenant_id=tenant_id, url=url, **outcome)
    db.add(ping)
    await db.commit()
    return ping


async def run_health_sweep(db: AsyncSession, http_client: httpx.AsyncClient) -> List[Dict[str, Any]]:
    """
    Ping every ACTIVE domain of every active tenant.

    Checks run concurrently and each is isolated, so one unreachable host
    still yields a recorded result for every domain.
    """
    result = await db.execute(
        select(Tenant.id, Tenant.name, Domain.hostname)
        .join(Domain, Domain.tenant_id == Tenant.id)
        .where(Tenant.is_active == True, Domain.status == DomainStatus.ACTIVE)
        .order_by(Tenant.name, Domain.hostname)
    )
    targets = [
        {"tenant_id": tenant_id, "site": name, "domain": hostname, "url": f"https://{hostname}"}
        for tenant_id, name, hostname in result.all()
    ]

    outcomes = await asyncio.gather(*(check_url(http_client, t["url"]) for t in targets))

    results = []
    for target, outcome in zip(targets, outcomes):
        db.add(HealthPing(tenant_id=target["tenant_id"], url=target["url"], **outcome))
        results.append({
            "tenant_id": str(target["tenant_id"]),
            "site": target["site"],
            "domain": target["domain"],
            "success": outcome["status_code"] < 400,
            **outcome,
        })
    await db.commit()

    failed = sum(1 for r in results if not r["success"])
    logger.info("Health sweep finished", domains=len(results), failed=failed)
    return results


def start_of_week(today: date) -> datetime:
    """Sunday 00:00 of the current week"""
    days_since_sunday = (today.weekday() + 1) % 7
    return datetime.combine(today - timedelta(days=days_since_sunday), datetime.min.time())


async def dashboard_stats(db: AsyncSession, tenant_id: UUID) -> Dict[str, Any]:
    now = datetime.utcnow()
    day_ago = now - timedelta(hours=24)

    total_checks, average_ms = (
        await db.execute(
            select(func.count(HealthPing.id), func.avg(HealthPing.response_time_ms)).where(
                HealthPing.tenant_id == tenant_id,
                HealthPing.created_at >= day_ago,
            )
        )
    ).one()
    successful_checks = await db.scalar(
        select(func.count(HealthPing.id)).where(
            HealthPing.tenant_id == tenant_id,
            HealthPing.created_at >= day_ago,
            HealthPing.status_code < 400,
        )
    )

    edits = await db.scalar(
        select(func.count(AuditLog.id)).where(
            AuditLog.tenant_id == tenant_id,
            AuditLog.created_at >= now - timedelta(days=7),
        )
    )

    today = date.today()
    active_specials = await db.scalar(
        select(func.count(Special.id)).where(
            Special.tenant_id == tenant_id,
            Special.is_active == True,
            Special.end_date >= today,
        )
    )

    week_start = start_of_week(today)
    events_this_week = await db.scalar(
        select(func.count(Event.id)).where(
            Event.tenant_id == tenant_id,
            Event.start_date >= week_start,
            Event.start_date < week_start + timedelta(days=7),
        )
    )

    return {
        "uptime": {
            "total_checks": total_checks,
            "successful_checks": successful_checks or 0,
            "uptime_percent": round(successful_checks / total_checks * 100, 2) if total_checks else None,
            "average_response_ms": round(float(average_ms), 1) if average_ms is not None else None,
        },
        "edits_last_7_days": edits or 0,
        "active_specials": active_specials or 0,
        "events_this_week": events_this_week or 0,
    }
