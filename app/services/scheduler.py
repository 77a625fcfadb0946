# app/services/scheduler.py
"""
Scheduler service for periodic maintenance (expired cache entries)
"""

from typing import Any, Dict
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
import logging

from app.config.settings import settings
from app.services.cache import CacheService, response_cache

logger = logging.getLogger(__name__)


class MaintenanceScheduler:
    """Scheduler for housekeeping jobs"""

    def __init__(self, cache: CacheService = response_cache):
        self.scheduler = AsyncIOScheduler()
        self.cache = cache
        self.is_running = False

    def start(self):
        """Start the scheduler"""
        if not self.is_running:
            # A stopped AsyncIOScheduler stays bound to its old event loop
            self.scheduler = AsyncIOScheduler()
            self.scheduler.add_job(
                self.cleanup_expired_cache,
                trigger=IntervalTrigger(minutes=settings.CACHE['cleanup_minutes']),
                id='cleanup_expired_cache',
                name='Cleanup Expired Cache Entries',
                replace_existing=True
            )

            self.scheduler.start()
            self.is_running = True
            logger.info("Maintenance scheduler started successfully")

    def stop(self):
        """Stop the scheduler"""
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("Maintenance scheduler stopped")

    async def cleanup_expired_cache(self) -> int:
        """Drop expired response cache entries"""
        try:
            removed = self.cache.cleanup()
            logger.info(f"Cache cleanup finished, {removed} entries removed, {self.cache.stats()['total_entries']} remain")
            return removed
        except Exception as e:
            logger.error(f"Error cleaning up cache: {e}")
            return 0

    def get_scheduler_status(self) -> Dict[str, Any]:
        """Get scheduler status and job information"""
        if not self.is_running:
            return {"status": "stopped", "jobs": []}

        jobs = []
        for job in self.scheduler.get_jobs():
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
                "trigger": str(job.trigger)
            })

        return {"status": "running", "jobs": jobs}


maintenance_scheduler = MaintenanceScheduler()
