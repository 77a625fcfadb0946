# app/services/report_storage.py
"""
Session-scoped report store

All reports live as one JSON array under a single key of the backing store.
Every write rewrites the whole array; there is no locking across the
read-modify-write cycle, so concurrent writers can overwrite each other.
"""

from datetime import datetime, timezone
from typing import List, Optional, Union
import json
import logging
import random
import string
import time

from pydantic import ValidationError

from app.schemas.report import Report, ReportCreate, ReportUpdate, StorageStats, StoredReport
from app.schemas.user import UserRole
from app.services.aggregation_service import round_half_up
from app.services.storage_backends import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_PREFIX = 'lastnext24_'
REPORTS_KEY = f'{STORAGE_PREFIX}reports'
AUDIO_KEY_PREFIX = f'{STORAGE_PREFIX}audio_'

# Demo roles map onto one synthetic user each; there is no real authentication
DEMO_USER_IDS = {
    UserRole.ENGINEER: 'user_engineer_demo',
    UserRole.MANAGER: 'user_manager_demo',
    UserRole.DIRECTOR: 'user_director_demo',
    UserRole.VP: 'user_vp_demo',
    UserRole.CTO: 'user_cto_demo',
}


class ReportStorageError(Exception):
    """Base error for the report store"""


class NoRoleSelectedError(ReportStorageError):
    pass


class ReportNotFoundError(ReportStorageError):
    pass


class ReportAuthorizationError(ReportStorageError):
    pass


class StorageWriteError(ReportStorageError):
    pass


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class ReportStorageService:
    """CRUD over the stored report array, scoped to the session's demo user

    A session that names the organization member it acts as stores reports
    under that member's id, so they show up in the member's team views.
    Otherwise the role's synthetic demo user owns them.
    """

    def __init__(self, store: KeyValueStore, role: Union[UserRole, str, None], user_id: Optional[str] = None):
        self.store = store
        self.role = UserRole.parse(role)
        self.user_id = user_id

    def generate_id(self) -> str:
        suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
        return f"report_{int(time.time() * 1000)}_{suffix}"

    def get_current_user(self) -> dict:
        if self.role is None:
            raise NoRoleSelectedError('No user role selected')
        return {"id": self.user_id or DEMO_USER_IDS[self.role], "role": self.role}

    def get_all_reports(self) -> List[Report]:
        """Every stored report, whoever owns it, as organization reports"""
        return [r.to_report() for r in self._get_all_reports()]

    def _get_all_reports(self) -> List[StoredReport]:
        try:
            raw = self.store.get_item(REPORTS_KEY)
            if not raw:
                return []
            return [StoredReport(**item) for item in json.loads(raw)]
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"Error reading reports from storage: {e}")
            return []

    def _save_all_reports(self, reports: List[StoredReport]) -> None:
        try:
            payload = json.dumps([r.model_dump(exclude_none=True) for r in reports])
            self.store.set_item(REPORTS_KEY, payload)
        except Exception as e:
            logger.error(f"Error saving reports to storage: {e}")
            raise StorageWriteError('Failed to save report. Storage may be full.') from e

    def create_report(self, data: ReportCreate) -> StoredReport:
        current_user = self.get_current_user()
        report_id = self.generate_id()
        now = utc_now_iso()

        report = StoredReport(
            id=report_id,
            user_id=current_user["id"],
            title=data.title,
            date=data.date,
            content=data.content,
            created_at=now,
            updated_at=now,
        )

        if data.has_audio:
            # Only a flag and a key placeholder; the audio bytes are not kept here
            report.has_audio = True
            report.audio_blob_key = f"{AUDIO_KEY_PREFIX}{report_id}"
            logger.info(f"Audio reference stored for report {report_id} (duration={data.audio_duration})")

        all_reports = self._get_all_reports()
        all_reports.append(report)
        self._save_all_reports(all_reports)

        logger.info(f"Report {report_id} created by {current_user['id']} for {data.date}")
        return report

    def get_report_by_id(self, report_id: str) -> Optional[StoredReport]:
        return next((r for r in self._get_all_reports() if r.id == report_id), None)

    def get_reports_by_user(self, user_id: Optional[str] = None) -> List[StoredReport]:
        """Reports for a user (default: current user), newest first"""
        target_user_id = user_id or self.get_current_user()["id"]
        reports = [r for r in self._get_all_reports() if r.user_id == target_user_id]
        return sorted(reports, key=lambda r: r.created_at, reverse=True)

    def get_reports_by_date(self, date: str, user_id: Optional[str] = None) -> List[StoredReport]:
        return [r for r in self.get_reports_by_user(user_id) if r.date == date]

    def get_all_reports_for_current_user(self) -> List[StoredReport]:
        return self.get_reports_by_user()

    def _find_owned(self, all_reports: List[StoredReport], report_id: str, action: str) -> Optional[int]:
        index = next((i for i, r in enumerate(all_reports) if r.id == report_id), None)
        if index is None:
            return None

        current_user = self.get_current_user()
        if all_reports[index].user_id != current_user["id"]:
            logger.warning(f"{current_user['id']} tried to {action} report {report_id} owned by {all_reports[index].user_id}")
            raise ReportAuthorizationError(f'Not authorized to {action} this report')
        return index

    def update_report(self, report_id: str, updates: ReportUpdate) -> StoredReport:
        all_reports = self._get_all_reports()
        index = self._find_owned(all_reports, report_id, 'update')
        if index is None:
            raise ReportNotFoundError('Report not found')

        changes = updates.model_dump(exclude_unset=True, exclude_none=True)
        updated = all_reports[index].model_copy(update={**changes, "updated_at": utc_now_iso()})

        all_reports[index] = updated
        self._save_all_reports(all_reports)
        return updated

    def delete_report(self, report_id: str) -> bool:
        all_reports = self._get_all_reports()
        index = self._find_owned(all_reports, report_id, 'delete')
        if index is None:
            return False

        report = all_reports[index]
        if report.audio_blob_key:
            try:
                self.store.remove_item(report.audio_blob_key)
            except Exception as e:
                logger.warning(f"Failed to remove audio data for report {report_id}: {e}")

        del all_reports[index]
        self._save_all_reports(all_reports)
        return True

    def get_storage_stats(self) -> StorageStats:
        all_reports = self._get_all_reports()
        used = 0
        for key in self.store.keys():
            if key.startswith(STORAGE_PREFIX):
                used += len(self.store.get_item(key) or '')

        return StorageStats(
            total_reports=len(all_reports),
            current_user_reports=len(self.get_reports_by_user()),
            storage_used=f"{round_half_up(used / 1024)} KB",
        )

    def clear_all_data(self) -> int:
        """Remove every lastnext24 key; returns how many were removed"""
        keys = [key for key in self.store.keys() if key.startswith(STORAGE_PREFIX)]
        for key in keys:
            self.store.remove_item(key)
        logger.info(f"Cleared {len(keys)} storage keys")
        return len(keys)
