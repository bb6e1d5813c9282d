import logging
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from league_backend.core.config import settings
from league_backend.core.database import SessionLocal
from league_backend.core.exceptions import LeagueBackendError

logger = logging.getLogger(__name__)


def run_backup():
    """Nightly backup job; opens its own session."""
    from league_backend.backup.services.backup_service import BackupService

    db = SessionLocal()
    try:
        result = BackupService(db).create_backup()
        logger.info(f"💾 Scheduled backup stored as {result['backupName']}")
    except LeagueBackendError as e:
        logger.error(f"❌ Scheduled backup failed: {e.message}")
    finally:
        db.close()


def start_scheduler(hour=None):
    """Start the daily backup job. Returns None when no backup hour is configured."""
    hour = settings.BACKUP_CRON_HOUR if hour is None else hour
    if hour is None:
        logger.info("⏰ No BACKUP_CRON_HOUR configured, scheduler not started.")
        return None

    scheduler = BackgroundScheduler()
    scheduler.add_job(run_backup, CronTrigger(hour=hour, minute=0), id="daily_backup", replace_existing=True)
    scheduler.start()
    logger.info(f"✅ Scheduler started with daily backup at {hour:02d}:00")
    return scheduler
