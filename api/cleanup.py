# Entry point for a scheduled (cron) serverless function.
# It imports the actual cleanup logic from the core application module.
import logging

from app.core.cleanup import cleanup_scratch

logger = logging.getLogger(__name__)


def handler(event, context):
    """Scheduled cleanup function to delete uploads never claimed by a generation request."""
    logger.info("Cleanup cron job invoked.")
    removed = cleanup_scratch()
    logger.info("Cleanup cron job finished.")
    return {"status": "success", "removed": removed}


if __name__ == "__main__":
    cleanup_scratch()
