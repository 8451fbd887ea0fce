"""
SafeSpace entry point
Opens the local store, loads the application state and logs a status summary.
"""

import asyncio
from safespace.services.state_controller import StateController
from safespace.services.store import Store
from safespace.utils.config import settings
from safespace.utils.errors import StorageUnavailable
from safespace.utils.logger import logger


async def startup(db_url: str = None) -> StateController:
    """
    Open the store and load the application state.

    A store that cannot be opened or read raises StorageUnavailable; the
    application cannot run without it.
    """
    store = Store(db_url)
    store.initialize()
    logger.info(f"{settings.app_name} v{settings.app_version} started")
    logger.info(f"Database path: {store.db.db_path}")

    controller = StateController(store)
    if not await controller.load_all():
        store.close()
        raise StorageUnavailable(f"cannot load data from {store.db.db_path}")
    return controller


async def shutdown(controller: StateController):
    controller.store.close()
    logger.info(f"{settings.app_name} stopped")


async def status():
    controller = await startup()
    try:
        todays = controller.todays_mood()
        most_frequent = await controller.most_frequent_mood()
        logger.info(f"Check-ins: {controller.check_in_days()}")
        logger.info(f"Today's mood: {todays.mood.label if todays else '-'}")
        logger.info(f"Most frequent mood: {most_frequent.label if most_frequent else '-'}")
        logger.info(f"Journal entries: {len(controller.journal_entries)}")
        logger.info(f"Dark mode: {controller.dark_mode}")
        logger.info(controller.random_affirmation())
    finally:
        await shutdown(controller)


if __name__ == "__main__":
    asyncio.run(status())
