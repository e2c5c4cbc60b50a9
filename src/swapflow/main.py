"""Main entry point - runs the status API and confirmation tracking."""

import asyncio
import logging
import signal

import uvicorn

from swapflow.api.app import create_app
from swapflow.config import get_settings
from swapflow.ledger.database import close_db, init_db
from swapflow.rpc.clients import RpcClientCache
from swapflow.services.confirmation_watcher import ConfirmationWatcher

logger = logging.getLogger(__name__)


class Application:
    """Runs the API server and the confirmation watcher side by side."""

    def __init__(self):
        self.settings = get_settings()
        self.clients = RpcClientCache()
        self.watcher = ConfirmationWatcher(self.clients)
        self._shutdown_event = asyncio.Event()

    async def start(self):
        """Start all services."""
        log_level = logging.DEBUG if self.settings.debug else logging.INFO
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        logger.info("Starting swapflow...")
        logger.info(f"Environment: {self.settings.environment}")

        await init_db()
        logger.info("Database initialized")

        tasks = [
            asyncio.create_task(self._run_api()),
            asyncio.create_task(self.watcher.run()),
        ]

        await self._shutdown_event.wait()

        self.watcher.stop()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        await self._cleanup()

    async def _run_api(self):
        """Run the FastAPI server."""
        try:
            config = uvicorn.Config(
                create_app(),
                host=self.settings.api_host,
                port=self.settings.api_port,
                log_level="debug" if self.settings.debug else "info",
            )
            server = uvicorn.Server(config)
            logger.info(f"Starting API server on {self.settings.api_host}:{self.settings.api_port}")
            await server.serve()
        except asyncio.CancelledError:
            logger.info("API server cancelled")
        except Exception as e:
            logger.error(f"API error: {e}")
            raise

    async def _cleanup(self):
        logger.info("Cleaning up...")
        await self.clients.close()
        await close_db()
        logger.info("Cleanup complete")

    def shutdown(self):
        """Signal shutdown."""
        logger.info("Shutdown requested")
        self._shutdown_event.set()


def main():
    """Main entry point."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    app = Application()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, app.shutdown)

    try:
        loop.run_until_complete(app.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        loop.close()


if __name__ == "__main__":
    main()
