"""Main entry point for the aura-quest API server"""
import logging

import uvicorn

from aura_quest.config import API_HOST, API_PORT, LOG_LEVEL, STORE_BACKEND, validate_config
from aura_quest.api.server import create_api_application

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


def main() -> None:
    """Main application entry point"""
    logger.info("Validating configuration...")
    validate_config()

    logger.info(f"Starting Aura Quest on {API_HOST}:{API_PORT} (store: {STORE_BACKEND})")
    uvicorn.run(
        create_api_application(),
        host=API_HOST,
        port=API_PORT,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
