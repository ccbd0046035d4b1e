"""
Smoke run against a live backend.

    SONUB_BASE_URL=https://abc.com python main.py
"""

import asyncio
import uuid

from loguru import logger

from sonub import ClientSettings, SonubClient, UserCreate, is_same_error
from sonub.services.errors import ApiError, INVALID_EMAIL


async def main() -> None:
    settings = ClientSettings.from_env()
    logger.info(f"Running smoke checks against {settings.base_url}")

    async with SonubClient(settings) as wp:
        try:
            await wp.get(f"{wp.sonub_api_url}/wrong-route")
            logger.error("Expected an error on a wrong route")
        except ApiError as e:
            if e.code == "rest_no_route":
                logger.info("Wrong route rejected")
            else:
                logger.error(f"Unexpected error on wrong route: {e}")

        try:
            logger.info(f"Version: {await wp.version()}")
        except ApiError as e:
            logger.error(f"Version failed: {e}")

        name = f"smoke{uuid.uuid4().hex[:8]}"
        try:
            await wp.register(
                UserCreate(username=name, email=f"{name}@example.com", password="12345a,*")
            )
            logger.info(f"Registered {name}, logged in: {wp.is_logged}")
        except ApiError as e:
            logger.error(f"Register failed: {e}")

        try:
            await wp.login("abc@wrong.com", "1345a8az,")
            logger.error("Expected an error on login with a wrong email")
        except ApiError as e:
            if is_same_error(e, INVALID_EMAIL):
                logger.info("Login with invalid email rejected")
            else:
                logger.error(f"Unexpected login error: {e}")

        wp.logout()


if __name__ == "__main__":
    asyncio.run(main())
