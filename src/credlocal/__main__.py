"""credlocal demo entrypoint.

Run with:
  python -m credlocal

Reads the same environment as the app: SECRET_KEY / CREDLOCAL_SECRET_KEY for
cookie signing, CREDLOCAL_USERS_PATH for the user table, plus
CREDLOCAL_HOST, CREDLOCAL_PORT, CREDLOCAL_RELOAD and CREDLOCAL_LOG_LEVEL.
"""

import logging
import os

import uvicorn

from credlocal.auth.users import DEFAULT_USERS_PATH

logger = logging.getLogger(__name__)


def _startup_checks() -> None:
    if not (os.getenv("SECRET_KEY") or os.getenv("CREDLOCAL_SECRET_KEY")):
        logger.warning("No SECRET_KEY set: every login will answer 500 cookie_attach_failed")
    if not DEFAULT_USERS_PATH.exists():
        logger.warning("No user table at %s (create one with scripts/create_user.py)", DEFAULT_USERS_PATH)


def main() -> None:
    logging.basicConfig(
        level=os.getenv("CREDLOCAL_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.getenv("CREDLOCAL_HOST", "0.0.0.0")
    port = int(os.getenv("CREDLOCAL_PORT", "8000"))
    reload = os.getenv("CREDLOCAL_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    _startup_checks()
    uvicorn.run("credlocal.app:create_app", factory=True, host=host, port=port, reload=reload)

if __name__ == "__main__":
    main()
