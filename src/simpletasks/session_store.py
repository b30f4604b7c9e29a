"""Durable storage for the session token."""

import json
from pathlib import Path
from typing import Optional

from platformdirs import user_data_dir

from simpletasks.config import APP_NAME
from simpletasks.utils.logger import get_logger


class SessionStore:
    """Holds a single bearer token, keyed by a fixed service namespace.

    The token lives in ``<data_dir>/<service>.credentials.json`` and is
    readable only by its owner. Nothing here checks whether the token is
    still accepted by the server.
    """

    def __init__(self, service: str, data_dir: Optional[Path] = None):
        if data_dir is None:
            data_dir = Path(user_data_dir(APP_NAME))
        self.service = service
        self.data_dir = Path(data_dir)
        self.credentials_file = self.data_dir / f"{service}.credentials.json"

    def get(self) -> Optional[str]:
        """Return the stored token, if any."""
        if not self.credentials_file.exists():
            return None
        try:
            with open(self.credentials_file, "r") as f:
                data = json.load(f)
        except (OSError, ValueError):
            get_logger(__name__).warning(
                "unreadable credentials file %s", self.credentials_file
            )
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token or None

    def set(self, token: Optional[str]) -> None:
        """Store ``token``, or remove the stored one when ``None``."""
        if token is None:
            if self.credentials_file.exists():
                self.credentials_file.unlink()
            get_logger(__name__).info("session cleared for %s", self.service)
            return

        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.credentials_file, "w") as f:
            json.dump({"token": token}, f, indent=2)

        # Set file permissions to be readable only by owner
        self.credentials_file.chmod(0o600)
        get_logger(__name__).info("session stored for %s", self.service)
