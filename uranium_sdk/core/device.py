"""Device identity with pluggable persistence."""

import json
from pathlib import Path
from typing import Optional, Protocol
from ..utils.helpers import generate_device_id
from ..utils.logger import get_logger

logger = get_logger(__name__)


class DeviceStorage(Protocol):
    """Persistence capability for the device ID."""

    def get(self) -> Optional[str]: ...

    def set(self, value: str) -> None: ...

    def clear(self) -> None: ...


class InMemoryDeviceStorage:
    """Keeps the device ID for the lifetime of the process."""

    def __init__(self, value: Optional[str] = None):
        self._value = value

    def get(self) -> Optional[str]:
        return self._value

    def set(self, value: str) -> None:
        self._value = value

    def clear(self) -> None:
        self._value = None


class FileDeviceStorage:
    """Persists the device ID in a small JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else Path.home() / ".uranium" / "device.json"

    def get(self) -> Optional[str]:
        if not self.path.exists():
            return None
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return data.get("device_id") or None

    def set(self, value: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"device_id": value}), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class DeviceIdentity:
    """
    Resolves the device ID sent with prepare requests.
    The first resolved value is cached on the instance.
    """

    def __init__(self, storage: Optional[DeviceStorage] = None):
        self.storage = storage
        self._cached: Optional[str] = None

    def get_device_id(self) -> str:
        """Get or create the device ID, persisting new ones."""
        if self._cached:
            return self._cached

        stored = self._load()
        if stored:
            self._cached = stored
            return stored

        device_id = generate_device_id()
        self._store(device_id)
        self._cached = device_id
        return device_id

    def clear(self) -> None:
        """Forget the device ID; the next lookup generates a new one."""
        self._cached = None
        if self.storage is None:
            return
        try:
            self.storage.clear()
        except (OSError, ValueError) as e:
            logger.warning("Failed to clear stored device ID", error=str(e))

    def _load(self) -> Optional[str]:
        if self.storage is None:
            return None
        try:
            return self.storage.get()
        except (OSError, ValueError) as e:
            logger.warning("Failed to load stored device ID", error=str(e))
            return None

    def _store(self, device_id: str) -> None:
        if self.storage is None:
            return
        try:
            self.storage.set(device_id)
        except (OSError, ValueError) as e:
            logger.warning("Failed to persist device ID", error=str(e))
