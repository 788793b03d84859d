"""On-disk Baileys credential store.

Layout under the session directory::

    creds.json
    keys/<type>/<sanitized id>.json   {"id": <original id>, "value": ...}

Contents are opaque to the gateway; we only load them for the sidecar and
write back whatever it reports.
"""

import re
import shutil
from pathlib import Path
from typing import Any

from wagate.core.exceptions import PersistenceError
from wagate.core.files import read_json, write_json_atomic
from wagate.core.logging import log
from wagate.whatsapp.base import CredentialState

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


def _file_name(key_id: str) -> str:
    return _UNSAFE.sub("_", key_id.replace("/", "__").replace(":", "-")) + ".json"


class CredentialStore:
    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.state = CredentialState()

    @property
    def creds_path(self) -> Path:
        return self.directory / "creds.json"

    @property
    def keys_dir(self) -> Path:
        return self.directory / "keys"

    def ensure(self) -> None:
        """Create the session directory. Failure here aborts startup."""
        self.directory.mkdir(parents=True, exist_ok=True)

    def load(self) -> CredentialState:
        creds: dict[str, Any] = {}
        if self.creds_path.exists():
            try:
                creds = read_json(self.creds_path) or {}
            except PersistenceError as e:
                log.warning(f"Ignoring unreadable credentials: {e}")
            if not isinstance(creds, dict):
                log.warning(f"Ignoring malformed credentials in {self.creds_path}")
                creds = {}

        keys: dict[str, dict[str, Any]] = {}
        if self.keys_dir.is_dir():
            for type_dir in sorted(p for p in self.keys_dir.iterdir() if p.is_dir()):
                for key_file in sorted(type_dir.glob("*.json")):
                    try:
                        entry = read_json(key_file)
                    except PersistenceError as e:
                        log.warning(f"Skipping unreadable key file: {e}")
                        continue
                    if not isinstance(entry, dict) or "id" not in entry:
                        log.warning(f"Skipping malformed key file: {key_file}")
                        continue
                    keys.setdefault(type_dir.name, {})[entry["id"]] = entry.get("value")

        self.state = CredentialState(creds=creds, keys=keys)
        log.info(
            f"Loaded credentials from {self.directory} "
            f"(registered={self.state.registered}, key types={len(keys)})"
        )
        return self.state

    def save_creds(self, update: dict[str, Any]) -> None:
        """Merge a ``creds.update`` payload and rewrite creds.json."""
        self.state.creds.update(update)
        write_json_atomic(self.creds_path, self.state.creds)
        log.debug(f"Saved creds ({len(update)} fields updated)")

    def save_keys(self, update: dict[str, dict[str, Any]]) -> None:
        """Apply a ``keys.update`` payload; ``None`` values delete the key."""
        for key_type, entries in update.items():
            type_dir = self.keys_dir / _UNSAFE.sub("_", key_type)
            stored = self.state.keys.setdefault(key_type, {})
            for key_id, value in (entries or {}).items():
                path = type_dir / _file_name(key_id)
                if value is None:
                    stored.pop(key_id, None)
                    try:
                        path.unlink(missing_ok=True)
                    except OSError as e:
                        raise PersistenceError(str(path), str(e))
                else:
                    stored[key_id] = value
                    write_json_atomic(path, {"id": key_id, "value": value})

    def clear(self) -> None:
        """Forget the linked device after a logout."""
        try:
            if self.directory.exists():
                shutil.rmtree(self.directory)
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(str(self.directory), str(e))
        self.state = CredentialState()
        log.info(f"Cleared credentials in {self.directory}")
