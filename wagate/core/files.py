"""JSON file helpers shared by the group snapshot and credential store"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from wagate.core.exceptions import PersistenceError


def read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, ValueError) as e:
        raise PersistenceError(str(path), str(e))


def write_json_atomic(path: Path, data: Any) -> None:
    """Rewrite ``path`` in full; readers never see a half-written file."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
                fh.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    except (OSError, TypeError, ValueError) as e:
        raise PersistenceError(str(path), str(e))
