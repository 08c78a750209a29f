"""JSON file storage with Result-based error handling.

Thin wrapper around reading and writing one JSON document. Writes go to a
temporary file in the same directory which then replaces the target, so
a crash mid-save never leaves a truncated roadmap behind.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from milepost.domain.shared.result import Err, Ok, Result


class JsonStorage:
    """Low-level JSON file I/O.

    Holds no domain logic. Every method returns ``Ok``/``Err`` instead of
    raising on I/O or decoding problems.

    Example:
        storage = JsonStorage()
        result = storage.load_json(Path("data/roadmap.json"))
        if isinstance(result, Ok):
            document = result.value
    """

    def load_json(self, path: Path) -> Result[dict[str, Any], str]:
        """Read a JSON object from ``path``."""
        try:
            if not path.exists():
                return Err(f"File not found: {path}")

            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                return Err(f"Expected a JSON object in {path}")
            return Ok(data)

        except json.JSONDecodeError as e:
            return Err(f"Invalid JSON in {path}: {e}")
        except PermissionError:
            return Err(f"Permission denied reading {path}")
        except OSError as e:
            return Err(f"Error reading {path}: {e}")

    def save_json(
        self,
        path: Path,
        data: dict[str, Any],
        indent: int = 2,
    ) -> Result[None, str]:
        """Write ``data`` to ``path`` pretty-printed, replacing it atomically."""
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            content = json.dumps(data, indent=indent, ensure_ascii=False)

            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
                handle.write("\n")
            os.replace(tmp_name, path)
            tmp_name = None
            return Ok(None)

        except TypeError as e:
            return Err(f"Data not JSON serializable: {e}")
        except PermissionError:
            return Err(f"Permission denied writing {path}")
        except OSError as e:
            return Err(f"Error writing {path}: {e}")
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
