"""Backup manifest generation service."""

import json
import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from mariadbbackup.models import BackupArtifact


class ManifestService:
    """Collects backup run metadata and writes the manifest JSON."""

    def __init__(self, manifest_file: str, logger):
        self.manifest_file = manifest_file
        self.logger = logger
        self.manifest: Dict[str, Any] = {
            "timestamp": None,
            "status": "running",
            "started_at": None,
            "finished_at": None,
            "duration_seconds": None,
            "metadata": {},
            "databases": [],
            "error": None,
        }

    def start_run(self, timestamp: str, metadata: Dict[str, Any]):
        self.manifest["timestamp"] = timestamp
        self.manifest["status"] = "running"
        self.manifest["started_at"] = self._now()
        self.manifest["metadata"] = metadata
        self.write()

    def add_artifact(self, artifact: BackupArtifact):
        self.manifest["databases"].append(
            {
                "name": artifact.database,
                "file": os.path.basename(artifact.path),
                "status": artifact.status,
                "returncode": artifact.returncode,
                "size_bytes": artifact.size_bytes,
                "duration_seconds": artifact.duration_seconds,
                "error": artifact.error,
            }
        )
        self.write()

    def finalize(self, status: str, error: Optional[str] = None):
        self.manifest["status"] = status
        self.manifest["finished_at"] = self._now()
        if self.manifest.get("started_at"):
            started_at = datetime.fromisoformat(self.manifest["started_at"])
            finished_at = datetime.fromisoformat(self.manifest["finished_at"])
            self.manifest["duration_seconds"] = (finished_at - started_at).total_seconds()
        self.manifest["error"] = error
        self.write()

    def write(self):
        manifest_dir = os.path.dirname(self.manifest_file) or "."
        os.makedirs(manifest_dir, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(prefix=".backup-manifest-", suffix=".json", dir=manifest_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file_obj:
                json.dump(self.manifest, file_obj, indent=2, sort_keys=True)
                file_obj.write("\n")
            os.replace(temp_path, self.manifest_file)
        except OSError as exc:
            self.logger.warning("Could not write manifest file '%s': %s", self.manifest_file, exc)
            try:
                os.remove(temp_path)
            except OSError:
                pass

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()
