"""Cluster control-plane clients used to read the MariaDB credentials secret."""

import base64
import binascii
import os
from pathlib import Path
from typing import Mapping, Optional

import requests

from mariadbbackup.errors import BackupError

SERVICE_ACCOUNT_DIR = "/var/run/secrets/kubernetes.io/serviceaccount"


def decode_secret_value(encoded: str, key: str) -> str:
    """Decodes one base64 ``data`` entry of a Kubernetes secret."""
    if not encoded:
        return ""
    try:
        return base64.b64decode(encoded, validate=True).decode("utf-8").strip()
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise BackupError(f"Secret key '{key}' does not hold valid base64 text.") from exc


class KubectlClusterClient:
    """Reads secrets through the current kubectl context."""

    def __init__(self, command_runner, logger, kubectl_command: str = "kubectl"):
        self.command_runner = command_runner
        self.logger = logger
        self.kubectl_command = kubectl_command

    def get_secret_value(self, namespace: str, name: str, key: str) -> str:
        self.logger.debug("Reading key %s of secret %s/%s with kubectl", key, namespace, name)
        result = self.command_runner.run(
            [
                self.kubectl_command,
                "get",
                "secret",
                name,
                "--namespace",
                namespace,
                "--output",
                f"jsonpath={{.data.{key}}}",
            ],
            check=True,
            capture_output=True,
            log_output=False,
        )
        return decode_secret_value((result.stdout or "").strip(), key)


class InClusterClusterClient:
    """Reads secrets from the Kubernetes API using the pod service account."""

    REQUEST_TIMEOUT = 30

    def __init__(
        self,
        logger,
        environ: Optional[Mapping[str, str]] = None,
        service_account_dir: str = SERVICE_ACCOUNT_DIR,
        requests_module=requests,
    ):
        self.logger = logger
        self.environ = os.environ if environ is None else environ
        self.service_account_dir = Path(service_account_dir)
        self.requests = requests_module

    @property
    def api_server(self) -> str:
        host = self.environ.get("KUBERNETES_SERVICE_HOST")
        if not host:
            raise BackupError(
                "KUBERNETES_SERVICE_HOST is not set. Use `cluster_access: kubectl` outside a pod."
            )
        port = self.environ.get("KUBERNETES_SERVICE_PORT", "443")
        if ":" in host:
            host = f"[{host}]"
        return f"https://{host}:{port}"

    def _read_token(self) -> str:
        token_path = self.service_account_dir / "token"
        try:
            return token_path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise BackupError(f"Could not read service account token {token_path}: {exc}") from exc

    def get_secret_value(self, namespace: str, name: str, key: str) -> str:
        url = f"{self.api_server}/api/v1/namespaces/{namespace}/secrets/{name}"
        self.logger.debug("Reading key %s of secret %s/%s from %s", key, namespace, name, url)

        ca_path = self.service_account_dir / "ca.crt"
        verify = str(ca_path) if ca_path.exists() else True
        try:
            response = self.requests.get(
                url,
                headers={"Authorization": f"Bearer {self._read_token()}"},
                verify=verify,
                timeout=self.REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            payload = response.json()
        except self.requests.RequestException as exc:
            raise BackupError(f"Could not read secret {namespace}/{name}: {exc}") from exc
        except ValueError as exc:
            raise BackupError(f"Secret {namespace}/{name} response is not valid JSON.") from exc

        data = payload.get("data") or {}
        return decode_secret_value(data.get(key, ""), key)


def build_cluster_client(
    access_mode: str,
    command_runner,
    logger,
    environ: Optional[Mapping[str, str]] = None,
    service_account_dir: str = SERVICE_ACCOUNT_DIR,
):
    """Picks a client for ``access_mode``; ``auto`` prefers the pod service account."""
    if access_mode == "auto":
        token_path = Path(service_account_dir) / "token"
        access_mode = "in-cluster" if token_path.exists() else "kubectl"
        logger.debug("Cluster access mode resolved to %s", access_mode)

    if access_mode == "kubectl":
        return KubectlClusterClient(command_runner=command_runner, logger=logger)
    if access_mode == "in-cluster":
        return InClusterClusterClient(
            logger=logger,
            environ=environ,
            service_account_dir=service_account_dir,
        )
    raise BackupError(
        f"Invalid cluster access mode '{access_mode}'. Use auto, kubectl or in-cluster."
    )
