"""Leitura do estado publicado no AWS AppConfig (somente leitura).

O estado publicado de uma configuração nomeada é a versão hospedada mais
recente do configuration profile, independente de status de deployment.
O leitor resolve os IDs de aplicação, ambiente e profile pelo nome,
baixa o conteúdo da última versão e devolve um `RemoteSnapshot`:

- `document`: conteúdo publicado validado (ou None)
- `state`: `DeployedState(version_number, content_hash)` (ou None se
  nunca houve publicação)

O hash publicado é recalculado a partir do conteúdo baixado com o mesmo
hash canônico do Change Detector, então "inalterado" significa conteúdo
canonicamente igual.

Notas:
- Recursos inexistentes (aplicação, ambiente, profile, versão) significam
  "nunca publicado", não erro.
- Conteúdo publicado inválido produz estado sem hash (força publicação).
- Nenhuma escrita é feita no AppConfig.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from flagsync.core.detect.change_detector import DeployedState, compute_document_hash
from flagsync.core.document.loader import parse_document
from flagsync.core.document.schema import DEFAULT_REMOVAL_MARKER, FlagDocument
from flagsync.core.exceptions import MalformedDocument, RemoteStateError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteSnapshot:
    document: Optional[FlagDocument] = None
    state: Optional[DeployedState] = None


class StateReader(Protocol):
    """Fonte do Deployed State Reference de uma configuração nomeada."""

    def read(self, *, application: str, environment: str, profile: str) -> RemoteSnapshot:
        ...


class NullStateReader:
    """Nenhum estado publicado conhecido (toda run publica)."""

    def read(self, *, application: str, environment: str, profile: str) -> RemoteSnapshot:
        return RemoteSnapshot()


class ExplicitStateReader:
    """Estado publicado informado explicitamente (ex.: saída do Terraform)."""

    def __init__(self, *, version_number: Optional[int], content_hash: Optional[str]):
        self._state = DeployedState(version_number=version_number, content_hash=content_hash)

    def read(self, *, application: str, environment: str, profile: str) -> RemoteSnapshot:
        return RemoteSnapshot(document=None, state=self._state)


class AppConfigStateReader:
    """Leitor de estado publicado via cliente boto3 `appconfig`."""

    def __init__(
        self,
        *,
        client: Optional[Any] = None,
        region: Optional[str] = None,
        removal_marker: str = DEFAULT_REMOVAL_MARKER,
    ):
        self._client = client
        self._region = region
        # mesmo marcador usado no merge local
        self._removal_marker = removal_marker

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("appconfig", region_name=self._region)
        return self._client

    # ------------------------------------------------------------------
    # Resolução de IDs
    # ------------------------------------------------------------------
    @staticmethod
    def _find_id(list_fn: Callable[..., Dict[str, Any]], name: str, **kwargs: Any) -> Optional[str]:
        token: Optional[str] = None
        while True:
            call_kwargs = dict(kwargs)
            if token:
                call_kwargs["NextToken"] = token
            response = list_fn(**call_kwargs)
            for item in response.get("Items", []) or []:
                if item.get("Name") == name:
                    return item.get("Id")
            token = response.get("NextToken")
            if not token:
                return None

    # ------------------------------------------------------------------
    # Leitura
    # ------------------------------------------------------------------
    def read(self, *, application: str, environment: str, profile: str) -> RemoteSnapshot:
        try:
            return self._read(application=application, environment=environment, profile=profile)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code == "ResourceNotFoundException":
                logger.warning("No existing configuration found for %s/%s/%s", application, environment, profile)
                return RemoteSnapshot()
            raise RemoteStateError(
                message=f"failed to read AppConfig state: {code or e}",
                details={
                    "application": application,
                    "environment": environment,
                    "profile": profile,
                    "error_code": code,
                },
            ) from e
        except BotoCoreError as e:
            raise RemoteStateError(
                message=f"failed to reach AppConfig: {e}",
                details={"application": application, "environment": environment, "profile": profile},
            ) from e

    def _read(self, *, application: str, environment: str, profile: str) -> RemoteSnapshot:
        client = self.client

        app_id = self._find_id(client.list_applications, application)
        if not app_id:
            logger.warning("Application '%s' not found in AWS AppConfig", application)
            return RemoteSnapshot()
        logger.info("Found application '%s' with ID: %s", application, app_id)

        env_id = self._find_id(client.list_environments, environment, ApplicationId=app_id)
        if not env_id:
            logger.warning("Environment '%s' not found in AWS AppConfig", environment)
            return RemoteSnapshot()
        logger.info("Found environment '%s' with ID: %s", environment, env_id)

        profile_id = self._find_id(client.list_configuration_profiles, profile, ApplicationId=app_id)
        if not profile_id:
            logger.warning("Configuration profile '%s' not found in AWS AppConfig", profile)
            return RemoteSnapshot()
        logger.info("Found configuration profile '%s' with ID: %s", profile, profile_id)

        versions = client.list_hosted_configuration_versions(
            ApplicationId=app_id,
            ConfigurationProfileId=profile_id,
        )
        items = versions.get("Items") or []
        if not items:
            logger.warning("No configuration versions found for profile ID: %s", profile_id)
            return RemoteSnapshot()

        # versões vêm em ordem decrescente, a mais recente primeiro
        version_number = int(items[0]["VersionNumber"])

        content = client.get_hosted_configuration_version(
            ApplicationId=app_id,
            ConfigurationProfileId=profile_id,
            VersionNumber=version_number,
        )["Content"]
        raw = content.read() if hasattr(content, "read") else content
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")

        try:
            document = parse_document(
                raw,
                source=f"appconfig:{application}/{profile}@{version_number}",
                removal_marker=self._removal_marker,
            )
        except MalformedDocument as e:
            logger.warning("Published version %s is not a valid flags document: %s", version_number, e)
            return RemoteSnapshot(state=DeployedState(version_number=version_number, content_hash=None))

        logger.info("Retrieved latest configuration version: %s", version_number)
        return RemoteSnapshot(
            document=document,
            state=DeployedState(version_number=version_number, content_hash=compute_document_hash(document)),
        )
