import os
import shutil
import subprocess
from typing import Optional

from google.auth import default
from google.cloud import firestore
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials

from ..utils.config import FIRESTORE_EMULATOR_HOST, GOOGLE_CLOUD_PROJECT_ID, LOCAL_ENV, SERVICE_ACCOUNT_FILES, TESTING
from ..utils.error_codes import ConfigError
from ..utils.logger import logger


class FirestoreClient:
    """
    Owns the Firestore connections used by the sync layer.

    ``client`` is the ``AsyncClient`` for reads, writes, queries and batches.
    ``watch_client`` is a synchronous ``Client`` used only for ``on_snapshot``
    listeners, which the async client does not provide.

    When no project is configured (or credentials cannot be resolved) both are
    ``None`` and the layer runs in offline mode.
    """

    _shared: Optional["FirestoreClient"] = None

    def __init__(self, project_id: str = GOOGLE_CLOUD_PROJECT_ID, client=None, watch_client=None):
        self.project_id = project_id
        self.client = client
        self.watch_client = watch_client

        if client is not None:
            return

        if TESTING:
            logger.info("🧪 Test environment detected - Firestore left unconfigured")
            return

        if not project_id:
            logger.warning("⚠️ GOOGLE_CLOUD_PROJECT_ID is not set - running in offline mode")
            return

        try:
            credentials = self._resolve_credentials()
            self.client = firestore.AsyncClient(project=project_id, credentials=credentials)
            self.watch_client = firestore.Client(project=project_id, credentials=credentials)
            logger.info(f"✅ Firestore client ready for project {project_id}")
        except Exception as e:
            logger.error(f"❌ FIRESTORE CLIENT Failed to authenticate: {e}")
            self.client = None
            self.watch_client = None

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def require_client(self):
        if self.client is None:
            raise ConfigError("Firestore is not configured")
        return self.client

    def require_watch_client(self):
        if self.watch_client is None:
            raise ConfigError("Firestore listeners are not configured")
        return self.watch_client

    def _resolve_credentials(self):
        if FIRESTORE_EMULATOR_HOST:
            logger.info(f"🧪 Using Firestore emulator at {FIRESTORE_EMULATOR_HOST}")
            return None

        if LOCAL_ENV:
            gcloud_cmd = shutil.which("gcloud")
            if not gcloud_cmd:
                raise FileNotFoundError("❌ gcloud command not found. Ensure Google Cloud SDK is installed and added to PATH.")
            access_token = subprocess.check_output([gcloud_cmd, "auth", "print-access-token"]).decode("utf-8").strip()
            return Credentials(access_token)

        try:
            credentials, _ = default()
            logger.info("✅ Using Application Default Credentials (ADC).")
            return credentials
        except Exception as adc_error:
            logger.warning(f"⚠️ ADC not available: {adc_error}")

        service_account_files = []
        google_creds_file = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
        if google_creds_file:
            service_account_files.append(google_creds_file)
        service_account_files.extend(SERVICE_ACCOUNT_FILES)

        for sa_file in service_account_files:
            if not os.path.exists(sa_file):
                continue
            try:
                credentials = service_account.Credentials.from_service_account_file(
                    sa_file, scopes=["https://www.googleapis.com/auth/cloud-platform"]
                )
                logger.info(f"✅ Using service account file: {sa_file}")
                return credentials
            except Exception as sa_error:
                logger.warning(f"⚠️ Failed to load {sa_file}: {sa_error}")

        raise ConfigError(
            "No valid authentication method found. "
            "Please ensure either ADC is set up or a valid service account file is available."
        )

    @classmethod
    def shared(cls) -> "FirestoreClient":
        if cls._shared is None:
            cls._shared = FirestoreClient()
        return cls._shared
