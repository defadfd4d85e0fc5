import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore

from slotbook.config import Settings

logger = logging.getLogger(__name__)


class FirebaseService:
    """Owns the Firebase Admin app and the Firestore client (one per process)"""

    _instance = None
    _initialized = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings: Settings):
        """Initialize Firebase Admin SDK (only once)"""
        if self._initialized:
            return

        project_id = settings.FIREBASE_PROJECT_ID or None
        database_id = settings.FIREBASE_DATABASE_ID
        cred_path = settings.GOOGLE_APPLICATION_CREDENTIALS

        try:
            if not firebase_admin._apps:
                if cred_path and os.path.exists(cred_path):
                    logger.info("Firebase init: using service account file %s", cred_path)
                    cred = credentials.Certificate(cred_path)
                else:
                    logger.info("Firebase init: using application default credentials")
                    cred = credentials.ApplicationDefault()
                firebase_admin.initialize_app(cred, {"projectId": project_id})

            self.db = firestore.client(database_id=database_id)
            logger.info(
                "Connected to Firestore project %s (database %s)", self.db.project, database_id
            )
            self._initialized = True

        except Exception:
            logger.error("Failed to initialize Firebase", exc_info=True)
            raise
