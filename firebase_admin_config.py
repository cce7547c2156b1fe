import firebase_admin
from firebase_admin import credentials, firestore
import os

# Lazy: nothing is initialised on import
_db_client = None


def get_db(service_key_path: str = None):
    """Get Firestore database client with lazy initialization"""
    global _db_client

    if _db_client is not None:
        return _db_client

    service_key_path = service_key_path or os.environ.get("FIREBASE_CREDENTIALS", "")

    if not firebase_admin._apps:
        if not service_key_path or not os.path.exists(service_key_path):
            print(f"⚠️ Service account key not found: {service_key_path!r}")
            return None
        try:
            print("🔥 Firebase initializing (lazy)...")
            cred = credentials.Certificate(service_key_path)
            firebase_admin.initialize_app(cred)
        except (ValueError, OSError) as e:
            print(f"❌ Firebase initialization failed: {e}")
            return None

    _db_client = firestore.client()
    print("✅ Firebase initialized successfully")
    return _db_client
