# config.py
import os

from dotenv import load_dotenv

# Pick up a local .env before reading settings
load_dotenv()


def _origins(raw: str):
    if raw.strip() == "*":
        return "*"
    return [o.strip() for o in raw.split(",") if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev_secret_key'
    CORS_ALLOWED_ORIGINS = _origins(os.environ.get('CORS_ALLOWED_ORIGINS', '*'))
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '5000'))
    # Delay between game over and the automatic board reset (seconds)
    RESET_DELAY_SECONDS = float(os.environ.get('RESET_DELAY_SECONDS', '5'))
    # memory | firestore
    LEDGER_BACKEND = os.environ.get('LEDGER_BACKEND', 'memory')
    STARTING_COINS = int(os.environ.get('STARTING_COINS', '100'))
    FIREBASE_CREDENTIALS = os.environ.get('FIREBASE_CREDENTIALS', '')
    DATA_DIR = os.environ.get('DATA_DIR') or os.path.join(os.path.dirname(__file__), 'data')
