"""
Runtime configuration for the student import service, read from the environment (and a local .env file).
"""
import os

from dotenv import load_dotenv

from kv_store import InMemoryKeyValueStore, MySQLKeyValueStore

load_dotenv()

STORE_BACKEND = os.environ.get('STORE_BACKEND', 'mysql').strip().lower()

# Database connection configuration
DB_CONFIG = {
    'host': os.environ.get('DB_HOST', 'localhost'),
    'user': os.environ.get('DB_USER', 'root'),
    'password': os.environ.get('DB_PASSWORD', ''),
    'database': os.environ.get('DB_NAME', 'school_admin_db')
}
KV_TABLE = os.environ.get('KV_TABLE', 'kv_store').strip()

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').strip().upper()

# 10 MB, same ceiling the upload dialog enforces
MAX_UPLOAD_BYTES = int(os.environ.get('MAX_UPLOAD_BYTES', 10 * 1024 * 1024))
CSV_DELIMITER = os.environ.get('CSV_DELIMITER', ',')

SCHOOL_EMAIL_DOMAIN = os.environ.get('SCHOOL_EMAIL_DOMAIN', 'school.edu').strip()
DEFAULT_NATIONALITY = os.environ.get('DEFAULT_NATIONALITY', 'Indian').strip()


def create_store(backend=None):
    """Builds the key-value store selected by STORE_BACKEND."""
    backend = (backend or STORE_BACKEND).lower()
    if backend == 'memory':
        return InMemoryKeyValueStore()
    if backend == 'mysql':
        return MySQLKeyValueStore(DB_CONFIG, table=KV_TABLE)
    raise ValueError(f"Unknown STORE_BACKEND: '{backend}'. Expected 'mysql' or 'memory'.")
