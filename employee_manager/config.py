import os

from dotenv import load_dotenv

load_dotenv()

# --- DATABASE CONFIGURATION ---
# Values come from the environment (or a .env file next to the app)
db_config = {
    'host': os.getenv("DB_HOST", "localhost"),
    'port': int(os.getenv("DB_PORT", "3306")),
    'user': os.getenv("DB_USER", "root"),
    'password': os.getenv("DB_PASSWORD", ""),
    'database': os.getenv("DB_NAME", "php_employee_management"),
    'connect_timeout': int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
    'charset': 'utf8mb4',
}

# --- FLASK / LOGGING ---
SECRET_KEY = os.getenv("SECRET_KEY", "a_default_secret_key_if_not_set")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("LOG_JSON", "true").lower() in ("1", "true", "yes")
DEBUG = os.getenv("FLASK_DEBUG", "0") == "1"
