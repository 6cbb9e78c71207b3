import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./examprep.db")
    DB_AUTO_CREATE = bool(data.get("DB_AUTO_CREATE", True))
    API_PORT = data.get("API_PORT", 8080)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    # Refresh tokens fall back to the access secret when no dedicated key is set
    JWT_REFRESH_SECRET = data.get("JWT_REFRESH_SECRET") or JWT_SECRET
    JWT_ACCESS_EXPIRY_MINUTES = int(data.get("JWT_ACCESS_EXPIRY_MINUTES", 15))
    JWT_REFRESH_EXPIRY_DAYS = int(data.get("JWT_REFRESH_EXPIRY_DAYS", 30))

    SESSION_TTL_DAYS = int(data.get("SESSION_TTL_DAYS", 30))
    SESSION_TOUCH_ON_REQUEST = bool(data.get("SESSION_TOUCH_ON_REQUEST", True))

    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 10))
    PASSWORD_RESET_EXPIRY_MINUTES = int(data.get("PASSWORD_RESET_EXPIRY_MINUTES", 10))
    SIGNUP_OTP_EXPIRY_MINUTES = int(data.get("SIGNUP_OTP_EXPIRY_MINUTES", 10))

    # Sliding window per client IP and path on signup, login and reset routes
    RATE_LIMIT_ENABLED = bool(data.get("RATE_LIMIT_ENABLED", True))
    RATE_LIMIT_REQUESTS = int(data.get("RATE_LIMIT_REQUESTS", 100))
    RATE_LIMIT_PERIOD_SECONDS = int(data.get("RATE_LIMIT_PERIOD_SECONDS", 900))
