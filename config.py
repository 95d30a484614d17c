import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _database_url() -> str:
    url = os.environ.get("DATABASE_URL", f"sqlite:///{os.path.join(BASE_DIR, 'data.db')}")
    # Hosted Postgres providers still hand out the legacy scheme.
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    # Admin auth
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin")
    JWT_SECRET = os.environ.get("JWT_SECRET", "fallback_secret")
    JWT_EXPIRES_DAYS = int(os.environ.get("JWT_EXPIRES_DAYS", 7))

    # Content generation
    AI_API_KEY = os.environ.get("GOOGLE_API_KEY") or os.environ.get("GEMINI_API_KEY")
    AI_MODEL = os.environ.get("AI_MODEL", "gemini-2.5-flash")
    AI_TIMEOUT_SECONDS = float(os.environ.get("AI_TIMEOUT_SECONDS", 15))

    STUDIO_NAME = os.environ.get("STUDIO_NAME", "Red Dot Studio")
    SEED_PORTFOLIO = os.environ.get("SEED_PORTFOLIO", "true").lower() == "true"
    LOG_DIR = os.environ.get("LOG_DIR", os.path.join(BASE_DIR, "logs"))


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SEED_PORTFOLIO = False
    ADMIN_PASSWORD = "test-password"
    JWT_SECRET = "test-secret"
    AI_API_KEY = "test-key"
