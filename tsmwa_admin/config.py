import os

BASE_DIR = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Remote log feed shown on /admin/logs. Empty URL -> no sources.
    LOG_API_URL = os.environ.get("LOG_API_URL", "")
    LOG_API_TIMEOUT = float(os.environ.get("LOG_API_TIMEOUT", "5"))
    LOG_SOURCES = {
        "backend-combined": "/api/logs/get_logs?type=combined",
        "backend-error": "/api/logs/get_logs?type=error",
        "notify-combined": "/api/notify/logs?type=combined",
        "notify-error": "/api/notify/logs?type=error",
    }

    ORG_NAME = os.environ.get("ORG_NAME", "Tandur Stone Merchants Welfare Association")
    # Home state for GST: invoices inside it split CGST/SGST, others use IGST.
    INVOICE_STATE = os.environ.get("INVOICE_STATE", "Telangana")

    SEED_DEMO_DATA = os.environ.get("SEED_DEMO_DATA", "").lower() in ("1", "true", "yes")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_API_URL = ""
    SEED_DEMO_DATA = False
