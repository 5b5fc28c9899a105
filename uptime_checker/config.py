import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    CHECK_TIMEOUT_SECONDS: float = float(os.getenv("CHECK_TIMEOUT_SECONDS", "10"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    UPTIME_JOBS_FILE: str = os.getenv("UPTIME_JOBS_FILE")


settings = Settings()
