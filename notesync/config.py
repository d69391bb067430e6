import os
from functools import lru_cache
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv(dotenv_path=".env")


# Connection parameters, keyed by the environment variable that supplies them
CONNECTION_ENV_VARS: Dict[str, str] = {
    "api_key": "NOTES_API_KEY",
    "auth_domain": "NOTES_AUTH_DOMAIN",
    "project_id": "NOTES_PROJECT_ID",
    "storage_bucket": "NOTES_STORAGE_BUCKET",
    "messaging_sender_id": "NOTES_MESSAGING_SENDER_ID",
    "app_id": "NOTES_APP_ID",
}


class Settings(BaseModel):
    """Runtime settings read from the process environment.

    Nothing here is validated: a missing key or a wrong project id shows up
    later as a subscription error in the live view.
    """
    api_key: Optional[str] = None
    auth_domain: Optional[str] = None
    project_id: Optional[str] = None
    storage_bucket: Optional[str] = None
    messaging_sender_id: Optional[str] = None
    app_id: Optional[str] = None

    supabase_url: Optional[str] = None
    notes_table: str = "notes"
    commit_delay_ms: int = 500
    typing_idle_ms: int = 800

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @property
    def store_url(self) -> Optional[str]:
        """Supabase project URL, derived from the project id when not given"""
        if self.supabase_url:
            return self.supabase_url
        if self.project_id:
            return f"https://{self.project_id}.supabase.co"
        return None

    @property
    def commit_delay(self) -> float:
        return self.commit_delay_ms / 1000

    @property
    def typing_idle(self) -> float:
        return self.typing_idle_ms / 1000

    def connection_status(self) -> Dict[str, bool]:
        """Which connection parameters are present (values are never exposed)"""
        return {
            env_var: bool(getattr(self, field))
            for field, env_var in CONNECTION_ENV_VARS.items()
        }


def load_settings() -> Settings:
    values = {field: os.getenv(env_var) for field, env_var in CONNECTION_ENV_VARS.items()}
    values["supabase_url"] = os.getenv("SUPABASE_URL")
    values["notes_table"] = os.getenv("NOTES_TABLE", "notes")
    values["commit_delay_ms"] = int(os.getenv("NOTES_COMMIT_DELAY_MS", "500"))
    values["typing_idle_ms"] = int(os.getenv("NOTES_TYPING_IDLE_MS", "800"))
    values["cors_origins"] = [
        origin.strip() for origin in os.getenv("NOTES_CORS_ORIGINS", "*").split(",") if origin.strip()
    ]
    values["log_level"] = os.getenv("NOTES_LOG_LEVEL", "INFO")
    return Settings(**values)


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings (read once)"""
    return load_settings()
