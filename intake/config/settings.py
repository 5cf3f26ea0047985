"""
Application Settings.

Centraliza toda configuração via .env / variáveis de ambiente.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configurações carregadas de variáveis de ambiente."""

    # --- App ---
    env: str = "development"
    debug: bool = True
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    log_level: str = "INFO"
    cors_allowed_origins: str = "http://localhost:5173,http://localhost:5176,http://localhost:8080"

    # --- Database ---
    database_url: str = "sqlite:///cadastro.db"
    db_pool_size: int = 5
    db_max_overflow: int = 5
    enforce_unique_tax_id: bool = False

    # --- Storage ("s3" ou "drive") ---
    storage_provider: str = "s3"
    max_upload_mb: int = 10

    # --- AWS S3 ---
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = "us-east-2"
    s3_bucket: str = "essencial-form-files"
    s3_prefix: str = ""

    # --- Google Drive (service account) ---
    google_project_id: str = ""
    google_private_key_id: str = ""
    google_private_key: str = ""
    google_client_email: str = ""
    google_client_id: str = ""
    google_drive_parent_folder_id: str = ""

    # --- CRM (Kommo) ---
    kommo_enabled: bool = False
    kommo_base_url: str = ""
    kommo_access_token: str = ""

    # --- WhatsApp Cloud API ---
    whatsapp_enabled: bool = False
    whatsapp_access_token: str = ""
    whatsapp_phone_number_id: str = ""
    whatsapp_recipients: str = ""
    whatsapp_api_version: str = "v18.0"
    whatsapp_template_name: str = ""
    whatsapp_template_language: str = "pt_BR"
    whatsapp_delivery_delay_seconds: float = 1.0

    # --- Chamadas externas ---
    http_timeout_seconds: float = 10.0
    viacep_base_url: str = "https://viacep.com.br/ws"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def cors_origins(self) -> list[str]:
        return _split_csv(self.cors_allowed_origins)

    @property
    def whatsapp_recipient_list(self) -> list[str]:
        return _split_csv(self.whatsapp_recipients)

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """Singleton de settings."""
    return Settings()
