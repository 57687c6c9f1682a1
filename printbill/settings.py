import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="PRINTBILL_", extra="ignore")

    repository_backend: str = "memory"
    db_url: str = ""
    memory_store_path: str = "./data/bills.json"

    storage_backend: str = "local"
    storage_local_path: str = "./assets"
    storage_prefix: str = ""
    public_base_url: str = ""

    s3_bucket: str = ""
    s3_region: str = ""
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_endpoint_url: str = ""
    s3_public_base_url: str = ""

    company_name: str = "Logo Printing Company"
    company_address: str = "123 Print Street, Design City, India"
    company_contact: str = "contact@logoprinting.com | +91 9876543210"
    currency_symbol: str = "₹"
    timezone: str = "Asia/Kolkata"
    date_format: str = "%d/%m/%Y"

    logo_max_bytes: int = 5 * 1024 * 1024
    search_debounce_ms: int = 300

    log_level: str = "INFO"
    log_json: bool = False


settings = Settings()
