# homeserve/config.py
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # Database
    database_username: str = "postgres"
    database_password: str = "postgres"
    database_hostname: str = "localhost"
    database_port: str = "5432"
    database_name: str = "homeserve"

    # Auth
    secret_key: str
    algorithm: str = "HS256"

    # Platform commission, in major currency units
    commission_rate: float = 0.15
    minimum_commission: float = 5
    maximum_commission: float = 100
    minimum_withdrawal: float = 50
    default_currency: str = "inr"

    # Logging
    log_level: str = "INFO"

    # CORS
    allowed_origins: List[str] = ["*"]

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
