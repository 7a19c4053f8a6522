# audit_form/core/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    api_title: str = Field(default="SEO Audit API", alias="API_TITLE")
    cors_origins: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    # Outbound mail relay
    smtp_host: str = Field(default="localhost", alias="SMTP_HOST")
    smtp_port: int = Field(default=465, alias="SMTP_PORT")
    # Only the literal "true" turns on implicit TLS
    smtp_secure: bool = Field(default=False, alias="SMTP_SECURE")
    smtp_user: Optional[str] = Field(default=None, alias="SMTP_USER")
    smtp_password: Optional[str] = Field(default=None, alias="SMTP_PASSWORD")
    smtp_from: Optional[str] = Field(default=None, alias="SMTP_FROM")
    smtp_to: Optional[str] = Field(default=None, alias="SMTP_TO")

    @field_validator("smtp_secure", mode="before")
    @classmethod
    def _parse_secure(cls, v):
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() == "true"

    @field_validator("smtp_port", mode="before")
    @classmethod
    def _default_port(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return 465
        return v

    def relay_summary(self) -> str:
        """Relay settings safe to log (no credentials)."""
        return (
            f"host={self.smtp_host} port={self.smtp_port} secure={self.smtp_secure} "
            f"auth={'yes' if self.smtp_user else 'no'} to={self.smtp_to}"
        )

settings = Settings()
