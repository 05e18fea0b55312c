# services/api/settings.py
from pydantic_settings import BaseSettings
from pydantic import ConfigDict, Field, PrivateAttr
import base64
from typing import List, Optional
from pathlib import Path

class Settings(BaseSettings):
    # Backing spreadsheet (service account must have edit access)
    google_sa_json: str = ""
    google_sa_json_base64: str = ""
    sheets_spreadsheet_id: str = ""

    # Google OAuth web client used for sign-in
    google_client_id: str = ""
    google_client_secret: str = ""
    # Example: https://projects.example.com/api/auth/callback
    oauth_redirect_uri: str = "http://localhost:8000/api/auth/callback"

    # Signs the session cookie. Must be set in production.
    session_secret: str = "change-me"
    session_max_age_seconds: int = 30 * 24 * 60 * 60

    # Comma-separated email suffixes allowed to sign in
    # Example in .env:
    # COMPANY_DOMAIN=@hines.com,@contractors.hines.com
    company_domain: str = "@hines.com"

    # Comma-separated emails that get the "hr" role at login.
    # Also the distribution list for every report email.
    hr_emails: Optional[str] = Field(
        default=None,
        description="Comma-separated HR emails (role + report recipients)",
    )

    # CORS settings
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    # Email settings
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    from_email: str = ""
    from_name: str = "Employee Manager System"
    app_name: str = "Employee Project Manager"

    # Bearer token the external scheduler sends to /api/cron/send-reports
    cron_secret: str = ""

    model_config = ConfigDict(
        # Always load .env from the same folder as this settings.py
        env_file=str(Path(__file__).resolve().parent / ".env"),
        extra="ignore",
    )

    # Decoded GOOGLE_SA_JSON_BASE64 file, written once per Settings object
    _sa_json_path: Optional[str] = PrivateAttr(default=None)


    def resolved_google_sa_json(self) -> str:
        """
        Return the path to the service account JSON.
        If GOOGLE_SA_JSON_BASE64 is set, decode it to a temp file (once).
        Otherwise return GOOGLE_SA_JSON (path or inline JSON).
        """
        if self.google_sa_json_base64:
            if self._sa_json_path:
                return self._sa_json_path

            import tempfile

            decoded = base64.b64decode(self.google_sa_json_base64)
            temp_file = tempfile.NamedTemporaryFile(mode='w', delete=False, suffix='.json')
            temp_file.write(decoded.decode('utf-8'))
            temp_file.close()
            self._sa_json_path = temp_file.name
            return self._sa_json_path

        return self.google_sa_json

    def get_origins_list(self) -> List[str]:
        """Parse comma-separated origins into a list."""
        if not self.allowed_origins:
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    def get_hr_emails_list(self) -> List[str]:
        if not self.hr_emails:
            return []
        return [e.strip() for e in self.hr_emails.split(",") if e.strip()]

    def get_company_domains_list(self) -> List[str]:
        return [d.strip() for d in (self.company_domain or "").split(",") if d.strip()]

    def sheet_view_url(self) -> str:
        return f"https://docs.google.com/spreadsheets/d/{self.sheets_spreadsheet_id}/edit"

    def sheet_embed_url(self) -> str:
        return (
            f"https://docs.google.com/spreadsheets/d/{self.sheets_spreadsheet_id}/edit"
            "?usp=sharing&rm=minimal&widget=true&chrome=false&headers=false&gridlines=false&single=true"
        )


_settings_instance = None

def get_settings() -> Settings:
    """Singleton pattern for settings."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
