"""Configuration settings for the statement conversion system."""

import os
import json
from typing import Dict, Any, List
from dataclasses import dataclass, asdict, field

# Environment variables
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
DEBUG = os.getenv("DEBUG", "False").lower() == "true"

# Parser Configuration
WINDOW_LOOKAHEAD = int(os.getenv("WINDOW_LOOKAHEAD", "2"))
MAX_TRANSACTIONS = int(os.getenv("MAX_TRANSACTIONS", "50"))
MIN_AMOUNT = float(os.getenv("MIN_AMOUNT", "0.01"))
MAX_AMOUNT = float(os.getenv("MAX_AMOUNT", "100000"))
MAX_DESCRIPTION_LENGTH = int(os.getenv("MAX_DESCRIPTION_LENGTH", "100"))
MIN_TEXT_LENGTH = int(os.getenv("MIN_TEXT_LENGTH", "100"))
BALANCE_STRATEGIES = ["last", "second"]
BALANCE_STRATEGY = os.getenv("BALANCE_STRATEGY", "last")
USE_SAMPLE_FALLBACK = os.getenv("USE_SAMPLE_FALLBACK", "True").lower() == "true"

# CSV Output Configuration
CSV_HEADER_STYLES = ["upper", "title"]
CSV_HEADER_STYLE = os.getenv("CSV_HEADER_STYLE", "upper")

# Upload / Extraction Configuration
MAX_FILE_SIZE_MB = int(os.getenv("MAX_FILE_SIZE_MB", "10"))
EXTRACTION_TIMEOUT_SECONDS = int(os.getenv("EXTRACTION_TIMEOUT_SECONDS", "30"))
SUPPORTED_PDF_FORMATS = [".pdf"]
SUPPORTED_MIME_TYPES = ["application/pdf"]

# History Configuration
HISTORY_BACKENDS = ["memory", "redis"]
HISTORY_BACKEND = os.getenv("HISTORY_BACKEND", "memory")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/1")
ANONYMOUS_USER_ID = "00000000-0000-0000-0000-000000000000"

# Celery Configuration
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0")
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TIMEZONE = "UTC"

# File Paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
REPORTS_DIR = os.getenv("REPORTS_DIR", os.path.join(BASE_DIR, "reports"))
LOGS_DIR = os.getenv("LOGS_DIR", os.path.join(BASE_DIR, "logs"))

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Excel Output Configuration
EXCEL_OUTPUT_FORMAT = "xlsx"
INCLUDE_METADATA = os.getenv("INCLUDE_METADATA", "True").lower() == "true"

# Processing Configuration
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "3"))
RETRY_DELAY_SECONDS = int(os.getenv("RETRY_DELAY_SECONDS", "60"))


@dataclass
class Settings:
    """Configuration settings class."""

    # Parser
    window_lookahead: int = 2
    max_transactions: int = 50
    min_amount: float = 0.01
    max_amount: float = 100000.0
    max_description_length: int = 100
    min_text_length: int = 100
    balance_strategy: str = "last"
    use_sample_fallback: bool = True

    # Output Configuration
    header_style: str = "upper"
    output_dir: str = REPORTS_DIR
    include_metadata: bool = True

    # Upload / Extraction
    max_file_size_mb: int = 10
    extraction_timeout_seconds: int = 30
    supported_pdf_formats: List[str] = field(default_factory=lambda: SUPPORTED_PDF_FORMATS.copy())

    # History
    history_backend: str = "memory"
    redis_url: str = REDIS_URL

    # Logging
    log_level: str = "INFO"
    log_format: str = LOG_FORMAT
    logs_dir: str = LOGS_DIR

    # Celery Configuration
    celery_broker_url: str = CELERY_BROKER_URL
    celery_result_backend: str = CELERY_RESULT_BACKEND
    max_retries: int = 3
    retry_delay_seconds: int = 60

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""
        return cls(
            window_lookahead=int(os.getenv("WINDOW_LOOKAHEAD", "2")),
            max_transactions=int(os.getenv("MAX_TRANSACTIONS", "50")),
            min_amount=float(os.getenv("MIN_AMOUNT", "0.01")),
            max_amount=float(os.getenv("MAX_AMOUNT", "100000")),
            max_description_length=int(os.getenv("MAX_DESCRIPTION_LENGTH", "100")),
            min_text_length=int(os.getenv("MIN_TEXT_LENGTH", "100")),
            balance_strategy=os.getenv("BALANCE_STRATEGY", "last"),
            use_sample_fallback=os.getenv("USE_SAMPLE_FALLBACK", "True").lower() == "true",
            header_style=os.getenv("CSV_HEADER_STYLE", "upper"),
            output_dir=os.getenv("OUTPUT_DIR", REPORTS_DIR),
            include_metadata=os.getenv("INCLUDE_METADATA", "True").lower() == "true",
            max_file_size_mb=int(os.getenv("MAX_FILE_SIZE_MB", "10")),
            extraction_timeout_seconds=int(os.getenv("EXTRACTION_TIMEOUT_SECONDS", "30")),
            history_backend=os.getenv("HISTORY_BACKEND", "memory"),
            redis_url=os.getenv("REDIS_URL", REDIS_URL),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", LOG_FORMAT),
            logs_dir=os.getenv("LOGS_DIR", LOGS_DIR),
            celery_broker_url=os.getenv("CELERY_BROKER_URL", CELERY_BROKER_URL),
            celery_result_backend=os.getenv("CELERY_RESULT_BACKEND", CELERY_RESULT_BACKEND),
            max_retries=int(os.getenv("MAX_RETRIES", "3")),
            retry_delay_seconds=int(os.getenv("RETRY_DELAY_SECONDS", "60")),
        )

    def validate(self) -> bool:
        """Validate settings."""
        return (
            self.window_lookahead >= 0 and
            self.max_transactions > 0 and
            0 <= self.min_amount < self.max_amount and
            self.max_description_length > 0 and
            self.min_text_length >= 0 and
            self.balance_strategy in BALANCE_STRATEGIES and
            self.header_style in CSV_HEADER_STYLES and
            self.max_file_size_mb > 0 and
            self.extraction_timeout_seconds > 0 and
            self.history_backend in HISTORY_BACKENDS and
            self.max_retries >= 0
        )

    def get_log_level(self) -> str:
        """Get log level as string."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level.upper() in valid_levels:
            return self.log_level.upper()
        return "INFO"

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Create settings from dictionary."""
        return cls(**data)

    def update(self, data: Dict[str, Any]) -> None:
        """Update settings from dictionary."""
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def clone(self) -> "Settings":
        """Create a copy of settings."""
        return self.from_dict(self.to_dict())


def get_config() -> Dict[str, Any]:
    """Get all module-level configuration as a dictionary.

    Returns:
        Dictionary containing all configuration values.
    """
    return {
        "environment": ENVIRONMENT,
        "debug": DEBUG,
        "window_lookahead": WINDOW_LOOKAHEAD,
        "max_transactions": MAX_TRANSACTIONS,
        "min_amount": MIN_AMOUNT,
        "max_amount": MAX_AMOUNT,
        "max_description_length": MAX_DESCRIPTION_LENGTH,
        "min_text_length": MIN_TEXT_LENGTH,
        "balance_strategy": BALANCE_STRATEGY,
        "use_sample_fallback": USE_SAMPLE_FALLBACK,
        "csv_header_style": CSV_HEADER_STYLE,
        "max_file_size_mb": MAX_FILE_SIZE_MB,
        "extraction_timeout_seconds": EXTRACTION_TIMEOUT_SECONDS,
        "history_backend": HISTORY_BACKEND,
        "celery_broker_url": CELERY_BROKER_URL,
        "celery_result_backend": CELERY_RESULT_BACKEND,
        "reports_dir": REPORTS_DIR,
        "logs_dir": LOGS_DIR,
        "log_level": LOG_LEVEL,
        "include_metadata": INCLUDE_METADATA,
        "max_retries": MAX_RETRIES,
        "retry_delay_seconds": RETRY_DELAY_SECONDS,
    }


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    for directory in [REPORTS_DIR, LOGS_DIR]:
        os.makedirs(directory, exist_ok=True)


def load_config_from_file(file_path: str) -> Dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(file_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_settings(file_path: str) -> Settings:
    """Build Settings from environment variables overlaid with a JSON file."""
    settings = Settings.from_env()
    settings.update(load_config_from_file(file_path))
    return settings
