import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class SurveySettings:
    log_dir: str = "logs"
    log_level: str = "INFO"
    json_logs: bool = True
    catalog_path: Optional[str] = None
    templates_dir: str = "config/templates"

    @classmethod
    def from_env(cls) -> 'SurveySettings':
        """Carga configuración desde variables de entorno (y el archivo .env si existe)"""
        load_dotenv()
        return cls(
            log_dir=os.getenv('SURVEY_LOG_DIR', 'logs'),
            log_level=os.getenv('SURVEY_LOG_LEVEL', 'INFO').upper(),
            json_logs=_env_flag('SURVEY_JSON_LOGS', 'true'),
            catalog_path=os.getenv('SURVEY_CATALOG_PATH') or None,
            templates_dir=os.getenv('SURVEY_TEMPLATES_DIR', 'config/templates')
        )
