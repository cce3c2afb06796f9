import logging
import logging.config
from datetime import datetime
from pathlib import Path
from typing import Dict, List

from pythonjsonlogger import jsonlogger

MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3

# Loggers del motor que no propagan a la raíz
SURVEY_LOGGERS = ("sitesurvey.engine", "sitesurvey.pricing", "sitesurvey.templates")


class SurveyJsonFormatter(jsonlogger.JsonFormatter):
    """Registro JSON con nivel, origen y hora del evento"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.fromtimestamp(record.created).isoformat()
        log_record['level'] = record.levelname
        log_record['origin'] = f"{record.module}.{record.funcName}:{record.lineno}"


def _formatters() -> Dict[str, dict]:
    return {
        'json': {
            '()': SurveyJsonFormatter,
            'format': '%(timestamp)s %(level)s %(name)s %(message)s'
        },
        'plain': {
            'format': '%(asctime)s %(levelname)-8s %(name)s | %(message)s',
            'datefmt': '%H:%M:%S'
        }
    }


def _handlers(log_file: Path, formatter: str, level: str) -> Dict[str, dict]:
    return {
        'stderr': {
            'class': 'logging.StreamHandler',
            'stream': 'ext://sys.stderr',
            'formatter': formatter,
            'level': level
        },
        'survey_file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': str(log_file),
            'encoding': 'utf-8',
            'formatter': formatter,
            'maxBytes': MAX_LOG_BYTES,
            'backupCount': LOG_BACKUPS,
            'level': level
        }
    }


def _loggers(handler_names: List[str], level: str) -> Dict[str, dict]:
    loggers = {'': {'handlers': handler_names, 'level': level}}
    for name in SURVEY_LOGGERS:
        loggers[name] = {'handlers': handler_names, 'level': level, 'propagate': False}
    return loggers


def log_file_for(log_dir: Path, prefix: str, day: datetime = None) -> Path:
    """Archivo de log diario: <prefix>_<AAAAMMDD>.log"""
    day = day or datetime.now()
    return log_dir / f"{prefix}_{day:%Y%m%d}.log"


def setup_logging(
    log_dir: str = "logs",
    level: str = "INFO",
    json_format: bool = True,
    prefix: str = "survey"
) -> Path:
    """Configura el logging de la herramienta y devuelve el archivo de log del día"""
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_file = log_file_for(directory, prefix)

    handlers = _handlers(log_file, 'json' if json_format else 'plain', level.upper())
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': _formatters(),
        'handlers': handlers,
        'loggers': _loggers(list(handlers), level.upper())
    })
    return log_file
