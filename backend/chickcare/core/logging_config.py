"""Configuration du système de logging centralisé."""

import glob
import json
import logging
import logging.handlers
import os
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Optional

from bson import ObjectId

from chickcare.core.settings import get_settings


class CustomJSONEncoder(json.JSONEncoder):
    """Encodeur JSON personnalisé pour gérer ObjectId et datetime."""

    def default(self, obj):
        if isinstance(obj, ObjectId):
            return str(obj)
        elif isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


class DataLogger:
    """Journal d'audit JSON (un fichier par jour, tableau JSON valide)."""

    def __init__(self, logs_dir: str = "logs", enabled: bool = True):
        self.logs_dir = Path(logs_dir)
        self.enabled = enabled
        if enabled:
            self.logs_dir.mkdir(parents=True, exist_ok=True)

    def log_data(
        self,
        calling_context: str,
        data: Dict[str, Any],
        user_data: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Ajoute une entrée d'audit (ex. suppression d'élevage, seed du catalogue)."""
        if not self.enabled:
            return

        json_file = self.logs_dir / f"{datetime.now().strftime('%Y-%m-%d')}-data.json"
        entry = {
            "datetime": datetime.now().isoformat(),
            "calling_context": calling_context,
            "user_data": user_data or {},
            "data": data,
        }

        entries: list = []
        if json_file.exists():
            with open(json_file, "r", encoding="utf-8") as f:
                try:
                    entries = json.load(f)
                except json.JSONDecodeError:
                    entries = []
        entries.append(entry)

        with open(json_file, "w", encoding="utf-8") as f:
            json.dump(entries, f, cls=CustomJSONEncoder)


def _file_handler(path: Path, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=path, when="midnight", interval=1, encoding="utf-8"
    )
    handler.suffix = "%Y-%m-%d"
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> tuple[logging.Logger, logging.Logger, DataLogger]:
    """Configure le système de logging avec rotation quotidienne.

    Description:
        - `chickcare.generic` (INFO+) : événements métier (complétions, cycle de vie, seed)
        - `chickcare.errors` (ERROR+) : erreurs inattendues et échecs des collaborateurs
        - `DataLogger` : audit JSON
        Sans `log_to_file`, seuls les handlers console sont posés.

    Returns:
        tuple: (logger_generic, logger_errors, data_logger)
    """
    settings = get_settings()
    logs_dir = Path(settings.logs_dir)
    if settings.log_to_file:
        logs_dir.mkdir(parents=True, exist_ok=True)
        cleanup_old_logs(logs_dir)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    generic_logger = logging.getLogger("chickcare.generic")
    generic_logger.setLevel(logging.INFO)
    if not generic_logger.handlers:  # Éviter les doublons
        if settings.log_to_file:
            generic_logger.addHandler(_file_handler(logs_dir / "generic.log", formatter))
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        generic_logger.addHandler(console)

    error_logger = logging.getLogger("chickcare.errors")
    error_logger.setLevel(logging.ERROR)
    if not error_logger.handlers:
        if settings.log_to_file:
            error_logger.addHandler(_file_handler(logs_dir / "errors.log", formatter))
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        error_logger.addHandler(console)

    data_logger = DataLogger(str(logs_dir), enabled=settings.log_to_file)

    return generic_logger, error_logger, data_logger


def cleanup_old_logs(logs_dir: Path, retention_days: int = 30) -> None:
    """Supprime les logs plus anciens que retention_days."""
    cutoff_str = (datetime.now() - timedelta(days=retention_days)).strftime("%Y-%m-%d")

    patterns = [
        f"{logs_dir}/*-data.json",
        f"{logs_dir}/generic.log.*",
        f"{logs_dir}/errors.log.*",
    ]

    for pattern in patterns:
        for file_path in glob.glob(pattern):
            file_name = os.path.basename(file_path)
            # Date en tête (data) ou en suffixe (rotation)
            date_part = file_name[:10] if file_name.endswith("-data.json") else file_name[-10:]
            if len(date_part) == 10 and date_part.count("-") == 2 and date_part < cutoff_str:
                try:
                    os.remove(file_path)
                except OSError:
                    continue


# Instance globale (lazy initialization)
_loggers: Optional[tuple[logging.Logger, logging.Logger, DataLogger]] = None


def get_loggers() -> tuple[logging.Logger, logging.Logger, DataLogger]:
    """Retourne les loggers configurés (singleton)."""
    global _loggers
    if _loggers is None:
        _loggers = setup_logging()
    return _loggers


def extract_user_data(user_id: Optional[ObjectId] = None, request=None) -> Dict[str, Any]:
    """Extrait les données utilisateur pour le logging."""
    user_data: Dict[str, Any] = {}

    if user_id:
        user_data["user_id"] = user_id

    if request:
        if hasattr(request, "client") and request.client:
            user_data["ip"] = request.client.host
        if hasattr(request, "headers"):
            user_agent = request.headers.get("user-agent")
            if user_agent:
                user_data["user_agent"] = user_agent

    return user_data
