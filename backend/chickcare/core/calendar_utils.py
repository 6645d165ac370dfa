# backend/chickcare/core/calendar_utils.py
# Calendrier de l'élevage : « jour » canonique dans le fuseau de référence, jours et semaines écoulés.

from __future__ import annotations

import datetime as dt
import math
from zoneinfo import ZoneInfo

from chickcare.core.settings import get_settings
from chickcare.core.utils import as_utc, utcnow

SECONDS_PER_DAY = 24 * 60 * 60


def reference_tz() -> ZoneInfo:
    """Fuseau de référence unique (settings `reference_timezone`)."""
    return ZoneInfo(get_settings().reference_timezone)


def day_key(day: dt.date) -> dt.datetime:
    """Clé de stockage d'un jour calendaire : minuit UTC de cette date.

    Description:
        Mongo ne connaît pas de type « date seule » ; toutes les clés `day_date`
        sont donc des datetimes à minuit, offset zéro.
    """
    return dt.datetime(day.year, day.month, day.day, tzinfo=dt.timezone.utc)


def normalize(instant: dt.date | dt.datetime) -> dt.datetime:
    """Ramène un instant au jour canonique.

    Description:
        - `date` seule : prise telle quelle comme jour calendaire.
        - `datetime` aware : localisé dans le fuseau de référence, puis date calendaire.
        - `datetime` naive : lu comme heure murale du fuseau de référence.

        Un instant proche de minuit est ainsi rangé sur le jour du fuseau de
        référence, jamais sur le jour UTC voisin.

    Args:
        instant (date | datetime): Valeur fournie par le client ou l'horloge serveur.

    Returns:
        datetime.datetime: Minuit UTC du jour calendaire de référence.
    """
    if not isinstance(instant, dt.datetime):
        return day_key(instant)
    if instant.tzinfo is None:
        return day_key(instant.date())
    return day_key(instant.astimezone(reference_tz()).date())


def today(now: dt.datetime | None = None) -> dt.datetime:
    """Jour courant dans le fuseau de référence (clé `day_date` par défaut)."""
    return normalize(now or utcnow())


def elapsed_days(start: dt.datetime, now: dt.datetime | None = None) -> int:
    """Nombre de jours écoulés depuis `start`, base 1 (le jour de départ compte pour 1).

    Description:
        Calculé sur l'instant serveur, sans ajustement de fuseau. Zéro ou négatif
        uniquement si `start` est dans le futur : à l'appelant de s'en garder.
    """
    delta = as_utc(now or utcnow()) - as_utc(start)
    return math.floor(delta.total_seconds() / SECONDS_PER_DAY) + 1


def week_of(elapsed_day_count: int, cap: int | None = None) -> int:
    """Semaine du programme pour un nombre de jours écoulés, plafonnée à la durée du programme."""
    cap = cap if cap is not None else get_settings().curriculum_weeks
    return min((elapsed_day_count - 1) // 7 + 1, cap)


def current_position(
    start_date: dt.datetime | None, fallback_week: int, now: dt.datetime | None = None
) -> tuple[int, int]:
    """Semaine et jour courants d'un élevage.

    Description:
        Sans date de départ (élevage en préparation), ou avec une date de départ
        encore dans le futur, le jour vaut 0 et la semaine est celle mémorisée sur
        l'élevage.

    Args:
        start_date (datetime | None): Date de départ de l'élevage.
        fallback_week (int): `current_week` mémorisé sur l'élevage.
        now (datetime | None): Horloge (tests).

    Returns:
        tuple[int, int]: `(current_week, current_day)`.
    """
    if start_date is None:
        return fallback_week, 0
    day = elapsed_days(start_date, now)
    if day < 1:
        return fallback_week, 0
    return week_of(day), day
