# backend/chickcare/core/utils.py
# Fonctions temporelles basiques (naive local et aware UTC).

import datetime as dt


def now():
    """Date/heure locale (naive).

    Description:
        Retourne `datetime.now()` sans timezone attachée. Pratique pour usages locaux
        mais à éviter pour les comparaisons cross-TZ (préférer `utcnow()`).

    Returns:
        datetime.datetime: Timestamp local (naive).
    """
    return dt.datetime.now()


def utcnow():
    """Date/heure UTC (timezone-aware).

    Description:
        Retourne `datetime.now(timezone.utc)` avec timezone UTC attachée. Recommandé
        pour les horodatages persistés et les comparaisons.

    Returns:
        datetime.datetime: Timestamp UTC (aware).
    """
    return dt.datetime.now(dt.timezone.utc)


def as_utc(value: dt.datetime) -> dt.datetime:
    """Force un datetime en UTC aware.

    Description:
        Mongo renvoie des datetimes naive (UTC implicite) : on leur rattache UTC.
        Un datetime déjà aware est converti en UTC.

    Args:
        value (datetime.datetime): Valeur lue en base ou reçue du client.

    Returns:
        datetime.datetime: Timestamp UTC (aware).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)
