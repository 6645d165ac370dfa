# backend/chickcare/services/temperature.py
# Guide de température de la couveuse (°F) selon la semaine du programme.

from __future__ import annotations

from typing import Any

ARRIVAL_TEMPERATURE_F = 95
ROOM_TEMPERATURE_F = 70
WEEKLY_DROP_F = 5
FULLY_FEATHERED_WEEK = 6

TOO_COLD = "Chicks are huddled together under the heat source, piling on top of each other"
TOO_HOT = "Chicks are spread out along the edges of the brooder, panting, wings held away from body"
JUST_RIGHT = "Chicks are scattered comfortably throughout the brooder, moving freely between warm and cool areas"


def recommended_temperature(week_number: int) -> int:
    """Température recommandée pour une semaine.

    Description:
        - semaine ≤ 0 (préparation) : 95 °F, cible à l’arrivée des poussins
        - semaines 1 à 5 : 95 °F puis −5 °F par semaine
        - semaine ≥ 6 : 70 °F (température ambiante, plus de chauffage d’appoint)

    Args:
        week_number (int): Semaine du programme.

    Returns:
        int: Température en °F.
    """
    if week_number <= 0:
        return ARRIVAL_TEMPERATURE_F
    if week_number >= FULLY_FEATHERED_WEEK:
        return ROOM_TEMPERATURE_F
    return ARRIVAL_TEMPERATURE_F - (week_number - 1) * WEEKLY_DROP_F


def temperature_guidance(week_number: int) -> dict[str, Any]:
    """Température recommandée + indices de comportement et conseil de la semaine."""
    if week_number <= 0:
        tip = "Pre-warm your brooder 24 hours before chicks arrive to ensure stable temperature."
    elif week_number >= FULLY_FEATHERED_WEEK:
        tip = (
            "Your chicks are fully feathered and can regulate their own temperature. "
            "Supplemental heat is only needed if room drops below 65°F."
        )
    else:
        tip = (
            "Lower the temperature by 5°F each week by raising your heat plate. "
            "Chicks grow more feathers and need less heat as they develop."
        )

    return {
        "week_number": week_number,
        "temperature": recommended_temperature(week_number),
        "too_cold": TOO_COLD,
        "too_hot": TOO_HOT,
        "just_right": JUST_RIGHT,
        "tip": tip,
    }
