# backend/chickcare/api/routes/guides.py
# Guides d'élevage statiques (température de la couveuse).

from fastapi import APIRouter, Query

from chickcare.services.temperature import temperature_guidance

router = APIRouter(prefix="/guides", tags=["guides"])


@router.get(
    "/temperature",
    summary="Température recommandée de la couveuse",
    description=(
        "Température (°F) pour une semaine du programme, avec les signes de confort.\n\n"
        "95 °F en préparation et semaine 1, −5 °F par semaine, 70 °F à partir de la semaine 6."
    ),
)
async def temperature(week: int = Query(..., description="Semaine du programme (0 = préparation).")):
    return temperature_guidance(week)
