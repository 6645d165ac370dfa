# backend/chickcare/db/mongodb.py
# Initialise le client MongoDB à partir des settings et expose l'accès aux collections.

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from chickcare.core.settings import get_settings

settings = get_settings()

# Le client Motor ne se connecte qu'à la première opération.
client: AsyncIOMotorClient = AsyncIOMotorClient(settings.mongodb_uri, tz_aware=True)
db: AsyncIOMotorDatabase = client[settings.mongodb_db]

# Noms des collections
FLOCKS = "flocks"
TASKS = "tasks"
TASK_COMPLETIONS = "task_completions"
CHICKS = "chicks"
CHICK_PHOTOS = "chick_photos"
CHICK_NOTES = "chick_notes"
USERS = "users"
META = "meta"


async def get_collection(name: str) -> AsyncIOMotorCollection:
    """Retourne une collection MongoDB par son nom.

    Description:
        Accède à `db[name]` et renvoie l'objet collection. Si la collection n'existe pas
        encore côté serveur, MongoDB la créera à la première insertion.

    Args:
        name (str): Nom de la collection (ex. "flocks", "task_completions").

    Returns:
        AsyncIOMotorCollection: Instance de collection MongoDB asynchrone.
    """
    return db[name]
