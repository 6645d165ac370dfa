# backend/chickcare/db/seed_data.py
# Outils de remplissage initial : ping Mongo, index et chargement versionné du catalogue de tâches.

import asyncio
import hashlib
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import TypeAdapter
from pymongo.errors import ConnectionFailure
from rich import print

from chickcare.core.logging_config import get_loggers
from chickcare.core.utils import utcnow
from chickcare.db.mongodb import META, TASKS, db, get_collection
from chickcare.db.seed_indexes import ensure_indexes
from chickcare.models.task import TaskBase

load_dotenv()
SEEDS_FOLDER = Path(__file__).resolve().parents[2] / "data" / "seeds"
TASKS_SEED_FILE = SEEDS_FOLDER / "tasks.json"
CATALOG_META_ID = "task_catalog"


async def test_connection():
    """Teste la connexion à MongoDB (ping).

    Description:
        Envoie une commande `ping` à la base. En cas d’échec, affiche un message et
        termine le processus avec un code d’erreur (sys.exit).
    """
    try:
        await db.command("ping")
        print("✅ Connexion à MongoDB réussie.")
    except ConnectionFailure:
        print("❌ Échec de la connexion à MongoDB.")
        sys.exit(1)


def load_task_seed(file_path: Path = TASKS_SEED_FILE) -> tuple[str, list[TaskBase]]:
    """Lit et valide le fichier de seed du catalogue.

    Description:
        La version du catalogue est l’empreinte SHA-256 (12 premiers caractères) du
        fichier : un seed inchangé n’est pas rejoué.

    Args:
        file_path (Path): Fichier JSON (liste de tâches).

    Returns:
        tuple[str, list[TaskBase]]: (version, tâches validées).

    Raises:
        FileNotFoundError: Si le fichier n’existe pas.
        pydantic.ValidationError: Si une entrée est invalide.
    """
    raw = file_path.read_bytes()
    version = hashlib.sha256(raw).hexdigest()[:12]
    tasks = TypeAdapter(list[TaskBase]).validate_python(json.loads(raw.decode("utf-8")))
    codes = [t.code for t in tasks]
    if len(codes) != len(set(codes)):
        raise ValueError(f"Duplicate task codes in {file_path.name}")
    return version, tasks


async def seed_tasks(force: bool = False, file_path: Path = TASKS_SEED_FILE) -> dict:
    """Charge le catalogue de tâches (upsert par `code`).

    Description:
        - Si la version enregistrée dans `meta` est identique et `force=False`, ne fait rien.
        - Sinon, upsert chaque tâche sur son `code` : l’`_id` d’une tâche existante est
          conservé, donc les complétions qui la référencent restent valides.
        - Les tâches absentes du seed sont conservées (références historiques).

    Args:
        force (bool): Rejouer le seed même si la version n’a pas changé.
        file_path (Path): Fichier de seed.

    Returns:
        dict: `{version, skipped, upserted, updated, total}`.
    """
    generic_logger, _, data_logger = get_loggers()
    version, tasks = load_task_seed(file_path)

    meta = await get_collection(META)
    current = await meta.find_one({"_id": CATALOG_META_ID})
    if current and current.get("version") == version and not force:
        print(f"🔁 Catalogue déjà à la version {version}. Rien modifié.")
        return {"version": version, "skipped": True, "upserted": 0, "updated": 0, "total": len(tasks)}

    coll = await get_collection(TASKS)
    upserted = updated = 0
    for task in tasks:
        res = await coll.update_one(
            {"code": task.code},
            {"$set": task.model_dump()},
            upsert=True,
        )
        if res.upserted_id is not None:
            upserted += 1
        elif res.modified_count:
            updated += 1

    await meta.update_one(
        {"_id": CATALOG_META_ID},
        {"$set": {"version": version, "count": len(tasks), "seeded_at": utcnow()}},
        upsert=True,
    )

    summary = {"version": version, "skipped": False, "upserted": upserted, "updated": updated, "total": len(tasks)}
    generic_logger.info(f"Task catalog seeded: {summary}")
    data_logger.log_data("seed_tasks", summary)
    print(f"✅ {upserted} tâches insérées, {updated} mises à jour (version {version}).")
    return summary


async def main(force: bool = False):
    await test_connection()
    await ensure_indexes()
    await seed_tasks(force=force)


if __name__ == "__main__":
    asyncio.run(main(force="--force" in sys.argv))
