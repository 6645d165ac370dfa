# backend/chickcare/core/security.py
# Hash de mot de passe (bcrypt), génération/validation JWT, dépendance FastAPI `get_current_user`.

import datetime as dt
import re
from typing import Annotated

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from chickcare.core.bson_utils import PyObjectId
from chickcare.core.settings import get_settings
from chickcare.core.utils import utcnow
from chickcare.db.mongodb import USERS, get_collection
from chickcare.models.user import User

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", scopes={})


def hash_password(password: str) -> str:
    """Hash de mot de passe (bcrypt via Passlib)."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Vérifie un mot de passe contre son hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: dt.timedelta | None = None) -> str:
    """Crée un access token JWT.

    Description:
        Encode un JWT signé contenant `data` (ex. `sub`) et une date d’expiration
        (`jwt_expiration_minutes` par défaut).

    Args:
        data (dict): Claims à inclure (ex. `{"sub": "<user_id>"}`).
        expires_delta (datetime.timedelta | None): Durée de validité.

    Returns:
        str: Jeton JWT signé.
    """
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or dt.timedelta(minutes=settings.jwt_expiration_minutes))
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_refresh_token(data: dict, expires_delta: dt.timedelta | None = None) -> str:
    """Crée un refresh token JWT (7 jours par défaut)."""
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or dt.timedelta(days=7))
    to_encode.update({"exp": expire, "type": "refresh"})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, expected_type: str) -> str | None:
    """Décode un JWT et renvoie son `sub`, ou None si invalide / mauvais type."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    sub = payload.get("sub")
    if payload.get("type") != expected_type or not isinstance(sub, str) or not ObjectId.is_valid(sub):
        return None
    return sub


async def get_current_user(token: str = Depends(oauth2_scheme)) -> User:
    """Dépendance FastAPI: charge l’utilisateur courant depuis le JWT.

    Description:
        - Décode le JWT reçu via le schéma OAuth2 Bearer
        - Extrait `sub` (id utilisateur) puis charge l’utilisateur en base
        - Lève 401 si le token est invalide ou si l’utilisateur n’existe pas / est inactif

    Args:
        token (str): Jeton d’authentification Bearer (injection via `oauth2_scheme`).

    Returns:
        User: Utilisateur courant.

    Raises:
        HTTPException: 401 si jeton invalide/inexistant ou utilisateur introuvable.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = decode_token(token, "access")
    if user_id is None:
        raise credentials_exception

    coll_users = await get_collection(USERS)
    raw_user = await coll_users.find_one({"_id": ObjectId(user_id)})
    if raw_user is None or not raw_user.get("is_active", True):
        raise credentials_exception

    return User(**raw_user)


def get_current_user_id(current_user: Annotated[User, Depends(get_current_user)]) -> PyObjectId:
    user_id = current_user.id
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user without id",
        )
    return user_id


def validate_password_strength(password: str) -> bool:
    """Valide la complexité du mot de passe.

    Description:
        Exige au minimum : 8 caractères, 1 majuscule, 1 minuscule, 1 chiffre et 1 caractère spécial.

    Args:
        password (str): Mot de passe à contrôler.

    Returns:
        bool: True si la politique est respectée.
    """
    return not (
        len(password) < 8
        or not re.search(r"[A-Z]", password)
        or not re.search(r"[a-z]", password)
        or not re.search(r"[0-9]", password)
        or not re.search(r"[\W_]", password)  # caractère spécial
    )


# Type aliases pour faciliter l'usage
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentUserId = Annotated[PyObjectId, Depends(get_current_user_id)]
