# backend/chickcare/api/routes/auth.py
# Routes d'authentification :
# - Inscription, login, refresh token
# - Profil de l'utilisateur courant
# Le reste de l'API ne consomme que l'identifiant de l'utilisateur courant.

from __future__ import annotations

from bson import ObjectId
from fastapi import APIRouter, Body, HTTPException, Request, status
from pymongo.collation import Collation
from pymongo.errors import DuplicateKeyError

from chickcare.core.bson_utils import dump_mongo
from chickcare.core.logging_config import get_loggers
from chickcare.core.security import (
    CurrentUser,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    validate_password_strength,
    verify_password,
)
from chickcare.db.mongodb import USERS, get_collection
from chickcare.models.user import (
    RefreshTokenRequest,
    TokenPair,
    TokenResponse,
    User,
    UserInRegister,
    UserOut,
)

router = APIRouter(prefix="/auth", tags=["auth"])

# Collation insensible à la casse (sensible aux accents)
COLLATION_CI = Collation(locale="en", strength=2)

logger_main = get_loggers()[0]


@router.post(
    "/register",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Inscription d’un nouvel utilisateur",
    description=(
        "Crée un compte utilisateur avec email et username uniques.\n\n"
        "- Vérifie la force du mot de passe\n"
        "- Hash le mot de passe\n"
        "- Retourne les informations publiques du compte créé"
    ),
)
async def register(
    payload: UserInRegister = Body(..., description="Données d'inscription : username, email et mot de passe."),
):
    """Inscription d’un utilisateur.

    Description:
        Enregistre un nouvel utilisateur après validation de la force du mot de passe et
        de l’unicité (email/username, insensible à la casse).

    Args:
        payload (UserInRegister): Données d'inscription (username, email, password).

    Returns:
        UserOut: Données publiques de l’utilisateur (id, username, email).
    """
    username = payload.username.strip()
    email = str(payload.email).strip()

    if not validate_password_strength(payload.password):
        raise HTTPException(status_code=400, detail="Password too weak")

    users = await get_collection(USERS)
    existing = await users.find_one(
        {"$or": [{"username": username}, {"email": email}]},
        projection={"_id": 1},
        collation=COLLATION_CI,
    )
    if existing:
        raise HTTPException(status_code=409, detail="Username or email already used")

    user = User(username=username, email=email, password_hash=hash_password(payload.password))
    try:
        res = await users.insert_one(dump_mongo(user))
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="Username or email already used")

    logger_main.info(f"User registered id={res.inserted_id}")
    return {"_id": res.inserted_id, "email": user.email, "username": user.username}


@router.post(
    "/login",
    response_model=TokenPair,
    summary="Connexion d’un utilisateur",
    description=(
        "Authentifie via formulaire OAuth2 **ou** JSON (username/email + password).\n\n"
        "- Retourne un couple de jetons (access + refresh)\n"
        "- 401 si identifiants invalides ou compte inactif"
    ),
)
async def login(request: Request):
    """Connexion utilisateur.

    Description:
        Authentifie l’utilisateur avec identifiant (username/email) et mot de passe, puis génère un access token
        et un refresh token JWT. Accepte `application/x-www-form-urlencoded`, `multipart/form-data` et JSON.

    Args:
        request (Request): Requête HTTP (support JSON ou formulaire).

    Returns:
        TokenPair: Contenant access_token, refresh_token et token_type.
    """
    ctype = request.headers.get("content-type", "")
    if "application/x-www-form-urlencoded" in ctype or "multipart/form-data" in ctype:
        form = await request.form()
        ident = str(form.get("username") or form.get("identifier") or "").strip()
        password = str(form.get("password") or "")
    else:
        try:
            body = await request.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        ident = str(body.get("identifier") or body.get("username") or body.get("email") or "").strip()
        password = str(body.get("password") or "")

    if not ident or not password:
        raise HTTPException(status_code=422, detail="Missing credentials")

    users = await get_collection(USERS)
    user = await users.find_one(
        {"$or": [{"email": ident}, {"username": ident}]},
        collation=COLLATION_CI,
    )
    if user is None or not verify_password(password, user.get("password_hash", "")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not user.get("is_active", True):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Inactive user")

    sub = str(user["_id"])
    return {
        "access_token": create_access_token(data={"sub": sub}),
        "refresh_token": create_refresh_token(data={"sub": sub}),
        "token_type": "bearer",
    }


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Renouvellement du token d’accès",
    description=(
        "Génère un nouveau token d’accès à partir d’un refresh token valide.\n\n"
        "- Vérifie la validité et le type du refresh token\n"
        "- Vérifie que l’utilisateur est actif"
    ),
)
async def refresh_token(
    payload: RefreshTokenRequest = Body(..., description="Refresh token JWT valide."),
):
    """Rafraîchissement du token d’accès.

    Args:
        payload (RefreshTokenRequest): Refresh token à valider.

    Returns:
        TokenResponse: Nouveau jeton d’accès.
    """
    sub = decode_token(payload.refresh_token, "refresh")
    if sub is None:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    users = await get_collection(USERS)
    user = await users.find_one({"_id": ObjectId(sub)}, {"_id": 1, "is_active": 1})
    if not user or not user.get("is_active", True):
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    return {"access_token": create_access_token(data={"sub": str(user["_id"])}), "token_type": "bearer"}


@router.get(
    "/me",
    response_model=UserOut,
    summary="Utilisateur courant",
)
async def me(current_user: CurrentUser):
    """Profil public de l’utilisateur authentifié."""
    return current_user
