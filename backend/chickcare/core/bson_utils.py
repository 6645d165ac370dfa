# backend/chickcare/core/bson_utils.py
# Helpers Pydantic v2 pour ObjectId + base model Mongo, et conversion des ids reçus dans les routes.
from __future__ import annotations

from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler
from pydantic.json_schema import GetJsonSchemaHandler, JsonSchemaValue
from pydantic_core import core_schema

from chickcare.core.errors import NotFoundError


class PyObjectId(ObjectId):
    """ObjectId compatible Pydantic v2 et OpenAPI.

    Description:
        Accepte une chaîne hex de 24 caractères **ou** un `ObjectId`, sérialise en chaîne
        et expose un schéma OpenAPI `type: string, format: objectid`.
    """

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.json_or_python_schema(
            json_schema=core_schema.no_info_plain_validator_function(cls._validate),
            python_schema=core_schema.no_info_plain_validator_function(cls._validate),
            serialization=core_schema.plain_serializer_function_ser_schema(str, when_used="json"),
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, core_schema_obj: core_schema.CoreSchema, handler: GetJsonSchemaHandler) -> JsonSchemaValue:
        return {
            "type": "string",
            "format": "objectid",
            "pattern": "^[a-fA-F0-9]{24}$",
            "examples": ["507f1f77bcf86cd799439011"],
        }

    @classmethod
    def _validate(cls, v: Any) -> ObjectId:
        """Valide et convertit en ObjectId.

        Raises:
            ValueError: Si la valeur n’est pas un ObjectId valide (remonte en 422).
        """
        if isinstance(v, ObjectId):
            return v
        if isinstance(v, str) and ObjectId.is_valid(v):
            return ObjectId(v)
        raise ValueError(f"Invalid ObjectId: {v!r}")


class MongoBaseModel(BaseModel):
    """BaseModel Pydantic pour documents Mongo (`_id` exposé via l’alias `id`)."""

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


def to_object_id(value: Any, not_found: type[NotFoundError] = NotFoundError) -> ObjectId:
    """Convertit un id de route en ObjectId.

    Description:
        Un id mal formé ne peut désigner aucune ressource : on lève directement
        l’erreur 404 du type de ressource plutôt qu’une 422.

    Args:
        value (Any): Id reçu (str ou ObjectId).
        not_found (type[NotFoundError]): Exception à lever si l’id est invalide.

    Returns:
        ObjectId: Id converti.
    """
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise not_found()


def dump_mongo(model: BaseModel, *, exclude_none: bool = True) -> dict:
    """Dump d’un modèle pour Mongo (dict, alias `_id`, sans les `None` par défaut)."""
    data = model.model_dump(by_alias=True, exclude_none=exclude_none)
    if data.get("_id") is None:
        data.pop("_id", None)
    return data
