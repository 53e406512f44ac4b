"""Author collection endpoints: create or fetch several authors at once."""

from __future__ import annotations

from flask import Blueprint, request, url_for

from library_api.api.deps import json_response, parse_id_list, projector, sort_registry, timing
from library_api.core.errors import BadRequest
from library_api.schemas.author import AuthorCreateSchema
from library_api.services.authors.service import AuthorService

bp = Blueprint("author_collections", __name__)

author_collection_schema = AuthorCreateSchema(many=True)


@bp.post("")
@timing
def create_author_collection():
    """Create every author of the posted array in one transaction."""

    payload = request.get_json(silent=True)
    if not isinstance(payload, list):
        raise BadRequest("A JSON array of authors is required")
    dtos = author_collection_schema.load(payload)
    authors = AuthorService(registry=sort_registry()).create_collection(dtos)

    response = json_response(projector.shape_all(authors, None), status=201)
    ids = ",".join(str(a.id) for a in authors)
    response.headers["Location"] = url_for(
        "author_collections.get_author_collection", ids=ids, _external=True
    )
    return response


@bp.get("/(<ids>)")
@timing
def get_author_collection(ids: str):
    """Return the requested authors; 404 unless all of them exist."""

    author_ids = parse_id_list(ids)
    authors = AuthorService(registry=sort_registry()).get_collection(author_ids)
    return json_response(projector.shape_all(authors, None))
