"""Component catalog and archetype table endpoints."""
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from typing import Any, Dict

from layoutforge.models.schemas.component_catalog import export_component_catalog as export_component_catalog_payload
from layoutforge.services.generation.archetype_resolver import export_archetype_tables
from layoutforge.services.generation.component_mapping import mapping_table_as_dict

router = APIRouter()


@router.get(
    "/components",
    tags=["Components"],
    summary="Get component catalog",
    description="Allowed layout component keys, the component catalog and the IR mapping table."
)
async def get_component_catalog() -> Dict[str, Any]:
    payload = export_component_catalog_payload()
    payload["mappingTable"] = mapping_table_as_dict()
    return payload


@router.get(
    "/components/export",
    tags=["Components"],
    summary="Export component catalog as JSON",
    description="Downloads the component catalog as a JSON file."
)
async def export_component_catalog() -> JSONResponse:
    response = JSONResponse(
        content=export_component_catalog_payload()
    )
    response.headers["Content-Disposition"] = 'attachment; filename="component_catalog.json"'
    return response


@router.get(
    "/archetypes",
    tags=["Components"],
    summary="Get layout archetypes",
    description="Archetype table, application-type mapping and default canvas sizes."
)
async def get_archetypes() -> Dict[str, Any]:
    return export_archetype_tables()
