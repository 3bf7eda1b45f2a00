"""Schema conversion endpoints."""

from fastapi import APIRouter, HTTPException

from ..models import SchemaConvertRequest, SchemaConvertResponse
from ...errors import MappingError
from ...models.contentful import ExportBundle
from ...models.migration import SchemaOptions
from ...services.schema_mapper import map_bundle

router = APIRouter()


@router.post("/convert", response_model=SchemaConvertResponse)
async def convert_schemas(data: SchemaConvertRequest):
    """Map the content types of an export to Sanity document definitions."""
    bundle = ExportBundle.from_dict(data.export.model_dump())
    options = SchemaOptions(
        keep_markdown=data.keep_markdown,
        weak_refs=data.weak_refs,
    )

    try:
        definitions = map_bundle(bundle, options)
    except MappingError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return SchemaConvertResponse(
        types=[d.to_dict() for d in definitions],
        total=len(definitions),
    )
