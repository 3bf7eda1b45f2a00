"""Dataset conversion endpoints."""

from fastapi import APIRouter

from ..models import DatasetConvertRequest, DatasetConvertResponse
from ...models.contentful import ExportBundle
from ...models.migration import DatasetOptions
from ...services.dataset_converter import DatasetConverter

router = APIRouter()


@router.post("/convert", response_model=DatasetConvertResponse)
async def convert_dataset(data: DatasetConvertRequest):
    """Convert the entries of an export to Sanity documents."""
    bundle = ExportBundle.from_dict(data.export.model_dump())
    options = DatasetOptions(
        locale=data.locale,
        keep_markdown=data.keep_markdown,
        weak_refs=data.weak_refs,
        include_drafts=data.include_drafts,
    )

    converter = DatasetConverter(bundle, options)
    documents = converter.convert()

    return DatasetConvertResponse(
        documents=documents,
        total=len(documents),
        warnings=converter.warnings,
    )
