from fastapi import APIRouter, File, HTTPException, UploadFile

from insightdash.schemas.upload import ParsedDatasetResponse
from insightdash.services.parsing import InputShapeError, parse_upload, validate_upload

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("", response_model=ParsedDatasetResponse)
async def upload_file(file: UploadFile = File(...)):
    """Upload a CSV, Excel or JSON file and get its rows and columns back."""
    file.file.seek(0, 2)
    file_size = file.file.tell()
    file.file.seek(0)

    validation = validate_upload(file.filename, file_size)
    if not validation["valid"]:
        raise HTTPException(status_code=400, detail=validation["error"])

    content = await file.read()
    try:
        parsed = parse_upload(file.filename, content)
    except InputShapeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ParsedDatasetResponse(
        filename=file.filename,
        file_type=parsed.file_type,
        columns=parsed.columns,
        rows=parsed.rows,
        row_count=len(parsed.rows),
    )
