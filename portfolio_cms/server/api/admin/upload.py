"""Admin image upload endpoint."""

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.models.io.common import ApiResponse
from portfolio_cms.core.models.io.operations import UploadResult
from portfolio_cms.server.services.audit import record_admin_action
from portfolio_cms.server.services.uploads import UploadError, save_image

router = APIRouter(tags=["admin-upload"])


@router.post(
    "/image",
    response_model=ApiResponse[UploadResult],
    summary="Upload Image",
    description="Upload a JPEG, PNG, WebP or GIF image (5 MB max by default).",
    response_description="The stored file name and its public URL.",
    responses={
        400: {"description": "Missing file, unsupported type or content mismatch"},
        413: {"description": "File too large"},
    },
)
async def upload_image(
    request: Request,
    file: UploadFile = File(..., description="Image file"),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[UploadResult]:
    try:
        result = await save_image(file)
    except UploadError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    finally:
        await file.close()

    await record_admin_action(
        session, request, "upload", "image", result.filename, details={"size": result.size, "type": result.type}
    )
    return ApiResponse[UploadResult](message="File uploaded successfully", data=result)
