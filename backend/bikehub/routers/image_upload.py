from fastapi import APIRouter, Depends, File, UploadFile
from typing import Optional
from bikehub.dependencies import get_upload_store
from bikehub.utils.uploads import UploadStore

router = APIRouter(prefix="/api", tags=["Image Upload"])

@router.post("/upload-image")
def upload_image(
    image: Optional[UploadFile] = File(None),
    store: UploadStore = Depends(get_upload_store),
):
    file_name = store.save(image)
    return {"imageUrl": store.public_url(file_name)}
