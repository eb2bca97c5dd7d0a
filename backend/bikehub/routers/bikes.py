from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import Optional
import logging
from bikehub.dependencies import get_repository, get_upload_store
from bikehub.models.bike import validate_bike
from bikehub.repository import BikeRepository
from bikehub.utils.uploads import UploadStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Bikes"])

@router.post("/add-bike", status_code=201)
def add_bike(
    name: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    desc: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    repo: BikeRepository = Depends(get_repository),
    store: UploadStore = Depends(get_upload_store),
):
    """
    Create a listing from a multipart form with an attached image.
    The text fields are checked before the image is written.
    """
    logger.info("Received bike data: name=%r price=%r desc=%r", name, price, desc)
    fields = {"name": name, "price": price, "desc": desc}
    validate_bike({**fields, "image": image.filename if image else None})

    file_name = store.save(image)
    bike = repo.create({**fields, "image": file_name})
    logger.info("Bike saved: %s (%s)", bike.name, bike.id)
    return {"message": "Bike saved successfully!", "bike": bike.model_dump()}

@router.get("/bikes")
def list_bikes(repo: BikeRepository = Depends(get_repository)):
    return [bike.model_dump() for bike in repo.list_all()]

# Registered before /bikes/{key} so "name" is never taken as a key.
@router.delete("/bikes/name/{name:path}")
def delete_bike_by_name(name: str, repo: BikeRepository = Depends(get_repository)):
    logger.info("Deleting bike by name: %r", name)
    bike = repo.delete_by_name(name)
    logger.info("Deleted bike: %s", bike.id)
    return {"message": "Bike deleted successfully", "bike": bike.model_dump()}

@router.delete("/bikes/{key}")
def delete_bike(key: str, repo: BikeRepository = Depends(get_repository)):
    logger.info("Deleting bike with key: %s", key)
    bike = repo.delete_by_key(key)
    logger.info("Deleted bike: %s", bike.name)
    return {"message": "Bike deleted successfully", "bike": bike.model_dump()}
