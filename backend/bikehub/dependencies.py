from fastapi import Request
from bikehub.repository import BikeRepository
from bikehub.utils.mpesa import MpesaClient
from bikehub.utils.uploads import UploadStore

# Shared components are built once in create_app() and kept on app.state.

def get_repository(request: Request) -> BikeRepository:
    return request.app.state.repository

def get_upload_store(request: Request) -> UploadStore:
    return request.app.state.upload_store

def get_payment_client(request: Request) -> MpesaClient:
    return request.app.state.payment_client
