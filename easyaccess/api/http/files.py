from fastapi import APIRouter, Depends, HTTPException, Request, status
from typing import AsyncIterator
import uuid

from easyaccess.domains.files.entities import File
from easyaccess.domains.files.exceptions import (
    DuplicateNameError, InvalidCredentialsError, NotFoundError, ValidationError
)
from easyaccess.domains.files.schemas import (
    FileAccess, FileContentSchema, FileContentUpdate, FileCreate, FileResponse, ImageAdd
)
from easyaccess.domains.files.services import FileService

router = APIRouter(prefix="/files", tags=["files"])


async def get_file_service(request: Request) -> AsyncIterator[FileService]:
    """Зависимость для получения сервиса файлов"""
    storage = request.app.state.storage
    async with storage.repository() as repository:
        yield FileService(repository, request.app.state.settings)


def to_response(file: File) -> FileResponse:
    return FileResponse(
        id=file.id,
        name=file.name,
        content=FileContentSchema(text=file.content.text, images=file.content.images),
        created_at=file.created_at,
        updated_at=file.updated_at
    )


def not_found(e: NotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def unprocessable(e: ValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(e))


@router.post("", response_model=FileResponse, status_code=status.HTTP_201_CREATED)
async def create_file(
    file_data: FileCreate,
    file_service: FileService = Depends(get_file_service)
):
    """Создание нового файла"""
    try:
        file = await file_service.create_file(file_data.name, file_data.password)
    except DuplicateNameError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValidationError as e:
        raise unprocessable(e)

    return to_response(file)


@router.post("/access", response_model=FileResponse)
async def access_file(
    access_data: FileAccess,
    file_service: FileService = Depends(get_file_service)
):
    """Доступ к существующему файлу по имени и паролю"""
    try:
        file = await file_service.authenticate_file(access_data.name, access_data.password)
    except NotFoundError as e:
        raise not_found(e)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except ValidationError as e:
        raise unprocessable(e)

    return to_response(file)


@router.get("/{file_id}", response_model=FileResponse)
async def get_file(
    file_id: uuid.UUID,
    file_service: FileService = Depends(get_file_service)
):
    """Получение файла по id"""
    file = await file_service.get_file(file_id)

    if not file:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found"
        )

    return to_response(file)


@router.put("/{file_id}/content", response_model=FileResponse)
async def update_file_content(
    file_id: uuid.UUID,
    content: FileContentUpdate,
    file_service: FileService = Depends(get_file_service)
):
    """Сохранение содержимого файла"""
    try:
        file = await file_service.update_content(file_id, content.text, content.images)
    except NotFoundError as e:
        raise not_found(e)

    return to_response(file)


@router.post("/{file_id}/images", response_model=FileResponse)
async def add_image(
    file_id: uuid.UUID,
    image_data: ImageAdd,
    file_service: FileService = Depends(get_file_service)
):
    """Добавление изображения"""
    try:
        file = await file_service.add_image(file_id, image_data.image)
    except NotFoundError as e:
        raise not_found(e)
    except ValidationError as e:
        raise unprocessable(e)

    return to_response(file)


@router.delete("/{file_id}/images/{index}", response_model=FileResponse)
async def remove_image(
    file_id: uuid.UUID,
    index: int,
    file_service: FileService = Depends(get_file_service)
):
    """Удаление изображения по индексу"""
    try:
        file = await file_service.remove_image(file_id, index)
    except NotFoundError as e:
        raise not_found(e)
    except ValidationError as e:
        raise unprocessable(e)

    return to_response(file)


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    file_id: uuid.UUID,
    file_service: FileService = Depends(get_file_service)
):
    """Удаление файла"""
    try:
        await file_service.delete_file(file_id)
    except NotFoundError as e:
        raise not_found(e)
