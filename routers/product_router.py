from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from config import settings
from infrastructure.context import RequestContext
from infrastructure.image_store import ImageUpload, file_too_large
from routers.dependencies import get_product_service, get_request_context
from schemas import (
    ApiResponse,
    PaginationMeta,
    ProductData,
    ProductListData,
    ProductResponse,
)
from services.catalog import ProductPage, ProductService

router = APIRouter(prefix="/products")


def _clean(value: Optional[str]) -> Optional[str]:
    """Multipart clients send empty strings for untouched inputs."""
    if value is None or value == "":
        return None
    return value


async def _read_image(
    image: Optional[UploadFile],
    max_bytes: int = settings.MAX_IMAGE_SIZE_BYTES,
) -> Optional[ImageUpload]:
    if image is None or not image.filename:
        return None
    # Never hold more than the limit plus one byte in memory.
    content = await image.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise file_too_large(max_bytes)
    return ImageUpload(content=content, filename=image.filename, content_type=image.content_type)


def _list_response(result: ProductPage) -> ApiResponse[ProductListData]:
    return ApiResponse[ProductListData](
        data=ProductListData(
            products=[ProductResponse.from_model(product) for product in result.items],
            pagination=PaginationMeta(
                page=result.page,
                pages=result.pages,
                total=result.total,
                limit=result.limit,
            ),
        )
    )


@router.get("", response_model=ApiResponse[ProductListData], summary="Browse the catalog")
async def list_products(
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    shop_id: Optional[str] = Query(None, alias="shopId"),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductListData]:
    result = await service.list_products(
        category=category,
        owner_id=shop_id,
        search=search,
        page=page,
        limit=limit,
    )
    return _list_response(result)


@router.get(
    "/category/{category}",
    response_model=ApiResponse[ProductListData],
    summary="Browse one category",
)
async def list_products_by_category(
    category: str,
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductListData]:
    result = await service.list_by_category(category, page=page, limit=limit)
    return _list_response(result)


@router.get("/{product_id}", response_model=ApiResponse[ProductData], summary="Get a single product")
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductData]:
    product = await service.get_product(product_id)
    return ApiResponse[ProductData](
        data=ProductData(product=ProductResponse.from_model(product, include_owner_email=True))
    )


@router.post(
    "",
    response_model=ApiResponse[ProductData],
    status_code=status.HTTP_201_CREATED,
    summary="Create a product with an image",
)
async def create_product(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    in_stock: Optional[str] = Form(None, alias="inStock"),
    image: Optional[UploadFile] = File(None),
    context: RequestContext = Depends(get_request_context),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductData]:
    product = await service.create_product(
        owner_id=context.user_id,
        fields={
            "title": _clean(title),
            "description": _clean(description),
            "category": _clean(category),
            "price": _clean(price),
            "in_stock": _clean(in_stock),
        },
        image=await _read_image(image),
    )
    return ApiResponse[ProductData](
        message="Product created successfully",
        data=ProductData(product=ProductResponse.from_model(product)),
    )


@router.put("/{product_id}", response_model=ApiResponse[ProductData], summary="Update an owned product")
async def update_product(
    product_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    in_stock: Optional[str] = Form(None, alias="inStock"),
    image: Optional[UploadFile] = File(None),
    context: RequestContext = Depends(get_request_context),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductData]:
    product = await service.update_product(
        product_id,
        requester_id=context.user_id,
        patch={
            "title": _clean(title),
            "description": _clean(description),
            "category": _clean(category),
            "price": _clean(price),
            "in_stock": _clean(in_stock),
        },
        new_image=await _read_image(image),
    )
    return ApiResponse[ProductData](
        message="Product updated successfully",
        data=ProductData(product=ProductResponse.from_model(product)),
    )


@router.delete("/{product_id}", response_model=ApiResponse[None], summary="Delete an owned product")
async def delete_product(
    product_id: str,
    context: RequestContext = Depends(get_request_context),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[None]:
    await service.delete_product(product_id, requester_id=context.user_id)
    return ApiResponse[None](message="Product deleted successfully")
