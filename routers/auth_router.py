from fastapi import APIRouter, Depends, status

from infrastructure.context import RequestContext
from routers.dependencies import get_auth_service, get_request_context
from schemas import (
    ApiResponse,
    AuthData,
    CurrentUserData,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from services.auth import AuthService

router = APIRouter(prefix="/auth")


@router.post(
    "/register",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
    summary="Register a shop owner",
)
async def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> ApiResponse[AuthData]:
    result = await service.register(
        username=payload.username,
        email=str(payload.email),
        password=payload.password,
        shop_name=payload.shop_name,
    )
    return ApiResponse[AuthData](
        message="User registered successfully",
        data=AuthData(user=UserResponse.from_model(result.user), token=result.token),
    )


@router.post("/login", response_model=ApiResponse[AuthData], summary="Log in with email and password")
async def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> ApiResponse[AuthData]:
    result = await service.login(email=payload.email, password=payload.password)
    return ApiResponse[AuthData](
        message="Login successful",
        data=AuthData(user=UserResponse.from_model(result.user), token=result.token),
    )


@router.get("/me", response_model=ApiResponse[CurrentUserData], summary="Current session user")
async def me(context: RequestContext = Depends(get_request_context)) -> ApiResponse[CurrentUserData]:
    return ApiResponse[CurrentUserData](data=CurrentUserData(user=UserResponse.from_model(context.user)))
