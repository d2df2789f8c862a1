from fastapi import APIRouter, Depends

from podcast_api.dependencies import get_account_service, get_current_user
from podcast_api.models import User
from podcast_api.schemas import (
    CoreResponse,
    CreateAccountInput,
    EditProfileInput,
    LoginInput,
    LoginResponse,
    UserProfileResponse,
    UserResponse,
)
from podcast_api.services.account_service import AccountService

router = APIRouter(prefix="/api/v1/users", tags=["users"])

@router.post("", status_code=201, response_model=CoreResponse)
async def create_account(data: CreateAccountInput, accounts: AccountService = Depends(get_account_service)):
    return CoreResponse.model_validate(await accounts.create_account(data))

@router.post("/login", response_model=LoginResponse)
async def login(data: LoginInput, accounts: AccountService = Depends(get_account_service)):
    return LoginResponse.model_validate(await accounts.login(data))

@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    return user

@router.patch("/me", response_model=CoreResponse)
async def edit_profile(
    data: EditProfileInput,
    user: User = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    return CoreResponse.model_validate(await accounts.edit_profile(user.id, data))

@router.get("/{user_id}", response_model=UserProfileResponse)
async def user_profile(user_id: int, accounts: AccountService = Depends(get_account_service)):
    return UserProfileResponse.model_validate(await accounts.find_by_id(user_id))
