from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from podcast_api.config import settings
from podcast_api.database import get_db
from podcast_api.models import Episode, Podcast, User, UserRole
from podcast_api.security import JwtService
from podcast_api.services.account_service import AccountService
from podcast_api.services.catalog_service import CatalogService
from podcast_api.stores import Store

security = HTTPBearer(auto_error=False)


def get_jwt_service() -> JwtService:
    return JwtService(settings.SECRET_KEY, settings.JWT_ALGORITHM)


def get_account_service(
    db: AsyncSession = Depends(get_db),
    jwt: JwtService = Depends(get_jwt_service),
) -> AccountService:
    return AccountService(Store(db, User), jwt)


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(Store(db, Podcast), Store(db, Episode))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    jwt: JwtService = Depends(get_jwt_service),
    accounts: AccountService = Depends(get_account_service),
) -> User:
    """
    Resolve the bearer token to a User.

    Missing, malformed or expired tokens, and tokens whose subject no
    longer exists, all yield 401.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception
    try:
        payload = jwt.verify(credentials.credentials)
    except JWTError:
        raise credentials_exception
    user_id = payload.get("id")
    if not isinstance(user_id, int):
        raise credentials_exception

    result = await accounts.find_by_id(user_id)
    if not result.ok:
        raise credentials_exception
    return result.user


async def require_host(user: User = Depends(get_current_user)) -> User:
    """Allow only Host and Admin accounts to modify the catalog."""
    if user.role not in (UserRole.Host, UserRole.Admin):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Host role required")
    return user
