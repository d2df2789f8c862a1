"""
Account service: registration, login and profile edits for the User
aggregate.

Every public method returns a result object (see ``schemas.CoreOutput``)
and never raises.  Unexpected store failures are logged and reported with
an operation-specific message, with one exception: ``login`` hands the
raw exception back in ``error`` rather than a fixed string.

Email uniqueness is a check-then-act sequence (lookup, then save) with no
lock around it; two concurrent registrations for the same address can
both pass the check, and the unique constraint on ``users.email`` is the
final guard.
"""
import logging

from podcast_api.models import User
from podcast_api.schemas import (
    CoreOutput,
    CreateAccountInput,
    EditProfileInput,
    LoginInput,
    LoginOutput,
    UserProfileOutput,
)
from podcast_api.security import JwtService
from podcast_api.stores import Store

logger = logging.getLogger(__name__)

USER_EXISTS = "There is a user with that email already"
USER_NOT_FOUND = "User not found"
WRONG_PASSWORD = "Wrong password"
EMAIL_IN_USE = "Email already in use"
CREATE_ACCOUNT_FAILED = "Could not create account"
UPDATE_PROFILE_FAILED = "Could not update profile"


class AccountService:
    def __init__(self, users: Store[User], jwt: JwtService) -> None:
        self.users = users
        self.jwt = jwt

    async def create_account(self, data: CreateAccountInput) -> CoreOutput:
        try:
            exists = await self.users.find_one({"email": data.email})
            if exists:
                return CoreOutput(ok=False, error=USER_EXISTS)
            # Password hashing happens in the User before_insert hook.
            user = self.users.create(email=data.email, password=data.password, role=data.role)
            await self.users.save(user)
            logger.info("Created %s account for %s", data.role.value, data.email)
            return CoreOutput(ok=True)
        except Exception:
            logger.exception("Account creation failed for %s", data.email)
            return CoreOutput(ok=False, error=CREATE_ACCOUNT_FAILED)

    async def login(self, data: LoginInput) -> LoginOutput:
        try:
            user = await self.users.find_one({"email": data.email}, load=("password",))
            if not user:
                return LoginOutput(ok=False, error=USER_NOT_FOUND)
            if not await user.check_password(data.password):
                return LoginOutput(ok=False, error=WRONG_PASSWORD)
            return LoginOutput(ok=True, token=self.jwt.sign(user.id))
        except Exception as exc:
            # TODO: return a fixed message like the other methods once the
            # HTTP layer stops stringifying the exception itself.
            logger.exception("Login failed for %s", data.email)
            return LoginOutput(ok=False, error=exc)

    async def find_by_id(self, user_id: int) -> UserProfileOutput:
        try:
            user = await self.users.find_one_or_fail({"id": user_id})
            return UserProfileOutput(ok=True, user=user)
        except Exception:
            return UserProfileOutput(ok=False, error=USER_NOT_FOUND)

    async def edit_profile(self, user_id: int, data: EditProfileInput) -> CoreOutput:
        """
        Change the email and/or password of *user_id*.

        The loaded user is saved whole, with only the supplied fields
        replaced.  Re-submitting the user's own current email is allowed.
        """
        try:
            user = await self.users.find_one({"id": user_id})
            if data.email is not None:
                owner = await self.users.find_one({"email": data.email})
                if owner and owner.id != user.id:
                    return CoreOutput(ok=False, error=EMAIL_IN_USE)
                user.email = data.email
            if data.password is not None:
                # Re-hashed by the User before_update hook.
                user.password = data.password
            await self.users.save(user)
            return CoreOutput(ok=True)
        except Exception:
            logger.exception("Profile update failed for user %s", user_id)
            return CoreOutput(ok=False, error=UPDATE_PROFILE_FAILED)
