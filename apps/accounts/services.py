import logging
from django.contrib.auth.hashers import check_password, make_password
from django.db import transaction, DatabaseError, IntegrityError

from apps.utils.exceptions import AuthError, ConflictError, StorageError
from .models import User

logger = logging.getLogger(__name__)


class AccountService:

    INVALID_CREDENTIALS = "Invalid email or password"
    DUPLICATE_EMAIL = "Email already exists"

    @staticmethod
    def register(email: str, password: str) -> User:
        """
        Create a user with a hashed password. Email must be unique.
        """
        email = User.objects.normalize_email(email)

        try:
            if User.objects.filter(email__iexact=email).exists():
                raise ConflictError(AccountService.DUPLICATE_EMAIL)

            with transaction.atomic():
                user = User.objects.create_user(email=email, password=password)
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same email
            raise ConflictError(AccountService.DUPLICATE_EMAIL) from e
        except DatabaseError as e:
            logger.error(f"Registration failed for {email}: {e}")
            raise StorageError("Could not register user.") from e

        logger.info("User registered", extra={"email": email})
        return user

    @staticmethod
    def authenticate(email: str, password: str) -> User:
        """
        Credential check only. Nothing is written: no last_login update
        and no password hash upgrade.
        """
        email = User.objects.normalize_email(email)

        try:
            user = User.objects.filter(email__iexact=email).first()
        except DatabaseError as e:
            logger.error(f"Login lookup failed for {email}: {e}")
            raise StorageError("Could not verify credentials.") from e

        if user is None:
            # Run the hasher once so timing does not reveal unknown emails
            make_password(password)
            raise AuthError(AccountService.INVALID_CREDENTIALS)

        if not (user.is_active and check_password(password, user.password)):
            raise AuthError(AccountService.INVALID_CREDENTIALS)

        logger.info("Successful login", extra={"email": email})
        return user
