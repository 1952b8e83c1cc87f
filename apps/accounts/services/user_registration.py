"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.ledger.services.account_store import open_account

from .exceptions import UserRegistrationError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    community_id: str,
    display_name: str = "",
    profile_image_url: str = "",
) -> User:
    """
    Register a new member and open their points account.

    The user row and the zero-balance ledger account are created in the
    same transaction, so a registered user always has an account.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        community_id: Community the member joins
        display_name: Optional display name
        profile_image_url: Optional avatar URL

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken
        NotFoundError: If the community does not exist
    """
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("A user with this email already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name,
            profile_image_url=profile_image_url,
        )
    except IntegrityError:
        raise UserRegistrationError("A user with this email already exists")

    open_account(user=user, community_id=community_id)

    logger.info("Registered user %s in community %s", user.id, community_id)
    return user
