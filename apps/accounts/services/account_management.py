"""Account management service."""

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.ledger.services.account_store import change_community, deactivate_account

from .exceptions import PasswordConfirmationError

User = get_user_model()


@transaction.atomic
def update_profile(*, user: User, display_name=None, profile_image_url=None, community_id=None) -> User:
    """
    Update profile fields and, optionally, move the member to another community.

    Only the arguments that are not None are applied.
    """
    update_fields = []
    if display_name is not None:
        user.display_name = display_name
        update_fields.append('display_name')
    if profile_image_url is not None:
        user.profile_image_url = profile_image_url
        update_fields.append('profile_image_url')
    if update_fields:
        user.save(update_fields=update_fields)

    if community_id is not None:
        change_community(user=user, community_id=community_id)

    return user


@transaction.atomic
def deactivate_user_account(*, user: User, password: str) -> None:
    """
    Deactivate a member. Ledger history is kept; the balance is frozen.

    Args:
        user: The member deactivating their account
        password: User's password for confirmation

    Raises:
        PasswordConfirmationError: If password is incorrect
    """
    user = (
        User.objects
        .select_for_update()
        .get(id=user.id)
    )

    if not user.check_password(password):
        raise PasswordConfirmationError("Invalid password")

    deactivate_account(user=user)
