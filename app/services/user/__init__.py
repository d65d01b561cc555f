"""
User service module.

Structure:
- core.py: user retrieval and status management
- registration.py: registration with referral support

Usage:
    from app.services.user import UserService

    user_service = UserService(session)
    user = await user_service.register_user("Asha", email, phone, parent_id="SA12345")
    await user_service.update_user_status(user.user_id, "active")
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.services.user.core import UserServiceCore
from app.services.user.registration import UserRegistrationMixin


class UserService(UserServiceCore, UserRegistrationMixin):
    """
    Combined user service.

    Inherits from all user service mixins to provide complete functionality.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize user service with all mixins.

        Args:
            session: Database session
        """
        UserServiceCore.__init__(self, session)
        UserRegistrationMixin.__init__(self, session)


__all__ = ["UserService", "UserServiceCore", "UserRegistrationMixin"]
