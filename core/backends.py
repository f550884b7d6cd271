"""
Authentication backend that logs marketplace users in by email address.
"""

from django.contrib.auth.backends import ModelBackend
from django.contrib.auth import get_user_model

User = get_user_model()


class EmailBackend(ModelBackend):
    """
    Authenticate tenants, owners and admins by email and password.

    Emails are stored lowercased by User.save(), so lookups normalise the
    submitted address the same way. Inactive accounts are refused through
    ModelBackend.user_can_authenticate().
    """

    def authenticate(self, request, username=None, password=None, **kwargs):
        """
        Args:
            request: HTTP request object
            username: Email address (simplejwt passes the USERNAME_FIELD here)
            password: User password
            **kwargs: May carry 'email' when called directly

        Returns:
            User object if authentication successful, None otherwise
        """
        email = kwargs.get('email', username)

        if not email or password is None:
            return None

        try:
            user = User.objects.get(email=email.strip().lower())
        except User.DoesNotExist:
            # Run the default password hasher once to reduce the timing
            # difference between an existing and a nonexistent user
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
