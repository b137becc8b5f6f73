import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from errors import DuplicateEmail
from models import User

logger = logging.getLogger(__name__)


class UserStore:
    """Credential store: user identities keyed by a unique email."""

    def __init__(self, session):
        self.session = session

    def find_by_email(self, email):
        return self.session.execute(select(User).filter_by(email=email)).scalar_one_or_none()

    def find_by_id(self, user_id):
        return self.session.get(User, user_id)

    def create(self, email, password_hash):
        # Fast path only; the unique constraint on user.email is what actually decides.
        if self.find_by_email(email) is not None:
            raise DuplicateEmail(f"email already registered: {email}")

        user = User(email=email, password=password_hash)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise DuplicateEmail(f"email already registered: {email}") from None

        logger.debug("Inserted user row %s", user.id)
        return user

    def delete_by_id(self, user_id, commit=True):
        result = self.session.execute(delete(User).where(User.id == user_id))
        if commit:
            self.session.commit()
        return result.rowcount > 0
