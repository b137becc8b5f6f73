import logging

from errors import InvalidCredentials
from passwords import hash_password, verify_password
from schemas import Credentials, RegisterRequest, parse

logger = logging.getLogger(__name__)


def _supplied(**fields):
    # A missing field should read "Field required", not "not a string".
    return {name: value for name, value in fields.items() if value is not None}


class AccountService:
    """Register, log in and delete accounts."""

    def __init__(self, users, tasks, codec):
        self.users = users
        self.tasks = tasks
        self.codec = codec

    def register(self, email, password):
        data = parse(RegisterRequest, _supplied(email=email, password=password))
        user = self.users.create(data.email, hash_password(data.password))
        logger.info("Registered user %s", user.id)
        return user, self.codec.issue(user)

    def login(self, email, password):
        data = parse(Credentials, _supplied(email=email, password=password))
        user = self.users.find_by_email(data.email)
        if user is None:
            logger.info("Login failed: unknown email")
            raise InvalidCredentials("unknown email")
        if not verify_password(data.password, user.password):
            logger.info("Login failed for user %s: wrong password", user.id)
            raise InvalidCredentials("wrong password")
        logger.info("User %s logged in", user.id)
        return user, self.codec.issue(user)

    def delete_account(self, owner_id):
        """Delete the owner's tasks and then the owner, in one transaction."""
        session = self.users.session
        try:
            removed = self.tasks.delete_all_for_owner(owner_id, commit=False)
            existed = self.users.delete_by_id(owner_id, commit=False)
            session.commit()
        except Exception:
            session.rollback()
            raise
        logger.info("Deleted account %s (%d tasks)", owner_id, removed)
        return existed
