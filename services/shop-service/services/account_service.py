"""User account service."""
import logging
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError
from opentelemetry import trace

from auth import issue_token
from errors import DuplicateEmail, InvalidCredentials
from models import User, USERS
from monitoring import signups_counter, auth_attempts_counter, auth_failures_counter
from security import hash_password, verify_password, is_hashed

logger = logging.getLogger(__name__)


class AccountService:
    """Service for user registration and login."""

    def __init__(self, db: Database):
        """
        Initialize account service.

        Args:
            db: Database handle
        """
        self.users = db[USERS]
        self.tracer = trace.get_tracer(__name__)

    def signup(self, name: str, email: str, password: str) -> str:
        """
        Register a user with an empty cart.

        Returns:
            Token for the new user

        Raises:
            DuplicateEmail: If a user with the same email exists
        """
        with self.tracer.start_as_current_span("db.query.find_user") as db_span:
            db_span.set_attribute("db.operation", "SELECT")
            db_span.set_attribute("db.collection", USERS)

            existing = self.users.find_one({"email": email}, {"_id": 1})

        if existing:
            signups_counter.add(1, {"outcome": "duplicate_email"})
            logger.info("Signup rejected: email already registered")
            raise DuplicateEmail()

        user = User(name=name, email=email, password=hash_password(password))

        with self.tracer.start_as_current_span("db.query.insert_user") as db_span:
            db_span.set_attribute("db.operation", "INSERT")
            db_span.set_attribute("db.collection", USERS)

            try:
                result = self.users.insert_one(user.model_dump())
            except DuplicateKeyError:
                # Lost a race with a concurrent signup for the same email
                signups_counter.add(1, {"outcome": "duplicate_email"})
                raise DuplicateEmail()

        user_id = str(result.inserted_id)
        signups_counter.add(1, {"outcome": "created"})
        logger.info("User signed up", extra={"user_id": user_id})
        return issue_token(user_id)

    def login(self, email: str, password: str) -> str:
        """
        Check credentials and issue a token.

        Returns:
            Token for the user

        Raises:
            InvalidCredentials: If the email is unknown or the password is wrong
        """
        auth_attempts_counter.add(1, {"type": "login"})

        with self.tracer.start_as_current_span("db.query.find_user") as db_span:
            db_span.set_attribute("db.operation", "SELECT")
            db_span.set_attribute("db.collection", USERS)

            user = self.users.find_one({"email": email}, {"_id": 1, "password": 1})

        if user is None or not verify_password(password, user.get("password")):
            auth_failures_counter.add(1, {"reason": "invalid_credentials"})
            logger.warning("Login failed: Invalid email or password")
            raise InvalidCredentials()

        user_id = str(user["_id"])
        if not is_hashed(user["password"]):
            self.users.update_one(
                {"_id": user["_id"]},
                {"$set": {"password": hash_password(password)}}
            )
            logger.info("Upgraded plaintext password to hash", extra={"user_id": user_id})

        logger.info("User logged in", extra={"user_id": user_id})
        return issue_token(user_id)
