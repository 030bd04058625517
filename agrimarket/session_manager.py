# agrimarket/session_manager.py

from typing import Optional
from passlib.context import CryptContext
from pydantic import ValidationError as ModelValidationError
from .config import Settings, settings as default_settings
from .errors import ValidationError
from .models import User
from .repository import Repository
from .storage import EntityStore, CURRENT_USER

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

ADMIN_ID = "admin-1"
REQUIRED_USER_FIELDS = ("email", "role", "name")
# Caller-supplied fields a new user keeps
REGISTRATION_FIELDS = ("email", "role", "name", "phone", "aadhaar", "location")


class SessionManager:
    """Handles login, registration and the persisted current-user session.

    The password check is a stub: unless `verify_passwords` is enabled, login
    matches on email and role only and the password is ignored.
    """

    def __init__(self, store: EntityStore, users: Repository[User], config: Settings = default_settings):
        self.store = store
        self.users = users
        self.config = config
        self.current_user: Optional[User] = self._rehydrate()

    def _rehydrate(self) -> Optional[User]:
        data = self.store.load_record(CURRENT_USER)
        if not data:
            return None
        try:
            user = User.model_validate(data)
        except ModelValidationError:
            print("---SESSION MANAGER: Stored session is unreadable, starting logged out---")
            return None
        print(f"---SESSION MANAGER: Restored session for '{user.email}'---")
        return user

    def _start_session(self, user: User) -> User:
        self.current_user = user
        self.store.save_record(CURRENT_USER, user.to_record(exclude={"hashed_password"}))
        return user

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def has_role(self, role: str) -> bool:
        return self.current_user is not None and self.current_user.role == role

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    def get_password_hash(self, password: str) -> str:
        return pwd_context.hash(password)

    def _credentials_ok(self, user: User, password: str) -> bool:
        if not self.config.verify_passwords:
            return True
        return bool(user.hashed_password) and self.verify_password(password, user.hashed_password)

    def login(self, email: str, password: str, role: str) -> Optional[User]:
        if role == "admin" and email == self.config.admin_email and password == self.config.admin_password:
            admin = User(id=ADMIN_ID, email=email, role="admin", name="Admin")
            print("---SESSION MANAGER: Admin logged in---")
            return self._start_session(admin)

        user = self.users.find_first(lambda u: u.email == email and u.role == role)
        if user and self._credentials_ok(user, password):
            print(f"---SESSION MANAGER: '{email}' logged in as {role}---")
            return self._start_session(user)

        print(f"---SESSION MANAGER: Login failed for '{email}' as {role}---")
        return None

    def register(self, user_data: dict) -> User:
        missing = [f for f in REQUIRED_USER_FIELDS if not user_data.get(f)]
        if missing:
            raise ValidationError.missing(missing)

        data = {k: v for k, v in self.users.field_names(user_data).items() if k in REGISTRATION_FIELDS}
        password = user_data.get("password")
        if password:
            data["hashed_password"] = self.get_password_hash(password)

        try:
            new_user = User(**data)
        except ModelValidationError as e:
            fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise ValidationError(f"Invalid registration details: {', '.join(fields)}", fields) from e

        self.users.insert(new_user)
        print(f"---SESSION MANAGER: Registered {new_user.role} '{new_user.email}'---")
        return self._start_session(new_user)

    def logout(self):
        self.current_user = None
        self.store.remove(CURRENT_USER)
        print("---SESSION MANAGER: Logged out---")
