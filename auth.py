"""
authentication providers for the dashboard login flow

the mock provider keeps the demo behavior (one canned account, any 6-digit OTP);
RealAuthProvider is the seam a real identity service plugs into
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
import logging
import uuid

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


class AuthenticationError(ValueError):
    """login or OTP verification failed"""


class UserRole(Enum):
    DOCTOR = "doctor"
    NURSE = "nurse"
    ADMIN = "admin"


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: UserRole

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role.value}


def is_well_formed_otp(code: str) -> bool:
    return bool(code) and len(code) == OTP_LENGTH and code.isdigit()


class AuthProvider(ABC):
    """login / signup / OTP verification"""
    @abstractmethod
    def login(self, email: str, password: str) -> User:
        """return the user or raise AuthenticationError"""

    @abstractmethod
    def signup(self, name: str, email: str, password: str, role: UserRole) -> User:
        ...

    @abstractmethod
    def verify_otp(self, code: str, phone: str) -> bool:
        ...


class MockAuthProvider(AuthProvider):
    """canned demo credentials, no real verification"""
    DEMO_EMAIL = "dr.rajput@example.com"
    DEMO_PASSWORD = "password"

    def __init__(self):
        self.demo_user = User(id="1", name="Dr. Rajput", email=self.DEMO_EMAIL, role=UserRole.DOCTOR)

    def login(self, email: str, password: str) -> User:
        if email == self.DEMO_EMAIL and password == self.DEMO_PASSWORD:
            logger.info("demo login for %s", email)
            return self.demo_user
        logger.warning("rejected login for %s", email)
        raise AuthenticationError(f"Invalid email or password. Try: {self.DEMO_EMAIL} / {self.DEMO_PASSWORD}")

    def signup(self, name: str, email: str, password: str, role: UserRole) -> User:
        if not name or not email or not password:
            raise AuthenticationError("Name, email and password are required")
        return User(id=uuid.uuid4().hex[:9], name=name, email=email, role=role)

    def verify_otp(self, code: str, phone: str) -> bool:
        # any well-formed code is accepted in demo mode
        return is_well_formed_otp(code)


class RealAuthProvider(AuthProvider):
    """placeholder for a real identity backend; every call raises until one is wired in"""
    def login(self, email: str, password: str) -> User:
        raise NotImplementedError("no identity backend configured")

    def signup(self, name: str, email: str, password: str, role: UserRole) -> User:
        raise NotImplementedError("no identity backend configured")

    def verify_otp(self, code: str, phone: str) -> bool:
        raise NotImplementedError("no identity backend configured")


def get_auth_provider(name: str) -> AuthProvider:
    """provider by config name ("mock" or "real")"""
    providers = {"mock": MockAuthProvider, "real": RealAuthProvider}
    if name not in providers:
        raise ValueError(f"Unknown auth provider: {name}")
    return providers[name]()
