from functools import lru_cache

from dotenv import load_dotenv
from fastapi import BackgroundTasks, Depends, HTTPException

from adapter.mongodb.connection import get_mongodb_client
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.queue.background_mailer import BackgroundMailer
from adapter.smtp.mailer import SmtpMailer
from port.mailer import MailerPort
from port.user_repository import UserRepository
from services.password_hasher import PasswordHasher
from services.token_service import TokenService
from utils.settings import Settings, load_settings


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    load_dotenv()
    return load_settings()


def _get_db(settings: Settings):
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client(settings.mongo_url)
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[settings.database_name]


def get_user_repo(settings: Settings = Depends(get_settings)) -> UserRepository:
    return MongoUserRepository(_get_db(settings))


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService(settings.jwt_secret_key, settings.jwt_algorithm)


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


def get_mailer(
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
) -> MailerPort:
    """Mailer whose sends run after the response has been returned."""
    return BackgroundMailer(SmtpMailer(settings), background_tasks.add_task)
