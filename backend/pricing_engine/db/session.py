from sqlmodel import SQLModel, create_engine
from pricing_engine.core.config import settings

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO, connect_args=connect_args)


def create_tables():
    """Создание всех таблиц"""
    # Модели должны быть зарегистрированы в metadata до create_all
    import pricing_engine.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
