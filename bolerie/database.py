from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from dotenv import load_dotenv

# Carrega as variáveis de ambiente do arquivo .env antes de ler as settings
load_dotenv()

from .core.config import settings  # noqa: E402

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# Cria o "motor" (engine) do SQLAlchemy
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)

# Fábrica de sessões: uma sessão por pedido (request) à API
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Classe Base para nossos modelos (ORM)
Base = declarative_base()
