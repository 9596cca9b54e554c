from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
from typing import List

from . import models, schemas, database, crud
from .models import UserRole
from .core.config import settings
from .security import verify_password

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

# Define o "esquema" de autenticação
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/token")


def create_access_token(data: dict, expires_delta: timedelta | None = None):
    """Cria um novo token JWT."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=15)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def authenticate_user(db: Session, email: str, password: str) -> models.User | None:
    user = crud.user.get_by_email(db, email=email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user

# --- Dependências (Dependencies) ---


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(database.get_db)):
    """
    Dependência para validar o token e retornar o usuário atual.
    Usaremos isso para proteger endpoints.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email: str = payload.get("sub")
        if email is None:
            raise credentials_exception
        token_data = schemas.TokenData(email=email)
    except JWTError:
        raise credentials_exception

    user = crud.user.get_by_email(db, email=token_data.email)

    if user is None or not user.is_active:
        raise credentials_exception
    return user


def require_role(required_roles: List[UserRole]):
    """
    Uma fábrica de dependências que cria uma dependência que requer que o
    utilizador tenha um dos 'roles' especificados.
    """
    def role_checker(current_user: models.User = Depends(get_current_user)):
        if current_user.role not in required_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User does not have the required privileges. Allowed roles: {[role.value for role in required_roles]}"
            )
        return current_user
    return role_checker


# Dependências específicas e reutilizáveis
require_owner_user = require_role([UserRole.OWNER])
require_admin_or_owner = require_role([UserRole.ADMIN, UserRole.OWNER])


def user_can_access_branch(user: models.User, branch_id: int) -> bool:
    """Donos enxergam todas as filiais; os demais apenas as associadas."""
    return user.role == UserRole.OWNER or branch_id in user.branch_ids


def get_accessible_branch(
    branch_id: int,
    db: Session = Depends(database.get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Branch:
    """
    Carrega a filial do caminho da URL (`/branches/{branch_id}/...`) e
    verifica se o usuário atual tem acesso a ela.
    """
    branch = crud.branch.get(db, branch_id)
    if branch is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Branch not found")
    if not user_can_access_branch(current_user, branch.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User does not have access to this branch"
        )
    return branch
