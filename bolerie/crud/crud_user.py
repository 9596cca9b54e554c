# bolerie/crud/crud_user.py

from sqlalchemy.orm import Session
from typing import List, Optional

from ..models import Branch, User, UserRole
from ..schemas import UserCreate
from ..security import get_password_hash


class CRUDUser:
    def get(self, db: Session, id: int) -> Optional[User]:
        return db.query(User).filter(User.id == id, User.is_active.is_(True)).first()

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        """Busca um usuário pelo seu email, que é um campo único."""
        return db.query(User).filter(User.email == email).first()

    def get_multi(self, db: Session) -> List[User]:
        return db.query(User).filter(User.is_active.is_(True)).order_by(User.name).all()

    def count(self, db: Session) -> int:
        return db.query(User).count()

    def create(self, db: Session, *, obj_in: UserCreate) -> User:
        """
        Cria o usuário fazendo o hash da senha e associando as filiais informadas.
        """
        # A senha nunca é salva em texto plano
        user_data = obj_in.model_dump(exclude={"password", "branch_ids"})
        db_obj = User(
            **user_data,
            hashed_password=get_password_hash(obj_in.password)
        )
        if obj_in.branch_ids:
            db_obj.branches = db.query(Branch).filter(Branch.id.in_(obj_in.branch_ids)).all()

        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, *, db_obj: User, obj_in) -> User:
        for field, value in obj_in.model_dump(exclude_unset=True).items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_users_by_branch(self, db: Session, *, branch_id: int) -> List[User]:
        """Usuários associados à filial mais todos os donos, sem repetição."""
        assigned = db.query(User).filter(
            User.is_active.is_(True),
            User.branches.any(Branch.id == branch_id),
        ).all()
        owners = db.query(User).filter(
            User.is_active.is_(True),
            User.role == UserRole.OWNER,
        ).all()
        users = {user.id: user for user in assigned + owners}
        return sorted(users.values(), key=lambda user: user.id)

    def add_user_to_branch(self, db: Session, *, db_obj: User, branch: Branch) -> User:
        if branch not in db_obj.branches:
            db_obj.branches.append(branch)
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, db_obj: User) -> User:
        db_obj.is_active = False
        db.add(db_obj)
        db.commit()
        return db_obj


# Instância única usada em toda a aplicação (crud.user.get_by_email(...))
user = CRUDUser()
