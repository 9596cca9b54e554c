# bolerie/crud/base.py

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from pydantic import BaseModel
from sqlalchemy.orm import Session
from ..database import Base

# Define tipos genéricos para o nosso Modelo SQLAlchemy e Schemas Pydantic
ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Classe base para operações CRUD de entidades que pertencem a uma filial.

    Toda consulta recebe o `branch_id` explicitamente: um registro de outra
    filial é tratado como inexistente.
    """
    # Nome da coluna de exclusão lógica ("is_active", "active") ou None para exclusão física
    soft_delete_field: Optional[str] = "is_active"
    order_by: Optional[str] = None

    def __init__(self, model: Type[ModelType]):
        """
        :param model: A classe do modelo SQLAlchemy (ex: models.Customer)
        """
        self.model = model

    def _query(self, db: Session, branch_id: int):
        query = db.query(self.model).filter(self.model.branch_id == branch_id)
        if self.soft_delete_field:
            query = query.filter(getattr(self.model, self.soft_delete_field).is_(True))
        return query

    def get(self, db: Session, id: Any, *, branch_id: int) -> Optional[ModelType]:
        """Busca um único objeto ativo pelo seu ID, dentro da filial."""
        return self._query(db, branch_id).filter(self.model.id == id).first()

    def get_multi(
        self, db: Session, *, branch_id: int, skip: int = 0, limit: Optional[int] = 100
    ) -> List[ModelType]:
        """Busca múltiplos objetos da filial com paginação."""
        query = self._query(db, branch_id)
        if self.order_by:
            query = query.order_by(getattr(self.model, self.order_by))
        else:
            query = query.order_by(self.model.id)
        return query.offset(skip).limit(limit).all()

    def create(self, db: Session, *, obj_in: CreateSchemaType, branch_id: int) -> ModelType:
        obj_in_data = obj_in.model_dump()
        db_obj = self.model(**obj_in_data, branch_id=branch_id)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """Atualiza apenas os campos enviados."""
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if field in ("id", "branch_id"):
                continue
            setattr(db_obj, field, value)

        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, db_obj: ModelType) -> ModelType:
        """Exclui o objeto: lógica (desativa) ou física, conforme a entidade."""
        if self.soft_delete_field:
            setattr(db_obj, self.soft_delete_field, False)
            db.add(db_obj)
        else:
            db.delete(db_obj)
        db.commit()
        return db_obj
