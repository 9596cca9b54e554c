# bolerie/services/result.py

import enum
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class FailureKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    CONSTRAINT = "constraint"
    VALIDATION = "validation"


@dataclass
class ServiceResult(Generic[T]):
    """
    Resultado de uma operação de serviço: ou sucesso com um valor,
    ou falha com o tipo e o motivo. Substitui a mistura de exceções,
    retornos booleanos e listas vazias.
    """
    ok: bool
    value: Optional[T] = None
    kind: Optional[FailureKind] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "ServiceResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: FailureKind, reason: str) -> "ServiceResult[T]":
        return cls(ok=False, kind=kind, reason=reason)

    @classmethod
    def not_found(cls, reason: str) -> "ServiceResult[T]":
        return cls.failure(FailureKind.NOT_FOUND, reason)

    @classmethod
    def constraint(cls, reason: str) -> "ServiceResult[T]":
        return cls.failure(FailureKind.CONSTRAINT, reason)

    @classmethod
    def invalid(cls, reason: str) -> "ServiceResult[T]":
        return cls.failure(FailureKind.VALIDATION, reason)
