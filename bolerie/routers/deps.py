# bolerie/routers/deps.py

from fastapi import HTTPException, status

from ..services.result import FailureKind, ServiceResult

FAILURE_STATUS = {
    FailureKind.NOT_FOUND: 404,
    FailureKind.CONSTRAINT: 409,
    FailureKind.VALIDATION: 422,
}


def unwrap(result: ServiceResult):
    """Devolve o valor de um resultado de sucesso ou levanta o HTTPException correspondente."""
    if result.ok:
        return result.value
    raise HTTPException(status_code=FAILURE_STATUS[result.kind], detail=result.reason)


def not_found(entity: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found")
