from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.errors import (
    AccountNotFoundError,
    DuplicateAccountError,
    InvalidArgumentError,
    TransferErrorKind,
)


TRANSFER_ERROR_STATUS = {
    TransferErrorKind.INVALID_ARGUMENT: 400,
    TransferErrorKind.NOT_FOUND: 404,
    TransferErrorKind.SELF_TRANSFER_NOT_ALLOWED: 400,
    TransferErrorKind.INSUFFICIENT_BALANCE: 409,
    TransferErrorKind.TRANSACTION_FAILURE: 500,
}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AccountNotFoundError)
    async def account_not_found_handler(
        request: Request, exc: AccountNotFoundError
    ) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(DuplicateAccountError)
    async def duplicate_account_handler(
        request: Request, exc: DuplicateAccountError
    ) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(InvalidArgumentError)
    async def invalid_argument_handler(
        request: Request, exc: InvalidArgumentError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})
