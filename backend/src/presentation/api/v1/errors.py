"""Translate failed operation results into HTTP errors."""

from fastapi import HTTPException, status

from application.results import INTERNAL_ERROR, OperationResult

STATUS_BY_CODE = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "missing_required_field": status.HTTP_400_BAD_REQUEST,
    "disclosure_not_acknowledged": status.HTTP_400_BAD_REQUEST,
    "authorization_error": status.HTTP_403_FORBIDDEN,
    "role_not_authorized": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def unwrap(result: OperationResult):
    """Return the payload of a successful result or raise the matching HTTPException."""
    if result.success:
        return result.data

    raise HTTPException(
        status_code=STATUS_BY_CODE.get(result.error_code, status.HTTP_409_CONFLICT),
        detail={"error": result.error, "error_code": result.error_code},
    )
