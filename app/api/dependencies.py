"""FastAPI dependencies shared by the endpoints."""

from fastapi import HTTPException, Request, status

from app.services.mail_service import MailService


def get_mail_service(request: Request) -> MailService:
    """Return the mail service built at application startup."""
    mail_service = getattr(request.app.state, "mail_service", None)
    if mail_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Mail service is not initialized",
        )
    return mail_service
