"""Administrative mailer check: sends the Hello email to the calling admin."""

from fastapi import APIRouter, status

from warden.adapters.api.v1.schemas import MessageOut
from warden.core.dependencies.auth import AdminUser
from warden.core.dependencies.services import MailerDep

router = APIRouter(prefix="/mailer", tags=["mailer"])


@router.get("", response_model=MessageOut, status_code=status.HTTP_202_ACCEPTED)
async def send_hello(admin: AdminUser, mailer: MailerDep):
    await mailer.send_hello(admin)
    return MessageOut(message="email sent")


__all__ = ["router"]
