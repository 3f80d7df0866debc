from fastapi import APIRouter, Depends, Request
from app.config import settings
from app.core.rate_limit import limiter
from app.modules.contact.schemas import ContactRequest, ContactResponse
from app.modules.contact.service import ContactService

router = APIRouter(prefix="/contact", tags=["contact"])


def get_contact_service() -> ContactService:
    return ContactService()


@router.post("", response_model=ContactResponse, status_code=200)
@limiter.limit(lambda: settings.contact_rate_limit)
async def submit_contact(
    request: Request,
    contact: ContactRequest,
    service: ContactService = Depends(get_contact_service)
):
    """Send the contact form to the site administrator"""
    return service.submit(contact)
