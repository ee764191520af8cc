from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from booking_api.dependencies import get_current_business, get_service_manager
from booking_api.domain.records import ServiceManager
from booking_api.models.service import ServiceCreate, ServicePatch, ServiceRead
from booking_api.models.user import User


router = APIRouter(
    prefix="/services",
    tags=["services"]
)


def _owned_service(service_id: int, services: ServiceManager, current_business: User):
    service = services.get(service_id)

    if service.business_id != current_business.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Service belongs to another business")

    return service


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ServiceRead)
def create_service(
    service: ServiceCreate,
    services: ServiceManager = Depends(get_service_manager),
    current_business: User = Depends(get_current_business),
):
    # ownership comes from the token, never from the body
    return services.create(service, business_id=current_business.id)


@router.get("", response_model=list[ServiceRead])
def list_services(
    business_id: Optional[int] = None,
    services: ServiceManager = Depends(get_service_manager),
):
    if business_id is None:
        return services.get_all()

    return services.get_all(business_id=business_id)


@router.get("/{service_id}", response_model=ServiceRead)
def get_service(service_id: int, services: ServiceManager = Depends(get_service_manager)):
    return services.get(service_id)


@router.put("/{service_id}", response_model=ServiceRead)
def update_service(
    service_id: int,
    patch: ServicePatch,
    services: ServiceManager = Depends(get_service_manager),
    current_business: User = Depends(get_current_business),
):
    _owned_service(service_id, services, current_business)
    return services.update(service_id, patch)


@router.delete("/{service_id}", response_model=ServiceRead)
def delete_service(
    service_id: int,
    services: ServiceManager = Depends(get_service_manager),
    current_business: User = Depends(get_current_business),
):
    _owned_service(service_id, services, current_business)
    return services.delete(service_id)
