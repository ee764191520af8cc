from typing import Optional

from fastapi import APIRouter, Depends, status

from booking_api.dependencies import get_invoice_manager
from booking_api.domain.records import InvoiceManager
from booking_api.models.invoice import InvoiceCreate, InvoicePatch, InvoiceRead


router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=InvoiceRead)
def create_invoice(
    invoice: InvoiceCreate,
    invoices: InvoiceManager = Depends(get_invoice_manager),
):
    return invoices.create(invoice)


@router.get("", response_model=list[InvoiceRead])
def list_invoices(
    appointment_id: Optional[int] = None,
    invoices: InvoiceManager = Depends(get_invoice_manager),
):
    if appointment_id is None:
        return invoices.get_all()

    return invoices.get_all(appointment_id=appointment_id)


@router.get("/{invoice_id}", response_model=InvoiceRead)
def get_invoice(invoice_id: int, invoices: InvoiceManager = Depends(get_invoice_manager)):
    return invoices.get(invoice_id)


# status is recomputed from remaining_balance on every update
@router.put("/{invoice_id}", response_model=InvoiceRead)
def update_invoice(
    invoice_id: int,
    patch: InvoicePatch,
    invoices: InvoiceManager = Depends(get_invoice_manager),
):
    return invoices.update(invoice_id, patch)


@router.delete("/{invoice_id}", response_model=InvoiceRead)
def delete_invoice(invoice_id: int, invoices: InvoiceManager = Depends(get_invoice_manager)):
    return invoices.delete(invoice_id)
