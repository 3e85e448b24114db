"""/v1/applications - card origination workflow endpoints"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from origination_gateway.api.dependencies import get_origination_service
from origination_gateway.api.v1.schemas import (
    ActivateCardRequest,
    CheckCreditRequest,
    MakeDecisionRequest,
    SubmitApplicationRequest,
    VerifyIdentityRequest,
)
from origination_gateway.services.origination import OriginationService

router = APIRouter()

ERROR_STATUS_CODES = {
    "not_found": 404,
    "invalid_state": 409,
    "already_activated": 409,
    "concurrent_modification": 409,
    "invalid_request": 422,
    "internal_error": 500,
}


def to_response(envelope: Dict[str, Any], success_status: int = 200) -> JSONResponse:
    """Map the service envelope onto an HTTP status without altering the body"""
    if envelope["success"]:
        status_code = success_status
    else:
        status_code = ERROR_STATUS_CODES.get(envelope.get("errorCode"), 400)
    return JSONResponse(status_code=status_code, content=envelope)


@router.post("/applications", status_code=201)
def submit_application(
    request_body: SubmitApplicationRequest,
    service: OriginationService = Depends(get_origination_service),
):
    """Submit a new credit card application. First step of the origination process."""
    return to_response(service.submit_application(request_body.to_intake()), success_status=201)


@router.post("/applications/{application_id}/identity-verification")
def verify_identity(
    application_id: str,
    request_body: VerifyIdentityRequest,
    service: OriginationService = Depends(get_origination_service),
):
    """Verify government ID, SSN and address (KYC)"""
    return to_response(
        service.verify_identity(
            application_id,
            government_id_type=request_body.government_id_type,
            government_id_number=request_body.government_id_number,
            verification_method=request_body.verification_method,
        )
    )


@router.post("/applications/{application_id}/credit-check")
def check_credit(
    application_id: str,
    request_body: Optional[CheckCreditRequest] = Body(None),
    service: OriginationService = Depends(get_origination_service),
):
    """Pull credit score and history summary"""
    bureaus = request_body.bureaus if request_body else None
    return to_response(service.check_credit(application_id, bureaus=bureaus))


@router.post("/applications/{application_id}/risk-assessment")
def assess_risk(
    application_id: str,
    service: OriginationService = Depends(get_origination_service),
):
    """Score the application from credit profile, income and employment"""
    return to_response(service.assess_risk(application_id))


@router.post("/applications/{application_id}/decision")
def make_decision(
    application_id: str,
    request_body: Optional[MakeDecisionRequest] = Body(None),
    service: OriginationService = Depends(get_origination_service),
):
    """Approve or deny; approved applications receive card terms"""
    request_body = request_body or MakeDecisionRequest()
    return to_response(
        service.make_decision(
            application_id,
            override_decision=request_body.override_decision,
            manual_review_notes=request_body.manual_review_notes,
        )
    )


@router.post("/applications/{application_id}/activation")
def activate_card(
    application_id: str,
    request_body: Optional[ActivateCardRequest] = Body(None),
    service: OriginationService = Depends(get_origination_service),
):
    """Issue and activate the card for an approved application"""
    request_body = request_body or ActivateCardRequest()
    address = request_body.card_delivery_address
    return to_response(
        service.activate_card(
            application_id,
            card_delivery_address=address.model_dump() if address else None,
            requested_pin=request_body.requested_pin,
        )
    )


@router.get("/applications/{application_id}")
def get_application_status(
    application_id: str,
    include_full_details: bool = Query(False, alias="includeFullDetails"),
    service: OriginationService = Depends(get_origination_service),
):
    """Current status, progress flags and next step; full artifact detail on request"""
    return to_response(service.get_application_status(application_id, include_full_details=include_full_details))
