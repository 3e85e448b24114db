"""Identity verification (KYC) stage"""

from datetime import datetime
from origination_gateway.domain.models import (
    Application,
    ApplicationStatus,
    IdentityVerification,
    VerificationChecks,
)
from origination_gateway.domain.lifecycle import advance, require

# Verdict threshold: roughly a 70% pass rate on a uniform score
PASS_THRESHOLD = 30.0

DOCUMENT_AUTHENTICITY_THRESHOLD = 40.0
FACE_MATCH_THRESHOLD = 35.0
SSN_MATCH_THRESHOLD = 30.0
ADDRESS_VERIFICATION_THRESHOLD = 25.0


def derive_checks(score: float) -> VerificationChecks:
    """Each sub-check passes independently when the score clears its own threshold"""
    return VerificationChecks(
        document_authenticity=score > DOCUMENT_AUTHENTICITY_THRESHOLD,
        face_match=score > FACE_MATCH_THRESHOLD,
        ssn_match=score > SSN_MATCH_THRESHOLD,
        address_verification=score > ADDRESS_VERIFICATION_THRESHOLD,
    )


def verify_identity(
    application: Application,
    government_id_type: str,
    verification_method: str,
    score: float,
    now: datetime,
) -> IdentityVerification:
    """
    Record an identity verification attempt on the application.

    The artifact is attached whether or not the applicant passes so failed
    attempts stay auditable. A failure moves the application to the terminal
    identity_verification_failed status; the flag is only set on a pass.
    """
    require(
        application,
        application.status == ApplicationStatus.SUBMITTED,
        f"Cannot verify identity. Application status is '{application.status.value}'",
    )

    verified = score > PASS_THRESHOLD
    verification = IdentityVerification(
        verified=verified,
        verification_score=score,
        government_id_type=government_id_type,
        verification_method=verification_method,
        verified_at=now,
        checks=derive_checks(score),
    )
    application.identity_verification = verification

    if verified:
        advance(application, ApplicationStatus.IDENTITY_VERIFIED)
        application.identity_verified = True
    else:
        advance(application, ApplicationStatus.IDENTITY_VERIFICATION_FAILED)

    return verification
