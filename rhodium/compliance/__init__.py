"""Compliance value types shared by adapters and stores."""

from __future__ import annotations

from .models import (
    CertificationTier,
    ComplianceStatus,
    RepoRef,
    decode_compliance_status,
    encode_compliance_status,
)

__all__ = [
    "CertificationTier",
    "ComplianceStatus",
    "RepoRef",
    "decode_compliance_status",
    "encode_compliance_status",
]
