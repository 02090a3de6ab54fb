#!/usr/bin/env python3
"""
errors.py - Error taxonomy for the LWE / threshold LWE protocol

Every class derives from a builtin family (ValueError / RuntimeError) so
callers that already catch those keep working.
"""


class ThresholdLweError(Exception):
    """Base class for protocol invariant violations."""


class InvalidPlaintext(ThresholdLweError, ValueError):
    """Encryption requested for a value outside {0, 1}."""


class ShareCountMismatch(ThresholdLweError, ValueError):
    """Interpolation with the wrong number of shares or duplicate indices."""


class UninitializedSecretMaterial(ThresholdLweError, RuntimeError):
    """Decryption attempted on a participant before key generation finished."""


class ProtocolShapeViolation(ThresholdLweError, ValueError):
    """A protocol step received a collection of the wrong length."""
