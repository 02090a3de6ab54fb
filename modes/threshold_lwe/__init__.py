"""
threshold_lwe - Threshold LWE encryption with DKG

Implements single-bit LWE encryption and its threshold variant:
- LWE scheme: m = n³, q = 2^n, Gaussian noise with σ = q^{1/4}
- DKG (Distributed Key Generation) - no Trusted Dealer, s is never assembled
- Shamir Secret Sharing with exact (Fraction) Lagrange interpolation
- Threshold decryption with pairwise-key masks that cancel under Lagrange
"""

from .lwe_scheme import (
    LWE_PARAMS,
    SchemeParameters,
    PublicKey,
    SecretKey,
    Ciphertext,
    LweScheme,
)

from .noise_primitives import (
    GaussianNoise,
    ZeroNoise,
    default_sigma,
)

from .shamir_utils import (
    Share,
    Interpolant,
    interpolate,
    reconstruct_secret,
    share_secret,
    lagrange_coefficients_at_zero,
)

from .participant import (
    Participant,
    derive_mask,
)

from .coordinator import (
    Coordinator,
    DEFAULT_COMMITTEE_SIZE,
    run_threshold_protocol,
)

__all__ = [
    'LWE_PARAMS',
    'SchemeParameters',
    'PublicKey',
    'SecretKey',
    'Ciphertext',
    'LweScheme',
    'GaussianNoise',
    'ZeroNoise',
    'default_sigma',
    'Share',
    'Interpolant',
    'interpolate',
    'reconstruct_secret',
    'share_secret',
    'lagrange_coefficients_at_zero',
    'Participant',
    'derive_mask',
    'Coordinator',
    'DEFAULT_COMMITTEE_SIZE',
    'run_threshold_protocol',
]
