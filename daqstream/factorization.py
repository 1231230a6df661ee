"""Prime factorization helpers for describing rates and periods."""

from __future__ import annotations

import math

_EPSILON = 0.000001


def get_factor_for_factorization(number: float) -> int:
    """Return the factor that turns ``number`` into a whole number fit for factorization.

    Returns 0 when ``number`` is 0, which can not be expanded.
    """
    if abs(number) < _EPSILON:
        return 0
    multiplier = 1
    while abs(math.modf(number)[0]) > _EPSILON:
        multiplier *= 10
        number *= 10
    if abs(number) - 1 < _EPSILON:
        # 1 has no prime factors, so double it once more
        multiplier *= 2
    return multiplier


def prime_factor_exponents(value: int) -> dict[int, int]:
    """Return the prime factors of ``value`` mapped to their exponents, ascending.

    0 and 1 give an empty mapping.
    """
    if value < 0:
        raise ValueError("value must not be negative")
    exponents: dict[int, int] = {}
    divisor = 2
    while divisor <= value:
        while value % divisor == 0:
            value //= divisor
            exponents[divisor] = exponents.get(divisor, 0) + 1
        divisor += 1
    return exponents


def compose_prime_factor_exponents(exponents: dict[int, int]) -> dict[str, int]:
    """Return a JSON-ready object keyed by the primes as text, in key order."""
    return {str(prime): exponent
            for prime, exponent in sorted(exponents.items(), key=lambda item: str(item[0]))}


def product(exponents: dict[int, int]) -> float:
    """Multiply out the prime factors; 0.0 for an empty mapping."""
    if not exponents:
        return 0.0
    result = 1.0
    for prime, exponent in sorted(exponents.items()):
        result *= math.pow(prime, exponent)
    return result


def change_signs(exponents: dict[int, int]) -> dict[int, int]:
    """Negate every exponent, turning a frequency into a period and vice versa."""
    return {prime: -exponent for prime, exponent in exponents.items()}