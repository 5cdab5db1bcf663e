"""Stress scenario: derive a stressed configuration from the baseline.

The derived configuration is an ordinary Configuration with the stress
toggle cleared, so it runs through the full pipeline on its own.
"""

from dataclasses import replace

from propsim.models.configuration import Configuration, RateShock


def derive_stressed_configuration(config: Configuration) -> Configuration | None:
    """Apply the configured rate shock, rent curve and occupancy decline.

    Returns None when stress is not enabled.
    """
    stress = config.stress
    if stress is None:
        return None

    loan = replace(
        config.loan,
        rate_shock=RateShock(year=max(1, stress.interest_shock_year), delta=stress.interest_shock_delta),
    )
    stressed = replace(config, loan=loan, stress=None)

    if stress.rent_curve is not None:
        stressed = replace(stressed, rent_curve=stress.rent_curve)
    if stress.occupancy_decline is not None:
        stressed = replace(stressed, occupancy_decline=stress.occupancy_decline)
    return stressed
