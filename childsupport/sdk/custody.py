"""Custody arrangement to annual overnights.

Each parent selects a custody arrangement. The custodial parent is the one
marked 'custodial'; the other parent's arrangement sets the overnights used
for the parenting-time deviation.
"""

import logging

from .schemas import MAX_OVERNIGHTS, CustodyArrangement, CustodyResolution, Parent

logger = logging.getLogger(__name__)

# Annual overnights with the non-custodial parent
ARRANGEMENT_OVERNIGHTS = {
    CustodyArrangement.NO_VISITATION: 0,
    CustodyArrangement.MINIMAL: 52,     # Every other weekend, no summer
    CustodyArrangement.STANDARD: 80,    # Every other weekend + 2 weeks summer + holidays
    CustodyArrangement.EXTENDED: 110,   # Every other weekend + one weekday + 4 weeks summer
    CustodyArrangement.SHARED: 146,     # Near 50/50 (alternating weeks, 2-2-3)
}

# Arrangements a non-custodial parent can have, in increasing overnights
VISITATION_ARRANGEMENTS = (
    CustodyArrangement.NO_VISITATION,
    CustodyArrangement.MINIMAL,
    CustodyArrangement.STANDARD,
    CustodyArrangement.EXTENDED,
    CustodyArrangement.SHARED,
)


def get_overnights(arrangement: CustodyArrangement, custom_overnights: int = 0) -> int:
    """Annual overnights for an arrangement used as a visitation schedule.

    'custom' uses custom_overnights clamped to 0-365. 'custodial' only shows
    up here when both parents claimed custody; it counts as standard
    visitation.
    """
    arrangement = CustodyArrangement(arrangement)

    if arrangement == CustodyArrangement.CUSTOM:
        return max(0, min(MAX_OVERNIGHTS, int(custom_overnights or 0)))
    if arrangement == CustodyArrangement.CUSTODIAL:
        return ARRANGEMENT_OVERNIGHTS[CustodyArrangement.STANDARD]
    return ARRANGEMENT_OVERNIGHTS[arrangement]


def resolve_custody(
    custody_a: CustodyArrangement,
    custody_b: CustodyArrangement,
    custom_overnights_a: int = 0,
    custom_overnights_b: int = 0,
) -> CustodyResolution:
    """Determine the custodial parent and the non-custodial overnights.

    If exactly one parent is custodial, the other parent's arrangement sets
    the overnights. If neither or both are, Parent A is treated as custodial
    and Parent B's arrangement is used.
    """
    a_custodial = CustodyArrangement(custody_a) == CustodyArrangement.CUSTODIAL
    b_custodial = CustodyArrangement(custody_b) == CustodyArrangement.CUSTODIAL

    if b_custodial and not a_custodial:
        overnights = get_overnights(custody_a, custom_overnights_a)
        return CustodyResolution(custodial_parent=Parent.B, overnights=overnights)

    overnights = get_overnights(custody_b, custom_overnights_b)
    ambiguous = a_custodial == b_custodial
    if ambiguous:
        logger.warning(
            f"Custody is ambiguous (A={CustodyArrangement(custody_a).value}, "
            f"B={CustodyArrangement(custody_b).value}); treating Parent A as custodial"
        )
    return CustodyResolution(custodial_parent=Parent.A, overnights=overnights, ambiguous=ambiguous)
