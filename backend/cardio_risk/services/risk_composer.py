"""Combined ASCVD + CAC assessment.

Pure orchestration over the ASCVD calculator and the CAC interpreter:
no numeric logic of its own, only summary lines and the cross-score
notes a CAC result adds to an ASCVD estimate.
"""

import logging

from cardio_risk.services.ascvd import calculate_ascvd
from cardio_risk.services.cac_interpreter import interpret_cac_score
from cardio_risk.services.risk_models import (
    CACScoreInput,
    CardiovascularRiskFactors,
    ComprehensiveRiskAssessment,
    LipidProfile,
    PatientDemographics,
    PatientRiskData,
)

logger = logging.getLogger(__name__)

CAC_ZERO_NOTE = "CAC = 0 may justify deferring statin therapy if ASCVD risk is intermediate"
CAC_HIGH_NOTE = "CAC ≥100 reinforces the indication for high-intensity statin therapy"
ASCVD_NOT_APPLICABLE_NOTE = "10-year ASCVD risk: not applicable (age outside 40-79)"


def calculate_comprehensive(
    demographics: PatientDemographics,
    lipids: LipidProfile | None = None,
    risk_factors: CardiovascularRiskFactors | None = None,
    cac: CACScoreInput | None = None,
) -> ComprehensiveRiskAssessment:
    """Run every assessment the available data supports.

    ASCVD runs when both lipids and risk factors are given; the CAC
    interpretation runs when a scan result is given. Cross-score notes
    are added only when both produced a usable result.
    """
    assessment = ComprehensiveRiskAssessment()

    if lipids is not None and risk_factors is not None:
        data = PatientRiskData.from_parts(demographics, lipids, risk_factors)
        assessment.ascvd = calculate_ascvd(data)
        if assessment.ascvd.is_applicable:
            assessment.summary.append(
                f"10-year ASCVD risk: {assessment.ascvd.score:g}% ({assessment.ascvd.interpretation})"
            )
        else:
            assessment.summary.append(ASCVD_NOT_APPLICABLE_NOTE)

    if cac is not None:
        assessment.cac = interpret_cac_score(cac, demographics)
        assessment.summary.append(
            f"CAC score: {assessment.cac.score:g} ({assessment.cac.interpretation})"
        )

        if assessment.ascvd is not None and assessment.ascvd.is_applicable:
            if cac.agatston_score <= 0:
                assessment.summary.append(CAC_ZERO_NOTE)
            elif cac.agatston_score >= 100:
                assessment.summary.append(CAC_HIGH_NOTE)

    logger.info(
        f"Comprehensive assessment: ascvd={'yes' if assessment.ascvd else 'no'}, "
        f"cac={'yes' if assessment.cac else 'no'}, summary_lines={len(assessment.summary)}"
    )
    return assessment
